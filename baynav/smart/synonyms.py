"""
Synonym Expansion

Expands query words with a small static synonym table plus the search
keywords of any program category or eligibility group the query triggers.
Used whenever the classifier resolves a query without a language model, and
as the fallback when the model call fails.
"""

import logging
from typing import Dict, List, Optional

from baynav.smart.config import MAX_EXPANDED_TERMS
from baynav.smart.reference import (
    Detection,
    ReferenceCatalog,
    detect_eligibility_groups,
    detect_program_categories,
)

logger = logging.getLogger(__name__)

# Kept minimal: every entry widens the downstream search query
SYNONYMS: Dict[str, List[str]] = {
    # Demographics
    "senior": ["seniors", "elderly", "65+", "60+"],
    "seniors": ["senior", "elderly", "65+"],
    "veteran": ["veterans", "military", "vet"],
    "veterans": ["veteran", "military"],
    "disabled": ["disability", "disabilities"],
    "disability": ["disabled", "disabilities"],
    "child": ["children", "kids", "youth"],
    "children": ["child", "kids", "youth"],
    "infant": ["baby", "newborn", "toddler"],
    "baby": ["infant", "newborn", "toddler"],
    "student": ["students", "college"],
    "family": ["families", "parents"],
    "pregnant": ["pregnancy", "prenatal", "expecting"],
    "homeless": ["unhoused", "houseless", "shelter"],
    "unhoused": ["homeless", "houseless"],
    "immigrant": ["immigrants", "refugee"],

    # Food
    "food": ["groceries", "meals", "hungry", "calfresh", "snap", "ebt"],
    "hungry": ["hunger", "food", "meals"],
    "snap": ["calfresh", "ebt", "food stamps"],
    "calfresh": ["snap", "ebt", "food stamps"],

    # Housing & utilities
    "housing": ["rent", "shelter", "apartment"],
    "rent": ["rental", "housing", "apartment"],
    "utility": ["utilities", "electric", "gas", "water"],
    "utilities": ["utility", "electric", "gas", "bills"],
    "electric": ["electricity", "power", "pge"],

    # Transportation
    "transportation": ["transit", "bus", "bart", "muni", "clipper"],
    "transit": ["transportation", "bus", "bart"],
    "bus": ["transit", "muni"],

    # Health
    "health": ["healthcare", "medical", "clinic"],
    "medical": ["health", "healthcare", "doctor"],
    "dental": ["dentist", "teeth"],
    "mental": ["mental health", "therapy", "counseling"],

    # Child care
    "childcare": ["child care", "daycare", "preschool"],
    "daycare": ["childcare", "preschool"],

    # Financial
    "bills": ["bill", "payment"],
    "tax": ["taxes", "vita", "tax preparation"],
    "free": ["discount", "low cost"],
    "discount": ["discounts", "free", "reduced"],

    # Legal
    "legal": ["lawyer", "attorney"],
    "lawyer": ["attorney", "legal"],

    # General
    "help": ["assistance", "support", "program"],
    "low-income": ["income-eligible", "low income"],
}


def expand_query_with_synonyms(
    query: str,
    catalog: Optional[ReferenceCatalog] = None,
    max_terms: int = MAX_EXPANDED_TERMS,
    detections: Optional[List[Detection]] = None,
) -> str:
    """
    Expand a query into a space-separated keyword string.

    Terms are collected in first-added order: the query's own words, then
    synonyms of those words, then the search keywords of detected categories
    and groups. Multi-word synonyms contribute their individual words. The
    result is capped at max_terms distinct terms.

    detections overrides category/group detection against the catalog.
    """
    words = query.lower().split()

    # dict keys keep insertion order and collapse duplicates
    terms: Dict[str, None] = dict.fromkeys(words)

    for word in words:
        for synonym in SYNONYMS.get(word, ()):
            for term in synonym.split():
                terms.setdefault(term)

    if detections is None and catalog is not None:
        detections = detect_program_categories(query, catalog) + detect_eligibility_groups(query, catalog)

    for detection in detections or ():
        for term in detection.search_keywords.lower().split():
            terms.setdefault(term)

    expanded = " ".join(list(terms)[:max_terms])
    logger.debug(f"Synonym expansion: '{query[:60]}' -> '{expanded}'")
    return expanded

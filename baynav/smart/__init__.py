"""
Query understanding for the smart assistant: location extraction, reference
catalog, classification stages, synonym expansion and LLM keyword extraction.
"""

from baynav.smart.classifier import ClassificationResult, classify_query
from baynav.smart.keyword_llm import DailyBudget, KeywordExtractor
from baynav.smart.locations import Location, extract_location
from baynav.smart.outcome import Fallback, Ok
from baynav.smart.reference import ReferenceCatalog, load_reference_catalog
from baynav.smart.synonyms import expand_query_with_synonyms

__all__ = [
    "ClassificationResult",
    "classify_query",
    "DailyBudget",
    "KeywordExtractor",
    "Location",
    "extract_location",
    "Fallback",
    "Ok",
    "ReferenceCatalog",
    "load_reference_catalog",
    "expand_query_with_synonyms",
]

"""
Reference Catalog

Three static tables that let the assistant answer most queries without a
language model:
- common queries: trigger phrase -> canned search keywords
- program categories: trigger words -> category search keywords
- eligibility groups: trigger words -> group search keywords

The catalog is loaded once at startup and never mutated afterwards. If any
file is missing or malformed, all three tables are empty and the assistant
degrades to synonym-only expansion.
"""

import os
import json
import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple

logger = logging.getLogger(__name__)

COMMON_QUERIES_FILE = "common-queries.json"
PROGRAM_CATEGORIES_FILE = "program-categories.json"
ELIGIBILITY_GROUPS_FILE = "eligibility-groups.json"


@dataclass(frozen=True)
class CommonQueryPattern:
    category: str
    name: str
    patterns: Tuple[str, ...]
    keywords_to_search: str


@dataclass(frozen=True)
class TriggerEntry:
    """A program category or eligibility group."""
    id: str
    name: str
    trigger_keywords: Tuple[str, ...]
    search_keywords: str


@dataclass(frozen=True)
class Detection:
    id: str
    name: str
    matched_trigger: str
    search_keywords: str


@dataclass(frozen=True)
class CommonQueryMatch:
    category: str
    pattern_name: str
    trigger: str
    keywords: str


def _freeze(entries: Dict[str, Any]) -> Mapping[str, Any]:
    return MappingProxyType(dict(entries))


@dataclass(frozen=True)
class ReferenceCatalog:
    common_queries: Mapping[str, Mapping[str, CommonQueryPattern]] = field(default_factory=lambda: _freeze({}))
    program_categories: Mapping[str, TriggerEntry] = field(default_factory=lambda: _freeze({}))
    eligibility_groups: Mapping[str, TriggerEntry] = field(default_factory=lambda: _freeze({}))

    @classmethod
    def empty(cls) -> "ReferenceCatalog":
        return cls()

    @property
    def is_empty(self) -> bool:
        return not (self.common_queries or self.program_categories or self.eligibility_groups)

    def stats(self) -> Dict[str, int]:
        return {
            "common_query_patterns": sum(len(p) for p in self.common_queries.values()),
            "program_categories": len(self.program_categories),
            "eligibility_groups": len(self.eligibility_groups),
        }


def _read_json(path: str) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"{os.path.basename(path)} must contain a JSON object")
    return data


def _string_list(value: Any, where: str) -> Tuple[str, ...]:
    if value is None:
        return ()
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ValueError(f"{where} must be a list of strings")
    return tuple(value)


def _string(value: Any, where: str) -> str:
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValueError(f"{where} must be a string")
    return value


def _parse_common_queries(data: Dict[str, Any]) -> Mapping[str, Mapping[str, CommonQueryPattern]]:
    categories = {}
    for category, patterns in (data.get("query_patterns") or {}).items():
        parsed = {}
        for pattern_name, pattern_data in patterns.items():
            parsed[pattern_name] = CommonQueryPattern(
                category=category,
                name=pattern_name,
                patterns=_string_list(pattern_data.get("patterns"), f"{category}/{pattern_name} patterns"),
                keywords_to_search=_string(pattern_data.get("keywords_to_search"), f"{category}/{pattern_name} keywords_to_search"),
            )
        categories[category] = _freeze(parsed)
    return _freeze(categories)


def _parse_trigger_entries(entries: Dict[str, Any]) -> Mapping[str, TriggerEntry]:
    parsed = {}
    for entry_id, entry in entries.items():
        parsed[entry_id] = TriggerEntry(
            id=entry_id,
            name=_string(entry.get("name"), f"{entry_id} name") or entry_id,
            trigger_keywords=_string_list(entry.get("trigger_keywords"), f"{entry_id} trigger_keywords"),
            search_keywords=_string(entry.get("search_keywords"), f"{entry_id} search_keywords"),
        )
    return _freeze(parsed)


def load_reference_catalog(reference_dir: str) -> ReferenceCatalog:
    """
    Load the three reference documents from reference_dir.

    Never raises: a missing or malformed file yields an empty catalog.
    """
    try:
        common = _read_json(os.path.join(reference_dir, COMMON_QUERIES_FILE))
        categories = _read_json(os.path.join(reference_dir, PROGRAM_CATEGORIES_FILE))
        groups = _read_json(os.path.join(reference_dir, ELIGIBILITY_GROUPS_FILE))

        catalog = ReferenceCatalog(
            common_queries=_parse_common_queries(common),
            program_categories=_parse_trigger_entries(categories.get("categories") or {}),
            eligibility_groups=_parse_trigger_entries(groups.get("groups") or {}),
        )
    except (OSError, ValueError, TypeError, AttributeError) as e:
        logger.warning(f"Could not load AI reference documents from {reference_dir}: {e}")
        return ReferenceCatalog.empty()

    logger.info(f"AI reference documents loaded: {catalog.stats()}")
    return catalog


def match_common_query(query: str, catalog: ReferenceCatalog) -> Optional[CommonQueryMatch]:
    """Return the first common-query pattern whose trigger appears in the query."""
    query_lower = query.lower()
    for category, patterns in catalog.common_queries.items():
        for pattern_name, pattern in patterns.items():
            for trigger in pattern.patterns:
                if trigger.lower() in query_lower:
                    logger.debug(f"Common query match: {category}/{pattern_name} via '{trigger}'")
                    return CommonQueryMatch(
                        category=category,
                        pattern_name=pattern_name,
                        trigger=trigger,
                        keywords=pattern.keywords_to_search,
                    )
    return None


def _detect(query: str, entries: Mapping[str, TriggerEntry]) -> List[Detection]:
    query_lower = query.lower()
    detected = []
    for entry in entries.values():
        for trigger in entry.trigger_keywords:
            if trigger.lower() in query_lower:
                detected.append(Detection(
                    id=entry.id,
                    name=entry.name,
                    matched_trigger=trigger,
                    search_keywords=entry.search_keywords,
                ))
                break
    return detected


def detect_program_categories(query: str, catalog: ReferenceCatalog) -> List[Detection]:
    """Categories with at least one trigger keyword in the query, one detection per category."""
    return _detect(query, catalog.program_categories)


def detect_eligibility_groups(query: str, catalog: ReferenceCatalog) -> List[Detection]:
    """Eligibility groups with at least one trigger keyword in the query."""
    return _detect(query, catalog.eligibility_groups)

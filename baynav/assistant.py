"""
Smart Assistant Pipeline

One run per request:
  truncate -> redact PII -> location -> classify -> search -> cards

Only the classifier's model call and the index search touch the network, and
both resolve failures locally. Anything that still raises here is a bug and
is turned into a 500 by the HTTP layer.
"""

import logging
import time
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from baynav.cards import ProgramCard, format_program_cards
from baynav.privacy import sanitize_query
from baynav.search_index import SearchIndexClient
from baynav.smart.classifier import ClassificationResult, classify_query
from baynav.smart.config import MAX_MESSAGE_CHARS
from baynav.smart.keyword_llm import KeywordExtractor
from baynav.smart.locations import Location, extract_location
from baynav.smart.outcome import Ok
from baynav.smart.reference import ReferenceCatalog

logger = logging.getLogger(__name__)


@dataclass
class AssistantAnswer:
    programs: List[ProgramCard]
    search_query: str
    location: Optional[Location]
    classification: ClassificationResult
    programs_found: int

    def to_response(self) -> Dict[str, Any]:
        return {
            "programs": [card.model_dump() for card in self.programs],
            "programsFound": self.programs_found,
            "searchQuery": self.search_query,
            "location": self.location.to_dict() if self.location else None,
            "tier": self.classification.tier,
            "skippedLLM": self.classification.skipped_llm,
        }


def prepare_message(message: str, max_chars: int = MAX_MESSAGE_CHARS) -> str:
    return sanitize_query(message.strip()[:max_chars])


def prepare_history(history: Optional[List[Dict[str, str]]]) -> List[Dict[str, str]]:
    """User turns are redacted like the message; assistant turns are our own text."""
    prepared = []
    for turn in history or []:
        content = turn.get("content", "")
        if turn.get("role") == "user":
            content = sanitize_query(content)
        prepared.append({"role": turn.get("role", "user"), "content": content})
    return prepared


async def run_smart_assistant(
    message: str,
    history: Optional[List[Dict[str, str]]],
    catalog: ReferenceCatalog,
    search_client: SearchIndexClient,
    keyword_extractor: Optional[KeywordExtractor] = None,
    invocation_id: str = "-",
) -> AssistantAnswer:
    timings: Dict[str, float] = {}

    query = prepare_message(message)
    location = extract_location(query)
    if location:
        logger.info(f"[{invocation_id}] Location detected: {location.to_dict()}")

    start = time.perf_counter()
    classification = await classify_query(query, prepare_history(history), catalog, keyword_extractor)
    timings["classify"] = round((time.perf_counter() - start) * 1000, 1)

    start = time.perf_counter()
    outcome = await search_client.search_programs(classification.keywords, location)
    timings["search"] = round((time.perf_counter() - start) * 1000, 1)

    if isinstance(outcome, Ok):
        records = outcome.value
    else:
        logger.warning(f"[{invocation_id}] Search degraded to empty results: {outcome.reason}")
        records = []

    programs = format_program_cards(records)

    logger.info(
        f"[{invocation_id}] Smart assistant: stage={classification.stage} tier={classification.tier} "
        f"found={len(records)} cards={len(programs)} classify={timings['classify']}ms search={timings['search']}ms"
    )

    return AssistantAnswer(
        programs=programs,
        search_query=classification.keywords,
        location=location,
        classification=classification,
        programs_found=len(records),
    )

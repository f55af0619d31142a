"""
Query Classification

Turns a user query into the keyword string sent to the search index, trying
the cheapest and most deterministic stages first:

1. common_query     - canned keywords for a known trigger phrase
2. short_query      - queries of a few words are already keyword-like
3. reference_trigger - a program category or eligibility group was detected
4. model_fallback   - ask a language model, or expand synonyms when none is
                      configured or the call fails

The order is a cost decision: the metered model call is the last resort.

This module is:
- Fail-soft (model failures degrade to synonym expansion)
- Deterministic for stages 1-3
"""

import inspect
import logging
from dataclasses import dataclass
from functools import cached_property
from typing import Any, Callable, Dict, List, Optional, Tuple

from baynav.smart.config import SHORT_QUERY_MAX_WORDS
from baynav.smart.keyword_llm import KeywordExtractor
from baynav.smart.outcome import Ok
from baynav.smart.reference import (
    CommonQueryMatch,
    Detection,
    ReferenceCatalog,
    detect_eligibility_groups,
    detect_program_categories,
    match_common_query,
)
from baynav.smart.synonyms import expand_query_with_synonyms

logger = logging.getLogger(__name__)

TIER_LOCAL = "local"


@dataclass(frozen=True)
class ClassificationResult:
    keywords: str
    skipped_llm: bool
    stage: str
    tier: str = TIER_LOCAL


class QueryContext:
    """Per-request view of a query; detections are computed at most once."""

    def __init__(
        self,
        query: str,
        history: Optional[List[Dict[str, str]]],
        catalog: ReferenceCatalog,
        keyword_extractor: Optional[KeywordExtractor] = None,
        short_query_max_words: int = SHORT_QUERY_MAX_WORDS,
    ):
        self.query = query
        self.history = history or []
        self.catalog = catalog
        self.keyword_extractor = keyword_extractor
        self.short_query_max_words = short_query_max_words

    @cached_property
    def word_count(self) -> int:
        return len(self.query.split())

    @cached_property
    def common_query(self) -> Optional[CommonQueryMatch]:
        return match_common_query(self.query, self.catalog)

    @cached_property
    def detections(self) -> List[Detection]:
        return detect_program_categories(self.query, self.catalog) + detect_eligibility_groups(self.query, self.catalog)

    def expand(self) -> str:
        return expand_query_with_synonyms(self.query, self.catalog, detections=self.detections)


@dataclass(frozen=True)
class ClassifierStage:
    name: str
    matches: Callable[[QueryContext], bool]
    resolve: Callable[[QueryContext], Any]


def _resolve_common_query(ctx: QueryContext) -> ClassificationResult:
    match = ctx.common_query
    return ClassificationResult(keywords=match.keywords, skipped_llm=True, stage="common_query")


def _resolve_short_query(ctx: QueryContext) -> ClassificationResult:
    return ClassificationResult(keywords=ctx.expand(), skipped_llm=True, stage="short_query")


def _resolve_reference_trigger(ctx: QueryContext) -> ClassificationResult:
    names = ", ".join(d.id for d in ctx.detections)
    logger.debug(f"Reference triggers detected: {names}")
    return ClassificationResult(keywords=ctx.expand(), skipped_llm=True, stage="reference_trigger")


async def _resolve_model_fallback(ctx: QueryContext) -> ClassificationResult:
    extractor = ctx.keyword_extractor
    if extractor is not None and extractor.configured:
        outcome = await extractor.extract(ctx.query, ctx.history)
        if isinstance(outcome, Ok):
            extraction = outcome.value
            return ClassificationResult(
                keywords=extraction.keywords,
                skipped_llm=False,
                stage="model_fallback",
                tier=extraction.tier,
            )
        logger.info(f"Keyword extraction fell back to synonyms: {outcome.reason}")
    return ClassificationResult(keywords=ctx.expand(), skipped_llm=True, stage="model_fallback")


CLASSIFIER_STAGES: Tuple[ClassifierStage, ...] = (
    ClassifierStage(
        "common_query",
        lambda ctx: ctx.common_query is not None and bool(ctx.common_query.keywords),
        _resolve_common_query,
    ),
    ClassifierStage("short_query", lambda ctx: ctx.word_count <= ctx.short_query_max_words, _resolve_short_query),
    ClassifierStage("reference_trigger", lambda ctx: bool(ctx.detections), _resolve_reference_trigger),
    ClassifierStage("model_fallback", lambda ctx: True, _resolve_model_fallback),
)


async def classify_query(
    query: str,
    history: Optional[List[Dict[str, str]]],
    catalog: ReferenceCatalog,
    keyword_extractor: Optional[KeywordExtractor] = None,
    stages: Tuple[ClassifierStage, ...] = CLASSIFIER_STAGES,
) -> ClassificationResult:
    """
    Classify a query into search keywords. First matching stage wins.

    Never raises for model failures; those resolve to synonym expansion.
    """
    ctx = QueryContext(query, history, catalog, keyword_extractor)

    for stage in stages:
        if not stage.matches(ctx):
            continue
        result = stage.resolve(ctx)
        if inspect.isawaitable(result):
            result = await result
        logger.info(
            f"Classified via {stage.name} (tier={result.tier}, skipped_llm={result.skipped_llm}): "
            f"'{result.keywords[:80]}'"
        )
        return result

    # Unreachable with the default stages: model_fallback always matches
    return ClassificationResult(keywords=ctx.expand(), skipped_llm=True, stage="synonyms")

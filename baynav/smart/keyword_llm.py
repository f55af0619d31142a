"""
LLM Keyword Extraction

Last-resort classifier stage: asks a hosted language model to turn a
natural-language query into search keywords. Only reached when no common
query, short-query, or category/group trigger matched.

Model tiers, tried in order:
1. Cloudflare Workers AI (free tier, hard stop when exhausted)
2. Azure OpenAI (metered, capped by a daily request budget)

This module is:
- Fail-soft (every failure becomes a Fallback outcome, never an exception)
- Bounded (one attempt per tier, no retries, per-call timeout, 60 token cap)
"""

import asyncio
import logging
import threading
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import httpx
from openai import APIConnectionError, APIStatusError, AsyncAzureOpenAI, AsyncOpenAI, OpenAIError

from baynav.smart import config as smart_config
from baynav.smart.config import ServiceSettings
from baynav.smart.outcome import Fallback, Ok, Outcome

logger = logging.getLogger(__name__)

TIER_CLOUDFLARE = "cloudflare"
TIER_AZURE_OPENAI = "azure_openai"

SYSTEM_PROMPT = "You extract search keywords from queries. Return only space-separated keywords, nothing else."

EXTRACTION_PROMPT = """You turn questions about assistance programs into search keywords.
{history_block}
User query: "{query}"

Reply with ONLY a space-separated list of search terms that would match relevant programs. Cover:
- the main topic (childcare, food, housing, transportation, utilities, healthcare, ...)
- who it is for, if stated (seniors, veterans, children, disabled, low-income, infant, youth, 65+, ...)
- the kind of program (subsidy, discount, free, emergency, assistance, ...)
- other words program listings commonly use for the same thing

Examples:
- "I need affordable childcare for my infant" -> "childcare infant child care affordable subsidy preschool daycare baby toddler"
- "I'm a senior who needs help with transportation" -> "senior seniors elderly 65+ transportation transit bus ride discount paratransit clipper"
- "Help paying electric bill" -> "utility utilities electric energy bill payment assistance LIHEAP PG&E low-income"

Keywords:"""


@dataclass(frozen=True)
class KeywordExtraction:
    keywords: str
    tier: str


class DailyBudget:
    """
    In-process daily request budget for a metered model.
    Counts successful calls per UTC day; resets when the day rolls over.
    """

    def __init__(self, max_daily_requests: int):
        self.max_daily_requests = max_daily_requests
        self.day = None
        self.count = 0
        self.lock = threading.Lock()

    def _today(self) -> str:
        return datetime.now(timezone.utc).strftime("%Y-%m-%d")

    def _roll(self) -> None:
        today = self._today()
        if self.day != today:
            self.day = today
            self.count = 0

    def has_capacity(self) -> bool:
        with self.lock:
            self._roll()
            return self.count < self.max_daily_requests

    def record_use(self) -> None:
        with self.lock:
            self._roll()
            self.count += 1

    def usage(self) -> Dict[str, Any]:
        with self.lock:
            self._roll()
            return {"day": self.day, "count": self.count, "max": self.max_daily_requests}


def trim_history(history: Optional[List[Dict[str, str]]], window: int = smart_config.HISTORY_WINDOW) -> List[Dict[str, str]]:
    """Most recent `window` turns, oldest first."""
    if not history or window <= 0:
        return []
    return list(history)[-window:]


def build_extraction_prompt(query: str, history: Optional[List[Dict[str, str]]] = None) -> str:
    turns = trim_history(history)
    history_block = ""
    if turns:
        lines = [f"{t.get('role', 'user')}: {t.get('content', '')}" for t in turns]
        history_block = "\nEarlier in this conversation:\n" + "\n".join(lines) + "\n"
    return EXTRACTION_PROMPT.format(query=query, history_block=history_block)


def parse_keywords(text: Optional[str]) -> str:
    """The whole completion is the keyword string; collapse whitespace and stray quotes."""
    if not text:
        return ""
    return " ".join(text.strip().strip('"').split())


class KeywordExtractor:
    """Extract search keywords with the configured model tiers."""

    def __init__(
        self,
        settings: ServiceSettings,
        http_client: Optional[httpx.AsyncClient] = None,
        budget: Optional[DailyBudget] = None,
        timeout_sec: float = smart_config.LLM_TIMEOUT_SEC,
    ):
        self.settings = settings
        self.timeout_sec = timeout_sec
        self.budget = budget or DailyBudget(smart_config.AZURE_MAX_DAILY_REQUESTS)
        self._cloudflare = None
        self._azure = None

        if settings.cloudflare_configured:
            self._cloudflare = AsyncOpenAI(
                api_key=settings.cf_api_token,
                base_url=f"{smart_config.CF_API_BASE}/accounts/{settings.cf_account_id}/ai/v1",
                timeout=timeout_sec,
                max_retries=0,
                http_client=http_client,
            )
        if settings.azure_openai_configured:
            self._azure = AsyncAzureOpenAI(
                api_key=settings.azure_openai_key,
                azure_endpoint=settings.azure_openai_endpoint,
                api_version=smart_config.AZURE_OPENAI_API_VERSION,
                timeout=timeout_sec,
                max_retries=0,
                http_client=http_client,
            )

    @property
    def configured(self) -> bool:
        return self._cloudflare is not None or self._azure is not None

    async def _complete(self, client: Any, model: str, prompt: str, tier: str) -> Outcome:
        try:
            response = await asyncio.wait_for(
                client.chat.completions.create(
                    model=model,
                    messages=[
                        {"role": "system", "content": SYSTEM_PROMPT},
                        {"role": "user", "content": prompt},
                    ],
                    max_tokens=smart_config.LLM_MAX_TOKENS,
                    temperature=smart_config.LLM_TEMPERATURE,
                    stream=False,
                ),
                timeout=self.timeout_sec,
            )
        except asyncio.TimeoutError:
            logger.warning(f"{tier} keyword extraction timed out after {self.timeout_sec}s")
            return Fallback("timeout")
        except APIStatusError as e:
            if e.status_code == 429:
                logger.info(f"{tier} rate limited (429), free tier or quota exhausted")
                return Fallback("rate_limited")
            logger.error(f"{tier} keyword extraction error: HTTP {e.status_code}")
            return Fallback(f"http_{e.status_code}")
        except APIConnectionError as e:
            logger.error(f"{tier} keyword extraction connection failed: {e}")
            return Fallback("network_error")
        except OpenAIError as e:
            logger.error(f"{tier} keyword extraction failed: {e}")
            return Fallback("client_error")
        except Exception as e:
            logger.error(f"{tier} keyword extraction failed unexpectedly: {type(e).__name__}: {e}")
            return Fallback("unexpected_error")

        try:
            content = response.choices[0].message.content
        except (AttributeError, IndexError, TypeError):
            content = None

        keywords = parse_keywords(content)
        if not keywords:
            logger.warning(f"{tier} returned an empty completion")
            return Fallback("empty_response")

        return Ok(KeywordExtraction(keywords=keywords, tier=tier))

    async def extract(self, query: str, history: Optional[List[Dict[str, str]]] = None) -> Outcome:
        """
        Returns Ok(KeywordExtraction) from the first tier that answers,
        or Fallback(reason) with the last tier's failure.
        """
        if not self.configured:
            return Fallback("not_configured")

        prompt = build_extraction_prompt(query, history)
        outcome: Outcome = Fallback("not_configured")

        if self._cloudflare is not None:
            outcome = await self._complete(self._cloudflare, self.settings.cf_model, prompt, TIER_CLOUDFLARE)
            if isinstance(outcome, Ok):
                logger.info(f"Workers AI extracted keywords: '{outcome.value.keywords}'")
                return outcome

        if self._azure is not None:
            if not self.budget.has_capacity():
                logger.info("Azure OpenAI daily budget exhausted")
                return Fallback("budget_exhausted")
            outcome = await self._complete(self._azure, self.settings.azure_openai_deployment, prompt, TIER_AZURE_OPENAI)
            if isinstance(outcome, Ok):
                self.budget.record_use()
                logger.info(f"Azure OpenAI extracted keywords: '{outcome.value.keywords}'")
                return outcome

        return outcome

"""
Smart Assistant Configuration

Tunables are read from the environment once at import. Credentials for the
external search index and language models are collected into an immutable
ServiceSettings built at service startup.

PRODUCTION DEFAULTS:
- SHORT_QUERY_MAX_WORDS=3 (queries this short skip the model)
- MAX_EXPANDED_TERMS=30 (bounds the search query size)
- no model credentials = synonym-only classification
- no search key = endpoint answers 503
"""

import os
import logging
from dataclasses import dataclass
from typing import Optional

logger = logging.getLogger(__name__)

DEFAULT_REFERENCE_DIR = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "data", "ai-reference")

SHORT_QUERY_MAX_WORDS = int(os.environ.get("SHORT_QUERY_MAX_WORDS", "3"))
MAX_EXPANDED_TERMS = int(os.environ.get("MAX_EXPANDED_TERMS", "30"))
MAX_MESSAGE_CHARS = int(os.environ.get("MAX_MESSAGE_CHARS", "500"))
HISTORY_WINDOW = int(os.environ.get("HISTORY_WINDOW", "6"))

SEARCH_TOP = int(os.environ.get("SEARCH_TOP", "10"))
MAX_PROGRAM_CARDS = int(os.environ.get("MAX_PROGRAM_CARDS", "5"))
DESCRIPTION_MAX_CHARS = int(os.environ.get("DESCRIPTION_MAX_CHARS", "150"))

SEARCH_TIMEOUT_SEC = float(os.environ.get("SEARCH_TIMEOUT_SEC", "5.0"))
LLM_TIMEOUT_SEC = float(os.environ.get("LLM_TIMEOUT_SEC", "8.0"))
LLM_MAX_TOKENS = int(os.environ.get("LLM_MAX_TOKENS", "60"))
LLM_TEMPERATURE = float(os.environ.get("LLM_TEMPERATURE", "0.1"))

RATE_LIMIT_REQUESTS = int(os.environ.get("RATE_LIMIT_REQUESTS", "30"))
RATE_LIMIT_WINDOW_SEC = float(os.environ.get("RATE_LIMIT_WINDOW_SEC", "60"))

# $1/day keeps Azure OpenAI near $30/month
AZURE_DAILY_BUDGET_CENTS = float(os.environ.get("AZURE_DAILY_BUDGET_CENTS", "100"))
AZURE_COST_PER_REQUEST_CENTS = float(os.environ.get("AZURE_COST_PER_REQUEST_CENTS", "0.0024"))
AZURE_MAX_DAILY_REQUESTS = int(AZURE_DAILY_BUDGET_CENTS // AZURE_COST_PER_REQUEST_CENTS)

SEARCH_API_VERSION = "2023-11-01"
AZURE_OPENAI_API_VERSION = "2024-02-15-preview"
CF_API_BASE = os.environ.get("CF_API_BASE", "https://api.cloudflare.com/client/v4")


@dataclass(frozen=True)
class ServiceSettings:
    """Credentials and endpoints for the external collaborators."""
    search_endpoint: str = "https://baynavigator-search.search.windows.net"
    search_key: Optional[str] = None
    search_index: str = "programs"
    cf_account_id: Optional[str] = None
    cf_api_token: Optional[str] = None
    cf_model: str = "@cf/meta/llama-3.1-8b-instruct"
    azure_openai_endpoint: Optional[str] = None
    azure_openai_key: Optional[str] = None
    azure_openai_deployment: str = "gpt-4o-mini"
    reference_dir: str = DEFAULT_REFERENCE_DIR

    @property
    def search_configured(self) -> bool:
        return bool(self.search_key)

    @property
    def cloudflare_configured(self) -> bool:
        return bool(self.cf_account_id and self.cf_api_token)

    @property
    def azure_openai_configured(self) -> bool:
        return bool(self.azure_openai_endpoint and self.azure_openai_key)

    @property
    def model_configured(self) -> bool:
        return self.cloudflare_configured or self.azure_openai_configured


def load_settings() -> ServiceSettings:
    """Build ServiceSettings from the current environment."""
    defaults = ServiceSettings()
    return ServiceSettings(
        search_endpoint=os.environ.get("AZURE_SEARCH_ENDPOINT", defaults.search_endpoint).rstrip("/"),
        search_key=os.environ.get("AZURE_SEARCH_KEY") or None,
        search_index=os.environ.get("AZURE_SEARCH_INDEX", defaults.search_index),
        cf_account_id=os.environ.get("CF_ACCOUNT_ID") or None,
        cf_api_token=os.environ.get("CF_API_TOKEN") or None,
        cf_model=os.environ.get("CF_MODEL", defaults.cf_model),
        azure_openai_endpoint=(os.environ.get("AZURE_OPENAI_ENDPOINT") or "").rstrip("/") or None,
        azure_openai_key=os.environ.get("AZURE_OPENAI_KEY") or None,
        azure_openai_deployment=os.environ.get("AZURE_OPENAI_DEPLOYMENT", defaults.azure_openai_deployment),
        reference_dir=os.environ.get("AI_REFERENCE_DIR", defaults.reference_dir),
    )


def log_effective_flags(settings: ServiceSettings) -> None:
    """Log effective configuration. Call once at startup."""
    logger.info(
        f"[SmartAssistant Config] search_configured={settings.search_configured}, "
        f"cloudflare={settings.cloudflare_configured}, azure_openai={settings.azure_openai_configured}, "
        f"short_query_max_words={SHORT_QUERY_MAX_WORDS}, max_expanded_terms={MAX_EXPANDED_TERMS}"
    )
    if not settings.model_configured:
        logger.warning("No language model configured, classification will use synonym expansion only")
    if not settings.search_configured:
        logger.error("Azure Search not configured, smart assistant will answer 503")

import os
import logging
from contextlib import asynccontextmanager
from typing import Optional

import httpx
from fastapi import FastAPI

from baynav.assistant_api import router as assistant_router
from baynav.rate_limit import ClientRateLimiter
from baynav.search_index import SearchIndexClient
from baynav.smart.config import ServiceSettings, load_settings, log_effective_flags
from baynav.smart.keyword_llm import KeywordExtractor
from baynav.smart.reference import ReferenceCatalog, load_reference_catalog

logging.basicConfig(
    level=os.environ.get("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[ServiceSettings] = None,
    catalog: Optional[ReferenceCatalog] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    """
    Build the service. The catalog is loaded once here and shared read-only
    by every request; one HTTP client serves the search index and both
    model tiers.
    """
    settings = settings or load_settings()
    if catalog is None:
        catalog = load_reference_catalog(settings.reference_dir)

    http_client = httpx.AsyncClient(transport=transport)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        log_effective_flags(settings)
        yield
        await http_client.aclose()

    app = FastAPI(title="Bay Navigator Smart Assistant", lifespan=lifespan)
    app.state.settings = settings
    app.state.catalog = catalog
    app.state.search_client = SearchIndexClient(settings, http_client)
    app.state.keyword_extractor = KeywordExtractor(settings, http_client=http_client)
    app.state.rate_limiter = ClientRateLimiter()

    app.include_router(assistant_router)

    @app.get("/api/status")
    async def get_status():
        extractor = app.state.keyword_extractor
        return {
            "search_configured": settings.search_configured,
            "cloudflare_configured": settings.cloudflare_configured,
            "azure_openai_configured": settings.azure_openai_configured,
            "azure_openai_budget": extractor.budget.usage(),
            "reference_catalog": catalog.stats(),
        }

    return app


app = create_app()

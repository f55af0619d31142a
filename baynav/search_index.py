"""
Program Search Index

Builds the area filter for a detected location and runs the keyword query
against the Azure AI Search program index.

Ranking is left entirely to the index. Any failure (timeout, non-2xx,
malformed JSON) resolves to Fallback and an empty result list; the request
still succeeds with zero programs.
"""

import logging
import time
from typing import Any, Dict, List, Optional

import httpx

from baynav.smart import config as smart_config
from baynav.smart.config import ServiceSettings
from baynav.smart.locations import Location
from baynav.smart.outcome import Fallback, Ok, Outcome

logger = logging.getLogger(__name__)

# Programs tagged with these areas apply everywhere in the Bay Area
REGIONAL_AREAS = ("Bay Area", "Statewide", "California", "Nationwide")

SEARCHABLE_FIELDS = ("name", "category", "description", "whatTheyOffer", "howToGetIt", "groups")

SELECT_FIELDS = (
    "id", "name", "category", "description", "whatTheyOffer", "howToGetIt",
    "groups", "areas", "city", "website", "phone",
)


def _odata_literal(value: str) -> str:
    return "'" + value.replace("'", "''") + "'"


def _area_clause(area: str) -> str:
    return f"areas/any(a: a eq {_odata_literal(area)})"


def build_search_filter(location: Optional[Location]) -> Optional[str]:
    """
    OData filter restricting results to programs available at the location.

    Returns None when no location was detected: absence of a location must
    never hide results.
    """
    if location is None:
        return None

    clauses = [_area_clause(area) for area in REGIONAL_AREAS]
    if location.county:
        clauses.append(_area_clause(location.county))
    if location.city:
        clauses.append(f"city eq {_odata_literal(location.city)}")
        clauses.append(_area_clause(location.city))

    return " or ".join(clauses)


def build_search_body(keywords: str, location: Optional[Location], top: int = smart_config.SEARCH_TOP) -> Dict[str, Any]:
    body: Dict[str, Any] = {
        "search": keywords,
        "queryType": "simple",
        "searchMode": "any",
        "top": top,
        "select": ",".join(SELECT_FIELDS),
        "searchFields": ",".join(SEARCHABLE_FIELDS),
    }
    search_filter = build_search_filter(location)
    if search_filter:
        body["filter"] = search_filter
    return body


class SearchIndexClient:
    """Thin client over the index's docs/search REST operation."""

    def __init__(
        self,
        settings: ServiceSettings,
        http_client: httpx.AsyncClient,
        timeout_sec: float = smart_config.SEARCH_TIMEOUT_SEC,
    ):
        self.settings = settings
        self.http_client = http_client
        self.timeout_sec = timeout_sec

    @property
    def configured(self) -> bool:
        return self.settings.search_configured

    @property
    def url(self) -> str:
        return (
            f"{self.settings.search_endpoint}/indexes/{self.settings.search_index}"
            f"/docs/search?api-version={smart_config.SEARCH_API_VERSION}"
        )

    async def search_programs(self, keywords: str, location: Optional[Location] = None) -> Outcome:
        """
        Returns Ok(list of program records) or Fallback(reason). Never raises.
        """
        if not self.configured:
            return Fallback("not_configured")

        body = build_search_body(keywords, location)
        start = time.perf_counter()

        try:
            response = await self.http_client.post(
                self.url,
                json=body,
                headers={"api-key": self.settings.search_key},
                timeout=self.timeout_sec,
            )
            response.raise_for_status()
            data = response.json()
        except httpx.TimeoutException:
            logger.warning(f"Azure Search timed out after {self.timeout_sec}s")
            return Fallback("timeout")
        except httpx.HTTPStatusError as e:
            logger.error(f"Azure Search error: HTTP {e.response.status_code}")
            return Fallback(f"http_{e.response.status_code}")
        except httpx.HTTPError as e:
            logger.error(f"Azure Search request failed: {e}")
            return Fallback("network_error")
        except ValueError as e:
            logger.error(f"Azure Search returned malformed JSON: {e}")
            return Fallback("malformed_response")

        value = data.get("value") if isinstance(data, dict) else None
        if not isinstance(value, list):
            logger.error("Azure Search response has no 'value' list")
            return Fallback("malformed_response")

        records: List[Dict[str, Any]] = [r for r in value if isinstance(r, dict)]
        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.info(f"Azure Search returned {len(records)} programs in {elapsed_ms:.0f}ms")
        return Ok(records)

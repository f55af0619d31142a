"""
Tests for search filter construction and the search index client.
"""

import asyncio

import httpx
import pytest

from baynav.search_index import (
    REGIONAL_AREAS,
    SearchIndexClient,
    build_search_body,
    build_search_filter,
)
from baynav.smart.locations import Location
from baynav.smart.outcome import Fallback, Ok

from conftest import SEARCH_ENDPOINT, make_settings


async def search_with(handler, keywords="food pantry", location=None, settings=None):
    settings = settings or make_settings()
    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        return await SearchIndexClient(settings, client).search_programs(keywords, location)


class TestSearchFilter:

    def test_no_location_no_filter(self):
        assert build_search_filter(None) is None
        assert "filter" not in build_search_body("food", None)

    def test_county_only(self):
        search_filter = build_search_filter(Location(county="Marin County"))
        for area in REGIONAL_AREAS:
            assert f"areas/any(a: a eq '{area}')" in search_filter
        assert "areas/any(a: a eq 'Marin County')" in search_filter
        assert "city eq" not in search_filter

    def test_city_and_county(self):
        search_filter = build_search_filter(Location(zip="94612", city="Oakland", county="Alameda County"))
        clauses = search_filter.split(" or ")
        assert clauses == [
            "areas/any(a: a eq 'Bay Area')",
            "areas/any(a: a eq 'Statewide')",
            "areas/any(a: a eq 'California')",
            "areas/any(a: a eq 'Nationwide')",
            "areas/any(a: a eq 'Alameda County')",
            "city eq 'Oakland'",
            "areas/any(a: a eq 'Oakland')",
        ]

    def test_quotes_escaped(self):
        search_filter = build_search_filter(Location(city="O'Town", county="Marin County"))
        assert "city eq 'O''Town'" in search_filter

    def test_body_shape(self):
        body = build_search_body("food pantry", Location(county="Napa County"))
        assert body["search"] == "food pantry"
        assert body["queryType"] == "simple"
        assert body["searchMode"] == "any"
        assert body["top"] == 10
        assert body["searchFields"] == "name,category,description,whatTheyOffer,howToGetIt,groups"
        assert body["select"].startswith("id,name,category,description")
        assert "Napa County" in body["filter"]


class TestSearchIndexClient:

    def test_success(self, backends):
        outcome = asyncio.run(search_with(backends, location=Location(county="Marin County")))
        assert isinstance(outcome, Ok)
        assert [r["id"] for r in outcome.value] == ["prog-0", "prog-1", "prog-2"]

        request = backends.requests_to("/docs/search")[0]
        assert str(request.url) == f"{SEARCH_ENDPOINT}/indexes/programs/docs/search?api-version=2023-11-01"
        assert request.headers["api-key"] == "search-key"
        body = backends.search_bodies()[0]
        assert body["search"] == "food pantry"
        assert "Marin County" in body["filter"]

    def test_not_configured(self, backends):
        outcome = asyncio.run(search_with(backends, settings=make_settings(search=False)))
        assert outcome == Fallback("not_configured")
        assert backends.requests == []

    @pytest.mark.parametrize("status", [400, 403, 500, 503])
    def test_http_error_is_soft(self, backends, status):
        backends.search_status = status
        outcome = asyncio.run(search_with(backends))
        assert outcome == Fallback(f"http_{status}")

    def test_malformed_json(self):
        def handler(request):
            return httpx.Response(200, content=b"<html>oops</html>")

        assert asyncio.run(search_with(handler)) == Fallback("malformed_response")

    def test_missing_value_list(self):
        def handler(request):
            return httpx.Response(200, json={"results": []})

        assert asyncio.run(search_with(handler)) == Fallback("malformed_response")

    def test_network_error(self):
        def handler(request):
            raise httpx.ConnectError("unreachable", request=request)

        assert asyncio.run(search_with(handler)) == Fallback("network_error")

    def test_timeout(self):
        def handler(request):
            raise httpx.ReadTimeout("too slow", request=request)

        assert asyncio.run(search_with(handler)) == Fallback("timeout")

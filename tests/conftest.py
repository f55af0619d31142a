import os
import sys
import json
from typing import Any, Dict, List, Optional

import httpx
import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from baynav.smart.config import DEFAULT_REFERENCE_DIR, ServiceSettings
from baynav.smart.reference import load_reference_catalog

SEARCH_ENDPOINT = "https://test-search.search.windows.net"
CF_ACCOUNT = "acct123"
AZURE_OPENAI_ENDPOINT = "https://test-openai.openai.azure.com"


def make_settings(search: bool = True, cloudflare: bool = False, azure: bool = False) -> ServiceSettings:
    return ServiceSettings(
        search_endpoint=SEARCH_ENDPOINT,
        search_key="search-key" if search else None,
        cf_account_id=CF_ACCOUNT if cloudflare else None,
        cf_api_token="cf-token" if cloudflare else None,
        azure_openai_endpoint=AZURE_OPENAI_ENDPOINT if azure else None,
        azure_openai_key="azure-key" if azure else None,
    )


def chat_completion(content: Optional[str]) -> Dict[str, Any]:
    return {
        "id": "chatcmpl-test",
        "object": "chat.completion",
        "created": 1700000000,
        "model": "test-model",
        "choices": [
            {
                "index": 0,
                "message": {"role": "assistant", "content": content},
                "finish_reason": "stop",
            }
        ],
    }


def program_record(i: int, description: str = "Helps residents.", **extra) -> Dict[str, Any]:
    record = {
        "id": f"prog-{i}",
        "name": f"Program {i}",
        "category": "Food",
        "description": description,
        "groups": ["everyone"],
        "areas": ["Bay Area"],
        "city": None,
        "website": f"https://example.org/{i}",
        "phone": None,
    }
    record.update(extra)
    return record


class FakeBackends:
    """
    httpx handler standing in for the search index and both model tiers.
    Records every request so tests can inspect payloads.
    """

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self.search_records: List[Dict[str, Any]] = [program_record(i) for i in range(3)]
        self.search_status = 200
        self.cloudflare_status = 200
        self.cloudflare_content: Optional[str] = "food pantry groceries"
        self.azure_status = 200
        self.azure_content: Optional[str] = "azure keywords"

    def requests_to(self, fragment: str) -> List[httpx.Request]:
        return [r for r in self.requests if fragment in str(r.url)]

    def search_bodies(self) -> List[Dict[str, Any]]:
        return [json.loads(r.content) for r in self.requests_to("/docs/search")]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        url = str(request.url)
        if "/docs/search" in url:
            if self.search_status != 200:
                return httpx.Response(self.search_status, json={"error": {"message": "search failed"}})
            return httpx.Response(200, json={"value": self.search_records})
        if "api.cloudflare.com" in url:
            if self.cloudflare_status != 200:
                return httpx.Response(self.cloudflare_status, json={"error": {"message": "cloudflare failed"}})
            return httpx.Response(200, json=chat_completion(self.cloudflare_content))
        if "openai.azure.com" in url:
            if self.azure_status != 200:
                return httpx.Response(self.azure_status, json={"error": {"message": "azure failed"}})
            return httpx.Response(200, json=chat_completion(self.azure_content))
        return httpx.Response(404, json={"error": "unexpected url"})


@pytest.fixture(scope="session")
def catalog():
    return load_reference_catalog(DEFAULT_REFERENCE_DIR)


@pytest.fixture
def backends():
    return FakeBackends()



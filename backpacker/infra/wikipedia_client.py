from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Protocol

import httpx

logger = logging.getLogger(__name__)

DEFAULT_WIKIPEDIA_API_URL = "https://en.wikipedia.org/w/api.php"
USER_AGENT = "backpacker-ai/0.1 (educational travel game)"


def get_wikipedia_api_url() -> str:
    return os.environ.get("WIKIPEDIA_API_URL", DEFAULT_WIKIPEDIA_API_URL)


def get_wikipedia_timeout_s() -> float:
    return float(os.environ.get("WIKIPEDIA_TIMEOUT_S", "10"))


class Encyclopedia(Protocol):
    async def fetch_article_content(self, query: str) -> str:  # pragma: no cover
        ...


def _extract_first_page(data: object) -> str:
    if not isinstance(data, dict):
        return ""
    query = data.get("query")
    if not isinstance(query, dict):
        return ""
    pages = query.get("pages") or {}
    if not isinstance(pages, dict) or not pages:
        return ""
    page = next(iter(pages.values()))
    if not isinstance(page, dict):
        return ""
    extract = page.get("extract")
    return extract if isinstance(extract, str) else ""


@dataclass(slots=True)
class WikipediaClient:
    """Plain-text article lookup against the MediaWiki extracts API.

    Lookups never raise: a missing page or any transport/HTTP/decoding failure
    comes back as an empty string, which callers read as "no article".
    """

    api_url: str = field(default_factory=get_wikipedia_api_url)
    timeout_s: float = field(default_factory=get_wikipedia_timeout_s)
    transport: httpx.AsyncBaseTransport | None = None

    def _params(self, query: str) -> dict[str, str]:
        return {
            "action": "query",
            "prop": "extracts",
            "explaintext": "true",
            "format": "json",
            "redirects": "1",
            "titles": query,
        }

    async def fetch_article_content(self, query: str) -> str:
        if not query.strip():
            return ""

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout_s,
                transport=self.transport,
                headers={"User-Agent": USER_AGENT},
            ) as client:
                resp = await client.get(self.api_url, params=self._params(query))
                resp.raise_for_status()
                return _extract_first_page(resp.json())
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("Wikipedia lookup failed for %r: %s", query, e)
            return ""

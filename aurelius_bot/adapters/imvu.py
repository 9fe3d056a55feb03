"""Best-effort enrichment of line items from IMVU product links.

Product ids are parsed from the URL itself; names and creators are scraped
from the product page with a handful of regular expressions. Every failure is
reported as ``success=False`` and leaves the item untouched.
"""

from __future__ import annotations

import logging
import re
import time
from collections.abc import Callable
from dataclasses import dataclass

import httpx

from ..core.models import LineItem

log = logging.getLogger("aurelius.imvu")

CACHE_TTL = 7 * 24 * 60 * 60  # seconds

_CLASSIC = re.compile(r"products_id=(\d+)")
_BETA = re.compile(r"product-(\d+)")

_NAME_PATTERNS = [
    re.compile(r"<h1[^>]*>([^<]+)</h1>", re.I),
    re.compile(r"<title[^>]*>([^<]+)</title>", re.I),
    re.compile(r'"product_name":\s*"([^"]+)"', re.I),
    re.compile(r'class="product-title"[^>]*>([^<]+)<', re.I),
]
_CREATOR_PATTERNS = [
    re.compile(r"by\s+([^<\n]+)", re.I),
    re.compile(r"creator[^>]*>([^<]+)<", re.I),
    re.compile(r'"creator_name":\s*"([^"]+)"', re.I),
]


@dataclass(frozen=True)
class ParsedUrl:
    product_id: str
    url_type: str  # "classic" | "beta"


@dataclass(frozen=True)
class EnrichmentResult:
    external_id: str | None
    name: str | None = None
    creator_name: str | None = None
    success: bool = False
    error: str | None = None


def parse_product_url(url: str | None) -> ParsedUrl | None:
    """Extract the product id from a classic or beta shop URL."""
    if not url or not isinstance(url, str):
        return None
    url = url.strip()
    match = _CLASSIC.search(url)
    if match:
        return ParsedUrl(match.group(1), "classic")
    match = _BETA.search(url)
    if match:
        return ParsedUrl(match.group(1), "beta")
    return None


def _first(patterns: list[re.Pattern[str]], html: str) -> str | None:
    for pattern in patterns:
        match = pattern.search(html)
        if match and match.group(1).strip():
            return match.group(1).strip()
    return None


def parse_product_page(html: str) -> tuple[str | None, str | None]:
    return _first(_NAME_PATTERNS, html), _first(_CREATOR_PATTERNS, html)


class IMVULinkParser:
    """Resolve product ids, names and creators for IMVU shop links."""

    user_agent = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36"

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.client = client or httpx.AsyncClient(follow_redirects=True)
        self.clock = clock
        self._cache: dict[str, tuple[float, tuple[str, str | None]]] = {}

    def _cached(self, product_id: str) -> tuple[str, str | None] | None:
        entry = self._cache.get(product_id)
        if entry and self.clock() - entry[0] < CACHE_TTL:
            return entry[1]
        return None

    @staticmethod
    def product_page_url(parsed: ParsedUrl) -> str:
        if parsed.url_type == "beta":
            return f"https://www.imvu.com/next/shop/product-{parsed.product_id}/"
        return f"https://www.imvu.com/shop/product.php?products_id={parsed.product_id}"

    async def extract_product_info(self, parsed: ParsedUrl) -> EnrichmentResult:
        cached = self._cached(parsed.product_id)
        if cached:
            return EnrichmentResult(parsed.product_id, cached[0], cached[1], success=True)
        try:
            response = await self.client.get(
                self.product_page_url(parsed), headers={"User-Agent": self.user_agent}
            )
            response.raise_for_status()
        except httpx.HTTPError as exc:
            log.warning("Error extracting product %s: %s", parsed.product_id, exc)
            return EnrichmentResult(parsed.product_id, error=str(exc))
        name, creator = parse_product_page(response.text)
        if not name:
            return EnrichmentResult(
                parsed.product_id,
                error="Could not extract product information from page",
            )
        self._cache[parsed.product_id] = (self.clock(), (name, creator))
        return EnrichmentResult(parsed.product_id, name, creator, success=True)

    async def lookup(self, url: str | None) -> EnrichmentResult:
        parsed = parse_product_url(url)
        if parsed is None:
            return EnrichmentResult(None, error="Invalid URL format")
        return await self.extract_product_info(parsed)

    async def enrich_items(self, items: list[LineItem]) -> list[LineItem]:
        """Return ``items`` with product data filled in where lookups succeed.

        Items that already carry an ``external_id`` are not looked up again.
        """
        enriched: list[LineItem] = []
        for item in items:
            if not item.source_url or item.external_id:
                enriched.append(item)
                continue
            result = await self.lookup(item.source_url)
            if not result.success:
                enriched.append(item)
                continue
            update: dict[str, str] = {"external_id": result.external_id}
            if result.name:
                update["name"] = result.name
            if result.creator_name:
                update["creator_name"] = result.creator_name
            enriched.append(item.model_copy(update=update))
        return enriched

    async def close(self) -> None:
        await self.client.aclose()

"""Zillow listing-page scraper, the last-resort source for structural facts."""

import asyncio
import json
import re
from typing import Any
from urllib.parse import quote, urljoin
from urllib.robotparser import RobotFileParser

import httpx
from bs4 import BeautifulSoup
from curl_cffi.requests import AsyncSession

from home_enrichment.logging import get_logger
from home_enrichment.models import SQUARE_FEET_PER_ACRE, AddressQuery, ProfileFields, SourceLabel
from home_enrichment.sources.base import BaseSource
from home_enrichment.sources.constants import BLOCK_PAGE_MARKERS, BROWSER_HEADERS
from home_enrichment.sources.parsing import clean_text, parse_float, parse_int, parse_positive_int

logger = get_logger(__name__)

ZILLOW_BASE_URL = "https://www.zillow.com"
ROBOTS_USER_AGENT = "*"
# Five requests per minute
ZILLOW_MIN_INTERVAL = 12.0
SCRAPER_TIMEOUT = 10.0

_YEAR_BUILT_RE = re.compile(r"Built in (\d{4})|Year built[:\s]+(\d{4})", re.IGNORECASE)
_SQFT_RE = re.compile(r"(\d{1,3}(?:,\d{3})*)\s*(?:sq\.?\s*ft|square\s*feet)", re.IGNORECASE)
_LOT_RE = re.compile(
    r"Lot(?:\s*size)?[:\s]+([\d,]+(?:\.\d+)?)\s*(acres?|sq\.?\s*ft|square\s*feet)",
    re.IGNORECASE,
)
_BEDS_RE = re.compile(r"(\d+)\s*(?:bd|beds?|bedrooms?)\b", re.IGNORECASE)
_BATHS_RE = re.compile(r"(\d+(?:\.\d+)?)\s*(?:ba|baths?|bathrooms?)\b", re.IGNORECASE)

_STRUCTURAL_FIELDS = frozenset(
    {"year_built", "square_footage", "lot_size", "bedrooms", "bathrooms"}
)


def listing_url(query: AddressQuery) -> str:
    return f"{ZILLOW_BASE_URL}/homes/{quote(query.one_line)}"


def is_block_page(html: str) -> bool:
    return any(marker in html for marker in BLOCK_PAGE_MARKERS)


def _iter_json_ld(soup: BeautifulSoup) -> list[dict[str, Any]]:
    """Every JSON-LD object on the page, flattening lists and ``@graph``."""
    objects: list[dict[str, Any]] = []
    for script in soup.find_all("script", type="application/ld+json"):
        try:
            data = json.loads(script.string or "")
        except json.JSONDecodeError:
            continue
        pending = data if isinstance(data, list) else [data]
        while pending:
            item = pending.pop(0)
            if not isinstance(item, dict):
                continue
            objects.append(item)
            graph = item.get("@graph")
            if isinstance(graph, list):
                pending.extend(graph)
    return objects


def _fields_from_json_ld(obj: dict[str, Any]) -> ProfileFields:
    floor_size = obj.get("floorSize")
    square_feet = floor_size.get("value") if isinstance(floor_size, dict) else floor_size
    return ProfileFields(
        year_built=parse_positive_int(obj.get("yearBuilt")),
        square_footage=parse_positive_int(square_feet),
        bedrooms=parse_int(obj.get("numberOfBedrooms") or obj.get("numberOfRooms")),
        bathrooms=parse_float(obj.get("numberOfBathroomsTotal")),
        property_type=clean_text(obj.get("propertyType") or obj.get("accommodationCategory")),
    )


def _fields_from_text(text: str) -> ProfileFields:
    """Regex fallback over the visible page text."""
    year_built = None
    if match := _YEAR_BUILT_RE.search(text):
        year_built = parse_positive_int(match.group(1) or match.group(2))

    square_footage = None
    if match := _SQFT_RE.search(text):
        square_footage = parse_positive_int(match.group(1))

    lot_size = None
    if match := _LOT_RE.search(text):
        value = parse_float(match.group(1))
        if value:
            is_acres = match.group(2).lower().startswith("acre")
            lot_size = value if is_acres else value / SQUARE_FEET_PER_ACRE

    bedrooms = None
    if match := _BEDS_RE.search(text):
        bedrooms = parse_int(match.group(1))

    bathrooms = None
    if match := _BATHS_RE.search(text):
        bathrooms = parse_float(match.group(1))

    return ProfileFields(
        year_built=year_built,
        square_footage=square_footage,
        lot_size=lot_size,
        bedrooms=bedrooms,
        bathrooms=bathrooms,
    )


def parse_listing_html(html: str) -> ProfileFields | None:
    """Extract structural facts from a listing page.

    Structured data (JSON-LD) wins; the regex fallback only runs when no
    JSON-LD object carries a structural fact.

    Returns:
        Fragment with at least one structural fact, or None.
    """
    soup = BeautifulSoup(html, "html.parser")

    for obj in _iter_json_ld(soup):
        if obj.get("@type") == "RealEstateAgent" or "address" in obj:
            fields = _fields_from_json_ld(obj)
            if fields.populated_fields() & _STRUCTURAL_FIELDS:
                return fields

    fields = _fields_from_text(soup.get_text(" ", strip=True))
    if fields.populated_fields() & _STRUCTURAL_FIELDS:
        return fields
    return None


class ZillowScraper(BaseSource[AddressQuery, ProfileFields]):
    """Scrapes a Zillow listing page, honoring robots.txt and a request throttle."""

    name = "zillow"

    def __init__(
        self,
        client: httpx.AsyncClient,
        *,
        session: AsyncSession | None = None,  # type: ignore[type-arg]
        timeout: float = SCRAPER_TIMEOUT,
        min_interval: float = ZILLOW_MIN_INTERVAL,
    ) -> None:
        super().__init__(client, timeout=timeout)
        self._curl_session = session
        self._owns_session = session is None
        self._min_interval = min_interval
        self._robots: RobotFileParser | None = None
        self._lock = asyncio.Lock()
        self._next_time: float = 0.0

    @property
    def label(self) -> SourceLabel:
        return SourceLabel.WEB_SCRAPER

    async def _get_curl_session(self) -> AsyncSession:  # type: ignore[type-arg]
        """Get or create a reusable curl_cffi session."""
        if self._curl_session is None:
            self._curl_session = AsyncSession()
        return self._curl_session

    async def _throttle(self) -> None:
        """Ensure a minimum interval between listing-page requests.

        Each caller reserves the next free slot under the lock, then sleeps
        until it without holding the lock.
        """
        async with self._lock:
            now = asyncio.get_running_loop().time()
            start = max(now, self._next_time)
            self._next_time = start + self._min_interval
        if start > now:
            await asyncio.sleep(start - now)

    async def _load_robots(self) -> RobotFileParser:
        """Fetch and parse robots.txt once per scraper."""
        if self._robots is None:
            parser = RobotFileParser()
            response = await self._client.get(urljoin(ZILLOW_BASE_URL, "/robots.txt"))
            # Same policy as RobotFileParser.read(): auth errors deny all,
            # other client errors allow all.
            if response.status_code in (401, 403):
                parser.disallow_all = True
            elif 400 <= response.status_code < 500:
                parser.allow_all = True
            else:
                response.raise_for_status()
                parser.parse(response.text.splitlines())
            self._robots = parser
        return self._robots

    async def is_allowed(self, url: str) -> bool:
        robots = await self._load_robots()
        return robots.can_fetch(ROBOTS_USER_AGENT, url)

    async def fetch(self, query: AddressQuery) -> ProfileFields | None:
        """Wait for a throttle slot, then scrape within the per-call timeout."""
        await self._throttle()
        return await super().fetch(query)

    async def _fetch(self, query: AddressQuery) -> ProfileFields | None:
        url = listing_url(query)
        if not await self.is_allowed(url):
            logger.info("zillow_disallowed_by_robots", url=url)
            return None

        session = await self._get_curl_session()
        response = await session.get(
            url,
            impersonate="chrome",
            headers=BROWSER_HEADERS,
            timeout=self._timeout,
        )
        if response.status_code != 200:
            logger.warning("zillow_http_error", url=url, status=response.status_code)
            return None

        html = response.text
        if is_block_page(html):
            logger.warning("zillow_blocked", url=url)
            return None

        fields = parse_listing_html(html)
        if fields is None:
            logger.info("zillow_no_listing_data", url=url)
            return None
        return fields.model_copy(update={"zillow_url": url})

    async def close(self) -> None:
        """Close the curl_cffi session if this scraper created it."""
        if self._curl_session is not None and self._owns_session:
            await self._curl_session.close()
        self._curl_session = None

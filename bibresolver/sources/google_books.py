"""
Google Books Adapter

Provides good descriptions, covers and language, but no library
classifications. Last resort of the basic metadata cascade.
Rate limit: 1000 requests/day without API key.
"""

from typing import Optional

import httpx
from loguru import logger

from bibresolver.models import BibliographicFragment, LookupKey
from bibresolver.sources.base import DEFAULT_TIMEOUT, SourceAdapter, as_int, extract_year, first_text


class GoogleBooksAdapter(SourceAdapter):
    """Volumes API: https://www.googleapis.com/books/v1/volumes?q=isbn:n"""

    BASE_URL = "https://www.googleapis.com/books/v1"

    name = "Google Books"
    keys = frozenset({LookupKey.ISBN})

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = DEFAULT_TIMEOUT,
        api_key: Optional[str] = None,
    ):
        super().__init__(client=client, timeout=timeout)
        self.api_key = api_key
        if not self.api_key:
            logger.debug("No Google Books API key provided. Rate limits will be lower.")

    async def _lookup_isbn(self, isbn: str) -> Optional[BibliographicFragment]:
        params = {"q": f"isbn:{isbn}"}
        if self.api_key:
            params["key"] = self.api_key

        data = await self._get_json(f"{self.BASE_URL}/volumes", params=params)

        items = data.get("items") or []
        if not items:
            logger.debug(f"{self.name}: no items")
            return None

        return self._parse_volume(items[0])

    def _parse_volume(self, item: dict) -> Optional[BibliographicFragment]:
        """Parse volume data."""
        info = item.get("volumeInfo")
        if not info:
            logger.debug(f"{self.name}: volumeInfo missing")
            return None

        # Cover images
        images = info.get("imageLinks", {})
        cover_url = (
            images.get("large") or images.get("medium")
            or images.get("thumbnail") or images.get("smallThumbnail")
        )

        # Fix HTTP URLs
        if cover_url and cover_url.startswith("http:"):
            cover_url = cover_url.replace("http:", "https:", 1)

        return BibliographicFragment(
            source_name=self.name,
            title=info.get("title"),
            author=first_text(info.get("authors")),
            publisher=info.get("publisher"),
            year=extract_year(info.get("publishedDate")),
            pages=as_int(info.get("pageCount")),
            description=info.get("description"),
            cover_url=cover_url,
            language=info.get("language"),
            subjects=tuple(info.get("categories", [])),
        )

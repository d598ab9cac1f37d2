"""
Source Adapter Base

Common plumbing for catalog adapters: a lazily created (or injected, shared)
httpx client, status/payload checking, and the failure boundary that turns
any exception or timeout into "no fragment".
"""

import asyncio
import re
from typing import Any, Awaitable, Callable, Optional

import httpx
from loguru import logger

from bibresolver.errors import SourceError
from bibresolver.models import BibliographicFragment, LookupKey


DEFAULT_TIMEOUT = 15.0

YEAR_PATTERN = re.compile(r"\d{4}")


def extract_year(date_string: Optional[str]) -> Optional[int]:
    """Pull a four digit year out of '2003', '2003-01-15', 'January 2003', ..."""
    if not date_string:
        return None
    match = YEAR_PATTERN.search(str(date_string))
    return int(match.group()) if match else None


def first_value(value: Any) -> Optional[Any]:
    """First element of a list, the value itself otherwise."""
    if isinstance(value, list):
        return value[0] if value else None
    return value


def first_text(value: Any, key: Optional[str] = None) -> Optional[str]:
    """
    First usable string from a list of strings or objects.

    Args:
        value: String, list of strings, or list of dicts
        key: Dict key holding the text (e.g. "name")
    """
    item = first_value(value)
    if isinstance(item, dict):
        item = item.get(key) if key else None
    if item is None:
        return None
    text = str(item).strip()
    return text or None


def as_int(value: Any) -> Optional[int]:
    try:
        return int(value) if value is not None else None
    except (TypeError, ValueError):
        return None


class SourceAdapter:
    """
    One external bibliographic catalog.

    Subclasses set `name` and `keys` and implement the matching protected
    lookups. Callers use the public fetch_* methods, which never raise.
    """

    name: str = "unknown"
    keys: frozenset[LookupKey] = frozenset()

    # Language code for catalogs only worth querying for matching titles
    locale: Optional[str] = None

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        """
        Args:
            client: Shared HTTP client. Created on first use when omitted.
            timeout: Upper bound for one lookup, in seconds
        """
        self.timeout = timeout
        self._client = client
        self._owns_client = client is None

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"

    def supports(self, key: LookupKey) -> bool:
        return key in self.keys

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout, follow_redirects=True)
        return self._client

    # ------------------------------------------------------------------
    # Public boundary
    # ------------------------------------------------------------------

    async def fetch_by_isbn(self, isbn: str) -> Optional[BibliographicFragment]:
        """Look up by ISBN. None when the catalog has nothing usable."""
        return await self._fetch(LookupKey.ISBN, lambda: self._lookup_isbn(isbn), f"isbn={isbn}")

    async def fetch_by_title(
        self,
        title: str,
        author: Optional[str] = None,
    ) -> Optional[BibliographicFragment]:
        """Look up by title, narrowed by author when given."""
        return await self._fetch(
            LookupKey.TITLE,
            lambda: self._lookup_title(title, author),
            f"title='{title}', author='{author or ''}'",
        )

    async def fetch_by_author(self, author: str) -> Optional[BibliographicFragment]:
        """Look up by author name."""
        return await self._fetch(LookupKey.AUTHOR, lambda: self._lookup_author(author), f"author='{author}'")

    async def _fetch(
        self,
        key: LookupKey,
        lookup: Callable[[], Awaitable[Optional[BibliographicFragment]]],
        label: str,
    ) -> Optional[BibliographicFragment]:
        if not self.supports(key):
            logger.debug(f"{self.name} does not support {key.value} lookups")
            return None

        try:
            fragment = await asyncio.wait_for(lookup(), timeout=self.timeout)
        except asyncio.TimeoutError:
            logger.warning(f"{self.name} timed out after {self.timeout}s ({label})")
            return None
        except SourceError as e:
            logger.info(f"{self.name}: {e.detail or e.message} ({label})")
            return None
        except Exception as e:
            logger.warning(f"{self.name} lookup failed ({label}): {type(e).__name__}: {e}")
            return None

        if fragment is None or fragment.is_empty():
            logger.debug(f"{self.name}: nothing usable ({label})")
            return None

        logger.debug(f"{self.name}: got fragment ({label})")
        return fragment

    # ------------------------------------------------------------------
    # Adapter hooks
    # ------------------------------------------------------------------

    async def _lookup_isbn(self, isbn: str) -> Optional[BibliographicFragment]:
        raise NotImplementedError

    async def _lookup_title(self, title: str, author: Optional[str]) -> Optional[BibliographicFragment]:
        raise NotImplementedError

    async def _lookup_author(self, author: str) -> Optional[BibliographicFragment]:
        raise NotImplementedError

    # ------------------------------------------------------------------
    # HTTP helpers
    # ------------------------------------------------------------------

    async def _get(
        self,
        url: str,
        params: Optional[dict] = None,
        headers: Optional[dict] = None,
    ) -> httpx.Response:
        client = await self._get_client()
        response = await client.get(url, params=params, headers=headers)

        if not response.is_success:
            raise SourceError(self.name, f"HTTP {response.status_code}")

        return response

    async def _get_json(
        self,
        url: str,
        params: Optional[dict] = None,
        headers: Optional[dict] = None,
    ) -> Any:
        response = await self._get(url, params=params, headers=headers)
        try:
            return response.json()
        except ValueError as e:
            raise SourceError(self.name, f"Unparseable JSON payload: {e}") from e

    async def _get_text(
        self,
        url: str,
        params: Optional[dict] = None,
        headers: Optional[dict] = None,
    ) -> str:
        response = await self._get(url, params=params, headers=headers)
        return response.text

    async def close(self):
        """Close HTTP client if this adapter created it."""
        if self._client and self._owns_client:
            await self._client.aclose()
            self._client = None

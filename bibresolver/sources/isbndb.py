"""
ISBNdb Adapter

Commercial catalog with Dewey numbers. Requests without an API key are
usually refused, which the adapter boundary treats as "nothing found".
"""

from typing import Optional

import httpx

from bibresolver.models import BibliographicFragment, LookupKey
from bibresolver.sources.base import DEFAULT_TIMEOUT, SourceAdapter, as_int, extract_year, first_text


class IsbndbAdapter(SourceAdapter):
    """Book endpoint: https://api2.isbndb.com/book/{isbn}"""

    BASE_URL = "https://api2.isbndb.com"

    name = "ISBNdb"
    keys = frozenset({LookupKey.ISBN})

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = DEFAULT_TIMEOUT,
        api_key: Optional[str] = None,
    ):
        super().__init__(client=client, timeout=timeout)
        self.api_key = api_key

    async def _lookup_isbn(self, isbn: str) -> Optional[BibliographicFragment]:
        headers = {"Authorization": self.api_key} if self.api_key else None
        data = await self._get_json(f"{self.BASE_URL}/book/{isbn}", headers=headers)

        book = data.get("book")
        if not book:
            return None

        return BibliographicFragment(
            source_name=self.name,
            title=book.get("title"),
            author=first_text(book.get("authors")),
            publisher=book.get("publisher"),
            year=extract_year(book.get("date_published")),
            pages=as_int(book.get("pages")),
            description=book.get("synopsis") or book.get("overview"),
            cover_url=book.get("image"),
            language=book.get("language"),
            dewey=first_text(book.get("dewey_decimal")),
            subjects=tuple(book.get("subjects", [])),
        )

"""
Open Library Adapters

Open Library is a free, open-source library catalog. It exposes the same
edition data through three endpoints with different shapes, each wrapped
here as its own adapter:

- Books API (/api/books, jscmd=data): richest, classifications nested
- Edition endpoint (/isbn/{isbn}.json): raw edition record
- Search API (/search.json): search index, arrays everywhere

Rate limits: Be respectful, no official limit but don't abuse.
"""

from typing import Optional

from loguru import logger

from bibresolver.errors import SourceError
from bibresolver.models import BibliographicFragment, LookupKey
from bibresolver.sources.base import SourceAdapter, as_int, extract_year, first_text


# MARC language codes seen on Open Library records
LANGUAGE_CODES = {
    "eng": "en",
    "spa": "es",
    "fre": "fr",
    "ger": "de",
    "ita": "it",
    "por": "pt",
}


def _language_from_key(value) -> Optional[str]:
    """'/languages/eng' or 'eng' -> 'en'."""
    code = first_text(value, "key")
    if not code:
        return None
    code = code.rsplit("/", 1)[-1]
    return LANGUAGE_CODES.get(code, code)


class OpenLibraryAdapter(SourceAdapter):
    """Shared pieces of the Open Library adapters."""

    BASE_URL = "https://openlibrary.org"
    COVERS_URL = "https://covers.openlibrary.org"

    keys = frozenset({LookupKey.ISBN})

    def _cover_url(self, cover_id) -> Optional[str]:
        if cover_id is None or as_int(cover_id) is None or as_int(cover_id) < 0:
            return None
        return f"{self.COVERS_URL}/b/id/{cover_id}-L.jpg"

    @staticmethod
    def _classifications(data: dict) -> tuple[Optional[str], Optional[str], Optional[str]]:
        """
        Read LC, Dewey and UDC codes from a record.

        Codes live either at the top level (edition records) or under
        "classifications" (Books API). UDC appears as "cdu" or "cdus".
        """
        nested = data.get("classifications") or {}

        def lookup(*names: str) -> Optional[str]:
            for source in (data, nested):
                for name in names:
                    value = first_text(source.get(name))
                    if value:
                        return value
            return None

        lc = lookup("lc_classifications")
        dewey = lookup("dewey_decimal_class")
        udc = lookup("cdu", "cdus")
        return lc, dewey, udc


class OpenLibraryBooksAdapter(OpenLibraryAdapter):
    """Books API: https://openlibrary.org/api/books?bibkeys=ISBN:n&jscmd=data&format=json"""

    name = "OpenLibrary API"

    async def _lookup_isbn(self, isbn: str) -> Optional[BibliographicFragment]:
        key = f"ISBN:{isbn}"
        data = await self._get_json(
            f"{self.BASE_URL}/api/books",
            params={"bibkeys": key, "jscmd": "data", "format": "json"},
        )

        entry = data.get(key) if isinstance(data, dict) else None
        if not entry:
            logger.debug(f"{self.name}: no entry for {key}")
            return None

        return self._parse_entry(entry)

    def _parse_entry(self, entry: dict) -> BibliographicFragment:
        lc, dewey, udc = self._classifications(entry)
        logger.debug(f"{self.name} classifications - LC: '{lc}', Dewey: '{dewey}', UDC: '{udc}'")

        cover = entry.get("cover") or {}
        subjects = tuple(
            name for name in (first_text([s], "name") for s in entry.get("subjects", []))
            if name
        )

        return BibliographicFragment(
            source_name=self.name,
            title=entry.get("title"),
            author=first_text(entry.get("authors"), "name"),
            publisher=first_text(entry.get("publishers"), "name"),
            year=extract_year(entry.get("publish_date")),
            pages=as_int(entry.get("number_of_pages")),
            description=first_text(entry.get("notes")),
            cover_url=cover.get("large") or cover.get("medium") or cover.get("small"),
            lc=lc,
            dewey=dewey,
            udc=udc,
            subjects=subjects,
        )


class OpenLibraryEditionAdapter(OpenLibraryAdapter):
    """Edition endpoint: https://openlibrary.org/isbn/{isbn}.json"""

    name = "OpenLibrary Direct"

    async def _lookup_isbn(self, isbn: str) -> Optional[BibliographicFragment]:
        data = await self._get_json(f"{self.BASE_URL}/isbn/{isbn}.json")
        if not isinstance(data, dict):
            raise SourceError(self.name, "Edition payload is not an object")

        author = await self._first_author(data.get("authors") or [])
        lc, dewey, udc = self._classifications(data)
        logger.debug(f"{self.name} classifications - LC: '{lc}', Dewey: '{dewey}', UDC: '{udc}'")

        description = data.get("description")
        if isinstance(description, dict):
            description = description.get("value")

        return BibliographicFragment(
            source_name=self.name,
            title=data.get("title"),
            author=author,
            publisher=first_text(data.get("publishers")),
            year=extract_year(data.get("publish_date")),
            pages=as_int(data.get("number_of_pages")),
            description=description,
            cover_url=self._cover_url(first_text(data.get("covers"))),
            language=_language_from_key(data.get("languages")),
            lc=lc,
            dewey=dewey,
            udc=udc,
            subjects=tuple(s for s in data.get("subjects", []) if isinstance(s, str)),
        )

    async def _first_author(self, authors: list) -> Optional[str]:
        """Authors are names, {"name": ...} objects, or {"key": "/authors/..."} references."""
        if not authors:
            return None

        author = authors[0]
        if isinstance(author, str):
            return author.strip() or None
        if isinstance(author, dict):
            if author.get("name"):
                return author["name"]
            if author.get("key"):
                return await self._get_author_name(author["key"])
        return None

    async def _get_author_name(self, author_key: str) -> Optional[str]:
        """Fetch author name from author key."""
        try:
            data = await self._get_json(f"{self.BASE_URL}{author_key}.json")
            return data.get("name")
        except SourceError as e:
            # Missing author name does not invalidate the edition
            logger.debug(f"{self.name}: author lookup failed for {author_key}: {e.detail}")
            return None


class OpenLibrarySearchAdapter(OpenLibraryAdapter):
    """Search API: https://openlibrary.org/search.json?isbn=n"""

    name = "OpenLibrary Search"

    FIELDS = (
        "key,title,author_name,publisher,first_publish_year,publish_year,isbn,"
        "lcc,ddc,subject,cover_i,number_of_pages_median,language"
    )

    async def _lookup_isbn(self, isbn: str) -> Optional[BibliographicFragment]:
        data = await self._get_json(
            f"{self.BASE_URL}/search.json",
            params={"isbn": isbn, "fields": self.FIELDS},
        )

        docs = data.get("docs") or []
        if not docs:
            logger.debug(f"{self.name}: no documents")
            return None

        return self._parse_doc(docs[0])

    def _parse_doc(self, doc: dict) -> BibliographicFragment:
        lc = first_text(doc.get("lcc"))
        dewey = first_text(doc.get("ddc"))
        logger.debug(f"{self.name} classifications - LC: '{lc}', Dewey: '{dewey}'")

        year = as_int(doc.get("first_publish_year"))
        if year is None and doc.get("publish_year"):
            year = min(doc["publish_year"])

        return BibliographicFragment(
            source_name=self.name,
            title=doc.get("title"),
            author=first_text(doc.get("author_name")),
            publisher=first_text(doc.get("publisher")),
            year=year,
            pages=as_int(doc.get("number_of_pages_median")),
            cover_url=self._cover_url(doc.get("cover_i")),
            language=_language_from_key(doc.get("language")),
            lc=lc,
            dewey=dewey,
            subjects=tuple(doc.get("subject", [])[:10]),  # Limit subjects
        )

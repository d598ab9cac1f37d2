"""
WorldCat Classify Adapter

OCLC's Classify service answers with an XML document carrying the most
popular LC and Dewey numbers for a work. Only those two tags are needed,
so the payload is scanned with regular expressions instead of parsed.
"""

import re
from typing import Optional

from bibresolver.models import BibliographicFragment, LookupKey
from bibresolver.sources.base import SourceAdapter


LCC_PATTERN = re.compile(r"<lcc>(.*?)</lcc>", re.DOTALL)
DDC_PATTERN = re.compile(r"<ddc>(.*?)</ddc>", re.DOTALL)


def _first_match(pattern: re.Pattern, xml: str) -> Optional[str]:
    """First non-blank tag body without nested markup."""
    for match in pattern.finditer(xml):
        value = match.group(1).strip()
        if value and "<" not in value:
            return value
    return None


class WorldCatClassifyAdapter(SourceAdapter):
    """
    Classify API.

    http://classify.oclc.org/classify2/Classify?isbn=9780140328721&summary=true
    http://classify.oclc.org/classify2/Classify?title=hamlet&author=shakespeare&summary=true
    """

    BASE_URL = "http://classify.oclc.org/classify2/Classify"

    name = "WorldCat Classify"
    keys = frozenset({LookupKey.ISBN, LookupKey.TITLE})

    async def _lookup_isbn(self, isbn: str) -> Optional[BibliographicFragment]:
        xml = await self._get_text(self.BASE_URL, params={"isbn": isbn, "summary": "true"})
        return self._parse_xml(xml)

    async def _lookup_title(self, title: str, author: Optional[str]) -> Optional[BibliographicFragment]:
        params = {"title": title, "summary": "true"}
        if author:
            params["author"] = author

        xml = await self._get_text(self.BASE_URL, params=params)
        return self._parse_xml(xml)

    def _parse_xml(self, xml: str) -> BibliographicFragment:
        return BibliographicFragment(
            source_name=self.name,
            lc=_first_match(LCC_PATTERN, xml),
            dewey=_first_match(DDC_PATTERN, xml),
        )

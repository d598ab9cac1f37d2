"""
Deutsche Nationalbibliothek Adapter

SRU search by author; UDC-like numeric subjects are read from the
MARC21-xml response with a regular expression.
"""

import re
from typing import Optional

from bibresolver.models import BibliographicFragment, LookupKey
from bibresolver.sources.base import SourceAdapter


SUBJECT_PATTERN = re.compile(r"<dc:subject[^>]*>([0-9]+.*?)</dc:subject>", re.DOTALL)


class DnbAdapter(SourceAdapter):
    """SRU: https://services.dnb.de/sru/authorities?version=1.1&operation=searchRetrieve&query=aut.person=..."""

    BASE_URL = "https://services.dnb.de/sru/authorities"

    name = "Deutsche Nationalbibliothek"
    keys = frozenset({LookupKey.AUTHOR})

    async def _lookup_author(self, author: str) -> Optional[BibliographicFragment]:
        xml = await self._get_text(
            self.BASE_URL,
            params={
                "version": "1.1",
                "operation": "searchRetrieve",
                "query": f"aut.person={author}",
                "recordSchema": "MARC21-xml",
            },
        )

        udc = None
        for match in SUBJECT_PATTERN.finditer(xml):
            value = match.group(1).strip()
            if value and "<" not in value:
                udc = value
                break

        return BibliographicFragment(source_name=self.name, udc=udc)

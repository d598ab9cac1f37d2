"""
Biblioteca Nacional de España Adapter

Spanish national catalog, a good source of UDC (CDU) numbers for
Spanish-language titles. Only queried when the title looks Spanish.
"""

from typing import Optional

from bibresolver.models import BibliographicFragment, LookupKey
from bibresolver.sources.base import SourceAdapter, first_text


class BneAdapter(SourceAdapter):
    """Catalog search: http://catalogo.bne.es/uhtbin/webcat?searchtype=title&searcharg=..."""

    BASE_URL = "http://catalogo.bne.es/uhtbin/webcat"

    name = "Biblioteca Nacional de España"
    keys = frozenset({LookupKey.TITLE})
    locale = "es"

    async def _lookup_title(self, title: str, author: Optional[str]) -> Optional[BibliographicFragment]:
        data = await self._get_json(
            self.BASE_URL,
            params={"searchtype": "title", "searcharg": title, "format": "json"},
        )

        udc = None
        for record in data.get("records") or []:
            udc = first_text(record.get("cdu"))
            if udc:
                break

        return BibliographicFragment(source_name=self.name, udc=udc)

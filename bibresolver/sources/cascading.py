"""
Cascading Source

Presents a whole cascade of ISBN adapters as one classification source.
Used by the parallel resolution so the OpenLibrary family (plus ISBNdb)
can contribute classifications alongside the catalog adapters.

Not re-exported from bibresolver.sources: it depends on the resolution
package, which itself imports the adapter base.
"""

from dataclasses import replace
from typing import Optional, Sequence

import httpx

from bibresolver.config import MAX_SOURCE_TIMEOUT
from bibresolver.models import BibliographicFragment, LookupKey
from bibresolver.resolution.cascade import CascadeResolver
from bibresolver.sources.base import SourceAdapter


class CascadingSource(SourceAdapter):
    """First fragment carrying any classification, relabeled with this source's name."""

    name = "OpenLibrary Service"
    keys = frozenset({LookupKey.ISBN})

    def __init__(
        self,
        adapters: Sequence[SourceAdapter],
        client: Optional[httpx.AsyncClient] = None,
        timeout: Optional[float] = None,
    ):
        """
        Args:
            adapters: Priority-ordered ISBN adapters
            client: Shared HTTP client (only used by the inner adapters)
            timeout: Bound for the whole cascade. Defaults to the sum of
                the inner adapters' timeouts, capped at MAX_SOURCE_TIMEOUT.
        """
        if timeout is None:
            timeout = min(sum(adapter.timeout for adapter in adapters) or 1.0, MAX_SOURCE_TIMEOUT)

        super().__init__(client=client, timeout=timeout)
        self.adapters = list(adapters)
        self.cascade = CascadeResolver(
            self.adapters,
            accept=BibliographicFragment.has_classification,
        )

    async def _lookup_isbn(self, isbn: str) -> Optional[BibliographicFragment]:
        fragment = await self.cascade.resolve_basic_metadata(isbn)
        if fragment is None:
            return None
        return replace(fragment, source_name=self.name, origin=fragment.origin_name)

    async def close(self):
        for adapter in self.adapters:
            await adapter.close()

"""
Book Resolution Service

Wires adapters, cascade, aggregators and composer together around one
shared HTTP client.

Example:
    async with BookResolutionService() as service:
        record = await service.resolve_by_isbn("0439708184")
"""

from typing import Optional

import httpx
from loguru import logger

from bibresolver.config import Settings, get_settings
from bibresolver.models import BibliographicQuery, ResolvedBookRecord
from bibresolver.resolution import BookRecordComposer, CascadeResolver, ParallelAggregator
from bibresolver.sources import (
    BneAdapter,
    DnbAdapter,
    GoogleBooksAdapter,
    HarvardLibraryAdapter,
    IsbndbAdapter,
    LibraryOfCongressAdapter,
    OpenLibraryBooksAdapter,
    OpenLibraryEditionAdapter,
    OpenLibrarySearchAdapter,
    SourceAdapter,
    WorldCatClassifyAdapter,
)
from bibresolver.sources.cascading import CascadingSource


class BookResolutionService:
    """
    Entry point for callers.

    Owns the HTTP client and closes it on exit. Each resolution builds its
    own classification set, so one service can serve concurrent requests.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.settings = settings or get_settings()
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(
            timeout=self.settings.source_timeout_seconds,
            follow_redirects=True,
            headers={"User-Agent": self.settings.user_agent},
        )

        timeout = self.settings.source_timeout_seconds
        shared = {"client": self.client, "timeout": timeout}

        # Basic metadata, in cascade priority order
        self.metadata_adapters = self._enabled([
            OpenLibraryBooksAdapter(**shared),
            OpenLibraryEditionAdapter(**shared),
            OpenLibrarySearchAdapter(**shared),
            GoogleBooksAdapter(api_key=self.settings.google_books_api_key, **shared),
        ])

        self.classification_adapters = self._enabled([
            WorldCatClassifyAdapter(**shared),
            LibraryOfCongressAdapter(**shared),
            HarvardLibraryAdapter(**shared),
            BneAdapter(**shared),
            DnbAdapter(**shared),
        ])

        # OpenLibrary family plus ISBNdb as one classification source
        self.extended_adapters = list(self.classification_adapters)
        openlibrary_service = CascadingSource(
            self._enabled([
                OpenLibraryBooksAdapter(**shared),
                OpenLibraryEditionAdapter(**shared),
                OpenLibrarySearchAdapter(**shared),
                IsbndbAdapter(api_key=self.settings.isbndb_api_key, **shared),
            ]),
            client=self.client,
        )
        if self.settings.is_source_enabled(openlibrary_service.name):
            self.extended_adapters.append(openlibrary_service)

        self.composer = BookRecordComposer(
            cascade=CascadeResolver(self.metadata_adapters),
            aggregator=ParallelAggregator(self.classification_adapters),
            extended_aggregator=ParallelAggregator(self.extended_adapters),
            unidentified_title=self.settings.unidentified_title,
        )

        logger.info(
            f"Resolution service ready: {len(self.metadata_adapters)} metadata sources, "
            f"{len(self.classification_adapters)} classification sources"
        )

    def _enabled(self, adapters: list[SourceAdapter]) -> list[SourceAdapter]:
        enabled = []
        for adapter in adapters:
            if self.settings.is_source_enabled(adapter.name):
                enabled.append(adapter)
            else:
                logger.info(f"Source disabled by configuration: {adapter.name}")
        return enabled

    @property
    def source_names(self) -> list[str]:
        """Names of every enabled source."""
        names = []
        for adapter in self.metadata_adapters + self.extended_adapters:
            if adapter.name not in names:
                names.append(adapter.name)
        return names

    async def resolve(self, query: BibliographicQuery) -> Optional[ResolvedBookRecord]:
        return await self.composer.resolve(query)

    async def resolve_by_isbn(self, isbn: str) -> Optional[ResolvedBookRecord]:
        return await self.composer.resolve_by_isbn(isbn)

    async def resolve_by_title_author(
        self,
        title: str,
        author: Optional[str] = None,
        publisher: Optional[str] = None,
    ) -> Optional[ResolvedBookRecord]:
        return await self.composer.resolve_by_title_author(title, author, publisher)

    async def resolve_by_isbn_parallel(self, isbn: str) -> Optional[ResolvedBookRecord]:
        return await self.composer.resolve_by_isbn_parallel(isbn)

    async def close(self):
        """Close the shared HTTP client if this service created it."""
        if self._owns_client and not self.client.is_closed:
            await self.client.aclose()

    async def __aenter__(self) -> "BookResolutionService":
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()

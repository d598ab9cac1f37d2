"""
Parallel Aggregator

Fans a query out to every applicable classification adapter at once,
waits for all of them, and merges whatever came back.
"""

import asyncio
from typing import Awaitable, Optional, Sequence

from loguru import logger

from bibresolver.language import title_matches_language
from bibresolver.models import BibliographicFragment, EnhancedClassificationSet, LookupKey
from bibresolver.resolution.merger import ClassificationMerger
from bibresolver.sources.base import SourceAdapter


class ParallelAggregator:
    """
    Concurrent try-all-and-merge over classification adapters.

    One call per applicable (adapter, key) pair. A failing or slow adapter
    only loses its own contribution; the aggregation always waits for all
    calls before merging.
    """

    def __init__(
        self,
        adapters: Sequence[SourceAdapter],
        merger: Optional[ClassificationMerger] = None,
    ):
        self.adapters = list(adapters)
        self.merger = merger or ClassificationMerger()

    def _plan(
        self,
        isbn: Optional[str],
        title: Optional[str],
        author: Optional[str],
    ) -> list[tuple[str, Awaitable[Optional[BibliographicFragment]]]]:
        calls = []

        for adapter in self.adapters:
            # Language-specific catalogs only for titles in their language
            if adapter.locale and not title_matches_language(title, adapter.locale):
                logger.debug(f"Skipping {adapter.name}: title does not look '{adapter.locale}'")
                continue

            if isbn and adapter.supports(LookupKey.ISBN):
                calls.append((adapter.name, adapter.fetch_by_isbn(isbn)))
            if title and adapter.supports(LookupKey.TITLE):
                calls.append((adapter.name, adapter.fetch_by_title(title, author)))
            if author and adapter.supports(LookupKey.AUTHOR):
                calls.append((adapter.name, adapter.fetch_by_author(author)))

        return calls

    async def resolve_classifications(
        self,
        isbn: Optional[str] = None,
        title: Optional[str] = None,
        author: Optional[str] = None,
        publisher: Optional[str] = None,
    ) -> Optional[EnhancedClassificationSet]:
        """
        Query every applicable adapter concurrently.

        Args:
            isbn: Normalized ISBN for ISBN-keyed adapters
            title: Title for title-keyed adapters
            author: Author for author-keyed adapters, also narrows title searches
            publisher: Informational only, no adapter is keyed on it

        Returns:
            Merged classification set, or None when nothing was found
        """
        calls = self._plan(isbn, title, author)
        logger.info(
            f"Aggregating classifications from {len(calls)} calls "
            f"(isbn={isbn}, title={title!r}, author={author!r}, publisher={publisher!r})"
        )

        if not calls:
            return None

        completed: list[asyncio.Task] = []
        tasks = []
        for _, call in calls:
            task = asyncio.ensure_future(call)
            task.add_done_callback(completed.append)
            tasks.append(task)

        await asyncio.gather(*tasks, return_exceptions=True)

        # Single-threaded fold after the join, in completion order
        names = {id(task): name for task, (name, _) in zip(tasks, calls)}
        fragments = []
        for task in completed:
            if task.cancelled():
                continue
            error = task.exception()
            if error is not None:
                logger.warning(f"{names[id(task)]} failed during aggregation: {error}")
                continue
            fragment = task.result()
            if fragment is not None:
                fragments.append(fragment)

        result = self.merger.fold(fragments)
        if result.is_empty():
            logger.info("Aggregation found no classifications")
            return None

        logger.info(
            f"Aggregated {len(fragments)} fragments: "
            f"lc={result.lc_candidates} dewey={result.dewey_candidates} udc={result.udc_candidates}"
        )
        return result

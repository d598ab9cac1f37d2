"""
Book Record Composer

Top-level orchestration: basic metadata cascade plus classification
aggregation, merged and arbitrated into one ResolvedBookRecord.

Resolution paths:
1. ISBN: cascade and ISBN-keyed aggregation run concurrently
2. Title/author: aggregation over title and author keyed catalogs
3. Parallel ISBN: like 1 with the extended source list, plus a title/author
   aggregation seeded by the basic metadata as soon as it arrives
"""

import asyncio
from dataclasses import dataclass, field
from typing import Optional

from loguru import logger

from bibresolver.isbn import IsbnNormalizer
from bibresolver.language import guess_title_language
from bibresolver.models import (
    BibliographicFragment,
    BibliographicQuery,
    ClassificationScheme,
    Confidence,
    EnhancedClassificationSet,
    ResolutionState,
    ResolvedBookRecord,
)
from bibresolver.resolution.aggregator import ParallelAggregator
from bibresolver.resolution.arbiter import SpecificityArbiter
from bibresolver.resolution.cascade import CascadeResolver
from bibresolver.resolution.merger import ClassificationMerger


BASIC_METADATA_MARKER = "basic metadata"
DEFAULT_UNIDENTIFIED_TITLE = "Unidentified book"

STRATEGY_CLASSIFICATIONS_ONLY = "classifications only"
STRATEGY_BASIC_AND_CLASSIFICATIONS = "basic metadata + enhanced classifications"
STRATEGY_TITLE_AUTHOR = "title/author search"
STRATEGY_PARALLEL = "parallel: basic metadata + enhanced classifications"

_STATE_ORDER = [
    ResolutionState.STARTED,
    ResolutionState.METADATA_PHASE,
    ResolutionState.CLASSIFICATION_PHASE,
    ResolutionState.MERGED,
    ResolutionState.COMPOSED,
]
_TERMINAL_STATES = {ResolutionState.COMPOSED, ResolutionState.EMPTY}


@dataclass
class ResolutionContext:
    """State of a single resolution. Created per call, never reused."""

    query: BibliographicQuery
    state: ResolutionState = ResolutionState.STARTED
    history: list[ResolutionState] = field(default_factory=lambda: [ResolutionState.STARTED])

    def advance(self, state: ResolutionState):
        """
        Move forward to a later state.

        Raises:
            RuntimeError: on a backward move or any move out of a terminal state
        """
        if self.state in _TERMINAL_STATES:
            raise RuntimeError(f"Resolution already finished ({self.state.value})")

        if state != ResolutionState.EMPTY and _STATE_ORDER.index(state) <= _STATE_ORDER.index(self.state):
            raise RuntimeError(f"Cannot move from {self.state.value} to {state.value}")

        self.state = state
        self.history.append(state)


def _dedupe(values) -> list[str]:
    seen = []
    for value in values:
        if value and value not in seen:
            seen.append(value)
    return seen


def _values_agree(a: str, b: str) -> bool:
    return a == b or a.startswith(b) or b.startswith(a)


class BookRecordComposer:
    """
    Composes a resolved record from the cascade and the aggregators.

    Example:
        composer = BookRecordComposer(cascade, aggregator)
        record = await composer.resolve_by_isbn("0439708184")
        if record:
            print(record.title, record.classification_summary())
    """

    def __init__(
        self,
        cascade: CascadeResolver,
        aggregator: ParallelAggregator,
        extended_aggregator: Optional[ParallelAggregator] = None,
        merger: Optional[ClassificationMerger] = None,
        arbiter: Optional[SpecificityArbiter] = None,
        unidentified_title: str = DEFAULT_UNIDENTIFIED_TITLE,
    ):
        """
        Args:
            cascade: Basic metadata cascade
            aggregator: Classification adapters (ISBN, title and author keyed)
            extended_aggregator: Aggregator for the parallel variant, usually
                `aggregator`'s adapters plus the cascading OpenLibrary source
            merger: Merger used to combine classification sets
            arbiter: Specificity arbiter
            unidentified_title: Title for records found by classification only
        """
        self.cascade = cascade
        self.aggregator = aggregator
        self.extended_aggregator = extended_aggregator or aggregator
        self.merger = merger or ClassificationMerger()
        self.arbiter = arbiter or SpecificityArbiter()
        self.unidentified_title = unidentified_title

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    async def resolve(self, query: BibliographicQuery) -> Optional[ResolvedBookRecord]:
        """
        Resolve any query: ISBN path when an ISBN is given, title path otherwise.

        Raises:
            InvalidQueryError: if the query has no usable field
        """
        query.validate()
        if query.isbn:
            if IsbnNormalizer.normalize(query.isbn):
                return await self._resolve_isbn(query)
            logger.info(f"'{query.isbn}' does not contain an ISBN")
            if not (query.title or query.author):
                return None
        return await self._resolve_title_author(query)

    async def resolve_by_isbn(self, isbn: str) -> Optional[ResolvedBookRecord]:
        return await self._resolve_isbn(BibliographicQuery(isbn=isbn).validate())

    async def resolve_by_title_author(
        self,
        title: str,
        author: Optional[str] = None,
        publisher: Optional[str] = None,
    ) -> Optional[ResolvedBookRecord]:
        query = BibliographicQuery(title=title, author=author, publisher=publisher).validate()
        return await self._resolve_title_author(query)

    async def resolve_by_isbn_parallel(self, isbn: str) -> Optional[ResolvedBookRecord]:
        return await self._resolve_isbn_parallel(BibliographicQuery(isbn=isbn).validate())

    # ------------------------------------------------------------------
    # Paths
    # ------------------------------------------------------------------

    async def _resolve_isbn(self, query: BibliographicQuery) -> Optional[ResolvedBookRecord]:
        isbn = IsbnNormalizer.normalize(query.isbn)
        if not isbn:
            logger.info(f"'{query.isbn}' does not contain an ISBN")
            return None
        context = ResolutionContext(query)
        logger.info(f"Resolving ISBN {isbn}")

        context.advance(ResolutionState.METADATA_PHASE)
        basic, classifications = await asyncio.gather(
            self.cascade.resolve_basic_metadata(isbn),
            self.aggregator.resolve_classifications(isbn=isbn),
        )
        context.advance(ResolutionState.CLASSIFICATION_PHASE)

        if basic is None and classifications is None:
            context.advance(ResolutionState.EMPTY)
            logger.info(f"Nothing found for ISBN {isbn}")
            return None

        context.advance(ResolutionState.MERGED)
        strategy = STRATEGY_CLASSIFICATIONS_ONLY if basic is None else STRATEGY_BASIC_AND_CLASSIFICATIONS
        return self._compose(context, basic, classifications, isbn, strategy)

    async def _resolve_title_author(self, query: BibliographicQuery) -> Optional[ResolvedBookRecord]:
        context = ResolutionContext(query)
        logger.info(f"Resolving title={query.title!r} author={query.author!r}")

        context.advance(ResolutionState.CLASSIFICATION_PHASE)
        classifications = await self.aggregator.resolve_classifications(
            title=query.title,
            author=query.author,
            publisher=query.publisher,
        )

        if classifications is None:
            context.advance(ResolutionState.EMPTY)
            return None

        context.advance(ResolutionState.MERGED)
        return self._compose(context, None, classifications, "", STRATEGY_TITLE_AUTHOR)

    async def _resolve_isbn_parallel(self, query: BibliographicQuery) -> Optional[ResolvedBookRecord]:
        isbn = IsbnNormalizer.normalize(query.isbn)
        if not isbn:
            logger.info(f"'{query.isbn}' does not contain an ISBN")
            return None
        context = ResolutionContext(query)
        logger.info(f"Resolving ISBN {isbn} (parallel)")

        async def metadata_then_titles() -> tuple[Optional[BibliographicFragment], Optional[EnhancedClassificationSet]]:
            basic = await self.cascade.resolve_basic_metadata(isbn)
            if basic is None:
                return None, None

            # ISBN aggregation may still be in flight here
            by_title = await self.aggregator.resolve_classifications(
                title=basic.title,
                author=basic.author,
                publisher=basic.publisher,
            )
            return basic, by_title

        context.advance(ResolutionState.METADATA_PHASE)
        by_isbn, (basic, by_title) = await asyncio.gather(
            self.extended_aggregator.resolve_classifications(isbn=isbn),
            metadata_then_titles(),
        )
        context.advance(ResolutionState.CLASSIFICATION_PHASE)

        classifications = None
        for found in (by_isbn, by_title):
            if found is None:
                continue
            if classifications is None:
                classifications = EnhancedClassificationSet()
            self.merger.merge_sets(classifications, found)

        if basic is None and classifications is None:
            context.advance(ResolutionState.EMPTY)
            logger.info(f"Nothing found for ISBN {isbn}")
            return None

        context.advance(ResolutionState.MERGED)
        return self._compose(context, basic, classifications, isbn, STRATEGY_PARALLEL)

    # ------------------------------------------------------------------
    # Composition
    # ------------------------------------------------------------------

    def _compose(
        self,
        context: ResolutionContext,
        basic: Optional[BibliographicFragment],
        classifications: Optional[EnhancedClassificationSet],
        isbn: str,
        strategy: str,
    ) -> ResolvedBookRecord:
        query = context.query
        classifications = classifications or EnhancedClassificationSet()

        chosen = {}
        for scheme in ClassificationScheme:
            current = (basic.classification(scheme) if basic else None) or ""
            chosen[scheme] = self.arbiter.pick_best(current, classifications.candidates(scheme))

        if basic is not None:
            title = basic.title or query.title or self.unidentified_title
            sources = [BASIC_METADATA_MARKER] + _dedupe(classifications.sources)
            subjects = _dedupe(list(basic.subjects) + classifications.subjects)
        else:
            title = query.title or self.unidentified_title
            sources = _dedupe(classifications.sources)
            subjects = _dedupe(classifications.subjects)

        record = ResolvedBookRecord(
            title=title,
            author=(basic.author if basic else None) or query.author or "",
            isbn=isbn,
            publisher=(basic.publisher if basic else None) or query.publisher or "",
            year=basic.year if basic else None,
            pages=basic.pages if basic else None,
            language=(basic.language if basic else None) or guess_title_language(title),
            description=basic.description if basic else None,
            cover_url=basic.cover_url if basic else None,
            lc=chosen[ClassificationScheme.LC],
            dewey=chosen[ClassificationScheme.DEWEY],
            udc=chosen[ClassificationScheme.UDC],
            subjects=tuple(subjects),
            sources=tuple(sources),
            search_strategy=strategy,
            confidence=self._confidence(basic, classifications, chosen),
        )

        context.advance(ResolutionState.COMPOSED)
        logger.info(f"Resolved '{record.title}' [{record.confidence.value}] {record.classification_summary()}")
        return record

    @staticmethod
    def _confidence(
        basic: Optional[BibliographicFragment],
        classifications: EnhancedClassificationSet,
        chosen: dict[ClassificationScheme, str],
    ) -> Confidence:
        """
        HIGH when two distinct sources agree on a scheme (equal values or
        one a prefix of the other), MEDIUM when any scheme has a value.
        Sources are compared by origin, so a wrapper that re-reads the
        basic metadata record does not count as a second source.
        """
        for scheme in ClassificationScheme:
            contributions = list(classifications.contributions[scheme])
            if basic is not None and basic.classification(scheme):
                contributions.insert(0, (basic.origin_name, basic.classification(scheme)))

            for i, (source_a, value_a) in enumerate(contributions):
                for source_b, value_b in contributions[i + 1:]:
                    if source_a != source_b and _values_agree(value_a, value_b):
                        return Confidence.HIGH

        if any(chosen.values()):
            return Confidence.MEDIUM
        return Confidence.LOW

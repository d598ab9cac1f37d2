"""
Unit tests for record composition.
"""

import pytest

from bibresolver.errors import InvalidQueryError
from bibresolver.models import (
    BibliographicFragment,
    BibliographicQuery,
    Confidence,
    LookupKey,
    ResolutionState,
)
from bibresolver.resolution.aggregator import ParallelAggregator
from bibresolver.resolution.cascade import CascadeResolver
from bibresolver.resolution.composer import BookRecordComposer, ResolutionContext
from bibresolver.sources.cascading import CascadingSource


def make_composer(metadata=(), classification=(), extended=None, **kwargs) -> BookRecordComposer:
    return BookRecordComposer(
        cascade=CascadeResolver(list(metadata)),
        aggregator=ParallelAggregator(list(classification)),
        extended_aggregator=ParallelAggregator(list(extended)) if extended is not None else None,
        **kwargs,
    )


@pytest.mark.asyncio
class TestIsbnResolution:

    async def test_end_to_end_scenario(self, stub_adapter, harry_potter_fragment, dewey_fragment):
        metadata = stub_adapter("OpenLibrary API", isbn_result=harry_potter_fragment)
        classifier = stub_adapter("WorldCat Classify", isbn_result=dewey_fragment)

        record = await make_composer([metadata], [classifier]).resolve(BibliographicQuery(isbn="9780439708180"))

        assert record.title == "Harry Potter and the Sorcerer's Stone"
        assert record.dewey == "823.914"
        assert record.lc == ""
        assert record.confidence == Confidence.MEDIUM
        assert record.sources == ("basic metadata", "WorldCat Classify")
        assert record.search_strategy == "basic metadata + enhanced classifications"
        assert record.isbn == "9780439708180"
        assert record.subjects == ("Wizards", "Magic")

    async def test_isbn_is_normalized(self, stub_adapter, harry_potter_fragment):
        metadata = stub_adapter("OpenLibrary API", isbn_result=harry_potter_fragment)

        record = await make_composer([metadata]).resolve_by_isbn("0-439-70818-4")

        assert metadata.calls == [("isbn", "9780439708180")]
        assert record.isbn == "9780439708180"

    async def test_total_failure_returns_none(self, stub_adapter):
        composer = make_composer(
            [stub_adapter("A"), stub_adapter("B", error=RuntimeError("down"))],
            [stub_adapter("C"), stub_adapter("D", error=TimeoutError())],
        )

        assert await composer.resolve(BibliographicQuery(isbn="9780439708180")) is None

    async def test_basic_metadata_without_classifications(self, stub_adapter, harry_potter_fragment):
        metadata = stub_adapter("OpenLibrary API", isbn_result=harry_potter_fragment)

        record = await make_composer([metadata], [stub_adapter("C")]).resolve_by_isbn("9780439708180")

        assert record.sources == ("basic metadata",)
        assert record.confidence == Confidence.LOW
        assert record.classification_summary() == "Subjects: Wizards, Magic"

    async def test_classifications_only(self, stub_adapter, dewey_fragment):
        classifier = stub_adapter("WorldCat Classify", isbn_result=dewey_fragment)

        record = await make_composer([stub_adapter("A")], [classifier]).resolve_by_isbn("9780439708180")

        assert record.title == "Unidentified book"
        assert record.search_strategy == "classifications only"
        assert record.sources == ("WorldCat Classify",)
        assert record.dewey == "823.914"

    async def test_classifications_only_keeps_query_title(self, stub_adapter, dewey_fragment):
        classifier = stub_adapter("WorldCat Classify", isbn_result=dewey_fragment)
        composer = make_composer([], [classifier], unidentified_title="Untitled")

        record = await composer.resolve(BibliographicQuery(isbn="9780439708180", title="My Title"))
        assert record.title == "My Title"

        record = await composer.resolve_by_isbn("9780439708180")
        assert record.title == "Untitled"

    async def test_more_specific_candidate_replaces_basic_value(self, stub_adapter):
        metadata = stub_adapter(
            "OpenLibrary API",
            isbn_result=BibliographicFragment(source_name="OpenLibrary API", title="Code", lc="QA76"),
        )
        classifier = stub_adapter(
            "WorldCat Classify",
            isbn_result=BibliographicFragment(source_name="WorldCat Classify", lc="QA76.76"),
        )

        record = await make_composer([metadata], [classifier]).resolve_by_isbn("9780000000002")

        assert record.lc == "QA76.76"

    async def test_agreement_with_basic_metadata_is_high(self, stub_adapter, dewey_fragment):
        metadata = stub_adapter(
            "OpenLibrary API",
            isbn_result=BibliographicFragment(source_name="OpenLibrary API", title="HP", dewey="823.914"),
        )
        classifier = stub_adapter("WorldCat Classify", isbn_result=dewey_fragment)

        record = await make_composer([metadata], [classifier]).resolve_by_isbn("9780439708180")

        assert record.confidence == Confidence.HIGH

    async def test_prefix_compatible_sources_are_high(self, stub_adapter):
        first = stub_adapter("A", isbn_result=BibliographicFragment(source_name="A", lc="PZ7"))
        second = stub_adapter("B", isbn_result=BibliographicFragment(source_name="B", lc="PZ7.R79835"))

        record = await make_composer([], [first, second]).resolve_by_isbn("9780439708180")

        assert record.confidence == Confidence.HIGH
        assert record.lc == "PZ7.R79835" or record.lc == "PZ7"

    async def test_conflicting_sources_are_medium(self, stub_adapter):
        first = stub_adapter("A", isbn_result=BibliographicFragment(source_name="A", dewey="823.914"))
        second = stub_adapter("B", isbn_result=BibliographicFragment(source_name="B", dewey="500.1"))

        record = await make_composer([], [first, second]).resolve_by_isbn("9780439708180")

        assert record.confidence == Confidence.MEDIUM

    async def test_same_source_twice_is_not_agreement(self, stub_adapter):
        both = stub_adapter(
            "Both",
            keys=[LookupKey.ISBN, LookupKey.TITLE],
            isbn_result=BibliographicFragment(source_name="Both", dewey="823.914"),
            title_result=BibliographicFragment(source_name="Both", dewey="823.914"),
        )

        record = await make_composer([], [both]).resolve(BibliographicQuery(isbn="9780439708180"))

        # Only the ISBN key fires on the ISBN path
        assert len(both.calls) == 1
        assert record.confidence == Confidence.MEDIUM

    async def test_blank_query_raises(self):
        with pytest.raises(InvalidQueryError):
            await make_composer().resolve(BibliographicQuery(isbn="  ", title=""))

    async def test_isbn_without_digits_returns_none(self, stub_adapter):
        metadata = stub_adapter("A")
        composer = make_composer([metadata], [stub_adapter("B")])

        assert await composer.resolve_by_isbn("---") is None
        assert await composer.resolve_by_isbn_parallel("not an isbn") is None
        assert await composer.resolve(BibliographicQuery(isbn="n/a")) is None
        assert metadata.calls == []

    async def test_isbn_without_digits_falls_back_to_title(self, stub_adapter):
        loc = stub_adapter(
            "Library of Congress",
            keys=[LookupKey.TITLE],
            title_result=BibliographicFragment(source_name="Library of Congress", lc="PR2807"),
        )

        record = await make_composer([], [loc]).resolve(BibliographicQuery(isbn="n/a", title="Hamlet"))

        assert loc.calls == [("title", "Hamlet", None)]
        assert record.title == "Hamlet"
        assert record.lc == "PR2807"
        assert record.search_strategy == "title/author search"


@pytest.mark.asyncio
class TestTitleResolution:

    async def test_title_author_search(self, stub_adapter):
        loc = stub_adapter(
            "Library of Congress",
            keys=[LookupKey.TITLE],
            title_result=BibliographicFragment(source_name="Library of Congress", lc="PQ8180.17", subjects=("Colombia",)),
        )
        dnb = stub_adapter(
            "Deutsche Nationalbibliothek",
            keys=[LookupKey.AUTHOR],
            author_result=BibliographicFragment(source_name="Deutsche Nationalbibliothek", udc="821.134.2"),
        )

        record = await make_composer([], [loc, dnb]).resolve(
            BibliographicQuery(title="Cien años de soledad", author="García Márquez", publisher="Sudamericana")
        )

        assert record.title == "Cien años de soledad"
        assert record.author == "García Márquez"
        assert record.publisher == "Sudamericana"
        assert record.isbn == ""
        assert record.lc == "PQ8180.17"
        assert record.udc == "821.134.2"
        assert record.language == "es"
        assert record.search_strategy == "title/author search"
        assert "basic metadata" not in record.sources
        assert set(record.sources) == {"Library of Congress", "Deutsche Nationalbibliothek"}

    async def test_nothing_found(self, stub_adapter):
        loc = stub_adapter("Library of Congress", keys=[LookupKey.TITLE])

        assert await make_composer([], [loc]).resolve_by_title_author("Hamlet") is None


@pytest.mark.asyncio
class TestParallelResolution:

    async def test_title_search_seeded_by_basic_metadata(self, stub_adapter, harry_potter_fragment, dewey_fragment):
        metadata = stub_adapter("OpenLibrary API", isbn_result=harry_potter_fragment)
        by_isbn = stub_adapter("WorldCat Classify", isbn_result=dewey_fragment)
        by_title = stub_adapter(
            "Library of Congress",
            keys=[LookupKey.TITLE],
            title_result=BibliographicFragment(source_name="Library of Congress", lc="PZ7.R79835"),
        )
        service_source = stub_adapter(
            "OpenLibrary Service",
            isbn_result=BibliographicFragment(source_name="OpenLibrary Service", dewey="823.914"),
        )

        composer = make_composer(
            [metadata],
            [by_isbn, by_title],
            extended=[by_isbn, by_title, service_source],
        )
        record = await composer.resolve_by_isbn_parallel("9780439708180")

        assert by_title.calls == [("title", "Harry Potter and the Sorcerer's Stone", "J. K. Rowling")]
        assert service_source.calls == [("isbn", "9780439708180")]
        assert record.search_strategy == "parallel: basic metadata + enhanced classifications"
        assert record.lc == "PZ7.R79835"
        assert record.dewey == "823.914"
        assert record.sources[0] == "basic metadata"
        assert set(record.sources[1:]) == {"WorldCat Classify", "OpenLibrary Service", "Library of Congress"}
        assert record.confidence == Confidence.HIGH

    async def test_without_basic_metadata(self, stub_adapter, dewey_fragment):
        by_isbn = stub_adapter("WorldCat Classify", isbn_result=dewey_fragment)
        by_title = stub_adapter("Library of Congress", keys=[LookupKey.TITLE])

        record = await make_composer([stub_adapter("A")], [by_isbn, by_title]).resolve_by_isbn_parallel(
            "9780439708180"
        )

        assert by_title.calls == []
        assert record.title == "Unidentified book"
        assert record.dewey == "823.914"

    async def test_total_failure(self, stub_adapter):
        composer = make_composer([stub_adapter("A")], [stub_adapter("B")])

        assert await composer.resolve_by_isbn_parallel("9780439708180") is None

    async def test_record_reread_through_wrapper_is_one_source(self, stub_adapter):
        openlibrary = stub_adapter(
            "OpenLibrary API",
            isbn_result=BibliographicFragment(source_name="OpenLibrary API", title="HP", lc="PZ7.R79835"),
        )
        wrapper = CascadingSource([openlibrary])

        record = await make_composer([openlibrary], [], extended=[wrapper]).resolve_by_isbn_parallel("9780439708180")

        assert record.sources == ("basic metadata", "OpenLibrary Service")
        assert record.lc == "PZ7.R79835"
        assert record.confidence == Confidence.MEDIUM


class TestResolutionContext:

    def test_forward_transitions(self):
        context = ResolutionContext(BibliographicQuery(isbn="1"))

        context.advance(ResolutionState.METADATA_PHASE)
        context.advance(ResolutionState.CLASSIFICATION_PHASE)
        context.advance(ResolutionState.MERGED)
        context.advance(ResolutionState.COMPOSED)

        assert context.history[0] == ResolutionState.STARTED
        assert context.state == ResolutionState.COMPOSED

    def test_backward_transition_rejected(self):
        context = ResolutionContext(BibliographicQuery(isbn="1"))
        context.advance(ResolutionState.CLASSIFICATION_PHASE)

        with pytest.raises(RuntimeError):
            context.advance(ResolutionState.METADATA_PHASE)

    def test_terminal_state_is_final(self):
        context = ResolutionContext(BibliographicQuery(isbn="1"))
        context.advance(ResolutionState.EMPTY)

        with pytest.raises(RuntimeError):
            context.advance(ResolutionState.MERGED)

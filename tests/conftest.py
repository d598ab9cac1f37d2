"""
Pytest configuration and fixtures for bibresolver tests.
"""

import asyncio
import sys
from pathlib import Path
from typing import AsyncGenerator, Iterable, Optional

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from bibresolver.config import Settings
from bibresolver.models import BibliographicFragment, LookupKey
from bibresolver.sources.base import SourceAdapter


# =============================================================================
# Test Settings
# =============================================================================

def get_test_settings() -> Settings:
    """Return settings configured for testing."""
    return Settings(
        source_timeout_seconds=1.0,
        environment="test",
        debug=True,
        log_level="DEBUG",
    )


@pytest.fixture
def settings() -> Settings:
    return get_test_settings()


# =============================================================================
# Stub Adapters
# =============================================================================

class StubAdapter(SourceAdapter):
    """
    Adapter with canned answers instead of HTTP calls.

    Records every lookup in `calls`. `delay` makes each lookup sleep first,
    `error` makes it raise after the delay.
    """

    def __init__(
        self,
        name: str,
        keys: Iterable[LookupKey] = (LookupKey.ISBN,),
        isbn_result: Optional[BibliographicFragment] = None,
        title_result: Optional[BibliographicFragment] = None,
        author_result: Optional[BibliographicFragment] = None,
        delay: float = 0.0,
        error: Optional[Exception] = None,
        locale: Optional[str] = None,
        timeout: float = 1.0,
    ):
        super().__init__(timeout=timeout)
        self.name = name
        self.keys = frozenset(keys)
        self.locale = locale
        self.isbn_result = isbn_result
        self.title_result = title_result
        self.author_result = author_result
        self.delay = delay
        self.error = error
        self.calls: list[tuple] = []

    async def _answer(self, result):
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return result

    async def _lookup_isbn(self, isbn):
        self.calls.append(("isbn", isbn))
        return await self._answer(self.isbn_result)

    async def _lookup_title(self, title, author):
        self.calls.append(("title", title, author))
        return await self._answer(self.title_result)

    async def _lookup_author(self, author):
        self.calls.append(("author", author))
        return await self._answer(self.author_result)


@pytest.fixture
def stub_adapter():
    """Factory for stub adapters."""
    return StubAdapter


# =============================================================================
# Data Fixtures
# =============================================================================

@pytest.fixture
def harry_potter_fragment() -> BibliographicFragment:
    """Basic metadata as the OpenLibrary Books API would return it."""
    return BibliographicFragment(
        source_name="OpenLibrary API",
        title="Harry Potter and the Sorcerer's Stone",
        author="J. K. Rowling",
        publisher="Scholastic",
        year=1998,
        pages=309,
        lc="",
        subjects=("Wizards", "Magic"),
    )


@pytest.fixture
def dewey_fragment() -> BibliographicFragment:
    return BibliographicFragment(source_name="WorldCat Classify", dewey="823.914")


# =============================================================================
# Application Fixtures
# =============================================================================

@pytest.fixture
def app():
    """FastAPI application for testing (resolution service overridden per test)."""
    from bibresolver.api.main import create_app

    application = create_app(get_test_settings())
    yield application
    application.dependency_overrides.clear()


@pytest_asyncio.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """Provide async HTTP client for API tests."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

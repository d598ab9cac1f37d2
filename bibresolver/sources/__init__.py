"""
Catalog Adapters

Each adapter wraps one external bibliographic catalog and returns
normalized BibliographicFragments. Metadata adapters:
- OpenLibrary (books API, edition records, search)
- Google Books
- ISBNdb

Classification adapters:
- WorldCat Classify
- Library of Congress
- Harvard Library
- Biblioteca Nacional de España
- Deutsche Nationalbibliothek

CascadingSource lives in bibresolver.sources.cascading.
"""

from bibresolver.sources.base import SourceAdapter, DEFAULT_TIMEOUT
from bibresolver.sources.openlibrary import (
    OpenLibraryBooksAdapter,
    OpenLibraryEditionAdapter,
    OpenLibrarySearchAdapter,
)
from bibresolver.sources.google_books import GoogleBooksAdapter
from bibresolver.sources.isbndb import IsbndbAdapter
from bibresolver.sources.worldcat import WorldCatClassifyAdapter
from bibresolver.sources.loc import LibraryOfCongressAdapter
from bibresolver.sources.harvard import HarvardLibraryAdapter
from bibresolver.sources.bne import BneAdapter
from bibresolver.sources.dnb import DnbAdapter

__all__ = [
    # Base
    "SourceAdapter",
    "DEFAULT_TIMEOUT",
    # Metadata
    "OpenLibraryBooksAdapter",
    "OpenLibraryEditionAdapter",
    "OpenLibrarySearchAdapter",
    "GoogleBooksAdapter",
    "IsbndbAdapter",
    # Classification
    "WorldCatClassifyAdapter",
    "LibraryOfCongressAdapter",
    "HarvardLibraryAdapter",
    "BneAdapter",
    "DnbAdapter",
]

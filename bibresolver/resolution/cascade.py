"""
Cascade Resolver

Sequential try-in-order-until-success over a priority-ordered adapter list.
"""

from typing import Callable, Optional, Sequence

from loguru import logger

from bibresolver.models import BibliographicFragment
from bibresolver.sources.base import SourceAdapter


AcceptPredicate = Callable[[BibliographicFragment], bool]


class CascadeResolver:
    """
    Returns the first acceptable fragment from an ordered list of adapters.

    Later adapters are never started once one has been accepted. What
    counts as acceptable is a predicate, by default "has a title".
    """

    def __init__(
        self,
        adapters: Sequence[SourceAdapter],
        accept: AcceptPredicate = BibliographicFragment.has_title,
    ):
        self.adapters = list(adapters)
        self.accept = accept

    async def resolve_basic_metadata(self, isbn: str) -> Optional[BibliographicFragment]:
        for adapter in self.adapters:
            fragment = await adapter.fetch_by_isbn(isbn)

            if fragment is not None and self.accept(fragment):
                logger.info(f"Basic metadata for {isbn} from {adapter.name}")
                return fragment

            logger.debug(f"{adapter.name} gave nothing acceptable for {isbn}, trying next source")

        logger.info(f"No source had basic metadata for {isbn}")
        return None

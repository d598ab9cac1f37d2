"""
Library of Congress Adapter

Searches loc.gov by title (and author) and collects LC class numbers and
subject headings from the results.
"""

from typing import Optional

from loguru import logger

from bibresolver.models import BibliographicFragment, LookupKey
from bibresolver.sources.base import SourceAdapter, first_text


def build_query(title: str, author: Optional[str]) -> str:
    if author:
        return f"title:{title} author:{author}"
    return f"title:{title}"


def filter_by_author(results: list[dict], author: Optional[str]) -> list[dict]:
    """
    Keep results whose contributors contain the author name.

    Case-insensitive substring match. Falls back to all results when
    nothing matches.
    """
    if not author:
        return results

    needle = author.lower()
    matching = []
    for result in results:
        contributors = result.get("contributor") or result.get("contributors") or []
        if isinstance(contributors, str):
            contributors = [contributors]
        if any(needle in str(name).lower() for name in contributors):
            matching.append(result)

    return matching or results


class LibraryOfCongressAdapter(SourceAdapter):
    """Search API: https://www.loc.gov/books/?q=title:hamlet+author:shakespeare&fo=json"""

    BASE_URL = "https://www.loc.gov/books/"

    name = "Library of Congress"
    keys = frozenset({LookupKey.TITLE})

    max_results = 10

    async def _lookup_title(self, title: str, author: Optional[str]) -> Optional[BibliographicFragment]:
        data = await self._get_json(
            self.BASE_URL,
            params={"q": build_query(title, author), "fo": "json", "c": self.max_results},
        )

        results = data.get("results") or []
        if not results:
            logger.debug(f"{self.name}: no results")
            return None

        results = filter_by_author(results, author)

        lc = None
        subjects: list[str] = []
        for result in results:
            if lc is None:
                lc = first_text(result.get("class"))
            for subject in result.get("subject") or []:
                if subject not in subjects:
                    subjects.append(subject)

        return BibliographicFragment(
            source_name=self.name,
            lc=lc,
            subjects=tuple(subjects),
        )

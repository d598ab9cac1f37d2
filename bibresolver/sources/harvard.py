"""
Harvard Library Adapter
"""

import re
from typing import Optional

from loguru import logger

from bibresolver.models import BibliographicFragment, LookupKey
from bibresolver.sources.base import SourceAdapter
from bibresolver.sources.loc import build_query


DEWEY_PREFIX = re.compile(r"^[0-9]{3}")


class HarvardLibraryAdapter(SourceAdapter):
    """Items API: https://api.lib.harvard.edu/v2/items.json?q=title:hamlet author:shakespeare"""

    BASE_URL = "https://api.lib.harvard.edu/v2/items.json"

    name = "Harvard Library"
    keys = frozenset({LookupKey.TITLE})

    async def _lookup_title(self, title: str, author: Optional[str]) -> Optional[BibliographicFragment]:
        data = await self._get_json(
            self.BASE_URL,
            params={"q": build_query(title, author), "limit": 10},
        )

        items = (data.get("docs") or {}).get("items") or []

        dewey = None
        for item in items:
            classification = item.get("classification")
            if not classification:
                continue
            # Only three-digit classes are Dewey; other schemes are not used
            if DEWEY_PREFIX.match(classification):
                dewey = classification
                break
            logger.debug(f"{self.name}: ignoring non-Dewey classification '{classification}'")

        return BibliographicFragment(source_name=self.name, dewey=dewey)

"""
Classification Merger

Folds fragments into an EnhancedClassificationSet. Candidate and subject
lists stay duplicate free; the sources list keeps one entry per merged
fragment.
"""

from typing import Iterable

from bibresolver.models import (
    BibliographicFragment,
    ClassificationScheme,
    EnhancedClassificationSet,
    is_blank,
)


def _append_unique(target: list[str], value: str):
    if value not in target:
        target.append(value)


class ClassificationMerger:

    def merge(self, into: EnhancedClassificationSet, fragment: BibliographicFragment) -> EnhancedClassificationSet:
        """Merge one fragment into the set, in place."""
        for scheme in ClassificationScheme:
            value = fragment.classification(scheme)
            if value is None:
                continue
            into.contributions[scheme].append((fragment.origin_name, value))
            _append_unique(into.candidates(scheme), value)

        for subject in fragment.subjects:
            if not is_blank(subject):
                _append_unique(into.subjects, subject.strip())

        into.sources.append(fragment.source_name)
        return into

    def merge_sets(self, into: EnhancedClassificationSet, other: EnhancedClassificationSet) -> EnhancedClassificationSet:
        """Merge a whole set into another, in place."""
        for scheme in ClassificationScheme:
            for value in other.candidates(scheme):
                _append_unique(into.candidates(scheme), value)
            into.contributions[scheme].extend(other.contributions[scheme])

        for subject in other.subjects:
            _append_unique(into.subjects, subject)

        into.sources.extend(other.sources)
        return into

    def fold(self, fragments: Iterable[BibliographicFragment]) -> EnhancedClassificationSet:
        """Fresh set from fragments, merged in the given order."""
        result = EnhancedClassificationSet()
        for fragment in fragments:
            self.merge(result, fragment)
        return result

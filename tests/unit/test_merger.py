"""
Unit tests for the classification merger.
"""

from bibresolver.models import BibliographicFragment, ClassificationScheme, EnhancedClassificationSet
from bibresolver.resolution.merger import ClassificationMerger


class TestClassificationMerger:

    def test_duplicate_candidates_kept_once_sources_twice(self):
        merger = ClassificationMerger()
        result = merger.fold([
            BibliographicFragment(source_name="WorldCat Classify", lc="QA76"),
            BibliographicFragment(source_name="Library of Congress", lc="QA76"),
        ])

        assert result.lc_candidates == ["QA76"]
        assert result.sources == ["WorldCat Classify", "Library of Congress"]
        assert len(result.contributions[ClassificationScheme.LC]) == 2

    def test_blank_values_ignored(self):
        result = ClassificationMerger().fold([
            BibliographicFragment(source_name="A", lc="  ", dewey="", udc="821.111", subjects=("", "Poetry")),
        ])

        assert result.lc_candidates == []
        assert result.dewey_candidates == []
        assert result.udc_candidates == ["821.111"]
        assert result.subjects == ["Poetry"]

    def test_order_preserved(self):
        result = ClassificationMerger().fold([
            BibliographicFragment(source_name="A", dewey="823"),
            BibliographicFragment(source_name="B", dewey="823.914"),
            BibliographicFragment(source_name="C", dewey="823"),
        ])

        assert result.dewey_candidates == ["823", "823.914"]
        assert result.best(ClassificationScheme.DEWEY) == "823"

    def test_source_recorded_without_classification(self):
        result = ClassificationMerger().fold([
            BibliographicFragment(source_name="A", subjects=("Magic",)),
        ])

        assert result.sources == ["A"]
        assert not result.has_any_classification()
        assert not result.is_empty()

    def test_merge_sets(self):
        merger = ClassificationMerger()
        first = merger.fold([BibliographicFragment(source_name="A", lc="PZ7", subjects=("Magic",))])
        second = merger.fold([
            BibliographicFragment(source_name="B", lc="PZ7", dewey="823.914", subjects=("Magic", "Wizards")),
        ])

        merger.merge_sets(first, second)

        assert first.lc_candidates == ["PZ7"]
        assert first.dewey_candidates == ["823.914"]
        assert first.subjects == ["Magic", "Wizards"]
        assert first.sources == ["A", "B"]
        assert first.contributions[ClassificationScheme.LC] == [("A", "PZ7"), ("B", "PZ7")]

    def test_fold_builds_fresh_set(self):
        merger = ClassificationMerger()
        fragment = BibliographicFragment(source_name="A", lc="QA76")

        first = merger.fold([fragment])
        second = merger.fold([fragment])

        assert first is not second
        assert second.sources == ["A"]

    def test_empty_set(self):
        assert EnhancedClassificationSet().is_empty()
        assert ClassificationMerger().fold([]).is_empty()

"""
Unit tests for ISBN normalization.
"""

import pytest

from bibresolver.isbn import IsbnNormalizer


class TestIsbn10To13:

    def test_worked_example(self):
        assert IsbnNormalizer.isbn10_to_13("0439708184") == "9780439708180"

    def test_prefix_is_978_plus_first_nine(self):
        result = IsbnNormalizer.isbn10_to_13("0596520689")
        assert result[:12] == "978" + "059652068"
        assert len(result) == 13

    def test_x_check_digit_is_dropped(self):
        # Check digit of the ISBN-10 is replaced by the EAN-13 one
        assert IsbnNormalizer.isbn10_to_13("080442957X") == "9780804429573"

    def test_non_digit_core_returned_unchanged(self):
        assert IsbnNormalizer.isbn10_to_13("X123456789") == "X123456789"

    def test_short_input_returned_unchanged(self):
        assert IsbnNormalizer.isbn10_to_13("12345") == "12345"


class TestNormalize:

    def test_strips_separators(self):
        assert IsbnNormalizer.normalize("978-0-439-70818-0") == "9780439708180"

    def test_converts_isbn10(self):
        assert IsbnNormalizer.normalize("0-439-70818-4") == "9780439708180"

    def test_other_lengths_only_cleaned(self):
        assert IsbnNormalizer.normalize("ISBN 12-34") == "1234"

    def test_empty(self):
        assert IsbnNormalizer.normalize("") == ""
        assert IsbnNormalizer.normalize(None) == ""

    @pytest.mark.parametrize("raw", [
        "0439708184",
        "978-0-439-70818-0",
        "isbn: 0-8044-2957-x",
        "X123456789",
        "abc",
        "  ",
        "12345678901234567",
    ])
    def test_idempotent(self, raw):
        once = IsbnNormalizer.normalize(raw)
        assert IsbnNormalizer.normalize(once) == once

    def test_is_isbn13(self):
        assert IsbnNormalizer.is_isbn13("9780439708180")
        assert not IsbnNormalizer.is_isbn13("0439708184")
        assert not IsbnNormalizer.is_isbn13("978043970818X")

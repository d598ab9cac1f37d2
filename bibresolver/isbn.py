"""
ISBN Normalization

Cleans raw identifiers (scanner output, user input) and converts ISBN-10
to ISBN-13. Best effort: malformed input is returned cleaned but otherwise
untouched so that downstream lookups can fail on their own.
"""

import re


class IsbnNormalizer:
    """Normalize ISBN strings."""

    NON_ISBN_CHARS = re.compile(r"[^0-9Xx]")

    @classmethod
    def clean(cls, raw: str) -> str:
        """Strip everything except digits and X/x."""
        if not raw:
            return ""
        return cls.NON_ISBN_CHARS.sub("", raw)

    @classmethod
    def normalize(cls, raw: str) -> str:
        """
        Normalize an identifier to ISBN-13 where possible.

        Args:
            raw: Raw identifier, e.g. "0-439-70818-4"

        Returns:
            13 characters as-is, 10 characters converted to ISBN-13,
            anything else cleaned only.
        """
        cleaned = cls.clean(raw)

        if len(cleaned) == 13:
            return cleaned
        if len(cleaned) == 10:
            return cls.isbn10_to_13(cleaned)
        return cleaned

    @staticmethod
    def isbn10_to_13(isbn10: str) -> str:
        """
        Convert ISBN-10 to ISBN-13 (978 prefix, EAN-13 check digit).

        Returns the input unchanged if its first nine characters are not digits.
        """
        core = "978" + isbn10[:9]
        if len(core) != 12 or not core.isdigit():
            return isbn10

        total = sum(
            int(digit) * (1 if i % 2 == 0 else 3)
            for i, digit in enumerate(core)
        )
        check = (10 - total % 10) % 10
        return f"{core}{check}"

    @classmethod
    def is_isbn13(cls, value: str) -> bool:
        return len(value) == 13 and value.isdigit()

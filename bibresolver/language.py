"""
Title language heuristic.

Stop-word lookup used to decide whether language-specific catalogs are
worth querying, and as a fallback language for a resolved record.
"""

from typing import Optional


STOP_WORDS: dict[str, frozenset[str]] = {
    "en": frozenset({
        "the", "and", "of", "in", "to", "a", "an", "for", "with", "on", "at", "by", "from",
    }),
    "es": frozenset({
        "el", "la", "los", "las", "de", "del", "en", "y", "un", "una", "para", "con", "por",
    }),
}


def _words(title: str) -> set[str]:
    return set(title.lower().split())


def title_matches_language(title: Optional[str], language: str) -> bool:
    """True if the title contains a stop word of the language."""
    if not title:
        return False
    stop_words = STOP_WORDS.get(language)
    if not stop_words:
        return False
    return bool(_words(title) & stop_words)


def title_languages(title: Optional[str]) -> list[str]:
    """All languages whose stop words appear in the title."""
    return [code for code in STOP_WORDS if title_matches_language(title, code)]


def guess_title_language(title: Optional[str]) -> Optional[str]:
    """Language code when exactly one language matches, else None."""
    matches = title_languages(title)
    if len(matches) == 1:
        return matches[0]
    return None

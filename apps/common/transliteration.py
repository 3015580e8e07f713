"""
Serbian Cyrillic/Latin transliteration for the Municipal CMS Platform

Content is written in either script, visitors search in either script.
Everything here is a pure function over strings:

- cyrillic_to_latin: Cyrillic -> diacritic-free Latin ("search form")
- latin_to_cyrillic: Latin (with or without diacritics) -> Cyrillic
- enhanced_search: script-insensitive substring match
- highlight_patterns / highlight_text: marking matches in result snippets
- slugify_text: URL slugs from titles in either script
"""

from __future__ import annotations

import re
from typing import Final

from django.utils.html import escape

# ===============================================================================
# MAPPING TABLES
# ===============================================================================

CYRILLIC_TO_LATIN: Final[dict[str, str]] = {
    "А": "A", "Б": "B", "В": "V", "Г": "G", "Д": "D",
    "Ђ": "Dj", "Е": "E", "Ж": "Z", "З": "Z", "И": "I",
    "Ј": "J", "К": "K", "Л": "L", "Љ": "Lj", "М": "M",
    "Н": "N", "Њ": "Nj", "О": "O", "П": "P", "Р": "R",
    "С": "S", "Т": "T", "Ћ": "C", "У": "U", "Ф": "F",
    "Х": "H", "Ц": "C", "Ч": "C", "Џ": "Dz", "Ш": "S",
    "а": "a", "б": "b", "в": "v", "г": "g", "д": "d",
    "ђ": "dj", "е": "e", "ж": "z", "з": "z", "и": "i",
    "ј": "j", "к": "k", "л": "l", "љ": "lj", "м": "m",
    "н": "n", "њ": "nj", "о": "o", "п": "p", "р": "r",
    "с": "s", "т": "t", "ћ": "c", "у": "u", "ф": "f",
    "х": "h", "ц": "c", "ч": "c", "џ": "dz", "ш": "s",
}  # fmt: skip

# Digraphs are replaced before single letters; order matters
LATIN_DIGRAPHS: Final[tuple[tuple[str, str], ...]] = (
    ("Dj", "Ђ"), ("DJ", "Ђ"),
    ("Lj", "Љ"), ("LJ", "Љ"),
    ("Nj", "Њ"), ("NJ", "Њ"),
    ("Dž", "Џ"), ("DŽ", "Џ"),
    ("dj", "ђ"), ("lj", "љ"), ("nj", "њ"), ("dž", "џ"),
)  # fmt: skip

LATIN_TO_CYRILLIC: Final[dict[str, str]] = {
    "A": "А", "B": "Б", "V": "В", "G": "Г", "D": "Д",
    "Đ": "Ђ", "E": "Е", "Ž": "Ж", "Z": "З", "I": "И",
    "J": "Ј", "K": "К", "L": "Л", "M": "М", "N": "Н",
    "O": "О", "P": "П", "R": "Р", "S": "С", "T": "Т",
    "Ć": "Ћ", "C": "Ц", "U": "У", "F": "Ф", "H": "Х",
    "Č": "Ч", "Š": "Ш",
    "a": "а", "b": "б", "v": "в", "g": "г", "d": "д",
    "đ": "ђ", "e": "е", "ž": "ж", "z": "з", "i": "и",
    "j": "ј", "k": "к", "l": "л", "m": "м", "n": "н",
    "o": "о", "p": "п", "r": "р", "s": "с", "t": "т",
    "ć": "ћ", "c": "ц", "u": "у", "f": "ф", "h": "х",
    "č": "ч", "š": "ш",
}  # fmt: skip

_SLUG_INVALID_CHARS = re.compile(r"[^a-z0-9]+")

# ===============================================================================
# CONVERSIONS
# ===============================================================================


def cyrillic_to_latin(text: str) -> str:
    """Transliterate Serbian Cyrillic to diacritic-free Latin"""
    return "".join(CYRILLIC_TO_LATIN.get(char, char) for char in text)


def latin_to_cyrillic(text: str) -> str:
    """Transliterate Serbian Latin to Cyrillic, digraphs first"""
    result = text
    for digraph, cyrillic in LATIN_DIGRAPHS:
        result = result.replace(digraph, cyrillic)
    return "".join(LATIN_TO_CYRILLIC.get(char, char) for char in result)


# ===============================================================================
# SEARCH
# ===============================================================================


def enhanced_search(content: str | None, query: str | None) -> bool:
    """
    Script-insensitive containment check.

    Matches when the lower-cased content contains the query as typed,
    the query converted to Cyrillic, or when the content converted to
    Latin contains the query converted to Latin.
    """
    if not content or not query:
        return False

    query_lower = query.lower()
    content_lower = content.lower()

    if query_lower in content_lower:
        return True

    if latin_to_cyrillic(query_lower) in content_lower:
        return True

    return cyrillic_to_latin(query_lower) in cyrillic_to_latin(content_lower)


def highlight_patterns(query: str) -> list[str]:
    """Query, its Cyrillic form and its Latin form without duplicates or blanks"""
    patterns: list[str] = []
    for candidate in (query, latin_to_cyrillic(query), cyrillic_to_latin(query)):
        if candidate and candidate not in patterns:
            patterns.append(candidate)
    return patterns


def highlight_text(text: str, query: str, tag: str = "mark") -> str:
    """Escape ``text`` and wrap every case-insensitive match of any pattern in ``<tag>``"""
    escaped = str(escape(text))
    if not query:
        return escaped

    alternatives = sorted({re.escape(str(escape(p))) for p in highlight_patterns(query)}, key=len, reverse=True)
    pattern = re.compile(f"({'|'.join(alternatives)})", re.IGNORECASE)
    return pattern.sub(lambda match: f"<{tag}>{match.group(0)}</{tag}>", escaped)


# ===============================================================================
# SLUGS
# ===============================================================================


def slugify_text(text: str, max_length: int = 200) -> str:
    """
    Build an ASCII slug from text in either script.

    >>> slugify_text("Општинска управа 2024")
    'opstinska-uprava-2024'
    """
    latin = cyrillic_to_latin(text)
    # Latin diacritics (č, ć, š, ž, đ) fold to their base letters
    latin = latin.translate(str.maketrans("čćšžđČĆŠŽĐ", "ccszdCCSZD"))
    slug = _SLUG_INVALID_CHARS.sub("-", latin.lower()).strip("-")
    return slug[:max_length].rstrip("-")

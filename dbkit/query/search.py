"""
Search text helpers used to build regex conditions.

``escape_regex`` neutralizes regular-expression metacharacters in user
input. ``to_searchable`` widens Turkish letters and their plain-Latin
counterparts into character classes so that "cicek" finds "çiçek" and the
other way round. Case is preserved: lower-case letters only widen to
lower-case variants, upper-case to upper-case.
"""

import re

_EQUIVALENTS = (
    "cç",
    "gğ",
    "iı",
    "oö",
    "sş",
    "uü",
    "CÇ",
    "GĞ",
    "Iİ",
    "OÖ",
    "SŞ",
    "UÜ",
)

_CHAR_CLASSES = {
    char: f"[{group}]" for group in _EQUIVALENTS for char in group
}


def escape_regex(text: str) -> str:
    """Escape every regex metacharacter in ``text``."""
    return re.escape(text)


def to_searchable(text: str) -> str:
    """
    Make ``text`` match regardless of Turkish diacritics.

    Expects already escaped input. Escaped sequences are never touched
    because ``re.escape`` does not escape letters.
    """
    return "".join(_CHAR_CLASSES.get(char, char) for char in text)

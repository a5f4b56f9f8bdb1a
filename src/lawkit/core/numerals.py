"""Locale-aware numeral normalization.

Converts numeral representations found in real-world datasets into plain
floats before analysis. Plain ASCII numbers are always accepted; the other
numeral systems are opt-in:

    - Japanese/CJK (``japanese=True``): full-width digits (``１２３``),
      kanji numerals with units (``一千二百三十四``, ``2万5千``, ``三億``),
      financial forms (``壱``, ``弐``, ``参``, ``拾``).
    - International (``international=True``): any Unicode decimal digit
      (Arabic-Indic, Devanagari, Thai, ...), currency symbols, locale
      thousands/decimal separators (``1.234,56``, ``1'234.5``, ``١٢٣٫٤``)
      and accounting negatives (``(1,200)``).

All functions are pure; nothing here keeps state between calls.
"""

from __future__ import annotations

import numbers
import re
import unicodedata
from typing import Any, Iterable

# =============================================================================
# CHARACTER TABLES
# =============================================================================

_FULLWIDTH_TABLE = str.maketrans(
    {
        **{chr(0xFF10 + i): str(i) for i in range(10)},
        "．": ".",
        "，": ",",
        "－": "-",
        "＋": "+",
        "　": " ",
    }
)

_KANJI_DIGITS = {
    "〇": 0, "零": 0,
    "一": 1, "壱": 1, "壹": 1,
    "二": 2, "弐": 2, "貳": 2, "两": 2,
    "三": 3, "参": 3, "參": 3,
    "四": 4, "五": 5, "六": 6, "七": 7, "八": 8, "九": 9,
}

_KANJI_SMALL_UNITS = {"十": 10, "拾": 10, "百": 100, "千": 1000, "仟": 1000, "阡": 1000}

_KANJI_LARGE_UNITS = {"万": 10**4, "萬": 10**4, "億": 10**8, "亿": 10**8, "兆": 10**12}

_ARABIC_SEPARATORS = str.maketrans({"٫": ".", "٬": ","})

# Characters dropped before parsing international numerals
_GROUPING_CHARS = {" ", " ", " ", " ", "'", "’"}

_THOUSANDS_COMMA = re.compile(r"[+-]?\d{1,3}(,\d{3})+")
_THOUSANDS_DOT = re.compile(r"[+-]?\d{1,3}(\.\d{3}){2,}")


# =============================================================================
# PUBLIC API
# =============================================================================


def normalize_numeral(
    value: Any,
    japanese: bool = False,
    international: bool = False,
) -> float | None:
    """
    Convert a single value into a float.

    Numbers pass through (booleans are rejected). Strings are parsed as plain
    ASCII numbers first, then with the enabled locale parsers.

    Args:
        value: Raw value (number or string)
        japanese: Accept full-width digits and kanji numerals
        international: Accept Unicode digits, currency symbols and locale
            separators

    Returns:
        The parsed float (possibly NaN/Inf if the input was), or None if the
        value is not a recognizable numeral.

    Example:
        >>> normalize_numeral("一千二百三十四", japanese=True)
        1234.0
        >>> normalize_numeral("€1.234,50", international=True)
        1234.5
        >>> normalize_numeral("１２３")  # locale parsing disabled
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, numbers.Real):
        return float(value)
    if not isinstance(value, str):
        return None

    text = value.strip()
    if not text:
        return None

    if text.isascii():
        parsed = _parse_ascii(text)
        if parsed is not None:
            return parsed

    if japanese:
        parsed = _parse_japanese(text)
        if parsed is not None:
            return parsed

    if international:
        parsed = _parse_international(text)
        if parsed is not None:
            return parsed

    return None


def normalize_numerals(
    values: Iterable[Any],
    japanese: bool = False,
    international: bool = False,
) -> list[float | None]:
    """Apply normalize_numeral() to every element of an iterable."""
    return [normalize_numeral(v, japanese=japanese, international=international) for v in values]


# =============================================================================
# PARSERS
# =============================================================================


def _parse_ascii(text: str) -> float | None:
    # float() accepts "1_000"; digit grouping is only honored by the
    # international parser
    if "_" in text:
        return None
    try:
        return float(text)
    except ValueError:
        return None


def _parse_japanese(text: str) -> float | None:
    """Parse full-width digits and kanji numerals."""
    text = text.translate(_FULLWIDTH_TABLE).replace(",", "").replace(" ", "")
    if not text:
        return None

    sign = 1.0
    if text[0] in "+-":
        sign = -1.0 if text[0] == "-" else 1.0
        text = text[1:]
    if not text:
        return None

    if text.isascii():
        parsed = _parse_ascii(text)
        return None if parsed is None else sign * parsed

    total = 0.0
    section = 0.0
    buffer = ""

    for char in text:
        if char.isascii() and (char.isdigit() or char == "."):
            buffer += char
        elif char in _KANJI_DIGITS:
            buffer += str(_KANJI_DIGITS[char])
        elif char in _KANJI_SMALL_UNITS:
            multiplier = _buffer_value(buffer, default=1.0)
            if multiplier is None:
                return None
            section += multiplier * _KANJI_SMALL_UNITS[char]
            buffer = ""
        elif char in _KANJI_LARGE_UNITS:
            tail = _buffer_value(buffer, default=0.0)
            if tail is None:
                return None
            group = section + tail
            if group == 0:
                group = 1.0
            total += group * _KANJI_LARGE_UNITS[char]
            section = 0.0
            buffer = ""
        else:
            return None

    tail = _buffer_value(buffer, default=0.0)
    if tail is None:
        return None
    return sign * (total + section + tail)


def _buffer_value(buffer: str, default: float) -> float | None:
    if not buffer:
        return default
    try:
        return float(buffer)
    except ValueError:
        return None


def _parse_international(text: str) -> float | None:
    """Parse Unicode digits, currency symbols and locale separators."""
    negative = False
    if text.startswith("(") and text.endswith(")"):
        negative = True
        text = text[1:-1]

    chars = []
    for char in text.translate(_ARABIC_SEPARATORS):
        if char in _GROUPING_CHARS:
            continue
        if unicodedata.category(char) == "Sc":
            continue
        if not char.isascii():
            digit = unicodedata.decimal(char, None)
            if digit is None:
                return None
            char = str(digit)
        chars.append(char)

    cleaned = "".join(chars)
    if not cleaned:
        return None

    cleaned = _resolve_separators(cleaned)
    if cleaned is None:
        return None

    parsed = _parse_ascii(cleaned)
    if parsed is None:
        return None
    return -parsed if negative else parsed


def _resolve_separators(text: str) -> str | None:
    """Rewrite locale thousands/decimal separators into Python float syntax."""
    has_comma = "," in text
    has_dot = "." in text

    if has_comma and has_dot:
        # Whichever separator comes last is the decimal mark
        if text.rfind(",") > text.rfind("."):
            return text.replace(".", "").replace(",", ".")
        return text.replace(",", "")

    if has_comma:
        if _THOUSANDS_COMMA.fullmatch(text):
            return text.replace(",", "")
        if text.count(",") == 1:
            return text.replace(",", ".")
        return None

    if has_dot and text.count(".") > 1:
        if _THOUSANDS_DOT.fullmatch(text):
            return text.replace(".", "")
        return None

    return text

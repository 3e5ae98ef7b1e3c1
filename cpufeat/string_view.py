"""Small string helpers used to parse kernel-provided text files."""

from __future__ import annotations

_WHITESPACE = " \t\n\v\f\r"
_HEX_DIGITS = "0123456789abcdefABCDEF"


def index_of_char(text: str, char: str) -> int:
    """Return the index of the first ``char`` in ``text``, or -1."""
    return text.find(char)


def index_of(text: str, sub: str) -> int:
    """Return the index of the first ``sub`` in ``text``, or -1.

    An empty ``sub`` is never found.
    """
    if not sub:
        return -1
    return text.find(sub)


def starts_with(text: str, prefix: str) -> bool:
    """Return whether ``text`` starts with a non-empty ``prefix``."""
    return bool(prefix) and text.startswith(prefix)


def pop_front(text: str, count: int) -> str:
    """Drop ``count`` characters from the front; empty if too many."""
    return text[count:]


def pop_back(text: str, count: int) -> str:
    """Drop ``count`` characters from the back; empty if too many."""
    if count >= len(text):
        return ""
    return text[: len(text) - count]


def keep_front(text: str, count: int) -> str:
    """Keep the first ``count`` characters (all of them if fewer)."""
    return text[:count]


def trim_whitespace(text: str) -> str:
    """Remove leading and trailing whitespace characters."""
    return text.strip(_WHITESPACE)


def parse_positive_number(text: str) -> int:
    """Parse a decimal or ``0x``-prefixed hexadecimal number.

    Returns -1 when ``text`` is not a non-negative number.
    """
    if text.startswith(("0x", "0X")):
        digits, base, allowed = text[2:], 16, _HEX_DIGITS
    else:
        digits, base, allowed = text, 10, "0123456789"
    if not digits or any(c not in allowed for c in digits):
        return -1
    return int(digits, base)


def copy_string(src: str, dst_size: int) -> str:
    """Return what fits into a zero-terminated buffer of ``dst_size`` bytes."""
    if dst_size <= 0:
        return ""
    return src[: dst_size - 1]


def has_word(line: str, word: str, separator: str) -> bool:
    """Return whether ``word`` appears as a whole ``separator``-delimited word."""
    if not word:
        return False
    return word in line.split(separator)


def get_attribute_key_value(line: str) -> tuple[str, str] | None:
    """Split ``line`` on ``": "`` into a trimmed ``(key, value)`` pair.

    Returns None when the separator is absent.
    """
    key, sep, value = line.partition(": ")
    if not sep:
        return None
    return trim_whitespace(key), trim_whitespace(value)
"""Weighted display width for mixed-script text.

CJK ideographs are counted as two units, every other character as one.
Entry-field clamping and tray labels both go through ``truncate`` so they
agree on what fits.
"""

from __future__ import annotations

ELLIPSIS = "…"

# Han script ranges (unified ideographs, extensions, compatibility blocks and
# the ideographic iteration/number marks)
_HAN_RANGES = (
    (0x2E80, 0x2E99),
    (0x2E9B, 0x2EF3),
    (0x2F00, 0x2FD5),
    (0x3005, 0x3005),
    (0x3007, 0x3007),
    (0x3021, 0x3029),
    (0x3038, 0x303B),
    (0x3400, 0x4DBF),
    (0x4E00, 0x9FFF),
    (0xF900, 0xFA6D),
    (0xFA70, 0xFAD9),
    (0x20000, 0x2A6DF),
    (0x2A700, 0x2EBE0),
    (0x2EBF0, 0x2EE5D),
    (0x2F800, 0x2FA1D),
    (0x30000, 0x323AF),
)


def is_han(ch: str) -> bool:
    """Return True if ``ch`` is a Han (CJK ideograph) character."""
    code = ord(ch)
    for low, high in _HAN_RANGES:
        if code < low:
            return False
        if code <= high:
            return True
    return False


def char_weight(ch: str) -> int:
    return 2 if is_han(ch) else 1


def weight(text: str) -> int:
    """Display weight of ``text``."""
    return sum(char_weight(ch) for ch in text)


def truncate(text: str, max_weight: int, with_ellipsis: bool = False) -> str:
    """
    Longest prefix of ``text`` whose weight does not exceed ``max_weight``.

    A character heavier than the remaining budget is dropped, never split.
    With ``with_ellipsis`` an ellipsis is appended only when something was
    cut off; text that already fits comes back unchanged.
    """
    budget = max(max_weight, 0)
    total = 0
    for index, ch in enumerate(text):
        step = char_weight(ch)
        if total + step > budget:
            prefix = text[:index]
            break
        total += step
    else:
        return text

    if with_ellipsis:
        return prefix + ELLIPSIS
    return prefix

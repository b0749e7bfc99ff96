"""Seven-segment encoding table and decimal digit helpers."""

from __future__ import annotations

from typing import Tuple

SegmentPattern = Tuple[bool, bool, bool, bool, bool, bool, bool]

# Segment order: top, upper-right, lower-right, bottom, lower-left,
# upper-left, middle.
SEGMENT_ROLES = (
    "top",
    "upper_right",
    "lower_right",
    "bottom",
    "lower_left",
    "upper_left",
    "middle",
)

BLANK_PATTERN: SegmentPattern = (False, False, False, False, False, False, False)

_DIGIT_PATTERNS: tuple[SegmentPattern, ...] = (
    (True, True, True, True, True, True, False),  # 0
    (False, True, True, False, False, False, False),  # 1
    (True, True, False, True, True, False, True),  # 2
    (True, True, True, True, False, False, True),  # 3
    (False, True, True, False, False, True, True),  # 4
    (True, False, True, True, False, True, True),  # 5
    (True, False, True, True, True, True, True),  # 6
    (True, True, True, False, False, False, False),  # 7
    (True, True, True, True, True, True, True),  # 8
    (True, True, True, True, False, True, True),  # 9
)


def segments_for(digit: int) -> SegmentPattern:
    """Return the lit segments for *digit* (0--9)."""
    return _DIGIT_PATTERNS[digit]


def digits_of(value: int) -> int:
    """Return the number of decimal digits in *value*, never less than 1."""
    count = 1
    while value >= 10:
        value //= 10
        count += 1
    return count


def decompose(value: int, digit_count: int) -> list[int]:
    """Split *value* into *digit_count* decimal digits, most significant first.

    *value* must already be clamped to ``[0, 10**digit_count - 1]``.
    """
    digits = []
    for power in range(digit_count - 1, -1, -1):
        place = 10**power
        digit = value // place
        digits.append(digit)
        value -= digit * place
    return digits

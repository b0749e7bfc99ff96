"""Seven-segment rendering — digit cells and the composed timer face.

Pure Python (PIL), no GUI dependencies.  Every call returns a fresh
``PIL.Image.Image``; nothing is cached between renders.

Geometry, in pixels, for a cell of width ``W = 32`` and height ``H = 36``::

     ____          top          (W/8, 0)        W/2 x H/9
    |    |         upper bars   (0|3W/4-W/8, H/9+1)    W/8 x 2H/9
    |____|         middle       (W/8, H/3+1)    W/2 x H/9
    |    |         lower bars   (0|3W/4-W/8, 4H/9+1)   W/8 x 2H/9
    |____|         bottom       (W/8, 2H/3)     W/2 x H/9
"""

from __future__ import annotations

import logging

from PIL import Image, ImageDraw

from segtimer.core.segments import BLANK_PATTERN, SegmentPattern, decompose, digits_of, segments_for
from segtimer.core.themes import RGB, Theme

log = logging.getLogger(__name__)

CELL_WIDTH = 32
CELL_HEIGHT = 36

# Digit image is the lit area of the cell only; the rest stays transparent.
DIGIT_WIDTH = 3 * CELL_WIDTH // 4
DIGIT_HEIGHT = 7 * CELL_HEIGHT // 9

DIGIT_STRIDE = 7 * (2 * CELL_WIDTH) // 16

_WIDE = (CELL_WIDTH // 2, CELL_HEIGHT // 9)
_LONG = (CELL_WIDTH // 8, 2 * CELL_HEIGHT // 9)
_RIGHT_X = 3 * CELL_WIDTH // 4 - CELL_WIDTH // 8

# (x, y, w, h) per segment, in SegmentPattern order.
SEGMENT_RECTS: tuple[tuple[int, int, int, int], ...] = (
    (CELL_WIDTH // 8, 0, *_WIDE),  # top
    (_RIGHT_X, CELL_HEIGHT // 9 + 1, *_LONG),  # upper-right
    (_RIGHT_X, 4 * CELL_HEIGHT // 9 + 1, *_LONG),  # lower-right
    (CELL_WIDTH // 8, 2 * CELL_HEIGHT // 3, *_WIDE),  # bottom
    (0, 4 * CELL_HEIGHT // 9 + 1, *_LONG),  # lower-left
    (0, CELL_HEIGHT // 9 + 1, *_LONG),  # upper-left
    (CELL_WIDTH // 8, CELL_HEIGHT // 3 + 1, *_WIDE),  # middle
)


def _fill_rect(draw: ImageDraw.ImageDraw, x: int, y: int, w: int, h: int, color: RGB) -> None:
    """Fill a *w* x *h* rectangle whose top-left corner is (*x*, *y*)."""
    draw.rectangle((x, y, x + w - 1, y + h - 1), fill=color)


def face_size(digit_count: int) -> tuple[int, int]:
    """Return the ``(width, height)`` of a face showing *digit_count* digits."""
    return CELL_WIDTH * digit_count, CELL_HEIGHT


def render_digit(pattern: SegmentPattern, theme: Theme) -> Image.Image:
    """Draw one digit, lit segments in the on-colour and the rest in the off-colour.

    Off segments are always painted so the unlit strokes stay visible.
    """
    image = Image.new("RGBA", (DIGIT_WIDTH, DIGIT_HEIGHT), (0, 0, 0, 0))
    draw = ImageDraw.Draw(image)
    for lit, (x, y, w, h) in zip(pattern, SEGMENT_RECTS):
        _fill_rect(draw, x, y, w, h, theme.on_color if lit else theme.off_color)
    return image


def face_patterns(value: int, digit_count: int) -> list[SegmentPattern]:
    """Return the pattern shown at each position, leading zeros blanked.

    A value of 0 keeps its rightmost zero, and a single-digit face never
    blanks anything.
    """
    digits = decompose(value, digit_count)
    lead_index = digit_count - digits_of(value)
    patterns = []
    for index, digit in enumerate(digits):
        if index < lead_index and digit == 0 and digit_count > 1:
            patterns.append(BLANK_PATTERN)
        else:
            patterns.append(segments_for(digit))
    return patterns


def render_face(value: int, digit_count: int, theme: Theme) -> Image.Image:
    """Render *value* across *digit_count* digit cells on the theme background."""
    width, height = face_size(digit_count)
    face = Image.new("RGB", (width, height), theme.background)

    x = width // 16
    y = CELL_HEIGHT // 9
    for pattern in face_patterns(value, digit_count):
        digit = render_digit(pattern, theme)
        face.paste(digit, (x, y), digit)
        x += DIGIT_STRIDE

    log.debug("Rendered %d on %d digit(s) (%s theme)", value, digit_count, theme.name)
    return face

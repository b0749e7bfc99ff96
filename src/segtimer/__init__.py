"""segtimer: a seven-segment countdown timer widget."""

__version__ = "0.1.0"

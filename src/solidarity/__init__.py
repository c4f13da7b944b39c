"""in-solidarity: flag non-inclusive language introduced by a code change."""

__version__ = "0.3.0"

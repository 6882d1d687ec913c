"""Utility functions for ManualPack."""

from manualpack.utils.hashing import content_hash
from manualpack.utils.headings import (
    HEADINGS_SUFFIX,
    headings_path_for,
    load_section_headings,
    parse_section_headings,
)

__all__ = [
    "content_hash",
    "HEADINGS_SUFFIX",
    "headings_path_for",
    "load_section_headings",
    "parse_section_headings",
]

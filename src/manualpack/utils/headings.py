"""Section heading sidecar files.

A manual ``coin-op.md`` may ship with ``coin-op.headings.json`` mapping
page numbers to the section the page belongs to::

    {"1": "Safety", "12": "Coin Door", "13": "Coin Door"}
"""

import json
from pathlib import Path

HEADINGS_SUFFIX = ".headings.json"


def parse_section_headings(raw: str | bytes) -> dict[int, str]:
    """Parse a JSON object of page number -> heading.

    Raises:
        ValueError: If the payload is not an object keyed by page numbers.
    """
    data = json.loads(raw)
    if not isinstance(data, dict):
        raise ValueError("Section headings must be a JSON object")

    headings = {}
    for key, value in data.items():
        try:
            page = int(key)
        except ValueError:
            raise ValueError(f"Invalid page number in section headings: {key!r}") from None
        if value:
            headings[page] = str(value)
    return headings


def headings_path_for(manual_path: Path) -> Path:
    """Sidecar path for a manual file (``x.md`` -> ``x.headings.json``)."""
    return manual_path.with_name(manual_path.stem + HEADINGS_SUFFIX)


def load_section_headings(path: Path | str) -> dict[int, str]:
    """Load a headings file from disk."""
    return parse_section_headings(Path(path).read_text(encoding="utf-8"))

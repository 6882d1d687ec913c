"""Ingester for a single manual file."""

import re
from pathlib import Path
from typing import Iterator, Optional

from manualpack.models import ManualSource
from manualpack.utils.headings import headings_path_for, load_section_headings

MANUAL_EXTENSIONS = {".md", ".markdown", ".txt"}

_TITLE_RE = re.compile(r"^# (.+)$", re.MULTILINE)


def extract_title(markdown: str) -> Optional[str]:
    """Return the first level-1 heading of a document, if any."""
    m = _TITLE_RE.search(markdown)
    return m.group(1).strip() if m else None


def build_manual(
    manual_path: str,
    markdown: str,
    section_headings: Optional[dict[int, str]] = None,
    manual_id: Optional[str] = None,
) -> ManualSource:
    """Build a ManualSource from a manual file.

    The id defaults to the path relative to the ingested root, without its
    suffix, so same-named files in different folders stay distinct.
    """
    return ManualSource(
        manual_id=manual_id or Path(manual_path).with_suffix("").as_posix(),
        markdown=markdown,
        source_path=manual_path,
        title=extract_title(markdown),
        section_headings=section_headings or {},
    )


class FileIngester:
    """Ingester for one markdown or text file."""

    source_type = "file"

    def can_handle(self, source: Path) -> bool:
        """Check if this is an existing manual file."""
        return source.is_file() and source.suffix.lower() in MANUAL_EXTENSIONS

    def ingest(self, source: Path) -> Iterator[ManualSource]:
        """Yield the single manual, with headings from its sidecar if present."""
        markdown = source.read_text(encoding="utf-8", errors="replace")

        headings = {}
        sidecar = headings_path_for(source)
        if sidecar.exists():
            headings = load_section_headings(sidecar)

        yield build_manual(str(source), markdown, headings, manual_id=source.stem)

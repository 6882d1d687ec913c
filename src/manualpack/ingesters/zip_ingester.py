"""Ingester for ZIP archives of manuals."""

import zipfile
from pathlib import Path, PurePosixPath
from typing import Iterator

from manualpack.ingesters.file_ingester import MANUAL_EXTENSIONS, build_manual
from manualpack.models import ManualSource
from manualpack.utils.headings import HEADINGS_SUFFIX, parse_section_headings


class ZipIngester:
    """Ingester for ZIP archive files."""

    source_type = "zip"

    def can_handle(self, source: Path) -> bool:
        """Check if this is a zip file."""
        return source.suffix.lower() == ".zip" and source.exists()

    def ingest(self, source: Path) -> Iterator[ManualSource]:
        """Yield manuals from a ZIP archive.

        Args:
            source: Path to the ZIP file

        Yields:
            ManualSource objects for each markdown or text member
        """
        with zipfile.ZipFile(source, "r") as zf:
            names = set(zf.namelist())

            for info in sorted(zf.infolist(), key=lambda i: i.filename):
                if info.is_dir():
                    continue

                member = PurePosixPath(info.filename)
                if any(part.startswith(".") for part in member.parts):
                    continue
                if member.suffix.lower() not in MANUAL_EXTENSIONS:
                    continue

                markdown = zf.read(info.filename).decode("utf-8", errors="replace")

                headings = {}
                sidecar = str(member.with_name(member.stem + HEADINGS_SUFFIX))
                if sidecar in names:
                    headings = parse_section_headings(zf.read(sidecar))

                yield build_manual(info.filename, markdown, headings)

"""Ingester for local folders of manuals."""

import logging
import os
from pathlib import Path
from typing import Iterator

from manualpack.ingesters.file_ingester import MANUAL_EXTENSIONS, build_manual
from manualpack.models import ManualSource
from manualpack.utils.headings import headings_path_for, load_section_headings

logger = logging.getLogger(__name__)


class FolderIngester:
    """Ingester for local filesystem folders."""

    source_type = "folder"

    def can_handle(self, source: Path) -> bool:
        """Check if this is an existing directory."""
        return source.is_dir()

    def ingest(self, source: Path) -> Iterator[ManualSource]:
        """Yield manuals from a folder recursively.

        Args:
            source: Path to the folder

        Yields:
            ManualSource objects for each markdown or text file, in path order
        """
        for root, dirs, files in os.walk(source):
            dirs.sort()
            for filename in sorted(files):
                full_path = Path(root) / filename
                rel_path = full_path.relative_to(source)

                if self._should_skip(rel_path):
                    continue
                if full_path.suffix.lower() not in MANUAL_EXTENSIONS:
                    continue

                try:
                    markdown = full_path.read_text(encoding="utf-8", errors="replace")
                except (PermissionError, OSError) as e:
                    logger.warning(f"Skipping unreadable file {rel_path}: {e}")
                    continue

                headings = {}
                sidecar = headings_path_for(full_path)
                if sidecar.exists():
                    headings = load_section_headings(sidecar)

                yield build_manual(str(rel_path), markdown, headings)

    def _should_skip(self, path: Path) -> bool:
        """Check if a file should be skipped.

        Skips hidden files, common build artifacts, and version control.
        """
        parts = path.parts

        # Skip hidden files/folders
        if any(part.startswith(".") for part in parts):
            return True

        skip_patterns = {
            "__pycache__",
            "node_modules",
            "venv",
            "env",
            "dist",
            "build",
        }

        return any(part in skip_patterns for part in parts)

"""Manual source handlers (ingesters) for ManualPack."""

from pathlib import Path
from typing import Optional

from manualpack.ingesters.file_ingester import FileIngester
from manualpack.ingesters.folder_ingester import FolderIngester
from manualpack.ingesters.zip_ingester import ZipIngester
from manualpack.protocols import ManualIngester

# Registry of available ingesters
_INGESTERS: list[ManualIngester] = [
    ZipIngester(),
    FolderIngester(),
    FileIngester(),
]


def get_ingester(source: Path | str) -> Optional[ManualIngester]:
    """Find an ingester that can handle the given source.

    Args:
        source: Path to the input source (manual file, folder or zip file)

    Returns:
        A ManualIngester instance that can handle the source, or None
    """
    source_path = Path(source)
    for ingester in _INGESTERS:
        if ingester.can_handle(source_path):
            return ingester
    return None


def register_ingester(ingester: ManualIngester) -> None:
    """Register a custom ingester (for plugins/extensions).

    Args:
        ingester: An object implementing the ManualIngester protocol
    """
    _INGESTERS.append(ingester)


__all__ = [
    "get_ingester",
    "register_ingester",
    "FileIngester",
    "FolderIngester",
    "ZipIngester",
]

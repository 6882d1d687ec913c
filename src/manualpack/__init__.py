"""ManualPack - page-aware chunking and retrieval for equipment manuals."""

from manualpack.chunkers import OverlapChunker, PageSegmenter
from manualpack.config import ChunkingConfig
from manualpack.models import Chunk, ChunkMetadata, ManualSource, Page

__version__ = "0.1.0"

__all__ = [
    "Chunk",
    "ChunkMetadata",
    "ChunkingConfig",
    "ManualSource",
    "OverlapChunker",
    "Page",
    "PageSegmenter",
]

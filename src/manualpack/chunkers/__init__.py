"""Chunking strategies for manual text."""

from manualpack.chunkers.overlap_chunker import OverlapChunker
from manualpack.chunkers.page_segmenter import PAGE_MARKER, PageSegmenter

__all__ = ["OverlapChunker", "PageSegmenter", "PAGE_MARKER"]

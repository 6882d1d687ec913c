"""Data models for ManualPack."""

from manualpack.models.manual import Chunk, ChunkMetadata, ManualSource, Page

__all__ = ["Chunk", "ChunkMetadata", "ManualSource", "Page"]

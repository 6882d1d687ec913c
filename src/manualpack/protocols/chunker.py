"""Protocol for text chunking strategies."""

from typing import Protocol, runtime_checkable

from manualpack.models import Chunk, ChunkMetadata


@runtime_checkable
class ChunkingStrategy(Protocol):
    """Protocol for text chunking strategies.

    The page segmenter hands each page's text to a strategy along with a
    metadata template that every returned chunk must carry a copy of.
    """

    def chunk(self, text: str, metadata: ChunkMetadata) -> list[Chunk]:
        """Split text into chunks with metadata."""
        ...

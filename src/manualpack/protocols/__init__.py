"""Protocol definitions for extensible components."""

from manualpack.protocols.chunker import ChunkingStrategy
from manualpack.protocols.embedder import EmbeddingProvider
from manualpack.protocols.ingester import ManualIngester
from manualpack.protocols.sink import ChunkSink

__all__ = ["ManualIngester", "EmbeddingProvider", "ChunkingStrategy", "ChunkSink"]

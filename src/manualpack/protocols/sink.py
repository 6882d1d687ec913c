"""Protocol for chunk persistence backends."""

from typing import Protocol, runtime_checkable

import numpy as np

from manualpack.models import Chunk


@runtime_checkable
class ChunkSink(Protocol):
    """Durable storage for chunks and their embeddings.

    Chunks are keyed by manual_id and chunk_index.
    """

    def persist_chunks(self, chunks: list[Chunk]) -> list[int]:
        """Store chunks and return their ids, in the same order."""
        ...

    def store_embeddings(self, chunk_ids: list[int], embeddings: np.ndarray) -> None:
        """Attach one embedding row to each chunk id."""
        ...

    def delete_manual_chunks(self, manual_id: str) -> int:
        """Remove every stored chunk of a manual; return how many were removed."""
        ...

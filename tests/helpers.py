"""Test doubles shared across the suite."""

from __future__ import annotations

import hashlib
import re

import numpy as np

from manualpack.models import Chunk, ChunkMetadata


class HashingEmbedder:
    """Deterministic bag-of-words embeddings; no model download needed."""

    def __init__(self, dim: int = 64):
        self.dim = dim
        self.calls: list[list[str]] = []

    @property
    def dimension(self) -> int:
        return self.dim

    @property
    def model_name(self) -> str:
        return "hashing-test"

    def embed(self, texts: list[str]) -> np.ndarray:
        self.calls.append(list(texts))
        out = np.zeros((len(texts), self.dim), dtype=np.float32)
        for row, text in enumerate(texts):
            for word in re.findall(r"\w+", text.lower()):
                bucket = int(hashlib.md5(word.encode("utf-8")).hexdigest(), 16) % self.dim
                out[row, bucket] += 1.0
            norm = np.linalg.norm(out[row])
            if norm:
                out[row] /= norm
        return out


class StaticEmbedder:
    """Returns the same vector for every text."""

    def __init__(self, vector: list[float]):
        self.vector = np.asarray(vector, dtype=np.float32)

    @property
    def dimension(self) -> int:
        return len(self.vector)

    @property
    def model_name(self) -> str:
        return "static-test"

    def embed(self, texts: list[str]) -> np.ndarray:
        return np.tile(self.vector, (len(texts), 1))


class RecordingSink:
    """In-memory ChunkSink that records every call."""

    def __init__(self):
        self.chunks: list[Chunk] = []
        self.embeddings: dict[int, np.ndarray] = {}
        self.deleted: list[str] = []

    def persist_chunks(self, chunks: list[Chunk]) -> list[int]:
        start = len(self.chunks)
        self.chunks.extend(chunks)
        return list(range(start + 1, start + 1 + len(chunks)))

    def store_embeddings(self, chunk_ids: list[int], embeddings: np.ndarray) -> None:
        for chunk_id, embedding in zip(chunk_ids, embeddings):
            self.embeddings[chunk_id] = embedding

    def delete_manual_chunks(self, manual_id: str) -> int:
        self.deleted.append(manual_id)
        before = len(self.chunks)
        self.chunks = [c for c in self.chunks if c.metadata.manual_id != manual_id]
        return before - len(self.chunks)


def make_chunk(manual_id: str, content: str, page: int = 1, index: int = 0) -> Chunk:
    return Chunk(
        content=content,
        metadata=ChunkMetadata(manual_id=manual_id, page_start=page, page_end=page),
        chunk_index=index,
    )


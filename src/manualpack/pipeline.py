"""Ingestion pipeline: manual markdown -> pages -> chunks -> embeddings -> sink."""

import logging
from dataclasses import dataclass
from typing import Optional

import numpy as np

from manualpack.chunkers import PageSegmenter
from manualpack.models import Chunk, ManualSource
from manualpack.protocols import ChunkSink, EmbeddingProvider
from manualpack.utils.hashing import content_hash

logger = logging.getLogger(__name__)


@dataclass
class IngestResult:
    """Counts reported for one ingested manual."""

    manual_id: str
    pages: int = 0
    chunks: int = 0
    duplicates_skipped: int = 0
    replaced: int = 0
    embedded: int = 0


def dedupe_chunks(chunks: list[Chunk]) -> tuple[list[Chunk], int]:
    """Drop chunks whose content repeats an earlier chunk of the same manual.

    Returns:
        The kept chunks (renumbered) and how many were dropped
    """
    seen: set[tuple[str, str]] = set()
    kept: list[Chunk] = []
    for chunk in chunks:
        key = (chunk.metadata.manual_id, content_hash(chunk.content))
        if key in seen:
            continue
        seen.add(key)
        chunk.chunk_index = len(kept)
        kept.append(chunk)
    return kept, len(chunks) - len(kept)


class IngestionPipeline:
    """Wires the page segmenter to an embedder and a chunk sink.

    The segmenter stays pure; all I/O happens through the injected
    embedder and sink.
    """

    def __init__(
        self,
        embedder: EmbeddingProvider,
        sink: ChunkSink,
        segmenter: Optional[PageSegmenter] = None,
        embed_batch_size: int = 64,
    ):
        if embed_batch_size <= 0:
            raise ValueError("embed_batch_size must be positive")
        self.embedder = embedder
        self.sink = sink
        self.segmenter = segmenter or PageSegmenter()
        self.embed_batch_size = embed_batch_size

    def ingest(self, manual: ManualSource, replace: bool = True) -> IngestResult:
        """Chunk, persist and embed one manual.

        Args:
            manual: The manual to ingest
            replace: Delete the manual's previously stored chunks first

        Returns:
            IngestResult with page, chunk and embedding counts
        """
        result = IngestResult(manual_id=manual.manual_id)

        pages = self.segmenter.split_pages(manual.markdown)
        chunks = self.segmenter.chunk_pages(
            pages, manual.manual_id, manual.section_headings
        )
        chunks, result.duplicates_skipped = dedupe_chunks(chunks)
        result.pages = len(pages)

        if not chunks:
            if replace:
                result.replaced = self.sink.delete_manual_chunks(manual.manual_id)
            logger.info(f"  {manual.manual_id}: no content to ingest")
            return result

        # Nothing reaches the sink until every batch is embedded
        batches = []
        for offset in range(0, len(chunks), self.embed_batch_size):
            batch = chunks[offset : offset + self.embed_batch_size]
            batches.append(np.asarray(self.embedder.embed([c.content for c in batch])))
        embeddings = np.concatenate(batches)

        if replace:
            result.replaced = self.sink.delete_manual_chunks(manual.manual_id)

        chunk_ids = self.sink.persist_chunks(chunks)
        result.chunks = len(chunk_ids)

        self.sink.store_embeddings(chunk_ids, embeddings)
        result.embedded = len(chunk_ids)

        logger.info(
            f"  {manual.manual_id}: {result.pages} pages, {result.chunks} chunks"
            + (f", {result.duplicates_skipped} duplicates skipped" if result.duplicates_skipped else "")
        )
        return result

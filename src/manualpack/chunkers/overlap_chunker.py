"""Overlapping, boundary-aware chunking strategy."""

import logging
from typing import Optional

from manualpack.config import ChunkingConfig
from manualpack.models import Chunk, ChunkMetadata

logger = logging.getLogger(__name__)

PARAGRAPH_BREAK = "\n\n"
SENTENCE_BREAKS = (". ", ".\n", "!\n", "?\n")


def _last_break(text: str, marker: str, end: int) -> int:
    """Index of the last ``marker`` starting at or before ``end``, or -1."""
    return text.rfind(marker, 0, end + len(marker))


class OverlapChunker:
    """Default chunking: ~500 char windows, 135 char overlap, prefer breaks.

    Each window is cut at the last paragraph break inside it, else at the
    last sentence end, else hard at target_size. A break only counts when
    it lies more than min_size characters into the window, so chunks never
    collapse into fragments. The next window starts ``overlap`` characters
    before the previous one ended.
    """

    def __init__(self, config: Optional[ChunkingConfig] = None):
        self.config = config or ChunkingConfig()

    def chunk(self, text: str, metadata: ChunkMetadata) -> list[Chunk]:
        """Split text into overlapping chunks tagged with metadata.

        Args:
            text: The text to chunk (typically one manual page)
            metadata: Template copied into every chunk

        Returns:
            Chunks in left-to-right order
        """
        prefix = f"[{metadata.section_heading}]\n\n" if metadata.section_heading else ""
        full_text = prefix + text
        length = len(full_text)

        cfg = self.config
        chunks: list[Chunk] = []
        start = 0

        while start < length:
            end = start + cfg.target_size

            # Not the last window: try to end on a paragraph or sentence
            if end < length:
                end = self._boundary_end(full_text, start, end)

            chunk_text = full_text[start:end].strip()

            # The first non-empty window is kept whatever its size
            if chunk_text and (len(chunk_text) >= cfg.min_size or not chunks):
                chunks.append(
                    Chunk(
                        content=chunk_text,
                        metadata=metadata.copy(),
                        chunk_index=len(chunks),
                        start_char=start,
                        end_char=min(end, length),
                    )
                )

            if end >= length:
                break
            start = end - cfg.overlap

        if chunks:
            logger.debug(
                f"Created {len(chunks)} chunks from {length} chars "
                f"(avg: {round(length / len(chunks))} chars/chunk)"
            )

        return chunks

    def _boundary_end(self, text: str, start: int, end: int) -> int:
        """Pull ``end`` back to the best paragraph or sentence break."""
        paragraph = _last_break(text, PARAGRAPH_BREAK, end)
        if self._accepts(paragraph, start, paragraph + 2):
            return paragraph + 2

        # Rightmost of all sentence markers, not the first one found
        sentence = max(_last_break(text, marker, end) for marker in SENTENCE_BREAKS)
        if self._accepts(sentence, start, sentence + 1):
            return sentence + 1

        return end

    def _accepts(self, position: int, start: int, new_end: int) -> bool:
        if position < 0 or position - start <= self.config.min_size:
            return False
        # The following window must still start past this one
        return new_end - self.config.overlap > start

"""Split extracted manual markdown into pages and chunk each page."""

import logging
import re
from typing import Mapping, Optional

from manualpack.chunkers.overlap_chunker import OverlapChunker
from manualpack.models import Chunk, ChunkMetadata, Page
from manualpack.protocols import ChunkingStrategy

logger = logging.getLogger(__name__)

# Document parsers emit one "### Page N" line at the top of every page
PAGE_MARKER = re.compile(r"^### Page (\d+)", re.MULTILINE)


class PageSegmenter:
    """Page-aware front end for a chunking strategy.

    Pages are delimited by ``### Page N`` marker lines. Page i spans from
    its marker up to the next marker (or the end of the document), so the
    marker line itself stays in the page text.
    """

    def __init__(
        self,
        chunker: Optional[ChunkingStrategy] = None,
        fallback_to_single_page: bool = True,
    ):
        """Initialize the segmenter.

        Args:
            chunker: Strategy used per page. Defaults to OverlapChunker.
            fallback_to_single_page: Treat a document without any page
                markers as page 1 instead of returning no pages.
        """
        self.chunker = chunker or OverlapChunker()
        self.fallback_to_single_page = fallback_to_single_page

    def split_pages(self, markdown: str) -> list[Page]:
        """Return the pages of a document in document order."""
        markers = [(m.start(), int(m.group(1))) for m in PAGE_MARKER.finditer(markdown)]

        if not markers:
            if self.fallback_to_single_page and markdown.strip():
                logger.warning(
                    "No '### Page N' markers found; treating the document as page 1"
                )
                return [Page(page_number=1, start=0, end=len(markdown), text=markdown)]
            return []

        pages = []
        for i, (offset, page_number) in enumerate(markers):
            end = markers[i + 1][0] if i + 1 < len(markers) else len(markdown)
            pages.append(
                Page(
                    page_number=page_number,
                    start=offset,
                    end=end,
                    text=markdown[offset:end],
                )
            )
        return pages

    def chunk_pages(
        self,
        pages: list[Page],
        manual_id: str,
        section_headings: Optional[Mapping[int, str]] = None,
    ) -> list[Chunk]:
        """Chunk already-split pages, numbering chunks across the manual."""
        headings = section_headings or {}
        all_chunks: list[Chunk] = []

        for page in pages:
            metadata = ChunkMetadata(
                manual_id=manual_id,
                page_start=page.page_number,
                page_end=page.page_number,
                section_heading=headings.get(page.page_number),
            )
            for chunk in self.chunker.chunk(page.text.strip(), metadata):
                chunk.chunk_index = len(all_chunks)
                all_chunks.append(chunk)

        return all_chunks

    def chunk_markdown(
        self,
        markdown: str,
        manual_id: str,
        section_headings: Optional[Mapping[int, str]] = None,
    ) -> list[Chunk]:
        """Split a manual into pages and chunk every page.

        Args:
            markdown: Full extracted markdown of the manual
            manual_id: Identifier stamped into every chunk's metadata
            section_headings: Optional page number -> heading lookup

        Returns:
            Chunks in page order, then in within-page order
        """
        pages = self.split_pages(markdown)
        return self.chunk_pages(pages, manual_id, section_headings)

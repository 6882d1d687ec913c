"""Core data models for manuals, pages and chunks."""

from dataclasses import dataclass, field, replace
from typing import Optional


@dataclass
class ChunkMetadata:
    """Associates a chunk with its source manual and page range."""

    manual_id: str
    page_start: int
    page_end: int
    section_heading: Optional[str] = None
    menu_path: Optional[str] = None

    def copy(self) -> "ChunkMetadata":
        """Return an independent copy of this metadata."""
        return replace(self)


@dataclass
class Chunk:
    """A bounded-size span of manual text used as a unit of retrieval.

    start_char and end_char are the untrimmed span of the chunk inside the
    text the chunker worked on (including any section heading prefix).
    """

    content: str
    metadata: ChunkMetadata
    chunk_index: int = 0
    start_char: int = 0
    end_char: int = 0


@dataclass(frozen=True)
class Page:
    """One page of a manual, located by its ``### Page N`` marker."""

    page_number: int
    start: int
    end: int
    text: str


@dataclass
class ManualSource:
    """A manual's extracted markdown, ready for ingestion."""

    manual_id: str
    markdown: str
    source_path: str
    title: Optional[str] = None
    section_headings: dict[int, str] = field(default_factory=dict)

    @property
    def display_title(self) -> str:
        return self.title or self.manual_id

"""Protocol for manual source handlers."""

from pathlib import Path
from typing import Iterator, Protocol, runtime_checkable

from manualpack.models import ManualSource


@runtime_checkable
class ManualIngester(Protocol):
    """Protocol for manual source handlers.

    Implementations handle different input layouts (single file, folder, zip).
    Uses structural subtyping - no inheritance required.
    """

    @property
    def source_type(self) -> str:
        """Return identifier for this source type (e.g., 'zip', 'folder')."""
        ...

    def can_handle(self, source: Path) -> bool:
        """Check if this ingester can process the given source."""
        ...

    def ingest(self, source: Path) -> Iterator[ManualSource]:
        """Yield one ManualSource per manual found in the source."""
        ...

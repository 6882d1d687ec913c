"""Exception hierarchy for ManualPack."""


class ManualPackError(Exception):
    """Base class for all ManualPack errors."""


class InvalidChunkingConfig(ManualPackError, ValueError):
    """Raised when chunk sizes cannot guarantee forward progress."""


class PackNotFoundError(ManualPackError, FileNotFoundError):
    """Raised when a .manualpack file does not exist."""


class ManualNotFoundError(ManualPackError, LookupError):
    """Raised when a manual id is not present in a pack."""

    def __init__(self, manual_id: str):
        super().__init__(f"Manual not found: {manual_id}")
        self.manual_id = manual_id

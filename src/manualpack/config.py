"""Configuration for chunking, embedding and search.

Chunk sizes live in an immutable :class:`ChunkingConfig` that is validated
when it is built. Process-level settings are read from the environment
(``MANUALPACK_*``) or a ``.env`` file:

* ``MANUALPACK_EMBEDDING_MODEL``     - default: ``"all-MiniLM-L6-v2"``
* ``MANUALPACK_EMBED_BATCH_SIZE``    - default: ``64``
* ``MANUALPACK_CHUNK_TARGET_SIZE``   - default: ``500``
* ``MANUALPACK_CHUNK_OVERLAP``       - default: ``135``
* ``MANUALPACK_CHUNK_MIN_SIZE``      - default: ``200``
* ``MANUALPACK_SEARCH_MAX_RESULTS``  - default: ``6``

Usage:

    from manualpack.config import Settings
    settings = Settings()
    chunker = OverlapChunker(settings.chunking_config())
"""

from dataclasses import dataclass

from pydantic_settings import BaseSettings, SettingsConfigDict

from manualpack.errors import InvalidChunkingConfig


@dataclass(frozen=True)
class ChunkingConfig:
    """Character-based sizes for the overlap chunker.

    Attributes:
        target_size: Desired chunk length before boundary adjustment
        overlap: Characters the next chunk's start precedes this chunk's end
        min_size: Chunks shorter than this are dropped, except the first
    """

    target_size: int = 500
    overlap: int = 135
    min_size: int = 200

    def __post_init__(self) -> None:
        for name in ("target_size", "overlap", "min_size"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise InvalidChunkingConfig(f"{name} must be an integer, got {value!r}")
        if self.target_size <= 0:
            raise InvalidChunkingConfig("target_size must be positive")
        if self.overlap < 0:
            raise InvalidChunkingConfig("overlap must not be negative")
        if self.min_size < 0:
            raise InvalidChunkingConfig("min_size must not be negative")
        if self.overlap >= self.target_size:
            raise InvalidChunkingConfig(
                f"overlap ({self.overlap}) must be smaller than "
                f"target_size ({self.target_size})"
            )
        if self.min_size > self.target_size:
            raise InvalidChunkingConfig(
                f"min_size ({self.min_size}) must not exceed "
                f"target_size ({self.target_size})"
            )


class Settings(BaseSettings):
    """Typed view over the process environment."""

    model_config = SettingsConfigDict(
        env_prefix="MANUALPACK_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    embedding_model: str = "all-MiniLM-L6-v2"
    embed_batch_size: int = 64

    chunk_target_size: int = 500
    chunk_overlap: int = 135
    chunk_min_size: int = 200

    search_max_results: int = 6
    # Tried in order; the first one yielding search_min_results hits wins
    search_thresholds: list[float] = [0.8, 0.75, 0.7, 0.65, 0.6]
    search_min_results: int = 3

    def chunking_config(self) -> ChunkingConfig:
        """Build a validated ChunkingConfig from the chunk_* settings."""
        return ChunkingConfig(
            target_size=self.chunk_target_size,
            overlap=self.chunk_overlap,
            min_size=self.chunk_min_size,
        )

"""SQLite-backed storage for .manualpack files."""

import sqlite3
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterator, Optional

import numpy as np

from manualpack.errors import ManualNotFoundError, PackNotFoundError
from manualpack.models import Chunk, ManualSource
from manualpack.storage.schema import SCHEMA
from manualpack.utils.hashing import content_hash

_CHUNK_COLUMNS = """c.id, c.manual_id, COALESCE(m.title, c.manual_id) AS manual_title,
                    c.chunk_index, c.page_start, c.page_end, c.section_heading,
                    c.menu_path, c.content"""


class ManualStore:
    """SQLite-backed storage for .manualpack files.

    Implements the ChunkSink protocol used by the ingestion pipeline.
    """

    def __init__(self, path: Path | str):
        self.path = Path(path)

    @classmethod
    def open(cls, path: Path | str) -> "ManualStore":
        """Open an existing pack, failing if the file is missing."""
        store = cls(path)
        if not store.path.exists():
            raise PackNotFoundError(f"Manual pack not found: {path}")
        return store

    @contextmanager
    def connection(self) -> Iterator[sqlite3.Connection]:
        """Context manager for database connections."""
        conn = sqlite3.connect(self.path)
        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def initialize(self) -> None:
        """Create schema if not exists."""
        with self.connection() as conn:
            conn.executescript(SCHEMA)

    def store_manual(self, manual: ManualSource, page_count: int) -> None:
        """Store (or refresh) a manual's catalogue entry."""
        with self.connection() as conn:
            conn.execute(
                """INSERT OR REPLACE INTO manuals
                   (manual_id, title, source_path, page_count, ingested_at)
                   VALUES (?, ?, ?, ?, ?)""",
                (
                    manual.manual_id,
                    manual.title,
                    manual.source_path,
                    page_count,
                    datetime.now(timezone.utc).isoformat(),
                ),
            )

    def persist_chunks(self, chunks: list[Chunk]) -> list[int]:
        """Store chunks and return their IDs."""
        chunk_ids = []
        with self.connection() as conn:
            for chunk in chunks:
                meta = chunk.metadata
                cursor = conn.execute(
                    """INSERT INTO chunks
                       (manual_id, chunk_index, page_start, page_end, section_heading,
                        menu_path, content, content_hash, start_char, end_char)
                       VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)""",
                    (
                        meta.manual_id,
                        chunk.chunk_index,
                        meta.page_start,
                        meta.page_end,
                        meta.section_heading,
                        meta.menu_path,
                        chunk.content,
                        content_hash(chunk.content),
                        chunk.start_char,
                        chunk.end_char,
                    ),
                )
                chunk_ids.append(cursor.lastrowid)
        return chunk_ids

    def store_embeddings(self, chunk_ids: list[int], embeddings: np.ndarray) -> None:
        """Store embeddings for chunks."""
        if len(chunk_ids) != len(embeddings):
            raise ValueError(
                f"Got {len(embeddings)} embeddings for {len(chunk_ids)} chunks"
            )
        with self.connection() as conn:
            for chunk_id, embedding in zip(chunk_ids, embeddings):
                conn.execute(
                    "INSERT OR REPLACE INTO vectors (chunk_id, embedding) VALUES (?, ?)",
                    (chunk_id, np.asarray(embedding, dtype=np.float32).tobytes()),
                )

    def delete_manual_chunks(self, manual_id: str) -> int:
        """Delete a manual's chunks and their vectors."""
        with self.connection() as conn:
            conn.execute(
                """DELETE FROM vectors WHERE chunk_id IN
                   (SELECT id FROM chunks WHERE manual_id = ?)""",
                (manual_id,),
            )
            cursor = conn.execute("DELETE FROM chunks WHERE manual_id = ?", (manual_id,))
            return cursor.rowcount

    def set_metadata(self, key: str, value: str) -> None:
        """Store a metadata key-value pair."""
        with self.connection() as conn:
            conn.execute(
                "INSERT OR REPLACE INTO metadata (key, value) VALUES (?, ?)",
                (key, value),
            )

    def get_metadata(self, key: str) -> Optional[str]:
        """Retrieve a metadata value by key."""
        with self.connection() as conn:
            row = conn.execute(
                "SELECT value FROM metadata WHERE key = ?", (key,)
            ).fetchone()
            return row["value"] if row else None

    # Query methods for search, export and MCP tools

    def list_manuals(self) -> list[dict]:
        """List manuals with their chunk counts."""
        with self.connection() as conn:
            cursor = conn.execute(
                """SELECT m.manual_id, m.title, m.source_path, m.page_count,
                          m.ingested_at, COUNT(c.id) AS chunk_count
                   FROM manuals m LEFT JOIN chunks c ON c.manual_id = m.manual_id
                   GROUP BY m.manual_id ORDER BY m.manual_id"""
            )
            return [dict(row) for row in cursor]

    def get_chunks(self, manual_id: str, page: Optional[int] = None) -> list[dict]:
        """Return a manual's chunks in order, optionally for one page."""
        query = f"""SELECT {_CHUNK_COLUMNS}, c.content_hash, c.start_char, c.end_char
                    FROM chunks c LEFT JOIN manuals m ON m.manual_id = c.manual_id
                    WHERE c.manual_id = ?"""
        params: list[Any] = [manual_id]
        if page is not None:
            query += " AND c.page_start <= ? AND c.page_end >= ?"
            params.extend([page, page])
        query += " ORDER BY c.page_start, c.chunk_index"

        with self.connection() as conn:
            return [dict(row) for row in conn.execute(query, params)]

    def recall(
        self,
        query_embedding: np.ndarray,
        limit: int = 10,
        manual_id: Optional[str] = None,
        min_score: float = 0.0,
    ) -> list[dict]:
        """Find similar chunks by embedding."""
        query = f"""SELECT {_CHUNK_COLUMNS}, v.embedding
                    FROM chunks c
                    JOIN vectors v ON c.id = v.chunk_id
                    LEFT JOIN manuals m ON m.manual_id = c.manual_id"""
        params: list[Any] = []
        if manual_id is not None:
            query += " WHERE c.manual_id = ?"
            params.append(manual_id)

        results = []
        with self.connection() as conn:
            for row in conn.execute(query, params):
                stored_emb = np.frombuffer(row["embedding"], dtype=np.float32)
                similarity = self._cosine_similarity(query_embedding, stored_emb)
                if similarity < min_score:
                    continue
                result = dict(row)
                del result["embedding"]
                result["similarity"] = float(similarity)
                results.append(result)

        results.sort(key=lambda x: x["similarity"], reverse=True)
        return results[:limit]

    def keyword_search(
        self,
        terms: list[str],
        limit: int = 10,
        manual_id: Optional[str] = None,
    ) -> list[dict]:
        """Rank chunks by how many distinct terms they contain."""
        wanted = sorted({t.lower() for t in terms if t.strip()})
        if not wanted:
            return []

        query = f"""SELECT {_CHUNK_COLUMNS}
                    FROM chunks c LEFT JOIN manuals m ON m.manual_id = c.manual_id"""
        params: list[Any] = []
        if manual_id is not None:
            query += " WHERE c.manual_id = ?"
            params.append(manual_id)

        results = []
        with self.connection() as conn:
            for row in conn.execute(query, params):
                text = row["content"].lower()
                hits = sum(1 for term in wanted if term in text)
                if hits == 0:
                    continue
                result = dict(row)
                result["score"] = hits / len(wanted)
                results.append(result)

        results.sort(key=lambda x: (-x["score"], x["manual_id"], x["chunk_index"]))
        return results[:limit]

    def export_manual(self, manual_id: str) -> dict:
        """Export a manual's chunks as a JSON-serialisable dict (no vectors)."""
        with self.connection() as conn:
            known = conn.execute(
                "SELECT 1 FROM manuals WHERE manual_id = ?", (manual_id,)
            ).fetchone()
        chunks = self.get_chunks(manual_id)
        if not known and not chunks:
            raise ManualNotFoundError(manual_id)

        return {
            "manual_id": manual_id,
            "exported_at": datetime.now(timezone.utc).isoformat(),
            "total_chunks": len(chunks),
            "chunks": [
                {
                    "id": c["id"],
                    "chunk_index": c["chunk_index"],
                    "page_start": c["page_start"],
                    "page_end": c["page_end"],
                    "section_heading": c["section_heading"],
                    "menu_path": c["menu_path"],
                    "content": c["content"],
                    "content_hash": c["content_hash"],
                }
                for c in chunks
            ],
        }

    @staticmethod
    def _cosine_similarity(a: np.ndarray, b: np.ndarray) -> float:
        """Compute cosine similarity between two vectors."""
        norm_a = np.linalg.norm(a)
        norm_b = np.linalg.norm(b)
        if norm_a == 0 or norm_b == 0:
            return 0.0
        return float(np.dot(a, b) / (norm_a * norm_b))

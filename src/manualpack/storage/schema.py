"""Database schema for .manualpack files."""

SCHEMA = """
-- Manuals table: one row per ingested manual
CREATE TABLE IF NOT EXISTS manuals (
    manual_id TEXT PRIMARY KEY,
    title TEXT,
    source_path TEXT,
    page_count INTEGER NOT NULL DEFAULT 0,
    ingested_at TEXT
);

-- Chunks table: overlapping page-tagged retrieval units
CREATE TABLE IF NOT EXISTS chunks (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    manual_id TEXT NOT NULL,
    chunk_index INTEGER NOT NULL,
    page_start INTEGER NOT NULL,
    page_end INTEGER NOT NULL,
    section_heading TEXT,
    menu_path TEXT,
    content TEXT NOT NULL,
    content_hash TEXT NOT NULL,
    start_char INTEGER,
    end_char INTEGER,
    FOREIGN KEY (manual_id) REFERENCES manuals(manual_id)
);

-- Vectors table: stores embeddings
CREATE TABLE IF NOT EXISTS vectors (
    chunk_id INTEGER PRIMARY KEY,
    embedding BLOB NOT NULL,
    FOREIGN KEY (chunk_id) REFERENCES chunks(id)
);

-- Metadata table: stores pack metadata
CREATE TABLE IF NOT EXISTS metadata (
    key TEXT PRIMARY KEY,
    value TEXT
);

-- Indexes for efficient queries
CREATE INDEX IF NOT EXISTS idx_chunks_manual ON chunks(manual_id, chunk_index);
CREATE INDEX IF NOT EXISTS idx_chunks_page ON chunks(manual_id, page_start);
"""

from __future__ import annotations

import json
from pathlib import Path

import numpy as np
import pytest

from manualpack.cli import build_chunking_config, main
from manualpack.config import ChunkingConfig, Settings
from manualpack.models import ManualSource
from manualpack.storage import ManualStore
from tests.helpers import make_chunk


@pytest.fixture
def manual_file(tmp_path: Path, sample_manual_markdown: str) -> Path:
    path = tmp_path / "galaga.md"
    path.write_text(sample_manual_markdown)
    return path


@pytest.fixture
def pack(tmp_path: Path) -> Path:
    path = tmp_path / "test.manualpack"
    store = ManualStore(path)
    store.initialize()
    store.store_manual(
        ManualSource(manual_id="galaga", markdown="", source_path="galaga.md", title="Galaga"),
        page_count=1,
    )
    ids = store.persist_chunks([make_chunk("galaga", "Unplug the cabinet.")])
    store.store_embeddings(ids, np.ones((1, 3), dtype=np.float32))
    store.set_metadata("embedding_model", "hashing-test")
    return path


@pytest.mark.unit
def test_build_chunking_config_prefers_overrides():
    settings = Settings(_env_file=None)

    assert build_chunking_config(settings) == ChunkingConfig()
    assert build_chunking_config(settings, target_size=800, overlap=100) == ChunkingConfig(
        target_size=800, overlap=100, min_size=200
    )


@pytest.mark.unit
def test_chunk_command_prints_json(manual_file, capsys):
    main(["chunk", str(manual_file)])

    chunks = json.loads(capsys.readouterr().out)
    assert [c["metadata"]["page_start"] for c in chunks] == [1, 2]
    assert chunks[0]["metadata"]["manual_id"] == "galaga"
    assert chunks[1]["content"].startswith("### Page 2")


@pytest.mark.unit
def test_chunk_command_rejects_degenerate_config(manual_file):
    with pytest.raises(SystemExit) as exc:
        main(["chunk", str(manual_file), "--target-size", "100", "--overlap", "100"])
    assert exc.value.code == 1


@pytest.mark.unit
def test_export_command_to_file(pack, tmp_path):
    out = tmp_path / "galaga.json"

    main(["export", str(pack), "galaga", "-o", str(out)])

    data = json.loads(out.read_text())
    assert data["total_chunks"] == 1
    assert data["chunks"][0]["content"] == "Unplug the cabinet."


@pytest.mark.unit
def test_export_unknown_manual_exits(pack):
    with pytest.raises(SystemExit) as exc:
        main(["export", str(pack), "missing"])
    assert exc.value.code == 1


@pytest.mark.unit
def test_info_command(pack, capsys):
    main(["info", str(pack)])

    out = capsys.readouterr().out
    assert "embedding_model: hashing-test" in out
    assert "galaga: 1 pages, 1 chunks" in out


@pytest.mark.unit
def test_missing_pack_exits(tmp_path):
    with pytest.raises(SystemExit) as exc:
        main(["info", str(tmp_path / "missing.manualpack")])
    assert exc.value.code == 1


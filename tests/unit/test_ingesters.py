from __future__ import annotations

import json
import zipfile
from pathlib import Path

import pytest

from manualpack.ingesters import FileIngester, FolderIngester, ZipIngester, get_ingester
from manualpack.protocols import ManualIngester
from manualpack.utils.headings import parse_section_headings


@pytest.fixture
def manuals_dir(tmp_path: Path) -> Path:
    root = tmp_path / "manuals"
    (root / "williams").mkdir(parents=True)
    (root / ".cache").mkdir()
    (root / "galaga.md").write_text("# Galaga Service Manual\n\n### Page 1\nSafety first.")
    (root / "galaga.headings.json").write_text(json.dumps({"1": "Safety", "2": ""}))
    (root / "pacman.txt").write_text("### Page 1\nNo title here.")
    (root / "williams" / "defender.markdown").write_text("# Defender\n### Page 1\nBoard set.")
    (root / "wiring.png").write_bytes(b"\x89PNG\r\n")
    (root / ".cache" / "hidden.md").write_text("### Page 1\nignored")
    return root


@pytest.mark.unit
def test_ingesters_satisfy_protocol():
    for ingester in (FileIngester(), FolderIngester(), ZipIngester()):
        assert isinstance(ingester, ManualIngester)


@pytest.mark.unit
def test_folder_ingester_finds_manuals(manuals_dir):
    manuals = list(FolderIngester().ingest(manuals_dir))

    assert [m.manual_id for m in manuals] == ["galaga", "pacman", "williams/defender"]
    galaga = manuals[0]
    assert galaga.title == "Galaga Service Manual"
    assert galaga.section_headings == {1: "Safety"}
    assert galaga.source_path == "galaga.md"
    assert manuals[1].title is None
    assert manuals[1].display_title == "pacman"


@pytest.mark.unit
def test_same_file_name_in_different_folders_gets_distinct_ids(tmp_path):
    for game in ("galaga", "pacman"):
        (tmp_path / game).mkdir()
        (tmp_path / game / "service.md").write_text(f"### Page 1\n{game} service.")

    manuals = list(FolderIngester().ingest(tmp_path))

    assert [m.manual_id for m in manuals] == ["galaga/service", "pacman/service"]


@pytest.mark.unit
def test_zip_ingester_reads_members_and_sidecars(tmp_path):
    archive = tmp_path / "manuals.zip"
    with zipfile.ZipFile(archive, "w") as zf:
        zf.writestr("set/galaga.md", "# Galaga\n### Page 1\nSafety.")
        zf.writestr("set/galaga.headings.json", '{"1": "Safety"}')
        zf.writestr("set/notes.pdf", b"%PDF")
        zf.writestr("__MACOSX/.galaga.md", "junk")

    manuals = list(ZipIngester().ingest(archive))

    assert [m.manual_id for m in manuals] == ["set/galaga"]
    assert manuals[0].section_headings == {1: "Safety"}
    assert manuals[0].source_path == "set/galaga.md"


@pytest.mark.unit
def test_file_ingester_uses_sidecar(manuals_dir):
    manuals = list(FileIngester().ingest(manuals_dir / "galaga.md"))

    assert len(manuals) == 1
    assert manuals[0].manual_id == "galaga"
    assert manuals[0].section_headings == {1: "Safety"}


@pytest.mark.unit
def test_get_ingester_dispatch(manuals_dir, tmp_path):
    archive = tmp_path / "a.zip"
    with zipfile.ZipFile(archive, "w") as zf:
        zf.writestr("a.md", "x")

    assert get_ingester(manuals_dir).source_type == "folder"
    assert get_ingester(archive).source_type == "zip"
    assert get_ingester(manuals_dir / "galaga.md").source_type == "file"
    assert get_ingester(manuals_dir / "wiring.png") is None
    assert get_ingester(tmp_path / "missing") is None


@pytest.mark.unit
def test_parse_section_headings_rejects_bad_input():
    with pytest.raises(ValueError):
        parse_section_headings("[1, 2]")
    with pytest.raises(ValueError):
        parse_section_headings('{"intro": "Safety"}')

import dataclasses
import tempfile
from pathlib import Path

import pytest

from virtprov.ignition import (
    IgnitionError,
    IgnitionFile,
    create_ignition,
    delete_ignition,
    ignition_directory,
    refresh_ignition,
    update_ignition,
)

CONTENT = '{"ignition": {"version": "3.4.0"}}'


def test_default_directory_is_under_temp_dir():
    directory = ignition_directory()
    assert directory.parent == Path(tempfile.gettempdir())


def test_id_of_empty_content_is_sha256_prefix(tmp_path):
    ignition = create_ignition("empty", "", tmp_path)
    assert ignition.id == "e3b0c44298fc1c14"
    assert ignition.size == 0


def test_id_of_abc_is_sha256_prefix(tmp_path):
    ignition = create_ignition("abc", "abc", tmp_path)
    assert ignition.id == "ba7816bf8f01cfea"


def test_create_writes_file_named_after_id(tmp_path):
    ignition = create_ignition("fcos-ignition", CONTENT, tmp_path)
    path = Path(ignition.path)
    assert path.parent == tmp_path
    assert path.name == f"ignition-{ignition.id}.ign"
    assert path.read_text(encoding="utf-8") == CONTENT
    assert ignition.size == len(CONTENT.encode("utf-8"))
    assert ignition.name == "fcos-ignition"
    assert ignition.content == CONTENT
    assert len(ignition.id) == 16


def test_create_counts_bytes_not_characters(tmp_path):
    content = "caf\u00e9"
    ignition = create_ignition("unicode", content, tmp_path)
    assert ignition.size == len(content.encode("utf-8"))
    assert Path(ignition.path).read_bytes() == content.encode("utf-8")


def test_create_makes_missing_directories(tmp_path):
    target = tmp_path / "a" / "b"
    ignition = create_ignition("nested", CONTENT, target)
    assert target.is_dir()
    assert Path(ignition.path).is_file()


def test_same_content_gives_same_file(tmp_path):
    first = create_ignition("one", CONTENT, tmp_path)
    second = create_ignition("two", CONTENT, tmp_path)
    assert first.id == second.id
    assert first.path == second.path


def test_different_content_gives_different_file(tmp_path):
    first = create_ignition("one", CONTENT, tmp_path)
    second = create_ignition("one", CONTENT + " ", tmp_path)
    assert first.path != second.path
    assert len(list(tmp_path.iterdir())) == 2


def test_existing_file_is_reused_unchanged(tmp_path):
    first = create_ignition("one", CONTENT, tmp_path)
    Path(first.path).write_text("xy", encoding="utf-8")
    second = create_ignition("one", CONTENT, tmp_path)
    assert Path(second.path).read_text(encoding="utf-8") == "xy"
    assert second.size == 2


def test_create_fails_when_directory_is_a_file(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("x", encoding="utf-8")
    with pytest.raises(IgnitionError) as info:
        create_ignition("bad", CONTENT, blocker)
    assert info.value.summary == "Failed to Create Temp Directory"


def test_refresh_updates_size(tmp_path):
    ignition = create_ignition("one", CONTENT, tmp_path)
    Path(ignition.path).write_text(CONTENT * 2, encoding="utf-8")
    refreshed = refresh_ignition(ignition)
    assert refreshed == dataclasses.replace(ignition, size=2 * ignition.size)


def test_refresh_missing_file_returns_none(tmp_path):
    ignition = create_ignition("one", CONTENT, tmp_path)
    Path(ignition.path).unlink()
    assert refresh_ignition(ignition) is None


def test_update_is_rejected(tmp_path):
    ignition = create_ignition("one", CONTENT, tmp_path)
    with pytest.raises(IgnitionError) as info:
        update_ignition(ignition)
    assert info.value.summary == "Update Not Supported"


def test_delete_removes_file_and_tolerates_repeat(tmp_path):
    ignition = create_ignition("one", CONTENT, tmp_path)
    delete_ignition(ignition)
    assert not Path(ignition.path).exists()
    delete_ignition(ignition)
    assert list(tmp_path.iterdir()) == []


def test_delete_failure_raises(tmp_path):
    directory = tmp_path / "dir"
    directory.mkdir()
    ignition = IgnitionFile(id="x", name="x", content="", path=str(directory), size=0)
    with pytest.raises(IgnitionError) as info:
        delete_ignition(ignition)
    assert info.value.summary == "Failed to Delete File"
    assert directory.is_dir()
"""test suite for atomic writes and JSON object files."""
import pytest
import os
import stat
import sys
from pathlib import Path
from unittest.mock import patch

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from codex_profiles.domain.errors import ConfigParseError, InvalidArgumentError, StorageError
from codex_profiles.utils.files import atomic_write, read_json_object, write_json_object


class TestAtomicWrite:
    def test_creates_parent_directories(self, tmp_path):
        target = tmp_path / "a" / "b" / "file.txt"
        atomic_write(target, "hello")
        assert target.read_text() == "hello"

    def test_overwrites(self, tmp_path):
        target = tmp_path / "file.txt"
        target.write_text("old")
        atomic_write(target, b"new")
        assert target.read_bytes() == b"new"

    def test_failed_rename_keeps_old_content(self, tmp_path):
        target = tmp_path / "file.txt"
        target.write_text("old")

        with patch("codex_profiles.utils.files.os.replace", side_effect=OSError("disk gone")):
            with pytest.raises(StorageError) as exc:
                atomic_write(target, "new")

        assert isinstance(exc.value.__cause__, OSError)
        assert target.read_text() == "old"
        assert os.listdir(tmp_path) == ["file.txt"]

    def test_keeps_existing_mode(self, tmp_path):
        target = tmp_path / "config.toml"
        target.write_text("old")
        target.chmod(0o644)
        atomic_write(target, "new")
        assert target.read_text() == "new"
        assert stat.S_IMODE(target.stat().st_mode) == 0o644

    def test_new_file_is_private(self, tmp_path):
        target = tmp_path / "auth.json"
        atomic_write(target, "{}")
        assert stat.S_IMODE(target.stat().st_mode) == 0o600


class TestJsonObjectFiles:
    def test_missing_is_empty(self, tmp_path):
        assert read_json_object(tmp_path / "auth.json") == {}

    def test_blank_is_empty(self, tmp_path):
        path = tmp_path / "auth.json"
        path.write_text("\n")
        assert read_json_object(path) == {}

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "auth.json"
        path.write_text("{")
        with pytest.raises(ConfigParseError):
            read_json_object(path)

    def test_invalid_utf8(self, tmp_path):
        path = tmp_path / "auth.json"
        path.write_bytes(b'{"k": "\xff"}')
        with pytest.raises(ConfigParseError) as exc:
            read_json_object(path)
        assert exc.value.path == path

    def test_non_object(self, tmp_path):
        path = tmp_path / "auth.json"
        path.write_text('"just a string"')
        with pytest.raises(InvalidArgumentError):
            read_json_object(path)

    def test_write_then_read(self, tmp_path):
        path = tmp_path / "auth.json"
        write_json_object(path, {"OPENAI_API_KEY": "sk", "nested": {"a": 1}})
        assert read_json_object(path) == {"OPENAI_API_KEY": "sk", "nested": {"a": 1}}
        assert path.read_text().endswith("\n")


if __name__ == "__main__":
    pytest.main([__file__, "-v"])

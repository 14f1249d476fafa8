"""test suite for ProfileStore."""
import pytest
import json
import sys
from datetime import datetime
from pathlib import Path
from unittest.mock import patch

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from codex_profiles.config import StoragePaths
from codex_profiles.domain.errors import InvalidArgumentError, ProfileNotFoundError, StorageError
from codex_profiles.domain.models import Profile, ProviderConfig
from codex_profiles.profiles.store import ProfileStore

OLD = "2020-01-01T00:00:00+00:00"


def ts(value: str) -> datetime:
    return datetime.fromisoformat(value)


class TestProfileStore:
    @pytest.fixture
    def store(self, tmp_path):
        """create a store rooted in a temporary directory."""
        return ProfileStore(StoragePaths(tmp_path / "data", tmp_path / "codex"))

    def test_list_empty_when_directory_missing(self, store):
        assert store.list() == []

    def test_save_with_empty_id_assigns_id_and_timestamps(self, store):
        saved = store.save(Profile(name="t1"))
        assert saved.id
        assert saved.created_at
        assert ts(saved.updated_at) >= ts(saved.created_at)
        assert store.profile_path(saved.id).exists()

    def test_saved_record_uses_camel_case_keys(self, store):
        saved = store.save(Profile(
            name="t1",
            model_provider="p1",
            providers={"p1": ProviderConfig(base_url="http://x", api_key="sk-x")},
        ))
        data = json.loads(store.profile_path(saved.id).read_text())
        assert data["modelProvider"] == "p1"
        assert data["providers"]["p1"]["baseUrl"] == "http://x"
        assert data["providers"]["p1"]["apiKey"] == "sk-x"
        assert "createdAt" in data and "updatedAt" in data
        # unset optional fields are omitted
        assert "description" not in data
        assert "wireApi" not in data["providers"]["p1"]

    def test_resave_preserves_created_at(self, store):
        first = store.save(Profile(id="keep", name="t1", created_at=OLD))
        assert first.created_at == OLD

        again = store.save(first.model_copy(update={"created_at": "1999-01-01T00:00:00+00:00"}))
        assert again.created_at == OLD
        assert ts(again.updated_at) >= ts(first.updated_at)
        assert store.get("keep").created_at == OLD

    def test_save_new_id_without_created_at_sets_now(self, store):
        saved = store.save(Profile(id="fresh", name="t1"))
        assert saved.created_at
        assert ts(saved.created_at) > ts(OLD)

    def test_save_future_created_at_is_clamped(self, store):
        saved = store.save(Profile(id="later", name="t1", created_at="2999-01-01T00:00:00+00:00"))
        assert ts(saved.created_at) <= ts(saved.updated_at)
        assert saved.created_at == saved.updated_at
        assert store.get("later").created_at == saved.created_at

    def test_save_past_created_at_is_kept(self, store):
        saved = store.save(Profile(id="earlier", name="t1", created_at=OLD))
        assert saved.created_at == OLD

    def test_save_rejects_invalid_id(self, store):
        with pytest.raises(InvalidArgumentError):
            store.save(Profile(id="../escape", name="bad"))
        assert not (store.paths.root / "escape.json").exists()

    def test_get_missing_raises(self, store):
        with pytest.raises(ProfileNotFoundError):
            store.get("nope")

    def test_get_invalid_id_raises_before_io(self, store):
        with pytest.raises(InvalidArgumentError):
            store.get("a/b")
        with pytest.raises(InvalidArgumentError):
            store.get("")

    def test_get_corrupted_record_raises_not_found(self, store):
        store.profiles_dir.mkdir(parents=True)
        (store.profiles_dir / "broken.json").write_text("{not json")
        with pytest.raises(ProfileNotFoundError):
            store.get("broken")

    def test_list_sorted_case_insensitive_and_skips_bad_records(self, store):
        store.save(Profile(name="beta"))
        store.save(Profile(name="Alpha"))
        store.save(Profile(name="gamma"))
        (store.profiles_dir / "broken.json").write_text("[]")
        (store.profiles_dir / "notes.txt").write_text("ignored")

        names = [p.name for p in store.list()]
        assert names == ["Alpha", "beta", "gamma"]

    def test_list_skips_record_with_invalid_utf8(self, store):
        store.save(Profile(name="ok"))
        (store.profiles_dir / "garbled.json").write_bytes(b'{"name": "\xff"}')
        assert [p.name for p in store.list()] == ["ok"]

    def test_get_record_with_invalid_utf8_raises_not_found(self, store):
        store.profiles_dir.mkdir(parents=True)
        (store.profiles_dir / "garbled.json").write_bytes(b'{"name": "\xff"}')
        with pytest.raises(ProfileNotFoundError):
            store.get("garbled")

    def test_list_unreadable_directory_raises_storage_error(self, store):
        store.save(Profile(name="ok"))
        with patch.object(Path, "iterdir", side_effect=PermissionError("denied")):
            with pytest.raises(StorageError) as exc:
                store.list()
        assert isinstance(exc.value.__cause__, PermissionError)

    def test_delete_then_get_not_found(self, store):
        saved = store.save(Profile(name="t1"))
        store.delete(saved.id)
        with pytest.raises(ProfileNotFoundError):
            store.get(saved.id)

    def test_delete_missing_is_not_an_error(self, store):
        store.delete("ghost")

    def test_delete_active_clears_marker(self, store):
        saved = store.save(Profile(name="t1"))
        store.set_active_id(saved.id)
        store.delete(saved.id)
        assert store.get_active_id() is None
        assert not store.active_profile_file.exists()

    def test_delete_other_keeps_marker(self, store):
        a = store.save(Profile(name="a"))
        b = store.save(Profile(name="b"))
        store.set_active_id(a.id)
        store.delete(b.id)
        assert store.get_active_id() == a.id

    def test_duplicate(self, store):
        source = store.save(Profile(
            id="src",
            name="source",
            created_at=OLD,
            providers={"p1": ProviderConfig(model="m-1")},
            model_provider="p1",
        ))
        copy = store.duplicate("src", "copy")

        assert copy.id != source.id
        assert copy.name == "copy"
        assert copy.created_at == copy.updated_at
        assert ts(copy.created_at) > ts(source.created_at)
        assert ts(copy.updated_at) >= ts(source.updated_at)
        assert copy.providers["p1"].model == "m-1"
        assert store.get(copy.id).name == "copy"
        assert store.get("src").name == "source"

    def test_duplicate_missing_raises(self, store):
        with pytest.raises(ProfileNotFoundError):
            store.duplicate("nope", "copy")

    def test_create_default(self, store):
        profile = store.create_default()
        assert store.get(profile.id).name == "Default"
        assert profile.model_provider == "custom"
        provider = profile.providers["custom"]
        assert provider.wire_api == "responses"
        assert provider.requires_openai_auth is True
        assert provider.model == "gpt-5.2"
        assert provider.model_reasoning_effort == "high"
        assert provider.api_key == ""


class TestActiveMarker:
    @pytest.fixture
    def store(self, tmp_path):
        return ProfileStore(StoragePaths(tmp_path / "data", tmp_path / "codex"))

    def test_absent_marker_is_none(self, store):
        assert store.get_active_id() is None

    def test_blank_marker_is_none(self, store):
        store.active_profile_file.parent.mkdir(parents=True)
        store.active_profile_file.write_text("  \n")
        assert store.get_active_id() is None

    def test_set_active_writes_raw_id(self, store):
        store.set_active_id("does-not-exist")
        assert store.active_profile_file.read_text() == "does-not-exist"
        assert store.get_active_id() == "does-not-exist"

    def test_clear_active_when_missing(self, store):
        store.clear_active_id()
        assert store.get_active_id() is None


if __name__ == "__main__":
    pytest.main([__file__, "-v"])

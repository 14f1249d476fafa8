import json
import logging
import re
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

from ..config import StoragePaths
from ..domain.errors import (
    ConfigParseError,
    InvalidArgumentError,
    ProfileNotFoundError,
    StorageError,
)
from ..domain.models import Profile, ProviderConfig
from ..utils.files import atomic_write, read_text

logger = logging.getLogger(__name__)

PROFILE_SUFFIX = ".json"
_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]+$")

DEFAULT_PROVIDER_ID = "custom"
DEFAULT_MODEL = "gpt-5.2"
DEFAULT_REASONING_EFFORT = "high"


def now_rfc3339() -> str:
    return datetime.now(timezone.utc).isoformat()


def _is_after(timestamp: str, now: str) -> bool:
    # unparseable or naive timestamps are kept as given
    try:
        value = datetime.fromisoformat(timestamp)
    except ValueError:
        return False
    if value.tzinfo is None:
        return False
    return value > datetime.fromisoformat(now)


def validate_id(value: str, kind: str = "profile") -> str:
    """ids become filename stems, so only ASCII letters, digits, '-' and '_' pass."""
    if not isinstance(value, str) or not _ID_PATTERN.match(value):
        raise InvalidArgumentError(f"Invalid {kind} id '{value}'")
    return value


class ProfileStore:
    """handles profile persistence, one JSON file per profile."""

    def __init__(self, paths: StoragePaths):
        self.paths = paths

    @property
    def profiles_dir(self) -> Path:
        return self.paths.profiles_dir

    @property
    def active_profile_file(self) -> Path:
        return self.paths.active_profile_file

    def profile_path(self, profile_id: str) -> Path:
        validate_id(profile_id)
        return self.profiles_dir / f"{profile_id}{PROFILE_SUFFIX}"

    def _read(self, path: Path) -> Profile:
        data = json.loads(read_text(path))
        return Profile.model_validate(data)

    def _write(self, profile: Profile) -> None:
        path = self.profile_path(profile.id)
        atomic_write(path, json.dumps(profile.to_record(), indent=2, ensure_ascii=False) + "\n")

    def list(self) -> List[Profile]:
        """
        load every profile, sorted by name ignoring case.

        records that cannot be read or parsed are skipped.
        """
        if not self.profiles_dir.is_dir():
            return []

        try:
            entries = sorted(self.profiles_dir.iterdir())
        except OSError as e:
            raise StorageError(f"Failed to read profiles directory: {e}") from e

        profiles = []
        for path in entries:
            if path.suffix != PROFILE_SUFFIX or not path.is_file():
                continue
            try:
                profiles.append(self._read(path))
            except (StorageError, ConfigParseError, ValueError) as e:
                logger.debug("skipping unreadable profile %s: %s", path.name, e)

        profiles.sort(key=lambda p: p.name.lower())
        return profiles

    def get(self, profile_id: str) -> Profile:
        """
        load one profile.

        raises:
            InvalidArgumentError: if the id is malformed
            ProfileNotFoundError: if the record is missing or unreadable
        """
        path = self.profile_path(profile_id)
        if not path.exists():
            raise ProfileNotFoundError(profile_id)
        try:
            return self._read(path)
        except (StorageError, ConfigParseError, ValueError) as e:
            raise ProfileNotFoundError(profile_id, str(e)) from e

    def save(self, profile: Profile) -> Profile:
        """
        create or update a profile.

        an empty id gets a fresh uuid. updating an existing record keeps its
        stored creation time whatever the caller passed in. a creation time
        in the future is clamped to now so updated_at never precedes it.

        returns:
            the profile as persisted
        """
        profile = profile.model_copy(deep=True)
        now = now_rfc3339()

        if not profile.id.strip():
            profile.id = str(uuid.uuid4())
            profile.created_at = now
        elif self.profile_path(profile.id).exists():
            try:
                profile.created_at = self._read(self.profile_path(profile.id)).created_at
            except (StorageError, ConfigParseError, ValueError) as e:
                logger.debug("could not read previous %s, keeping created_at: %s", profile.id, e)

        if not profile.created_at.strip() or _is_after(profile.created_at, now):
            profile.created_at = now
        profile.updated_at = now
        self._write(profile)
        logger.info("saved profile %s (%s)", profile.id, profile.name)
        return profile

    def delete(self, profile_id: str) -> None:
        """remove a profile; clears the active marker if it pointed here."""
        path = self.profile_path(profile_id)
        if path.exists():
            try:
                path.unlink()
            except OSError as e:
                raise StorageError(f"Failed to delete profile: {e}") from e
            logger.info("deleted profile %s", profile_id)

        if self.get_active_id() == profile_id:
            self.clear_active_id()

    def duplicate(self, profile_id: str, new_name: str) -> Profile:
        """copy a profile under a fresh id and name with fresh timestamps."""
        profile = self.get(profile_id)
        profile.id = str(uuid.uuid4())
        profile.name = new_name
        profile.created_at = now_rfc3339()
        profile.updated_at = profile.created_at
        self._write(profile)
        logger.info("duplicated profile %s as %s", profile_id, profile.id)
        return profile

    def create_default(self) -> Profile:
        """persist a starter profile with a single placeholder provider."""
        now = now_rfc3339()
        provider = ProviderConfig(
            name="Custom Provider",
            wire_api="responses",
            requires_openai_auth=True,
            model=DEFAULT_MODEL,
            model_reasoning_effort=DEFAULT_REASONING_EFFORT,
            api_key="",
        )
        profile = Profile(
            id=str(uuid.uuid4()),
            name="Default",
            created_at=now,
            updated_at=now,
            providers={DEFAULT_PROVIDER_ID: provider},
            model_provider=DEFAULT_PROVIDER_ID,
            model=DEFAULT_MODEL,
            model_reasoning_effort=DEFAULT_REASONING_EFFORT,
            api_key="",
        )
        self._write(profile)
        logger.info("created default profile %s", profile.id)
        return profile

    def get_active_id(self) -> Optional[str]:
        """get the active profile id; None when the marker is absent or blank."""
        if not self.active_profile_file.exists():
            return None
        value = read_text(self.active_profile_file).strip()
        return value or None

    def set_active_id(self, profile_id: str) -> None:
        """overwrite the marker with the raw id; existence is not checked."""
        atomic_write(self.active_profile_file, profile_id)

    def clear_active_id(self) -> None:
        try:
            self.active_profile_file.unlink()
        except FileNotFoundError:
            pass
        except OSError as e:
            raise StorageError(f"Failed to clear active profile: {e}") from e

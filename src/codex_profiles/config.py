import os
from pathlib import Path
from typing import Mapping, Optional

CONFIG_DIR = Path.home() / ".codex-profiles"
CONFIG_FILE_NAME = "config"
PROFILES_DIR_NAME = "profiles"
ACTIVE_PROFILE_FILE_NAME = "active-profile.txt"

CODEX_HOME_KEY = "CODEX_HOME"
CODEX_CONFIG_FILE_NAME = "config.toml"
CODEX_AUTH_FILE_NAME = "auth.json"
CODEX_API_KEY_FIELD = "OPENAI_API_KEY"


def _read_settings(config_file: Path) -> dict:
    settings = {}
    if not config_file.exists():
        return settings
    try:
        with open(config_file, "r", encoding="utf-8") as f:
            for line in f:
                line = line.strip()
                if "=" in line:
                    key, value = line.split("=", 1)
                    settings[key] = value
    except (IOError, PermissionError, OSError):
        # unreadable settings behave like no settings
        return {}
    return settings


def _write_settings(config_file: Path, settings: dict) -> None:
    try:
        config_file.parent.mkdir(parents=True, exist_ok=True)
        with open(config_file, "w", encoding="utf-8") as f:
            for key, value in settings.items():
                f.write(f"{key}={value}\n")
    except (IOError, PermissionError, OSError) as e:
        raise RuntimeError(f"failed to write config file: {e}") from e


def get_codex_home_override(config_dir: Path = CONFIG_DIR) -> Optional[str]:
    """get the custom Codex home directory from the settings file."""
    value = _read_settings(config_dir / CONFIG_FILE_NAME).get(CODEX_HOME_KEY, "")
    return value.strip() or None


def set_codex_home_override(path: str, config_dir: Path = CONFIG_DIR) -> None:
    """set the custom Codex home directory, preserving other settings."""
    config_file = config_dir / CONFIG_FILE_NAME
    settings = _read_settings(config_file)
    settings[CODEX_HOME_KEY] = path
    _write_settings(config_file, settings)


def clear_codex_home_override(config_dir: Path = CONFIG_DIR) -> None:
    """drop the custom Codex home directory, preserving other settings."""
    config_file = config_dir / CONFIG_FILE_NAME
    settings = _read_settings(config_file)
    if settings.pop(CODEX_HOME_KEY, None) is not None:
        _write_settings(config_file, settings)


def resolve_codex_home(
    config_dir: Path = CONFIG_DIR,
    env: Optional[Mapping[str, str]] = None,
    home: Optional[Path] = None,
) -> Path:
    """
    resolve the directory holding Codex's config.toml and auth.json.

    precedence: settings file override, then the CODEX_HOME environment
    variable, then ~/.codex.
    """
    if env is None:
        env = os.environ
    override = get_codex_home_override(config_dir)
    if override:
        return Path(override).expanduser()
    from_env = (env.get(CODEX_HOME_KEY) or "").strip()
    if from_env:
        return Path(from_env).expanduser()
    return (home or Path.home()) / ".codex"


class StoragePaths:
    """on-disk locations used by the profile store and the synchronizer."""

    def __init__(self, root: Path, codex_home: Path):
        self.root = Path(root)
        self.codex_home = Path(codex_home)

    @classmethod
    def from_environment(
        cls,
        root: Path = CONFIG_DIR,
        env: Optional[Mapping[str, str]] = None,
        codex_home: Optional[Path] = None,
    ) -> "StoragePaths":
        if codex_home is None:
            codex_home = resolve_codex_home(root, env=env)
        return cls(root, Path(codex_home).expanduser())

    @property
    def profiles_dir(self) -> Path:
        return self.root / PROFILES_DIR_NAME

    @property
    def active_profile_file(self) -> Path:
        return self.root / ACTIVE_PROFILE_FILE_NAME

    @property
    def config_path(self) -> Path:
        return self.codex_home / CODEX_CONFIG_FILE_NAME

    @property
    def auth_path(self) -> Path:
        return self.codex_home / CODEX_AUTH_FILE_NAME

from pathlib import Path
from typing import Optional


class CodexProfilesError(Exception):
    """base class for exceptions in codex-profiles."""
    pass


class ProfileNotFoundError(CodexProfilesError):
    """raised when a profile record is absent or unreadable."""
    def __init__(self, profile_id: str, reason: Optional[str] = None):
        self.profile_id = profile_id
        self.reason = reason
        message = f"Profile '{profile_id}' not found"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class ProviderNotFoundError(CodexProfilesError):
    """raised when a profile has no provider with the given id."""
    def __init__(self, profile_id: str, provider_id: str):
        self.profile_id = profile_id
        self.provider_id = provider_id
        super().__init__(f"Provider '{provider_id}' not found in profile '{profile_id}'")


class InvalidArgumentError(CodexProfilesError, ValueError):
    """raised for malformed ids or documents of the wrong shape."""
    pass


class ConfigParseError(CodexProfilesError):
    """raised when a TOML or JSON document cannot be parsed."""
    def __init__(self, path: Path, detail: str):
        self.path = path
        self.detail = detail
        super().__init__(f"Failed to parse {path}: {detail}")


class StorageError(CodexProfilesError):
    """raised when a filesystem operation fails; the OS error is chained."""
    pass

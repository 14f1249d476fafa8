"""profile management for Codex CLI configuration."""
from .manager import ProfileManager
from .store import ProfileStore, validate_id
from ..domain.errors import ProfileNotFoundError, ProviderNotFoundError

__all__ = [
    "ProfileManager",
    "ProfileStore",
    "validate_id",
    "ProfileNotFoundError",
    "ProviderNotFoundError",
]

import logging
from typing import List, Optional

from ..domain.errors import InvalidArgumentError, ProfileNotFoundError, ProviderNotFoundError
from ..domain.models import Profile, ProviderConfig
from ..sync.live import LiveConfigReader
from .store import ProfileStore, validate_id

logger = logging.getLogger(__name__)


class ProfileManager:
    """editing workflow on top of the store: providers, renames, live import."""

    def __init__(self, store: ProfileStore, reader: LiveConfigReader):
        self.store = store
        self.reader = reader

    def ensure_profiles(self) -> List[Profile]:
        """list profiles, creating the default one on first run."""
        profiles = self.store.list()
        if not profiles:
            profiles = [self.store.create_default()]
        return profiles

    def create_profile(self, name: str, description: Optional[str] = None) -> Profile:
        """
        create an empty profile.

        raises:
            InvalidArgumentError: if name is blank
        """
        if not name or not name.strip():
            raise InvalidArgumentError("Profile name cannot be empty")
        return self.store.save(Profile(name=name.strip(), description=description or None))

    def rename(self, profile_id: str, name: str) -> Profile:
        profile = self.store.get(profile_id)
        profile.name = name
        return self.store.save(profile)

    def set_description(self, profile_id: str, description: Optional[str]) -> Profile:
        profile = self.store.get(profile_id)
        profile.description = description or None
        return self.store.save(profile)

    def add_provider(self, profile_id: str, provider_id: str, config: ProviderConfig) -> Profile:
        """add or replace a provider in a profile."""
        validate_id(provider_id, kind="provider")
        profile = self.store.get(profile_id)
        profile.providers[provider_id] = config
        return self.store.save(profile)

    def update_provider(self, profile_id: str, provider_id: str, config: ProviderConfig) -> Profile:
        """
        replace a provider's config.

        when the provider is the profile's default, its model, effort and
        api key are mirrored onto the profile-level fields.
        """
        validate_id(provider_id, kind="provider")
        profile = self.store.get(profile_id)
        profile.providers[provider_id] = config
        if profile.model_provider == provider_id:
            _mirror_selection(profile, config)
        return self.store.save(profile)

    def delete_provider(self, profile_id: str, provider_id: str) -> Profile:
        """
        remove a provider from a profile.

        raises:
            ProviderNotFoundError: if the profile has no such provider
        """
        profile = self.store.get(profile_id)
        if provider_id not in profile.providers:
            raise ProviderNotFoundError(profile_id, provider_id)
        del profile.providers[provider_id]
        return self.store.save(profile)

    def set_active_provider(self, profile_id: str, provider_id: str) -> Profile:
        """make provider_id the profile's default provider."""
        profile = self.store.get(profile_id)
        if provider_id not in profile.providers:
            raise ProviderNotFoundError(profile_id, provider_id)
        profile.model_provider = provider_id
        _mirror_selection(profile, profile.providers[provider_id])
        return self.store.save(profile)

    def load_from_live(self, profile_id: str) -> Profile:
        """replace a profile's providers and model selection with the live Codex config."""
        profile = self.store.get(profile_id)
        live = self.reader.read_current()
        profile.providers = live.providers
        profile.model_provider = live.model_provider
        profile.model = live.model
        profile.model_reasoning_effort = live.model_reasoning_effort
        profile.api_key = live.api_key
        logger.info("imported live config into profile %s", profile_id)
        return self.store.save(profile)

    def get_active_profile(self) -> Optional[Profile]:
        """
        get the active profile.

        a marker naming a profile that no longer exists is reported as no
        active profile; the next apply overwrites it.
        """
        active_id = self.store.get_active_id()
        if active_id is None:
            return None
        try:
            return self.store.get(active_id)
        except (ProfileNotFoundError, ValueError):
            logger.warning("active profile '%s' no longer exists", active_id)
            return None


def _mirror_selection(profile: Profile, config: ProviderConfig) -> None:
    if config.model is not None:
        profile.model = config.model
    if config.model_reasoning_effort is not None:
        profile.model_reasoning_effort = config.model_reasoning_effort
    if config.api_key is not None:
        profile.api_key = config.api_key

"""
projection of a stored profile onto Codex's live config.toml and auth.json.

only model_provider, model, model_reasoning_effort and [model_providers]
are rewritten in config.toml, and only OPENAI_API_KEY in auth.json. the
three writes (config, auth, active marker) are individually atomic but
not a transaction: both files are parsed up front, but a write failure
part way leaves the earlier writes in place.
"""
import logging
from typing import Any, Dict, Optional, Tuple

from tomlkit.toml_document import TOMLDocument

from ..codec.toml_codec import dump_document, load_document, providers_to_table
from ..config import CODEX_API_KEY_FIELD, StoragePaths
from ..domain.models import ApplyResult, Profile, ProviderConfig
from ..profiles.store import ProfileStore
from ..utils.files import atomic_write, read_json_object, write_json_object

logger = logging.getLogger(__name__)


def resolve_provider(profile: Profile) -> Tuple[str, Optional[ProviderConfig]]:
    """
    pick the provider that drives the top-level model selection.

    the profile's model_provider wins when it names a configured provider.
    otherwise the smallest provider id is used. with no providers at all,
    the raw model_provider string is returned with no config.
    """
    if profile.model_provider in profile.providers:
        return profile.model_provider, profile.providers[profile.model_provider]
    if profile.providers:
        fallback_id = min(profile.providers)
        logger.debug(
            "provider '%s' not in profile %s, falling back to '%s'",
            profile.model_provider, profile.id, fallback_id,
        )
        return fallback_id, profile.providers[fallback_id]
    return profile.model_provider, None


def resolve_selection(
    profile: Profile, provider: Optional[ProviderConfig]
) -> Tuple[str, Optional[str], Optional[str]]:
    """provider values win; the profile-level fields are the fallback."""
    model = profile.model
    effort = profile.model_reasoning_effort
    api_key = profile.api_key
    if provider is not None:
        if provider.model:
            model = provider.model
        if provider.model_reasoning_effort is not None:
            effort = provider.model_reasoning_effort
        if provider.api_key is not None:
            api_key = provider.api_key
    return model, effort, api_key


class ProfileSynchronizer:
    """writes a profile's provider/model selection into the live Codex files."""

    def __init__(self, store: ProfileStore, paths: StoragePaths):
        self.store = store
        self.paths = paths

    def apply(self, profile_id: str) -> ApplyResult:
        """
        apply a profile to config.toml and auth.json and mark it active.

        raises:
            ProfileNotFoundError: if the profile does not exist
            ConfigParseError: if an existing live file is malformed
            InvalidArgumentError: if auth.json is not a JSON object
            StorageError: if a write fails
        """
        profile = self.store.get(profile_id)
        provider_id, provider = resolve_provider(profile)
        model, effort, api_key = resolve_selection(profile, provider)

        # both live files are parsed before either is written
        document = load_document(self.paths.config_path)
        auth = read_json_object(self.paths.auth_path)

        self._merge_config(document, profile, provider_id, model, effort)
        atomic_write(self.paths.config_path, dump_document(document))
        api_key_written = self._merge_auth(auth, api_key)
        write_json_object(self.paths.auth_path, auth)
        self.store.set_active_id(profile_id)

        logger.info("applied profile %s with provider '%s'", profile_id, provider_id)
        return ApplyResult(
            profile_id=profile_id,
            model_provider=provider_id,
            model=model,
            model_reasoning_effort=effort,
            api_key_written=api_key_written,
        )

    def _merge_config(
        self,
        document: TOMLDocument,
        profile: Profile,
        provider_id: str,
        model: str,
        effort: Optional[str],
    ) -> None:
        document["model_provider"] = provider_id
        document["model"] = model
        if effort is not None:
            document["model_reasoning_effort"] = effort
        elif "model_reasoning_effort" in document:
            del document["model_reasoning_effort"]

        if "model_providers" in document:
            del document["model_providers"]
        if profile.providers:
            document["model_providers"] = providers_to_table(profile.providers)

    def _merge_auth(self, auth: Dict[str, Any], api_key: Optional[str]) -> bool:
        if api_key:
            auth[CODEX_API_KEY_FIELD] = api_key
        else:
            auth.pop(CODEX_API_KEY_FIELD, None)
        return bool(api_key)

import logging

from ..codec.toml_codec import load_document, providers_from_table
from ..config import CODEX_API_KEY_FIELD, StoragePaths
from ..domain.models import ConfigStatus, CurrentConfig
from ..utils.files import read_json_object

logger = logging.getLogger(__name__)

DEFAULT_MODEL_PROVIDER = "openai"


class LiveConfigReader:
    """read-only view of Codex's config.toml and auth.json."""

    def __init__(self, paths: StoragePaths):
        self.paths = paths

    def status(self) -> ConfigStatus:
        auth_path = self.paths.auth_path.absolute()
        config_path = self.paths.config_path.absolute()
        return ConfigStatus(
            auth_exists=auth_path.exists(),
            config_exists=config_path.exists(),
            auth_path=str(auth_path),
            config_path=str(config_path),
        )

    def read_current(self) -> CurrentConfig:
        """
        parse the live files into the profile-shaped view.

        the provider named by model_provider gets the top-level model, effort
        and the auth.json key filled in where it has none of its own, which
        mirrors what apply would have written. missing files give defaults.

        raises:
            ConfigParseError: if either file exists but is malformed
        """
        document = load_document(self.paths.config_path).unwrap()

        providers = providers_from_table(document.get("model_providers"))
        model_provider = _string(document.get("model_provider"), DEFAULT_MODEL_PROVIDER)
        model = _string(document.get("model"), "")
        effort = document.get("model_reasoning_effort")
        effort = effort if isinstance(effort, str) else None

        api_key = read_json_object(self.paths.auth_path).get(CODEX_API_KEY_FIELD)
        api_key = api_key if isinstance(api_key, str) else None

        active = providers.get(model_provider)
        if active is not None:
            if active.model is None:
                active.model = model
            if active.model_reasoning_effort is None:
                active.model_reasoning_effort = effort
            if active.api_key is None:
                active.api_key = api_key
        else:
            logger.debug("model_provider '%s' has no [model_providers] entry", model_provider)

        return CurrentConfig(
            providers=providers,
            model_provider=model_provider,
            model=model,
            model_reasoning_effort=effort,
            api_key=api_key,
        )


def _string(value, default: str) -> str:
    return value if isinstance(value, str) else default

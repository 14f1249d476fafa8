"""conversion between ProviderConfig and Codex's [model_providers.<id>] tables."""
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import tomlkit
from tomlkit.exceptions import TOMLKitError
from tomlkit.items import InlineTable, Table
from tomlkit.toml_document import TOMLDocument

from ..domain.errors import ConfigParseError
from ..domain.models import ProviderConfig
from ..utils.files import read_text

# keys of a provider table that Codex itself understands, in write order
STRING_FIELDS = ("name", "base_url", "wire_api")
ENV_FIELDS = ("env_key", "env_key_instructions")
MAP_FIELDS = ("http_headers", "query_params")


def provider_to_table(config: ProviderConfig) -> Table:
    """
    build the TOML table for one provider.

    only externally recognized fields are emitted; model, effort and
    api key stay out of the table. unset fields are omitted.
    """
    table = tomlkit.table()
    for key in STRING_FIELDS:
        value = getattr(config, key)
        if value is not None:
            table.add(key, value)
    if config.requires_openai_auth is not None:
        table.add("requires_openai_auth", config.requires_openai_auth)
    for key in ENV_FIELDS:
        value = getattr(config, key)
        if value is not None:
            table.add(key, value)
    for key in MAP_FIELDS:
        value = getattr(config, key)
        if value is not None:
            table.add(key, _inline_map(value))
    return table


def _inline_map(values: Mapping[str, str]) -> InlineTable:
    inline = tomlkit.inline_table()
    for k in sorted(values):
        inline.append(k, values[k])
    return inline


def _string_or_none(table: Mapping[str, Any], key: str) -> Optional[str]:
    value = table.get(key)
    return str(value) if isinstance(value, str) else None


def _string_map_or_none(table: Mapping[str, Any], key: str) -> Optional[Dict[str, str]]:
    value = table.get(key)
    if not isinstance(value, Mapping):
        return None
    # non-string values are dropped rather than rejected
    return {str(k): str(v) for k, v in value.items() if isinstance(v, str)}


def table_to_provider(table: Any) -> ProviderConfig:
    """
    parse one [model_providers.<id>] table.

    unknown keys and values of the wrong type are ignored; the private
    fields are always left unset.

    raises:
        ValueError: if the value is not a table
    """
    if not isinstance(table, Mapping):
        raise ValueError("Provider config must be a table")

    requires_auth = table.get("requires_openai_auth")
    return ProviderConfig(
        name=_string_or_none(table, "name"),
        base_url=_string_or_none(table, "base_url"),
        wire_api=_string_or_none(table, "wire_api"),
        requires_openai_auth=requires_auth if isinstance(requires_auth, bool) else None,
        env_key=_string_or_none(table, "env_key"),
        env_key_instructions=_string_or_none(table, "env_key_instructions"),
        http_headers=_string_map_or_none(table, "http_headers"),
        query_params=_string_map_or_none(table, "query_params"),
    )


def providers_to_table(providers: Mapping[str, ProviderConfig]) -> Table:
    """build the [model_providers] super-table, one sub-table per id in sorted order."""
    section = tomlkit.table(is_super_table=True)
    for provider_id in sorted(providers):
        section.add(provider_id, provider_to_table(providers[provider_id]))
    return section


def providers_from_table(section: Any) -> Dict[str, ProviderConfig]:
    """parse [model_providers]; entries that are not tables are skipped."""
    if not isinstance(section, Mapping):
        return {}
    providers = {}
    for provider_id, value in section.items():
        try:
            providers[str(provider_id)] = table_to_provider(value)
        except ValueError:
            continue
    return providers


def load_document(path: Path) -> TOMLDocument:
    """
    parse a TOML file, keeping comments and layout for round-tripping.

    a missing or blank file is an empty document.

    raises:
        ConfigParseError: if the file is not valid TOML
    """
    if not path.exists():
        return tomlkit.document()
    text = read_text(path)
    if not text.strip():
        return tomlkit.document()
    if not text.endswith("\n"):
        # appended keys must start on their own line
        text += "\n"
    try:
        return tomlkit.parse(text)
    except TOMLKitError as e:
        raise ConfigParseError(path, str(e)) from e


def dump_document(document: TOMLDocument) -> str:
    return tomlkit.dumps(document)

"""data models for Codex profiles and the live Codex configuration."""
from typing import Dict, Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """records are stored with camelCase keys; field names are accepted too."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        protected_namespaces=(),
    )

    def to_record(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class ProviderConfig(CamelModel):
    """one entry of [model_providers.<id>] plus fields private to this tool."""
    name: Optional[str] = None
    base_url: Optional[str] = None
    wire_api: Optional[str] = None
    requires_openai_auth: Optional[bool] = None
    env_key: Optional[str] = None
    env_key_instructions: Optional[str] = None
    http_headers: Optional[Dict[str, str]] = None
    query_params: Optional[Dict[str, str]] = None
    # never written to [model_providers]
    model: Optional[str] = None
    model_reasoning_effort: Optional[str] = None
    api_key: Optional[str] = None


class Profile(CamelModel):
    """a named bundle of providers plus the default provider pointer."""
    id: str = ""
    name: str
    description: Optional[str] = None
    created_at: str = ""  # RFC 3339
    updated_at: str = ""  # RFC 3339
    providers: Dict[str, ProviderConfig] = Field(default_factory=dict)
    model_provider: str = ""
    model: str = ""
    model_reasoning_effort: Optional[str] = None
    api_key: Optional[str] = None


class ConfigStatus(CamelModel):
    auth_exists: bool
    config_exists: bool
    auth_path: str
    config_path: str


class CurrentConfig(CamelModel):
    """provider-centric view of what Codex is currently configured with."""
    providers: Dict[str, ProviderConfig] = Field(default_factory=dict)
    model_provider: str = "openai"
    model: str = ""
    model_reasoning_effort: Optional[str] = None
    api_key: Optional[str] = None


class ApplyResult(CamelModel):
    """outcome of projecting a profile onto the live Codex files."""
    profile_id: str
    model_provider: str
    model: str
    model_reasoning_effort: Optional[str] = None
    api_key_written: bool = False

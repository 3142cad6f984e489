"""Action configuration using Pydantic settings."""

from __future__ import annotations

import json
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Dict, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from workflow_dispatch.core.errors import ConfigurationError
from workflow_dispatch.schemas.workflow import DispatchRequest


class ActionSettings(BaseSettings):
    """Action inputs and runner context loaded from environment variables.

    The runner exposes step inputs as ``INPUT_<NAME>`` and the invoking run
    as ``GITHUB_*`` variables; tool-specific knobs use the
    ``WORKFLOW_DISPATCH_`` prefix.
    """

    model_config = SettingsConfigDict(
        env_prefix="WORKFLOW_DISPATCH_",
        extra="ignore",
        populate_by_name=True,
    )

    workflow: Optional[str] = Field(default=None, validation_alias="INPUT_WORKFLOW")
    token: Optional[str] = Field(default=None, validation_alias="INPUT_TOKEN", repr=False)
    ref: Optional[str] = Field(default=None, validation_alias="INPUT_REF")
    repo: Optional[str] = Field(default=None, validation_alias="INPUT_REPO")
    inputs: Optional[str] = Field(default=None, validation_alias="INPUT_INPUTS")

    github_ref: Optional[str] = Field(default=None, validation_alias="GITHUB_REF")
    github_repository: Optional[str] = Field(default=None, validation_alias="GITHUB_REPOSITORY")
    github_api_url: str = Field(default="https://api.github.com", validation_alias="GITHUB_API_URL")
    github_output: Optional[str] = Field(default=None, validation_alias="GITHUB_OUTPUT")
    runner_debug: bool = Field(default=False, validation_alias="RUNNER_DEBUG")
    actions_step_debug: bool = Field(default=False, validation_alias="ACTIONS_STEP_DEBUG")

    log_level: str = Field(default="INFO")
    log_json: bool = Field(default=False)
    http_timeout: float = Field(default=30.0)

    @property
    def debug(self) -> bool:
        return self.runner_debug or self.actions_step_debug

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, value: str) -> str:
        return value.upper()

    @field_validator("github_api_url")
    @classmethod
    def strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @field_validator(
        "workflow",
        "token",
        "ref",
        "repo",
        "inputs",
        "github_ref",
        "github_repository",
        "github_output",
        mode="before",
    )
    @classmethod
    def empty_string_to_none(cls, value: str | None) -> str | None:
        if isinstance(value, str) and value.strip() == "":
            return None
        return value

    @field_validator("runner_debug", "actions_step_debug", "log_json", mode="before")
    @classmethod
    def empty_string_to_false(cls, value: Any) -> Any:
        if value in (None, ""):
            return False
        return value


@lru_cache
def get_settings() -> ActionSettings:
    """Return cached action settings instance."""

    return ActionSettings()


@dataclass(frozen=True)
class InvocationContext:
    """Defaults taken from the run that invoked the action."""

    ref: Optional[str]
    repository: Optional[str]


def get_invocation_context(settings: Optional[ActionSettings] = None) -> InvocationContext:
    settings = settings or get_settings()
    return InvocationContext(ref=settings.github_ref, repository=settings.github_repository)


@dataclass(frozen=True)
class DispatchConfig:
    """Fully resolved parameters for one dispatch invocation."""

    workflow_ref: str
    owner: str
    repo: str
    request: DispatchRequest
    debug: bool = False

    @property
    def ref(self) -> str:
        return self.request.ref


def parse_inputs(raw: Optional[str]) -> Dict[str, str]:
    """Decode the structured ``inputs`` value into a flat string mapping.

    The value must be a JSON object whose values are scalars. Booleans are
    rendered the way JSON spells them so ``true`` stays ``"true"``.
    """

    if raw is None:
        return {}
    try:
        decoded = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"Input 'inputs' is not valid JSON: {exc}") from exc

    if not isinstance(decoded, dict):
        raise ConfigurationError("Input 'inputs' must be a JSON object of key/value pairs")

    normalized: Dict[str, str] = {}
    for key, value in decoded.items():
        if isinstance(value, (dict, list)):
            raise ConfigurationError(f"Input 'inputs' has a non-scalar value for key '{key}'")
        if value is None:
            normalized[key] = ""
        elif isinstance(value, str):
            normalized[key] = value
        else:
            normalized[key] = json.dumps(value)
    return normalized


def split_repository(repository: str) -> tuple[str, str]:
    parts = repository.split("/")
    if len(parts) != 2 or not all(part.strip() for part in parts):
        raise ConfigurationError(f"Repository '{repository}' must be in the form owner/repo")
    return parts[0].strip(), parts[1].strip()


def resolve_dispatch_config(
    settings: ActionSettings,
    context: Optional[InvocationContext] = None,
) -> DispatchConfig:
    """Combine explicit inputs with the invocation context.

    Raises ConfigurationError before any network call is attempted.
    """

    context = context or get_invocation_context(settings)

    if not settings.workflow:
        raise ConfigurationError("Input required and not supplied: workflow")
    if not settings.token:
        raise ConfigurationError("Input required and not supplied: token")

    inputs = parse_inputs(settings.inputs)

    ref = settings.ref or context.ref
    if not ref:
        raise ConfigurationError("No ref supplied and no default ref available from the invoking run")

    repository = settings.repo or context.repository
    if not repository:
        raise ConfigurationError("No repo supplied and no default repository available from the invoking run")
    owner, repo = split_repository(repository)

    return DispatchConfig(
        workflow_ref=settings.workflow,
        owner=owner,
        repo=repo,
        request=DispatchRequest(ref=ref, inputs=inputs),
        debug=settings.debug,
    )

"""
Configuration for a buf-breaking run.

Action inputs arrive as ``INPUT_<NAME>`` environment variables (the GitHub
Actions convention) and are read with pydantic-settings. Runner context
(``RUNNER_TEMP``, ``GITHUB_OUTPUT``, ...) is read from unprefixed variables.

Configuration sources (in order of precedence):
1. Explicit overrides (CLI flags)
2. Environment variables
3. Default values

Example:
    from buf_breaking.config import load_config

    config = load_config(since="v1")
    config.validate()
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from buf_breaking.errors import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_GITHUB_API_URL = "https://api.github.com"


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


class ActionInputs(BaseSettings):
    """Inputs declared in action.yml."""

    model_config = SettingsConfigDict(
        env_prefix="INPUT_",
        case_sensitive=False,
        extra="ignore",
    )

    input: Optional[str] = Field(default=None, description="Current schema reference")
    against: Optional[str] = Field(default=None, description="Baseline schema reference")
    since: Optional[str] = Field(
        default=None,
        description="Older baseline; only changes not already breaking against it are reported",
    )
    buf_token: Optional[str] = Field(default=None, description="BSR token")
    buf_input_https_username: Optional[str] = Field(default=None)
    buf_input_https_password: Optional[str] = Field(default=None)
    github_token: Optional[str] = Field(default=None, description="Token for pull request comments")
    comment: bool = Field(default=False, description="Post findings as pull request comments")
    buf_path: Optional[str] = Field(default=None, description="Explicit path to the buf binary")

    @field_validator(
        "input",
        "against",
        "since",
        "buf_token",
        "buf_input_https_username",
        "buf_input_https_password",
        "github_token",
        "buf_path",
        mode="before",
    )
    @classmethod
    def _strip_blank(cls, value: Any) -> Any:
        return _blank_to_none(value)

    @field_validator("comment", mode="before")
    @classmethod
    def _blank_comment(cls, value: Any) -> Any:
        if value is None or (isinstance(value, str) and not value.strip()):
            return False
        return value


class RunnerContext(BaseSettings):
    """Values the Actions runner exposes to every step."""

    model_config = SettingsConfigDict(case_sensitive=False, extra="ignore")

    runner_temp: Optional[str] = None
    github_output: Optional[str] = None
    github_event_path: Optional[str] = None
    github_repository: Optional[str] = None
    github_api_url: str = DEFAULT_GITHUB_API_URL

    @field_validator(
        "runner_temp",
        "github_output",
        "github_event_path",
        "github_repository",
        mode="before",
    )
    @classmethod
    def _strip_blank(cls, value: Any) -> Any:
        return _blank_to_none(value)

    def load_event(self) -> Dict[str, Any]:
        """Webhook payload of the triggering event, ``{}`` when unavailable."""
        if not self.github_event_path:
            return {}
        try:
            with open(self.github_event_path, "r", encoding="utf-8") as f:
                payload = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.debug("Could not read event payload %s: %s", self.github_event_path, e)
            return {}
        return payload if isinstance(payload, dict) else {}

    def pull_request_number(self) -> Optional[int]:
        number = (self.load_event().get("pull_request") or {}).get("number")
        return number if isinstance(number, int) else None

    def pull_request_head_sha(self) -> Optional[str]:
        head = (self.load_event().get("pull_request") or {}).get("head") or {}
        sha = head.get("sha")
        return sha if isinstance(sha, str) and sha else None


@dataclass(frozen=True)
class ActionConfig:
    """Everything one run needs to know."""
    inputs: ActionInputs
    runner: RunnerContext

    @property
    def incremental(self) -> bool:
        return self.inputs.since is not None

    def validate(self) -> None:
        """
        Check required inputs before anything is executed.

        Raises:
            ConfigurationError: Naming the first offending field
        """
        inputs = self.inputs
        if inputs.input is None:
            raise ConfigurationError("an input was not provided")
        if inputs.against is None:
            raise ConfigurationError("an against was not provided")
        if inputs.buf_input_https_username and not inputs.buf_input_https_password:
            raise ConfigurationError(
                "buf_input_https_password was not provided (required with buf_input_https_username)"
            )
        if inputs.buf_input_https_password and not inputs.buf_input_https_username:
            raise ConfigurationError(
                "buf_input_https_username was not provided (required with buf_input_https_password)"
            )
        if inputs.buf_token and not self.runner.runner_temp:
            raise ConfigurationError("expected RUNNER_TEMP to be defined")


def load_config(**overrides: Any) -> ActionConfig:
    """Build an :class:`ActionConfig` from the environment plus non-``None`` overrides.

    Raises:
        ConfigurationError: If a value cannot be parsed (e.g. a non-boolean ``comment``)
    """
    explicit = {key: value for key, value in overrides.items() if value is not None}
    try:
        return ActionConfig(inputs=ActionInputs(**explicit), runner=RunnerContext())
    except ValidationError as e:
        raise ConfigurationError(f"invalid configuration: {e}")

"""
Configuration for Asana CLI Tree.

Settings are read from a YAML file (``~/.asana-cli-tree.yml`` by default)
and can be overridden per key with ``ASANA_TREE_*`` environment variables:

    access_token: "1/1234:abcd"
    workspace_id: "1200000000000001"
    has_subtask_tag: "1200000000000099"
    dump_path: "~/.asana-cli-tree.json"
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field, SecretStr, ValidationError
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from asana_tree.constants import CONFIG_PATH, DEFAULT_BASE_URL, DEFAULT_TIMEOUT, ENV_PREFIX
from asana_tree.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Runtime configuration."""

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        extra="ignore",
        frozen=True,
        coerce_numbers_to_str=True,
    )

    access_token: SecretStr = Field(..., description="Asana personal access token")
    workspace_id: str = Field(..., min_length=1, description="Workspace to read")
    has_subtask_tag: str = Field(
        ...,
        min_length=1,
        description="Tag marking the tasks whose subtasks are fetched",
    )
    dump_path: Path = Field(..., description="Snapshot cache file")
    base_url: str = DEFAULT_BASE_URL
    timeout: float = Field(default=DEFAULT_TIMEOUT, gt=0)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # File values arrive as init kwargs; the environment overrides them.
        return (env_settings, init_settings)

    @property
    def cache_path(self) -> Path:
        return self.dump_path.expanduser()


def resolve_config_path(config_path: str | os.PathLike[str] | None = None) -> Path:
    """Pick the config file: explicit path, then $ASANA_TREE_CONFIG, then the default."""
    chosen = config_path or os.environ.get(f"{ENV_PREFIX}CONFIG") or CONFIG_PATH
    return Path(chosen).expanduser()


def read_config_file(path: Path) -> dict[str, Any]:
    """Read the YAML config file. A missing file counts as empty."""
    if not path.is_file():
        logger.debug("No config file at %s", path)
        return {}

    try:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Cannot parse config file {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file {path} must contain a mapping of keys")
    return data


def get_settings(config_path: str | os.PathLike[str] | None = None) -> Settings:
    """
    Load settings from the config file and the environment.

    Raises:
        ConfigurationError: If the file is unreadable or required keys are missing
    """
    path = resolve_config_path(config_path)
    data = read_config_file(path)

    try:
        return Settings(**data)
    except ValidationError as e:
        problems = ", ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        raise ConfigurationError(f"Invalid configuration in {path}: {problems}") from e

"""Configuration management for gql-qla."""

import logging
import os
import tempfile
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml

from .core.errors import ConfigError
from .core.query_builder import DEFAULT_MAX_DEPTH

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "~/.gql-qla/config.yaml"


@dataclass
class Header:
    """A request header that can be switched off without deleting it."""

    key: str
    value: str
    enabled: bool = True


@dataclass
class Environment:
    """A named endpoint (dev, staging, prod...)."""

    name: str
    endpoint: str = ""
    headers: list[Header] = field(default_factory=list)
    variables: str = ""


@dataclass
class Config:
    """Configuration for gql-qla."""

    active_env: str = ""
    environments: list[Environment] = field(default_factory=list)
    global_headers: list[Header] = field(default_factory=list)
    max_depth: int = DEFAULT_MAX_DEPTH
    timeout: float = 30.0
    schema_file: Optional[str] = None

    def active_environment(self) -> Optional[Environment]:
        """Return the active environment, or None if none is selected."""
        if not self.active_env:
            return None
        for env in self.environments:
            if env.name == self.active_env:
                return env
        return None

    def merged_headers(self) -> dict[str, str]:
        """Enabled global headers, overridden by the active environment's."""
        result = {h.key: h.value for h in self.global_headers if h.enabled}
        env = self.active_environment()
        if env is not None:
            result.update({h.key: h.value for h in env.headers if h.enabled})
        return result

    def env_names(self) -> list[str]:
        return [env.name for env in self.environments]


def get_default_config_path() -> str:
    """Get default config file path."""
    return os.path.expanduser(DEFAULT_CONFIG_PATH)


def _headers(items: Any) -> list[Header]:
    return [
        Header(
            key=str(item["key"]),
            value=str(item.get("value", "")),
            enabled=bool(item.get("enabled", True)),
        )
        for item in items or []
    ]


def from_dict(data: dict[str, Any]) -> Config:
    """Build a Config from parsed YAML, with defaults for missing values."""
    try:
        environments = [
            Environment(
                name=str(env["name"]),
                endpoint=env.get("endpoint", ""),
                headers=_headers(env.get("headers")),
                variables=env.get("variables", ""),
            )
            for env in data.get("environments") or []
        ]
        return Config(
            active_env=data.get("active_env", ""),
            environments=environments,
            global_headers=_headers(data.get("global_headers")),
            max_depth=int(data.get("max_depth", DEFAULT_MAX_DEPTH)),
            timeout=float(data.get("timeout", 30.0)),
            schema_file=data.get("schema_file"),
        )
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        raise ConfigError(f"Invalid configuration: {e}") from e


def load(config_path: Optional[str] = None) -> Config:
    """
    Load configuration from YAML file.

    Args:
        config_path: Path to config file. If None, uses default location.

    Returns:
        Config object with defaults for missing values.

    Raises:
        ConfigError: If the file is not valid YAML or has the wrong shape
    """
    if config_path is None:
        config_path = get_default_config_path()

    # Return defaults if config doesn't exist
    if not os.path.exists(config_path):
        logger.debug("No config at %s, using defaults", config_path)
        return Config()

    try:
        with open(config_path) as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Invalid configuration in {config_path}: expected a mapping")
    return from_dict(data)


def save(config: Config, config_path: Optional[str] = None) -> None:
    """Write the config as YAML, atomically (temp file then rename)."""
    if config_path is None:
        config_path = get_default_config_path()

    directory = Path(config_path).parent
    directory.mkdir(parents=True, exist_ok=True)

    fd, tmp_path = tempfile.mkstemp(dir=directory, suffix=".tmp")
    try:
        with os.fdopen(fd, "w") as f:
            yaml.safe_dump(asdict(config), f, default_flow_style=False, sort_keys=False)
        os.replace(tmp_path, config_path)
    except BaseException:
        os.unlink(tmp_path)
        raise

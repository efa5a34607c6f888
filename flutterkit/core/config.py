"""
Installer configuration.

Settings are resolved in layers, later layers winning:
    1. Built-in defaults
    2. YAML configuration file (flutterkit.yaml)
    3. Agent variables (AGENT_TOOLSDIRECTORY, AGENT_TEMPDIRECTORY)
    4. Explicit overrides (command-line flags)

Example flutterkit.yaml:

    cache_dir: /opt/hostedtoolcache
    temp_dir: /tmp/flutterkit
    releases_url: https://storage.googleapis.com/flutter_infra/releases/releases_{arch}.json
    timeout: 60
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from flutterkit.core.directory import get_default_cache_root, get_default_temp_root
from flutterkit.core.exceptions import ConfigError
from flutterkit.core.platform import SUPPORTED_ARCHITECTURES

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "flutterkit.yaml"
RELEASES_URL_TEMPLATE = (
    "https://storage.googleapis.com/flutter_infra/releases/releases_{arch}.json"
)
FLUTTER_TOOL_NAME = "Flutter"

# Agent variables as exposed in the environment
AGENT_TOOLS_DIRECTORY = "AGENT_TOOLSDIRECTORY"
AGENT_TEMP_DIRECTORY = "AGENT_TEMPDIRECTORY"

_FILE_KEYS = {"cache_dir", "temp_dir", "releases_url", "timeout", "arch"}


@dataclass(frozen=True)
class InstallerConfig:
    """Everything the installer needs from its surroundings."""

    cache_root: Path = field(default_factory=get_default_cache_root)
    temp_root: Path = field(default_factory=get_default_temp_root)
    releases_url: str = RELEASES_URL_TEMPLATE
    timeout: int = 30
    tool_name: str = FLUTTER_TOOL_NAME
    arch: Optional[str] = None

    def __post_init__(self):
        if self.arch is not None and self.arch not in SUPPORTED_ARCHITECTURES:
            raise ConfigError(
                f"Unsupported architecture '{self.arch}'. "
                f"Expected one of: {', '.join(SUPPORTED_ARCHITECTURES)}"
            )
        if "{arch}" not in self.releases_url:
            raise ConfigError(
                f"releases_url must contain an '{{arch}}' placeholder: {self.releases_url}"
            )


def load_yaml_config(config_file: Path, required: bool = False) -> Dict[str, Any]:
    """
    Load and parse a YAML configuration file.

    Args:
        config_file: Path to YAML configuration file
        required: If True, raise error if file doesn't exist

    Returns:
        Configuration dictionary (empty dict if file doesn't exist and not required)

    Raises:
        ConfigError: If the file is required and missing, or is not valid YAML
    """
    config_file = Path(config_file)
    if not config_file.exists():
        if required:
            raise ConfigError(f"Configuration file not found: {config_file}")
        logger.debug(f"Config file not found (optional): {config_file}")
        return {}

    logger.debug(f"Loading configuration from {config_file}")

    try:
        with open(config_file, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f)
    except (yaml.YAMLError, OSError) as e:
        raise ConfigError(f"Invalid configuration in {config_file}: {e}") from e

    config = config or {}
    if not isinstance(config, dict):
        raise ConfigError(f"Configuration in {config_file} must be a mapping")

    for key in sorted(set(config) - _FILE_KEYS):
        logger.debug(f"Ignoring unknown configuration key '{key}'")

    return config


def load_config(
    config_file: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
    **overrides: Any,
) -> InstallerConfig:
    """
    Build an InstallerConfig from all configuration layers.

    Args:
        config_file: Explicit configuration file (required to exist when given).
            If None, ./flutterkit.yaml is used when present.
        environ: Environment to read agent variables from (default: os.environ)
        **overrides: Explicit values (cache_root, temp_root, releases_url,
            timeout, arch); None values are ignored

    Returns:
        Resolved InstallerConfig

    Raises:
        ConfigError: If any layer holds an invalid value
    """
    if environ is None:
        environ = os.environ

    if config_file is not None:
        data = load_yaml_config(config_file, required=True)
    else:
        data = load_yaml_config(Path.cwd() / DEFAULT_CONFIG_FILE)

    values: Dict[str, Any] = {}
    if data.get("cache_dir"):
        values["cache_root"] = Path(data["cache_dir"]).expanduser()
    if data.get("temp_dir"):
        values["temp_root"] = Path(data["temp_dir"]).expanduser()
    if data.get("releases_url"):
        values["releases_url"] = str(data["releases_url"])
    if data.get("timeout") is not None:
        try:
            values["timeout"] = int(data["timeout"])
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Invalid timeout: {data['timeout']!r}") from e
    if data.get("arch"):
        values["arch"] = str(data["arch"])

    if environ.get(AGENT_TOOLS_DIRECTORY):
        values["cache_root"] = Path(environ[AGENT_TOOLS_DIRECTORY])
    if environ.get(AGENT_TEMP_DIRECTORY):
        values["temp_root"] = Path(environ[AGENT_TEMP_DIRECTORY])

    for key, value in overrides.items():
        if value is not None:
            values[key] = value

    config = InstallerConfig(**values)
    logger.debug(
        f"Configuration: cache_root={config.cache_root}, "
        f"temp_root={config.temp_root}, releases_url={config.releases_url}"
    )
    return config


__all__ = [
    "DEFAULT_CONFIG_FILE",
    "RELEASES_URL_TEMPLATE",
    "FLUTTER_TOOL_NAME",
    "InstallerConfig",
    "load_yaml_config",
    "load_config",
]

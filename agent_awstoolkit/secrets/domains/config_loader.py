"""Configuration loader for Agent-AWStoolkit.

The config file is optional. Without one, every setting takes its default.
"""
import os
import copy
import logging
from pathlib import Path
from typing import Dict, Any, Optional
import yaml

from .aws_client import BACKENDS
from .errors import ConfigError
from .models import DEFAULT_REGION
from .preferences import get_preference

logger = logging.getLogger(__name__)

REGION_ENV_VAR = "AWS_TOOLKIT_REGION"
EXIT_CODE_MODES = ("single", "distinct")

DEFAULT_CONFIG: Dict[str, Any] = {
    "aws": {
        "region": DEFAULT_REGION,
        "profile": None,
    },
    "backend": "sdk",
    "exit_codes": "single",
}


def default_config_path() -> Path:
    """Default XDG location of the config file."""
    return Path.home() / ".config" / "agent-awstoolkit" / "config.yml"


def _get_config_path() -> Optional[str]:
    """
    Get config file path using XDG Base Directory standard.

    Priority order:
    1. User preference (stored in ~/.config/agent-awstoolkit/preferences.json)
    2. Default location: ~/.config/agent-awstoolkit/config.yml

    Returns:
        Absolute path to config file, or None if neither location has one
    """
    config_path_pref = get_preference("config_path")
    if config_path_pref:
        config_path = Path(config_path_pref)
        if config_path.exists():
            logger.debug(f"Using config from preference: {config_path}")
            return str(config_path)
        logger.warning(f"Config path from preference doesn't exist: {config_path}")

    default_config = default_config_path()
    if default_config.exists():
        logger.debug(f"Using default config location: {default_config}")
        return str(default_config)

    return None


def _validate(config: Dict[str, Any], config_path: str) -> None:
    aws = config["aws"]
    region = aws.get("region")
    if not isinstance(region, str) or not region.strip():
        raise ConfigError(f"'aws.region' in config at {config_path} must be a non-empty string")

    profile = aws.get("profile")
    if profile is not None and not isinstance(profile, str):
        raise ConfigError(f"'aws.profile' in config at {config_path} must be a string")

    if config["backend"] not in BACKENDS:
        raise ConfigError(
            f"Unsupported backend: {config['backend']}\n"
            f"Supported backends: {', '.join(BACKENDS)}"
        )

    if config["exit_codes"] not in EXIT_CODE_MODES:
        raise ConfigError(
            f"Unsupported exit_codes mode: {config['exit_codes']}\n"
            f"Supported modes: {', '.join(EXIT_CODE_MODES)}"
        )


def load_config() -> Dict[str, Any]:
    """
    Load and validate configuration, merged over the defaults.

    Returns:
        Dict containing configuration with keys:
        - aws: dict with region and profile
        - backend: "sdk" or "cli"
        - exit_codes: "single" or "distinct"

    Raises:
        ConfigError: If the config file cannot be read, is not valid YAML, or has invalid values
    """
    config = copy.deepcopy(DEFAULT_CONFIG)

    # Get config path dynamically each time (not cached at module level)
    config_path = _get_config_path()

    if config_path:
        try:
            with open(config_path, 'r') as f:
                loaded = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Failed to parse YAML config at {config_path}: {e}")
        except OSError as e:
            raise ConfigError(f"Failed to read config file at {config_path}: {e}")

        if loaded is not None:
            if not isinstance(loaded, dict):
                raise ConfigError(f"Config file at {config_path} must contain a mapping")
            aws_section = loaded.pop("aws", None)
            if aws_section is not None:
                if not isinstance(aws_section, dict):
                    raise ConfigError(f"'aws' section in config at {config_path} must be a mapping")
                config["aws"].update(aws_section)
            config.update(loaded)

        _validate(config, config_path)
        logger.debug(f"Configuration loaded successfully from {config_path}")

    env_region = os.getenv(REGION_ENV_VAR)
    if env_region:
        logger.debug(f"Using {REGION_ENV_VAR} from environment: {env_region}")
        config["aws"]["region"] = env_region

    return config

"""Configuration loading: defaults, then ``config.json``, then environment."""
import json
import os
from typing import Any, Dict, Optional

DEFAULT_CONFIG: Dict[str, Any] = {
    'api_base_url': 'https://pokeapi.co/api/v2/',
    'catalog_limit': 151,
    'request_timeout': 10.0,
    'incorrect_answer_seconds': 2.0,
    'log_level': 'WARNING',
}

# config key -> converter, applied to file and environment values alike
CONVERTERS = {
    'api_base_url': str,
    'catalog_limit': int,
    'request_timeout': float,
    'incorrect_answer_seconds': float,
    'log_level': str,
}

# env var -> config key
ENV_OVERRIDES = {
    'POKEDEX_API_BASE_URL': 'api_base_url',
    'POKEDEX_CATALOG_LIMIT': 'catalog_limit',
    'POKEDEX_REQUEST_TIMEOUT': 'request_timeout',
    'POKEDEX_INCORRECT_ANSWER_SECONDS': 'incorrect_answer_seconds',
    'POKEDEX_LOG_LEVEL': 'log_level',
}


class ConfigError(Exception):
    """Raised for an unreadable config file or an invalid override."""


def _convert(key: str, value: Any, source: str) -> Any:
    if value is None or isinstance(value, (bool, dict, list)):
        raise ConfigError(f"Invalid value for {source}: {value!r}")
    try:
        return CONVERTERS[key](value)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid value for {source}: {value!r}") from e


def load_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    """Load configuration with environment variable support.

    A missing file is not an error since every key has a default.
    Environment variables take precedence over file values.

    Raises:
        ConfigError: If the file cannot be read, is not valid JSON or a
            value has the wrong type.
    """
    config = dict(DEFAULT_CONFIG)

    if config_path and os.path.exists(config_path):
        try:
            with open(config_path, 'r') as f:
                saved = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Error parsing config file '{config_path}': {e}") from e
        except OSError as e:
            raise ConfigError(f"Cannot read config file '{config_path}': {e}") from e
        if not isinstance(saved, dict):
            raise ConfigError(f"Config file '{config_path}' must contain a JSON object")
        for key, value in saved.items():
            if key in DEFAULT_CONFIG:
                config[key] = _convert(key, value, f"'{key}' in {config_path}")

    for env_name, key in ENV_OVERRIDES.items():
        raw = os.getenv(env_name)
        if raw:
            config[key] = _convert(key, raw, env_name)

    if config['catalog_limit'] <= 0:
        raise ConfigError("catalog_limit must be a positive integer")
    if config['request_timeout'] <= 0:
        raise ConfigError("request_timeout must be positive")
    if config['incorrect_answer_seconds'] < 0:
        raise ConfigError("incorrect_answer_seconds must not be negative")
    return config

"""
Configuration loading module for the PS2 → PSP converter.

Handles loading settings from a YAML file, merging with defaults,
resolving the Perplexity API key, and building the immutable
PipelineConfig used for a single run.
"""
import copy
import yaml
import os
from dataclasses import dataclass
from pathlib import Path
from dotenv import load_dotenv, find_dotenv
import logging
from typing import Dict, Any, Optional

from .exceptions import ConfigError, ConfigNotFoundError, ConfigParsingError

# Get logger for this module
logger = logging.getLogger(__name__)

#: Packaged configuration file, used when no explicit path is given.
DEFAULT_CONFIG_PATH = os.path.join(os.path.dirname(__file__), 'config', 'config.yaml')

#: Environment variable checked for the API key when the config names none.
DEFAULT_API_KEY_ENV = 'PERPLEXITY_API_KEY'

#: Default configuration values.
DEFAULT_CONFIG: Dict[str, Dict[str, Any]] = {
    'api': {
        'key': DEFAULT_API_KEY_ENV,  # Name of the env var holding the key
        'base_url': 'https://api.perplexity.ai',
        'model_name': 'sonar-reasoning-pro',
        'readiness_max_tokens': 5,
        'readiness_timeout_sec': 15,
        'plan_max_tokens': 4000,
        'plan_timeout_sec': 60,
    },
    'scan': {
        'max_entries': 200,
    },
    'output': {
        'default_folder': 'output',
        'readme_name': 'README.psp.md',
        'summary_name': 'conversion-summary.txt',
        'stub_name': 'main.c',
    },
    'logging': {
        'level': 'INFO',
        'log_file': None,
        'log_to_console': True,
    },
}


@dataclass(frozen=True)
class PipelineConfig:
    """Validated-once input for a single pipeline run.

    Attributes:
        source_root: Absolute path of the extracted PS2 game folder.
        output_root: Absolute path where the PSP skeleton is generated.
        api_key: Perplexity API key (may be empty until validated).
    """
    source_root: Path
    output_root: Path
    api_key: str


def resolve_api_key(cli_value: Optional[str], key_setting: Optional[str],
                    default_env_var: str = DEFAULT_API_KEY_ENV) -> str:
    """
    Resolves the API key, giving the command line priority over the environment.

    Resolution logic:
    1. A non-empty value passed on the command line wins.
    2. Otherwise key_setting is treated as the name of an environment variable.
    3. If that variable is unset, default_env_var is checked.

    Returns:
        The resolved key, or an empty string if nothing was found.
    """
    if cli_value:
        return cli_value

    env_var_name = key_setting if key_setting else default_env_var
    api_key = os.getenv(env_var_name)

    if not api_key and env_var_name != default_env_var:
        # Custom env var not set, try the default as a fallback
        api_key = os.getenv(default_env_var)

    return api_key or ""


def load_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    """
    Loads configuration from a YAML file and merges it over the defaults.

    Args:
        config_path: Path to a YAML configuration file. When omitted, the
                     packaged `config/config.yaml` is used if present.

    Returns:
        A dictionary containing the loaded and processed configuration.

    Raises:
        ConfigNotFoundError: If an explicitly given config file does not exist.
        ConfigParsingError: If the config file cannot be parsed.
        ConfigError: For other configuration-related issues.
    """
    # Pick up PERPLEXITY_API_KEY from a .env next to where the tool is run
    load_dotenv(find_dotenv(usecwd=True))

    config = copy.deepcopy(DEFAULT_CONFIG)

    explicit = config_path is not None
    abs_config_path = os.path.abspath(config_path) if explicit else DEFAULT_CONFIG_PATH

    if not os.path.exists(abs_config_path):
        if explicit:
            raise ConfigNotFoundError(f"Configuration file not found: {abs_config_path}")
        logger.warning(f"Configuration file '{abs_config_path}' not found. Using default settings.")
    else:
        try:
            with open(abs_config_path, 'r', encoding='utf-8') as f:
                user_config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigParsingError(f"Error parsing configuration file '{abs_config_path}': {e}") from e
        except OSError as e:
            raise ConfigError(f"Error reading configuration file '{abs_config_path}': {e}") from e

        if user_config:
            if not isinstance(user_config, dict):
                raise ConfigParsingError(
                    f"Configuration file '{abs_config_path}' must contain a mapping at the top level."
                )
            # Section-level merge of user config into defaults
            for section, settings in user_config.items():
                if section in config:
                    if not isinstance(settings, dict):
                        raise ConfigParsingError(
                            f"Section '{section}' in '{abs_config_path}' must be a mapping, "
                            f"got {type(settings).__name__}."
                        )
                    config[section].update(settings)
                else:
                    config[section] = settings
        logger.debug(f"Loaded configuration from {abs_config_path}")

    log_file = config['logging'].get('log_file')
    if log_file:
        config['logging']['log_file'] = os.path.abspath(log_file)

    return config


def build_pipeline_config(source_folder: str, output_folder: Optional[str],
                          cli_api_key: Optional[str], config: Dict[str, Any]) -> PipelineConfig:
    """Builds the PipelineConfig from CLI input, resolving paths and the API key."""
    output_folder = output_folder or config.get('output', {}).get('default_folder', 'output')
    api_key = resolve_api_key(cli_api_key, config.get('api', {}).get('key'))
    if api_key:
        logger.info("Perplexity API key resolved successfully.")
    else:
        logger.warning("Perplexity API key could not be resolved.")
    return PipelineConfig(
        source_root=Path(source_folder).expanduser().resolve(),
        output_root=Path(output_folder).expanduser().resolve(),
        api_key=api_key,
    )

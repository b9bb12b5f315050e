"""
YAML configuration loading with environment variable overrides.

The service reads its default valuation assumptions from a YAML file. Each
top-level key can be overridden with ``<PREFIX><KEY>`` in the environment,
e.g. ``ASSUMPTIONS_DISCOUNT_RATE=0.09``.
"""
import os
import yaml
from pathlib import Path
from typing import Any, Dict, Optional, Type, TypeVar
from functools import lru_cache
from pydantic import BaseModel, ValidationError

from shared.configs.models import Assumptions

T = TypeVar('T', bound=BaseModel)

DEFAULT_CONFIG_DIR = Path(__file__).resolve().parent.parent.parent / "config"
ASSUMPTIONS_ENV_PREFIX = "ASSUMPTIONS_"


class ConfigurationError(Exception):
    """Configuration loading or validation error."""
    pass


class ConfigLoader:
    """Reads YAML files from one directory and validates them into pydantic models."""

    def __init__(self, config_dir: Optional[Path] = None):
        self.config_dir = Path(config_dir) if config_dir else DEFAULT_CONFIG_DIR
        if not self.config_dir.is_dir():
            raise ConfigurationError(f"Config directory not found: {self.config_dir}")

    def load_yaml(self, filename: str) -> Dict[str, Any]:
        """
        Read a YAML mapping.

        An empty file yields an empty dict.

        Raises:
            ConfigurationError: If the file is missing, unreadable, not YAML or not a mapping
        """
        filepath = self.config_dir / filename
        if not filepath.is_file():
            raise ConfigurationError(f"Config file not found: {filepath}")

        try:
            content = yaml.safe_load(filepath.read_text(encoding='utf-8'))
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {filepath}: {e}") from e
        except OSError as e:
            raise ConfigurationError(f"Error reading {filepath}: {e}") from e

        if content is None:
            return {}
        if not isinstance(content, dict):
            raise ConfigurationError(f"Expected a mapping at the top of {filepath}")
        return content

    def apply_env_overrides(self, values: Dict[str, Any], env_prefix: str = "") -> Dict[str, Any]:
        """
        Replace values whose ``<env_prefix><KEY>`` variable is set.

        Only keys present in ``values`` are looked up.
        """
        merged = dict(values)
        for key in values:
            raw = os.getenv(f"{env_prefix}{key}".upper())
            if raw is not None:
                merged[key] = self._parse_env_value(raw)
        return merged

    def _parse_env_value(self, value: str) -> Any:
        """Convert an environment string to bool, int or float where it looks like one."""
        lowered = value.strip().lower()
        if lowered in ('true', 'yes', 'on'):
            return True
        if lowered in ('false', 'no', 'off'):
            return False

        for cast in (int, float):
            try:
                return cast(value)
            except ValueError:
                continue
        return value

    def load_and_validate(self, filename: str, model_class: Type[T], env_prefix: str = "") -> T:
        """
        Load a YAML file, apply environment overrides and validate.

        Raises:
            ConfigurationError: If loading fails or the values do not validate
        """
        values = self.apply_env_overrides(self.load_yaml(filename), env_prefix)
        try:
            return model_class.model_validate(values)
        except ValidationError as e:
            raise ConfigurationError(f"Configuration validation failed for {filename}:\n{e}") from e


@lru_cache()
def get_config_loader(config_dir: Optional[str] = None) -> ConfigLoader:
    """Cached loader per config directory."""
    return ConfigLoader(config_dir=Path(config_dir) if config_dir else None)


def load_assumptions_config(path: Optional[str] = None) -> Assumptions:
    """
    Load the default valuation assumptions.

    Args:
        path: YAML file with any subset of the assumption keys (snake_case or
              camelCase). When None, the built-in defaults are returned.

    Returns:
        Validated Assumptions
    """
    if not path:
        return Assumptions()

    filepath = Path(path)
    loader = get_config_loader(str(filepath.parent))
    return loader.load_and_validate(filepath.name, Assumptions, env_prefix=ASSUMPTIONS_ENV_PREFIX)

"""Configuration loader for the sync API.

Configuration is read from ``config/default.yaml``. When ``APP_ENV`` names an
environment (``config/production.yaml``, ...), that file is merged on top, so
an environment file only lists what it overrides. String values may reference
environment variables as ``${VAR}`` or ``${VAR:-fallback}``.
"""

import os
import re
from pathlib import Path
from typing import Any

import structlog
import yaml
from pydantic import ValidationError

from walletsync.locale.messages import available_locales
from walletsync.models.config import AppConfig

log = structlog.stdlib.get_logger()

CONFIG_DIR = Path(__file__).resolve().parent.parent.parent / "config"
DEFAULT_CONFIG_NAME = "default"
ENV_VAR_PATTERN = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)(?::-([^}]*))?\}")


class ConfigurationError(Exception):
    """Raised when configuration is invalid or missing."""


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


class ConfigLoader:
    """Builds ``AppConfig`` from YAML files with environment substitution."""

    def __init__(self, config_dir: Path | None = None) -> None:
        """
        Initialize the loader.

        Args:
            config_dir: Directory holding ``default.yaml`` and environment
                overlays. Defaults to the repository's ``config/`` directory.
        """
        self.config_dir = Path(config_dir) if config_dir is not None else CONFIG_DIR

    def load_config(self, config_path: str | None = None) -> AppConfig:
        """Load and validate the application configuration.

        Args:
            config_path: Explicit YAML file to load on its own. If None, the
                default file plus the ``APP_ENV`` overlay are used.

        Returns:
            AppConfig: Validated application configuration

        Raises:
            ConfigurationError: If a file is missing or unreadable, a referenced
                environment variable is unset, or validation fails
        """
        if config_path is not None:
            sources = [Path(config_path)]
        else:
            sources = self._default_sources()

        raw: dict[str, Any] = {}
        for source in sources:
            log.info("loading_configuration", config_path=str(source))
            raw = _deep_merge(raw, self._read_yaml(source))

        try:
            config = AppConfig(**self._substitute(raw))
        except ValidationError as e:
            log.error("configuration_validation_failed", error=str(e))
            raise ConfigurationError(f"Configuration validation failed: {e}") from e

        log.info(
            "configuration_loaded",
            sources=[str(source) for source in sources],
            default_locale=config.locale.default_locale,
            api_prefix=config.api.prefix,
        )
        return config

    def _default_sources(self) -> list[Path]:
        default_file = self.config_dir / f"{DEFAULT_CONFIG_NAME}.yaml"
        if not default_file.exists():
            raise ConfigurationError(
                f"Configuration file not found: {default_file}. "
                f"Create {DEFAULT_CONFIG_NAME}.yaml in {self.config_dir}."
            )

        sources = [default_file]
        env = os.getenv("APP_ENV")
        if env and env != DEFAULT_CONFIG_NAME:
            overlay = self.config_dir / f"{env}.yaml"
            if overlay.exists():
                sources.append(overlay)
            else:
                log.warning("environment_config_missing", app_env=env, expected=str(overlay))
        return sources

    def _read_yaml(self, path: Path) -> dict[str, Any]:
        """Read one YAML file, which must hold a mapping.

        Raises:
            ConfigurationError: If the file is missing, unparseable, empty or
                not a mapping
        """
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except FileNotFoundError as e:
            raise ConfigurationError(f"Configuration file not found: {path}") from e
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Failed to parse YAML file {path}: {e}") from e
        except OSError as e:
            raise ConfigurationError(f"Failed to read configuration file {path}: {e}") from e

        if data is None:
            raise ConfigurationError(f"Configuration file is empty: {path}")
        if not isinstance(data, dict):
            raise ConfigurationError(f"Configuration file must contain a mapping: {path}")
        return data

    def _substitute(self, value: Any) -> Any:
        if isinstance(value, dict):
            return {key: self._substitute(item) for key, item in value.items()}
        if isinstance(value, list):
            return [self._substitute(item) for item in value]
        if isinstance(value, str):
            return ENV_VAR_PATTERN.sub(self._expand, value)
        return value

    @staticmethod
    def _expand(match: "re.Match[str]") -> str:
        name, fallback = match.group(1), match.group(2)
        env_value = os.getenv(name)
        if env_value is not None:
            return env_value
        if fallback is not None:
            return fallback
        raise ConfigurationError(
            f"Required environment variable not set: {name}. "
            f"Set it or give a fallback as ${{{name}:-value}}."
        )

    def validate_config(self, config: AppConfig) -> list[str]:
        """Return warnings for settings that load but degrade behaviour.

        Hard errors, such as a default locale outside the supported set, are
        already rejected when the model is built.

        Args:
            config: Application configuration to validate

        Returns:
            List of warning messages (empty if no warnings)
        """
        warnings = []

        untranslated = sorted(set(config.locale.supported_locales) - available_locales())
        if untranslated:
            warnings.append(
                f"supported locales {untranslated} have no message catalog; "
                f"error messages will fall back to English"
            )

        malformed = sorted(
            tag for tag in config.locale.supported_locales if len(tag) != 2 or not tag.islower()
        )
        if malformed:
            warnings.append(
                f"supported locales {malformed} are not two-letter lowercase subtags "
                f"and can never match an Accept-Language entry"
            )

        if not config.api.prefix.startswith("/"):
            warnings.append(f"api.prefix '{config.api.prefix}' should start with '/'")

        if warnings:
            log.warning("configuration_validation_warnings", warnings=warnings)

        return warnings

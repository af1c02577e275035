"""Property-based tests for configuration models and the YAML loader.

Feature: walletsync-sync-layer
"""

import pytest
import structlog
from hypothesis import given
from hypothesis import strategies as st
from pydantic import ValidationError

from walletsync.models import AppConfig, LocaleConfig, SyncConfig
from walletsync.models.config import DEFAULT_SUPPORTED_LOCALES
from walletsync.utils.config_loader import ConfigLoader, ConfigurationError

log = structlog.stdlib.get_logger()


@given(st.integers(min_value=1, max_value=1000))
def test_default_limit_accepts_positive_values(default_limit: int):
    """Any positive page size is a valid default."""
    log.info("test_default_limit_accepts_positive_values", default_limit=default_limit)

    config = SyncConfig(default_limit=default_limit)
    assert config.default_limit == default_limit


@given(st.integers(max_value=0))
def test_default_limit_rejects_non_positive_values(default_limit: int):
    with pytest.raises(ValidationError) as excinfo:
        SyncConfig(default_limit=default_limit)
    assert "default_limit" in str(excinfo.value)


@given(st.sampled_from(DEFAULT_SUPPORTED_LOCALES))
def test_supported_default_locale_is_accepted(locale: str):
    assert LocaleConfig(default_locale=locale).default_locale == locale


def test_default_locale_must_be_supported():
    """Negotiation has to be able to fall back to the default."""
    with pytest.raises(ValidationError):
        LocaleConfig(default_locale="ja")
    with pytest.raises(ValidationError):
        LocaleConfig(default_locale="fr", supported_locales=["en", "de"])


def test_supported_locales_cannot_be_empty():
    with pytest.raises(ValidationError):
        LocaleConfig(supported_locales=[])


def test_defaults():
    config = AppConfig()

    assert config.locale.default_locale == "en"
    assert config.locale.supported_locales == ["en", "fr", "es", "de", "pt", "it"]
    assert config.sync.default_limit == 20
    assert config.sync.watermark_field == "updated_at"
    assert config.api.prefix == "/api/v1"


def test_environment_variable_loading(monkeypatch):
    """Nested settings are read from APP_-prefixed variables."""
    monkeypatch.setenv("APP_LOCALE__DEFAULT_LOCALE", "de")
    monkeypatch.setenv("APP_SYNC__DEFAULT_LIMIT", "50")
    monkeypatch.setenv("APP_API__PREFIX", "/v2")
    monkeypatch.setenv("APP_DATABASE__URL", "sqlite:///./other.db")

    config = AppConfig()

    assert config.locale.default_locale == "de"
    assert config.sync.default_limit == 50
    assert config.api.prefix == "/v2"
    assert config.database.url == "sqlite:///./other.db"


def test_invalid_environment_value_rejected(monkeypatch):
    monkeypatch.setenv("APP_SYNC__DEFAULT_LIMIT", "0")
    with pytest.raises(ValidationError):
        AppConfig()


class TestConfigLoader:
    def test_loads_yaml_with_env_substitution(self, tmp_path, monkeypatch):
        monkeypatch.setenv("WALLETSYNC_DB", "sqlite:///./from-env.db")
        config_file = tmp_path / "test.yaml"
        config_file.write_text(
            "locale:\n"
            "  default_locale: fr\n"
            "sync:\n"
            "  default_limit: 10\n"
            "database:\n"
            "  url: ${WALLETSYNC_DB}\n",
            encoding="utf-8",
        )

        config = ConfigLoader().load_config(str(config_file))

        assert config.locale.default_locale == "fr"
        assert config.sync.default_limit == 10
        assert config.database.url == "sqlite:///./from-env.db"

    def test_missing_env_var_raises(self, tmp_path, monkeypatch):
        monkeypatch.delenv("WALLETSYNC_MISSING", raising=False)
        config_file = tmp_path / "test.yaml"
        config_file.write_text("database:\n  url: ${WALLETSYNC_MISSING}\n", encoding="utf-8")

        with pytest.raises(ConfigurationError, match="WALLETSYNC_MISSING"):
            ConfigLoader().load_config(str(config_file))

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(ConfigurationError, match="not found"):
            ConfigLoader().load_config(str(tmp_path / "absent.yaml"))

    @pytest.mark.parametrize("content", ["", "- just\n- a list\n"])
    def test_empty_or_non_mapping_file_raises(self, tmp_path, content):
        config_file = tmp_path / "bad.yaml"
        config_file.write_text(content, encoding="utf-8")

        with pytest.raises(ConfigurationError):
            ConfigLoader().load_config(str(config_file))

    def test_invalid_values_raise_configuration_error(self, tmp_path):
        config_file = tmp_path / "bad.yaml"
        config_file.write_text("locale:\n  default_locale: zh\n", encoding="utf-8")

        with pytest.raises(ConfigurationError, match="validation failed"):
            ConfigLoader().load_config(str(config_file))

    def test_fallback_used_when_variable_unset(self, tmp_path, monkeypatch):
        monkeypatch.delenv("WALLETSYNC_DB", raising=False)
        config_file = tmp_path / "test.yaml"
        config_file.write_text(
            "database:\n  url: ${WALLETSYNC_DB:-sqlite:///./fallback.db}\n", encoding="utf-8"
        )

        config = ConfigLoader().load_config(str(config_file))

        assert config.database.url == "sqlite:///./fallback.db"

    def test_environment_overlay_is_merged_over_default(self, tmp_path, monkeypatch):
        (tmp_path / "default.yaml").write_text(
            "locale:\n  default_locale: en\nsync:\n  default_limit: 20\n", encoding="utf-8"
        )
        (tmp_path / "staging.yaml").write_text(
            "sync:\n  default_limit: 5\n", encoding="utf-8"
        )
        monkeypatch.setenv("APP_ENV", "staging")

        config = ConfigLoader(config_dir=tmp_path).load_config()

        assert config.sync.default_limit == 5
        assert config.locale.default_locale == "en"

    def test_unknown_environment_falls_back_to_default(self, tmp_path, monkeypatch):
        (tmp_path / "default.yaml").write_text("sync:\n  default_limit: 7\n", encoding="utf-8")
        monkeypatch.setenv("APP_ENV", "qa")

        assert ConfigLoader(config_dir=tmp_path).load_config().sync.default_limit == 7

    def test_missing_default_file_raises(self, tmp_path, monkeypatch):
        monkeypatch.delenv("APP_ENV", raising=False)
        with pytest.raises(ConfigurationError, match="not found"):
            ConfigLoader(config_dir=tmp_path).load_config()

    def test_default_config_file_loads(self, monkeypatch):
        monkeypatch.delenv("APP_ENV", raising=False)

        config = ConfigLoader().load_config()

        assert config.locale.supported_locales == DEFAULT_SUPPORTED_LOCALES
        assert config.sync.default_limit == 20


class TestValidateConfig:
    def test_default_config_has_no_warnings(self):
        assert ConfigLoader().validate_config(AppConfig()) == []

    def test_locale_without_catalog_warns(self):
        config = AppConfig(locale=LocaleConfig(supported_locales=["en", "nl"]))

        warnings = ConfigLoader().validate_config(config)

        assert any("nl" in warning and "catalog" in warning for warning in warnings)

    def test_malformed_locale_warns(self):
        config = AppConfig(locale=LocaleConfig(supported_locales=["en", "pt-BR"]))

        warnings = ConfigLoader().validate_config(config)

        assert any("pt-BR" in warning and "two-letter" in warning for warning in warnings)

    def test_prefix_without_slash_warns(self):
        config = AppConfig(api={"prefix": "api"})

        assert any("prefix" in warning for warning in ConfigLoader().validate_config(config))

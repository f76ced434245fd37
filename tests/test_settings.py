"""
Tests for the settings system.
"""

import pytest
from pathlib import Path

from rating_gateway.settings import (
    DEFAULTS,
    SETTINGS_ENV_VAR,
    SETTINGS_FILE,
    DotDict,
    load_settings,
    validate_settings,
)


class TestDotDict:
    """Tests for DotDict"""

    def test_dot_access(self):
        d = DotDict({"a": 1, "b": {"c": 2}})
        assert d.a == 1
        assert d.b.c == 2

    def test_missing_key_raises(self):
        d = DotDict({"a": 1})
        with pytest.raises(AttributeError):
            _ = d.nonexistent

    def test_get_nested(self):
        d = DotDict({"a": {"b": {"c": 3}}})
        assert d.get_nested("a.b.c") == 3
        assert d.get_nested("a.b.x", "default") == "default"
        assert d.get_nested("a.b.c.d", "default") == "default"

    def test_set_attr(self):
        d = DotDict({})
        d.foo = "bar"
        assert d["foo"] == "bar"


class TestLoadSettings:
    """Tests for loading settings"""

    def test_load_defaults_when_no_file(self, tmp_path):
        """Missing file falls back to defaults"""
        settings = load_settings(tmp_path / "missing.yaml")
        assert settings.cache.file_name == DEFAULTS["cache"]["file_name"]
        assert settings.get_nested("tracing.log_traces") is False

    def test_load_from_yaml(self, tmp_path):
        """Values from the file override defaults"""
        path = tmp_path / "settings.yaml"
        path.write_text(
            "cache:\n"
            "  file_name: Custom\n"
            "view:\n"
            "  store_url: https://example.com/app\n",
            encoding="utf-8",
        )

        settings = load_settings(path)

        assert settings.cache.file_name == "Custom"
        assert settings.view.store_url == "https://example.com/app"

    def test_deep_merge_keeps_sibling_defaults(self, tmp_path):
        """Partial sections keep the remaining default keys"""
        path = tmp_path / "settings.yaml"
        path.write_text("cache:\n  file_name: Custom\n", encoding="utf-8")

        settings = load_settings(path)

        assert settings.cache.directory == DEFAULTS["cache"]["directory"]
        assert settings.logging.level == "INFO"

    def test_empty_file(self, tmp_path):
        path = tmp_path / "settings.yaml"
        path.write_text("", encoding="utf-8")
        assert load_settings(path).cache.file_name == "RatingConditionCache"

    def test_env_var_points_to_file(self, tmp_path, monkeypatch):
        path = tmp_path / "from_env.yaml"
        path.write_text("logging:\n  level: DEBUG\n", encoding="utf-8")
        monkeypatch.setenv(SETTINGS_ENV_VAR, str(path))

        assert load_settings().logging.level == "DEBUG"

    def test_bundled_file_matches_defaults(self, monkeypatch):
        """The shipped settings.yaml is valid and agrees with DEFAULTS"""
        monkeypatch.delenv(SETTINGS_ENV_VAR, raising=False)
        settings = load_settings()

        assert Path(SETTINGS_FILE).exists()
        assert validate_settings(settings) == []
        assert settings.cache.file_name == DEFAULTS["cache"]["file_name"]
        assert settings.view.store_url is None


class TestValidateSettings:
    """Tests for settings validation"""

    def test_defaults_are_valid(self):
        assert validate_settings(DotDict(DEFAULTS)) == []

    @pytest.mark.parametrize("section,key,value,fragment", [
        ("logging", "level", "LOUD", "logging.level"),
        ("cache", "file_name", "", "cache.file_name"),
        ("cache", "directory", 42, "cache.directory"),
        ("view", "store_url", 123, "view.store_url"),
        ("tracing", "log_traces", "yes", "tracing.log_traces"),
    ])
    def test_invalid_values(self, section, key, value, fragment):
        config = {name: dict(values) for name, values in DEFAULTS.items()}
        config[section][key] = value

        errors = validate_settings(DotDict(config))

        assert len(errors) == 1
        assert fragment in errors[0]

    def test_lowercase_level_is_valid(self):
        config = {name: dict(values) for name, values in DEFAULTS.items()}
        config["logging"]["level"] = "debug"
        assert validate_settings(DotDict(config)) == []

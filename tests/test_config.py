"""Tests for run configuration — env defaults, overrides and validation."""

from __future__ import annotations

import json

import pytest

from linkmonitor.config import (
    DEFAULT_FALLBACK_URL,
    DEFAULT_PATTERN,
    MonitorConfig,
    load_config,
    load_inputs_file,
)
from linkmonitor.errors import ConfigError


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in (
        "AFFILIATE_PATTERN",
        "AFFILIATE_FALLBACK_URL",
        "AFFILIATE_FALLBACK_LABEL",
        "LINK_TIMEOUT_MS",
        "LINK_RETRIES",
        "LINK_USER_AGENT",
        "FAIL_ON_BROKEN",
        "CHECK_EXTERNAL",
    ):
        monkeypatch.delenv(name, raising=False)


class TestDefaults:
    def test_builtin_defaults(self) -> None:
        config = load_config()
        assert config.affiliate_pattern == DEFAULT_PATTERN
        assert config.fallback_url == DEFAULT_FALLBACK_URL
        assert config.fallback_label == "NCSF Homepage"
        assert config.timeout_ms == 10000
        assert config.retries == 2
        assert config.fail_on_broken is False
        assert config.check_external is False

    def test_env_overrides_defaults(self, monkeypatch) -> None:
        monkeypatch.setenv("LINK_TIMEOUT_MS", "2500")
        monkeypatch.setenv("LINK_RETRIES", "0")
        monkeypatch.setenv("FAIL_ON_BROKEN", "true")
        config = load_config()
        assert config.timeout_ms == 2500
        assert config.retries == 0
        assert config.fail_on_broken is True

    def test_bad_numeric_env_raises_config_error(self, monkeypatch) -> None:
        monkeypatch.setenv("LINK_RETRIES", "lots")
        with pytest.raises(ConfigError):
            load_config()

    def test_config_is_immutable(self) -> None:
        config = load_config()
        with pytest.raises(AttributeError):
            config.retries = 5  # type: ignore[misc]


class TestOverrides:
    def test_camel_case_keys_accepted(self) -> None:
        config = load_config({"fallbackUrl": "https://shop.example/", "failOnBroken": True})
        assert config.fallback_url == "https://shop.example/"
        assert config.fail_on_broken is True

    def test_snake_case_keys_accepted(self) -> None:
        config = load_config({"timeout_ms": 500})
        assert config.timeout_ms == 500

    def test_overrides_win_over_env(self, monkeypatch) -> None:
        monkeypatch.setenv("LINK_RETRIES", "7")
        assert load_config({"retries": 1}).retries == 1

    def test_none_values_fall_through(self, monkeypatch) -> None:
        monkeypatch.setenv("LINK_RETRIES", "4")
        assert load_config({"retries": None}).retries == 4

    def test_unknown_key_rejected(self) -> None:
        with pytest.raises(ConfigError, match="bogus"):
            load_config({"bogus": 1})


class TestValidation:
    def test_default_config_is_valid(self) -> None:
        load_config().validate()

    @pytest.mark.parametrize(
        "overrides",
        [
            {"retries": -1},
            {"timeout_ms": 0},
            {"affiliate_pattern": ""},
            {"affiliate_pattern": "aff(["},
            {"fallback_url": ""},
        ],
    )
    def test_invalid_values_raise(self, overrides) -> None:
        with pytest.raises(ConfigError):
            load_config(overrides).validate()

    def test_fallback_matching_pattern_warns(self) -> None:
        # The built-in fallback lives on the affiliate domain itself.
        warnings = load_config().warnings()
        assert any("matches the affiliate pattern" in w for w in warnings)

    def test_unrelated_fallback_has_no_warning(self) -> None:
        config = MonitorConfig(fallback_url="https://shop.example/home")
        assert config.warnings() == []

    def test_check_external_warns_inert(self) -> None:
        config = MonitorConfig(fallback_url="https://shop.example/", check_external=True)
        assert any("check_external" in w for w in config.warnings())


class TestOverrideTypes:
    @pytest.mark.parametrize("raw, expected", [("false", False), ("0", False), ("TRUE", True), ("yes", True)])
    def test_string_booleans_are_converted(self, raw, expected) -> None:
        config = load_config({"failOnBroken": raw})
        assert config.fail_on_broken is expected

    def test_numeric_strings_are_converted(self) -> None:
        config = load_config({"timeoutMs": "5000", "retries": " 1 "})
        assert config.timeout_ms == 5000
        assert config.retries == 1
        config.validate()

    @pytest.mark.parametrize(
        "overrides",
        [{"timeoutMs": "soon"}, {"failOnBroken": "maybe"}, {"retries": "two"}],
    )
    def test_unparseable_strings_raise(self, overrides) -> None:
        with pytest.raises(ConfigError):
            load_config(overrides)

    @pytest.mark.parametrize(
        "overrides",
        [
            {"timeout_ms": 2.5},
            {"retries": True},
            {"fail_on_broken": 1},
            {"check_external": [True]},
            {"fallback_url": 42},
        ],
    )
    def test_wrong_types_fail_validation(self, overrides) -> None:
        with pytest.raises(ConfigError):
            load_config(overrides).validate()


class TestInputsFile:
    def test_reads_json_object(self, tmp_path) -> None:
        path = tmp_path / "inputs.json"
        path.write_text(json.dumps({"retries": 0, "fallbackLabel": "Shop"}), encoding="utf-8")
        assert load_inputs_file(path) == {"retries": 0, "fallbackLabel": "Shop"}

    def test_non_object_rejected(self, tmp_path) -> None:
        path = tmp_path / "inputs.json"
        path.write_text("[1, 2]", encoding="utf-8")
        with pytest.raises(ConfigError):
            load_inputs_file(path)

    def test_invalid_json_rejected(self, tmp_path) -> None:
        path = tmp_path / "inputs.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(ConfigError):
            load_inputs_file(path)

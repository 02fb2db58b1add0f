"""Tests for deploy check settings loading and validation."""

from __future__ import annotations

import pytest

from deploy_check.config import CheckMode, ConfigurationError, config_load_settings
from deploy_check.domain import LabelMatchMode


@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    """Run each test without ambient PLUGIN_* variables or a local dotenv file."""

    monkeypatch.chdir(tmp_path)
    for variable_name in (
        "PLUGIN_ACCESS_KEY",
        "PLUGIN_SECRET_KEY",
        "PLUGIN_APPLICATION",
        "PLUGIN_ENVIRONMENT",
        "PLUGIN_VERSION_LABEL",
        "PLUGIN_REGION",
        "PLUGIN_TIMEOUT",
        "PLUGIN_TICK",
        "PLUGIN_DEBUG",
        "PLUGIN_LABEL_MATCH",
        "PLUGIN_CHECK_MODE",
        "PLUGIN_POLL_IMMEDIATELY",
    ):
        monkeypatch.delenv(variable_name, raising=False)


def test_config_defaults_and_environment_variables(monkeypatch: pytest.MonkeyPatch) -> None:
    """Load PLUGIN_* variables and apply documented defaults.

    Args:
        monkeypatch: Pytest monkeypatch fixture.

    Returns:
        None: Assertions validate loaded values.

    Raises:
        AssertionError: Raised when defaults or env mapping drift.
    """

    monkeypatch.setenv("PLUGIN_APPLICATION", " orders-api ")
    monkeypatch.setenv("PLUGIN_VERSION_LABEL", "v42")

    settings = config_load_settings()

    assert settings.application == "orders-api"
    assert settings.region == "us-east-1"
    assert settings.timeout == 30
    assert settings.tick == 20
    assert settings.environment == ""
    assert settings.label_match is LabelMatchMode.EXACT
    assert settings.check_mode is CheckMode.ENVIRONMENT
    assert settings.settings_use_static_credentials() is False

    budget = settings.settings_build_budget()
    assert budget.total_seconds == 1800.0
    assert budget.tick_seconds == 20.0


def test_config_overrides_take_precedence(monkeypatch: pytest.MonkeyPatch) -> None:
    """Prefer explicit overrides over environment values.

    Args:
        monkeypatch: Pytest monkeypatch fixture.

    Returns:
        None: Assertions validate precedence.

    Raises:
        AssertionError: Raised when env values win over overrides.
    """

    monkeypatch.setenv("PLUGIN_APPLICATION", "orders-api")
    monkeypatch.setenv("PLUGIN_VERSION_LABEL", "v41")
    monkeypatch.setenv("PLUGIN_TIMEOUT", "10")

    settings = config_load_settings(
        overrides={"version_label": "v42", "environment": "prod", "label_match": "prefix", "check_mode": "version"}
    )
    target = settings.settings_build_target()

    assert target.expected_version_label == "v42"
    assert target.environment_selector == "prod"
    assert settings.timeout == 10
    assert settings.label_match is LabelMatchMode.PREFIX
    assert settings.check_mode is CheckMode.VERSION


@pytest.mark.parametrize(
    "overrides",
    [
        {"application": "orders-api", "version_label": "v42", "timeout": "thirty"},
        {"application": "orders-api", "version_label": "v42", "tick": "0"},
        {"application": "   ", "version_label": "v42"},
        {"version_label": "v42"},
        {"application": "orders-api", "version_label": "v42", "label_match": "fuzzy"},
    ],
)
def test_config_invalid_values_raise_configuration_error(overrides: dict[str, object]) -> None:
    """Fail fast with configuration error on malformed or missing inputs.

    Args:
        overrides: Invalid settings input.

    Returns:
        None: Assertions validate configuration failure.

    Raises:
        AssertionError: Raised when invalid input is accepted.
    """

    with pytest.raises(ConfigurationError, match="configuration validation failed"):
        config_load_settings(overrides=overrides)

    assert issubclass(ConfigurationError, ValueError)


def test_config_secret_key_is_hidden_from_repr() -> None:
    """Keep static secret out of settings repr.

    Returns:
        None: Assertions validate repr redaction.

    Raises:
        AssertionError: Raised when secret leaks into repr.
    """

    settings = config_load_settings(
        overrides={"application": "orders-api", "version_label": "v42", "access_key": "AKIA", "secret_key": "s3cr3t"}
    )

    assert "s3cr3t" not in repr(settings)
    assert settings.settings_use_static_credentials() is True

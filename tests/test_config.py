from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from tenacious.config import RetrySettings, load_settings, save_settings
from tenacious.errors import InvalidConfigurationError
from tenacious.wait_config import TimeUnit


def test_load_defaults_when_config_missing(tmp_path: Path) -> None:
    settings = load_settings(tmp_path / "config.toml")

    assert settings.unit == "MILLISECONDS"
    assert settings.start_interval == 100
    assert settings.end_interval == 1600
    assert settings.iterations == 5
    assert settings.infinite is False
    assert settings.log_first_stack_trace is True


def test_settings_roundtrip(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "config.toml"
    original = RetrySettings(
        unit="s",
        start_interval=2,
        end_interval=30,
        iterations=4,
        infinite=True,
        log_first_stack_trace=False,
    )

    save_settings(original, path)
    loaded = load_settings(path)

    assert loaded == original
    assert loaded.unit == "SECONDS"
    assert path.read_text(encoding="utf-8").startswith("[retry]\n")


def test_invalid_values_fall_back_to_defaults(tmp_path: Path) -> None:
    path = tmp_path / "config.toml"
    path.write_text(
        "\n".join(
            [
                "[retry]",
                'unit = "fortnights"',
                "start_interval = 0",
                'end_interval = "big"',
                "iterations = 3",
                'infinite = "yes"',
            ]
        ),
        encoding="utf-8",
    )

    settings = load_settings(path)

    assert settings.unit == "MILLISECONDS"
    assert settings.start_interval == 100
    assert settings.end_interval == 1600
    assert settings.iterations == 3
    assert settings.infinite is False


def test_broken_toml_returns_defaults(tmp_path: Path) -> None:
    path = tmp_path / "config.toml"
    path.write_text("[retry\nstart_interval = ", encoding="utf-8")

    assert load_settings(path) == RetrySettings()


def test_non_table_retry_section_is_ignored(tmp_path: Path) -> None:
    path = tmp_path / "config.toml"
    path.write_text('retry = "fast"\n', encoding="utf-8")

    assert load_settings(path) == RetrySettings()


def test_environment_overrides_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    path = tmp_path / "config.toml"
    save_settings(RetrySettings(start_interval=5, end_interval=50), path)
    monkeypatch.setenv("TENACIOUS_START_INTERVAL", "7")
    monkeypatch.setenv("TENACIOUS_ITERATIONS", "not-a-number")
    monkeypatch.setenv("TENACIOUS_UNIT", "us")

    settings = load_settings(path)

    assert settings.start_interval == 7
    assert settings.end_interval == 50
    assert settings.iterations == 5
    assert settings.unit == "MICROSECONDS"


def test_settings_build_wait_configuration() -> None:
    config = RetrySettings(unit="ms", start_interval=10, end_interval=40, iterations=20).to_wait_configuration()

    assert config.unit is TimeUnit.MILLISECONDS
    assert (config.start_interval, config.end_interval, config.iterations) == (10, 40, 20)
    assert config.infinite is False


def test_inconsistent_settings_raise_on_conversion() -> None:
    settings = RetrySettings(start_interval=50, end_interval=10)

    with pytest.raises(InvalidConfigurationError, match="endInterval"):
        settings.to_wait_configuration()


def test_assignment_is_validated() -> None:
    settings = RetrySettings()

    with pytest.raises(ValidationError):
        settings.iterations = 0

    with pytest.raises(ValidationError):
        settings.unit = "fortnights"

"""Retry settings loaded from TOML and the environment."""

from __future__ import annotations

import os
import sys
from contextlib import suppress
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing_extensions import TypedDict

if sys.version_info >= (3, 11):
    import tomllib
else:  # pragma: no cover
    import tomli as tomllib

from tenacious.errors import InvalidConfigurationError
from tenacious.wait_config import TimeUnit, WaitConfiguration

DEFAULT_CONFIG_PATH = Path("~/.config/tenacious/config.toml").expanduser()
DEFAULT_UNIT = TimeUnit.MILLISECONDS.name
DEFAULT_START_INTERVAL = 100
DEFAULT_END_INTERVAL = 1600
DEFAULT_ITERATIONS = 5

ENV_PREFIX = "TENACIOUS_"
_INT_FIELDS = ("start_interval", "end_interval", "iterations")
_BOOL_FIELDS = ("infinite", "log_first_stack_trace")


class RetryTable(TypedDict, total=False):
    unit: str
    start_interval: int
    end_interval: int
    iterations: int
    infinite: bool
    log_first_stack_trace: bool


class RetrySettings(BaseModel):
    model_config = ConfigDict(validate_assignment=True)

    unit: str = DEFAULT_UNIT
    start_interval: int = Field(default=DEFAULT_START_INTERVAL, gt=0)
    end_interval: int = Field(default=DEFAULT_END_INTERVAL, gt=0)
    iterations: int = Field(default=DEFAULT_ITERATIONS, gt=0)
    infinite: bool = False
    log_first_stack_trace: bool = True

    @field_validator("unit")
    @classmethod
    def _validate_unit(cls, value: str) -> str:
        try:
            return TimeUnit.parse(value).name
        except InvalidConfigurationError as exc:
            raise ValueError(exc.message) from exc

    def to_wait_configuration(self) -> WaitConfiguration:
        return WaitConfiguration(
            TimeUnit.parse(self.unit),
            self.start_interval,
            self.end_interval,
            self.iterations,
            infinite=self.infinite,
            log_first_stack_trace=self.log_first_stack_trace,
        )

    def to_table(self) -> RetryTable:
        return RetryTable(
            unit=self.unit,
            start_interval=self.start_interval,
            end_interval=self.end_interval,
            iterations=self.iterations,
            infinite=self.infinite,
            log_first_stack_trace=self.log_first_stack_trace,
        )


def get_config_path(path: str | Path | None = None) -> Path:
    if path is None:
        return DEFAULT_CONFIG_PATH
    return Path(path).expanduser()


def _parse_env_int(name: str) -> int | None:
    raw = os.getenv(name, "").strip()
    if not raw:
        return None
    try:
        value = int(raw)
    except ValueError:
        return None
    return value if value > 0 else None


def _sanitize(raw: dict[str, object]) -> RetrySettings:
    settings = RetrySettings()

    unit = raw.get("unit", settings.unit)
    if isinstance(unit, str):
        with suppress(InvalidConfigurationError):
            settings.unit = TimeUnit.parse(unit).name

    for name in _INT_FIELDS:
        value = raw.get(name)
        if isinstance(value, int) and not isinstance(value, bool) and value > 0:
            setattr(settings, name, value)

    for name in _BOOL_FIELDS:
        value = raw.get(name)
        if isinstance(value, bool):
            setattr(settings, name, value)

    env_unit = os.getenv(f"{ENV_PREFIX}UNIT", "").strip()
    if env_unit:
        with suppress(InvalidConfigurationError):
            settings.unit = TimeUnit.parse(env_unit).name
    for name in _INT_FIELDS:
        env_value = _parse_env_int(f"{ENV_PREFIX}{name.upper()}")
        if env_value is not None:
            setattr(settings, name, env_value)

    return settings


def load_settings(path: str | Path | None = None) -> RetrySettings:
    resolved = get_config_path(path)
    raw: object = {}
    if resolved.exists():
        try:
            with resolved.open("rb") as handle:
                raw = tomllib.load(handle).get("retry", {})
        except (tomllib.TOMLDecodeError, OSError):
            raw = {}
    if not isinstance(raw, dict):
        raw = {}
    return _sanitize(raw)


def _toml_scalar(value: object) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, str):
        escaped = value.replace("\\", "\\\\").replace('"', '\\"')
        return f'"{escaped}"'
    raise TypeError(f"Unsupported TOML scalar type: {type(value)!r}")


def save_settings(settings: RetrySettings, path: str | Path | None = None) -> Path:
    resolved = get_config_path(path)
    resolved.parent.mkdir(parents=True, exist_ok=True)
    lines = ["[retry]"]
    lines.extend(f"{key} = {_toml_scalar(value)}" for key, value in settings.to_table().items())
    resolved.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return resolved

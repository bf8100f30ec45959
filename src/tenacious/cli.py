"""Command line entrypoint: run a command until it succeeds or retrying gives up."""

from __future__ import annotations

import argparse
import logging as py_logging
import subprocess
import sys
from collections.abc import Callable, Sequence
from pathlib import Path

from .config import RetrySettings, load_settings
from .engine import RetryEngine
from .errors import ErrorCode, TenaciousError, UnrecoverableError, user_facing_error
from .logging import configure_logging
from .sleeper import Sleeper
from .wait_config import TimeUnit, WaitConfiguration

_VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARN", "ERROR")

logger = py_logging.getLogger(__name__)


class CommandFailedError(Exception):
    def __init__(self, returncode: int, command: Sequence[str]) -> None:
        super().__init__(f"Command exited with status {returncode}: {' '.join(command)}")
        self.returncode = returncode
        self.command = list(command)


def _positive_int_type(flag: str) -> Callable[[str], int]:
    def parse(value: str) -> int:
        try:
            number = int(value)
        except ValueError as exc:
            raise argparse.ArgumentTypeError(f"{flag} must be an integer") from exc
        if number <= 0:
            raise argparse.ArgumentTypeError(f"{flag} must be greater than 0")
        return number

    return parse


def _unit_type(value: str) -> str:
    try:
        return TimeUnit.parse(value).name
    except TenaciousError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def _log_level_type(value: str) -> str:
    normalized = value.upper()
    if normalized == "WARNING":
        normalized = "WARN"
    if normalized not in _VALID_LOG_LEVELS:
        accepted = ", ".join(_VALID_LOG_LEVELS)
        raise argparse.ArgumentTypeError(f"--log-level must be one of: {accepted}")
    return normalized


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tenacious",
        description="Run a command, retrying failures with escalating backoff.",
    )
    parser.add_argument("--config", type=Path, default=None, help="TOML file with a [retry] table.")
    parser.add_argument("--unit", type=_unit_type, default=None)
    parser.add_argument("--start", type=_positive_int_type("--start"), default=None)
    parser.add_argument("--end", type=_positive_int_type("--end"), default=None)
    parser.add_argument("--iterations", type=_positive_int_type("--iterations"), default=None)
    parser.add_argument(
        "--infinite",
        action="store_true",
        default=None,
        help="Retry without limit once the interval reaches --end.",
    )
    parser.add_argument(
        "--retry-exit-code",
        type=int,
        action="append",
        default=None,
        dest="retry_exit_codes",
        help="Exit status treated as recoverable (repeatable). Default: any nonzero status.",
    )
    parser.add_argument("--log-level", type=_log_level_type, default="INFO")
    parser.add_argument("--log-file", type=Path, default=None)
    parser.add_argument("command", nargs=argparse.REMAINDER)
    return parser


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = build_parser()
    return parser.parse_args(argv)


def resolve_settings(namespace: argparse.Namespace) -> RetrySettings:
    settings = load_settings(namespace.config)
    overrides = {
        "unit": namespace.unit,
        "start_interval": namespace.start,
        "end_interval": namespace.end,
        "iterations": namespace.iterations,
        "infinite": namespace.infinite,
    }
    for name, value in overrides.items():
        if value is not None:
            setattr(settings, name, value)
    return settings


def command_predicate(retry_exit_codes: Sequence[int] | None) -> Callable[[Exception], bool]:
    accepted = frozenset(retry_exit_codes or ())

    def predicate(failure: Exception) -> bool:
        if not isinstance(failure, CommandFailedError):
            return False
        return not accepted or failure.returncode in accepted

    return predicate


def run_command(
    command: Sequence[str],
    *,
    config: WaitConfiguration,
    retry_exit_codes: Sequence[int] | None = None,
    runner: Callable[..., subprocess.CompletedProcess] = subprocess.run,
    sleeper: Sleeper | None = None,
) -> int:
    def attempt() -> int:
        logger.debug("Running command=%s", list(command))
        completed = runner(list(command), check=False)
        if completed.returncode != 0:
            raise CommandFailedError(completed.returncode, command)
        return completed.returncode

    engine = RetryEngine(config, command_predicate(retry_exit_codes), sleeper=sleeper)
    return engine.call(attempt)


def main(
    argv: Sequence[str] | None = None,
    *,
    runner: Callable[..., subprocess.CompletedProcess] = subprocess.run,
    sleeper: Sleeper | None = None,
) -> int:
    logger = configure_logging()
    parser = build_parser()
    try:
        namespace = parser.parse_args(argv)
    except SystemExit as exc:
        if exc.code not in (None, 0):
            logger.warning("Argument parsing failed with exit code %s", exc.code)
        return int(exc.code or 0)

    logger = configure_logging(level=namespace.log_level, log_file=namespace.log_file)
    command = list(namespace.command)
    if command and command[0] == "--":
        command = command[1:]
    if not command:
        print(user_facing_error("No command given", hint="Pass the command after --"), file=sys.stderr)
        return int(ErrorCode.INVALID_ARGS)

    try:
        config = resolve_settings(namespace).to_wait_configuration()
        logger.debug("Retrying with %s", config.describe())
        return run_command(
            command,
            config=config,
            retry_exit_codes=namespace.retry_exit_codes,
            runner=runner,
            sleeper=sleeper,
        )
    except UnrecoverableError as exc:
        failure = exc.failure
        if isinstance(failure, CommandFailedError):
            message = f"Command gave up with exit status {failure.returncode}"
            hint = "Inspect the command output above"
            code = exc.code
        else:
            message = f"Command could not run: {failure}"
            hint = "Check that the executable exists and is runnable"
            code = ErrorCode.COMMAND_ERROR
        logger.error("%s", message, exc_info=logger.isEnabledFor(py_logging.DEBUG))
        print(user_facing_error(message, hint=hint), file=sys.stderr)
        return int(code)
    except TenaciousError as exc:
        logger.error("Handled TenaciousError (code=%s): %s", int(exc.code), exc.message)
        print(user_facing_error(exc.message, hint=exc.hint), file=sys.stderr)
        return int(exc.code)
    except KeyboardInterrupt:
        logger.warning("Interrupted while retrying")
        return int(ErrorCode.ABORTED)


def run(argv: Sequence[str] | None = None) -> int:
    return main(argv)

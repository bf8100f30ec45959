from __future__ import annotations

import pytest

from tenacious.errors import InvalidConfigurationError
from tenacious.predicates import always, never, retry_on


def test_constant_predicates() -> None:
    assert always(ValueError("x")) is True
    assert never(ValueError("x")) is False


def test_retry_on_matches_subclasses() -> None:
    predicate = retry_on(OSError, ValueError)

    assert predicate(ConnectionResetError("reset"))
    assert predicate(ValueError("bad"))
    assert not predicate(KeyError("missing"))


def test_retry_on_requires_types() -> None:
    with pytest.raises(InvalidConfigurationError):
        retry_on()


def test_retry_on_rejects_non_exception_types() -> None:
    with pytest.raises(InvalidConfigurationError, match="Not an exception type"):
        retry_on(int)  # type: ignore[arg-type]

from __future__ import annotations

from pathlib import Path

import pytest

from tenacious.wait_config import TimeUnit


class RecordingSleeper:
    def __init__(self) -> None:
        self.calls: list[tuple[int, TimeUnit]] = []

    def __call__(self, duration: int, unit: TimeUnit) -> None:
        self.calls.append((duration, unit))

    @property
    def durations(self) -> list[int]:
        return [duration for duration, _ in self.calls]


class AsyncRecordingSleeper(RecordingSleeper):
    async def __call__(self, duration: int, unit: TimeUnit) -> None:  # type: ignore[override]
        self.calls.append((duration, unit))


@pytest.fixture
def sleeper() -> RecordingSleeper:
    return RecordingSleeper()


@pytest.fixture
def async_sleeper() -> AsyncRecordingSleeper:
    return AsyncRecordingSleeper()


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("UNIT", "START_INTERVAL", "END_INTERVAL", "ITERATIONS"):
        monkeypatch.delenv(f"TENACIOUS_{name}", raising=False)


@pytest.hookimpl(trylast=True)
def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    del config
    for item in items:
        path = Path(str(getattr(item, "path", item.fspath)))
        if "integration" in path.parts:
            item.add_marker(pytest.mark.integration)
            item.add_marker(pytest.mark.slow)

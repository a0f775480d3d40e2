"""
Pytest configuration and fixtures.
"""

import logging
from pathlib import Path

import pytest

from hoststat.collectors.system import SystemCollector
from hoststat.config.schema import DefaultsConfig, SystemConfig


class FakeSource:
    """Host source returning canned values; exception instances are raised."""

    def __init__(self, load=(1.0, 2.0, 4.0), cpus=2, uptime=3600, users=3):
        self.load = load
        self.cpus = cpus
        self.uptime_value = uptime
        self.users = users
        self.calls: list[str] = []

    def _answer(self, name, value):
        self.calls.append(name)
        if isinstance(value, BaseException):
            raise value
        return value

    def load_average(self):
        return self._answer("load_average", self.load)

    def cpu_count(self):
        return self._answer("cpu_count", self.cpus)

    def uptime(self):
        return self._answer("uptime", self.uptime_value)

    def user_count(self):
        return self._answer("user_count", self.users)


class ClosedQueue:
    """Queue whose owner has already closed it."""

    async def put(self, item) -> None:
        raise RuntimeError("put on closed queue")


@pytest.fixture
def source() -> FakeSource:
    return FakeSource()


@pytest.fixture
def make_collector(source: FakeSource):
    """Build a SystemCollector around the fake source."""

    def factory(
        interval_seconds: int = 0,
        collect_user_number: bool = False,
        print_configs: bool = False,
        default_interval: float = 15.0,
        src: FakeSource | None = None,
    ) -> SystemCollector:
        config = SystemConfig(
            interval_seconds=interval_seconds,
            collect_user_number=collect_user_number,
            print_configs=print_configs,
        )
        return SystemCollector(config, DefaultsConfig(interval=default_interval), source=src or source)

    return factory


@pytest.fixture
def example_config_path() -> Path:
    return Path(__file__).parent.parent / "config.example.conf"


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop handlers installed by setup_logging so streams do not leak between tests."""
    yield
    logger = logging.getLogger("hoststat")
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)

"""
Tests for the psutil-backed host queries.
"""

import time

import psutil
import pytest

from hoststat.utils.host import HostQueryError, NotSupportedError, PsutilSource


@pytest.fixture
def host() -> PsutilSource:
    return PsutilSource()


def test_load_average(monkeypatch, host) -> None:
    monkeypatch.setattr(psutil, "getloadavg", lambda: (0.5, 1, 1.5))

    assert host.load_average() == (0.5, 1.0, 1.5)


def test_load_average_missing_is_not_supported(monkeypatch, host) -> None:
    monkeypatch.delattr(psutil, "getloadavg", raising=False)

    with pytest.raises(NotSupportedError):
        host.load_average()


def test_load_average_os_error(monkeypatch, host) -> None:
    def broken():
        raise OSError("cannot read /proc/loadavg")

    monkeypatch.setattr(psutil, "getloadavg", broken)

    with pytest.raises(HostQueryError) as excinfo:
        host.load_average()
    assert not isinstance(excinfo.value, NotSupportedError)


def test_cpu_count(monkeypatch, host) -> None:
    monkeypatch.setattr(psutil, "cpu_count", lambda logical=True: 8)

    assert host.cpu_count() == 8


def test_cpu_count_unknown(monkeypatch, host) -> None:
    monkeypatch.setattr(psutil, "cpu_count", lambda logical=True: None)

    with pytest.raises(HostQueryError):
        host.cpu_count()


def test_uptime(monkeypatch, host) -> None:
    monkeypatch.setattr(psutil, "boot_time", lambda: time.time() - 120)

    assert 119 <= host.uptime() <= 121


def test_uptime_failure(monkeypatch, host) -> None:
    def broken():
        raise RuntimeError("couldn't find 'btime' line in /proc/stat")

    monkeypatch.setattr(psutil, "boot_time", broken)

    with pytest.raises(HostQueryError):
        host.uptime()


def test_user_count(monkeypatch, host) -> None:
    monkeypatch.setattr(psutil, "users", lambda: ["alice", "bob"])

    assert host.user_count() == 2


@pytest.mark.parametrize(
    "error, expected",
    [
        (FileNotFoundError(2, "No such file or directory"), FileNotFoundError),
        (PermissionError(13, "Permission denied"), PermissionError),
        (psutil.AccessDenied(), PermissionError),
        (OSError(5, "Input/output error"), HostQueryError),
    ],
)
def test_user_count_errors(monkeypatch, host, error, expected) -> None:
    def broken():
        raise error

    monkeypatch.setattr(psutil, "users", broken)

    with pytest.raises(expected):
        host.user_count()

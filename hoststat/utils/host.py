"""
Host readings backed by psutil.

Each query either returns a value or raises a classified error:

- NotSupportedError: the platform has no such metric
- FileNotFoundError / PermissionError: the backing OS resource is missing
  or unreadable (user count only)
- HostQueryError: any other failure of the query
"""

import time

import psutil


class HostQueryError(Exception):
    """A host query failed."""

    pass


class NotSupportedError(HostQueryError):
    """The query is not implemented on this platform."""

    pass


class PsutilSource:
    """
    Queries load averages, logical CPU count, uptime and logged-in users.

    Methods are synchronous and return promptly; callers are expected to
    invoke them from the event loop thread between ticks.
    """

    def load_average(self) -> tuple[float, float, float]:
        """1, 5 and 15 minute load averages."""
        getloadavg = getattr(psutil, "getloadavg", None)
        if getloadavg is None:
            raise NotSupportedError("load average not implemented on this platform")

        try:
            load1, load5, load15 = getloadavg()
        except NotImplementedError as e:
            raise NotSupportedError(f"load average not implemented: {e}") from e
        except (OSError, RuntimeError) as e:
            raise HostQueryError(str(e)) from e

        return float(load1), float(load5), float(load15)

    def cpu_count(self) -> int:
        """Number of logical CPUs."""
        try:
            count = psutil.cpu_count(logical=True)
        except (OSError, RuntimeError) as e:
            raise HostQueryError(str(e)) from e

        if not count:
            raise HostQueryError("unable to determine the number of logical CPUs")
        return count

    def uptime(self) -> int:
        """Seconds since boot."""
        try:
            boot_time = psutil.boot_time()
        except (OSError, RuntimeError) as e:
            raise HostQueryError(str(e)) from e

        return max(0, int(time.time() - boot_time))

    def user_count(self) -> int:
        """Number of logged-in user sessions."""
        try:
            return len(psutil.users())
        except psutil.AccessDenied as e:
            raise PermissionError(f"access denied reading users: {e}") from e
        except (FileNotFoundError, PermissionError):
            raise
        except (OSError, RuntimeError) as e:
            raise HostQueryError(str(e)) from e

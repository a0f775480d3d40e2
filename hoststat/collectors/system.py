"""
System-wide metrics collector.

Collects:
- Load average (1, 5, 15 minutes) and load normalized by CPU count
- Logical CPU count
- Uptime
- Logged-in user count (optional)

Load and CPU count failures abort the cycle. Uptime and user count are
best effort: a failure only drops the field.
"""

from collections.abc import Iterator
from dataclasses import dataclass, fields
from typing import Any, Protocol

from ..config.schema import DefaultsConfig, SystemConfig
from ..logging import get_logger
from ..models.sample import Number
from ..utils.host import HostQueryError, NotSupportedError, PsutilSource
from .base import Collector, GatherError

logger = get_logger("collectors.system")


class HostSource(Protocol):
    """The four host queries used by SystemCollector."""

    def load_average(self) -> tuple[float, float, float]: ...

    def cpu_count(self) -> int: ...

    def uptime(self) -> int: ...

    def user_count(self) -> int: ...


@dataclass(frozen=True)
class SystemFields:
    """Fields computed in one gather cycle, in emission order."""

    load1: float
    load5: float
    load15: float
    n_cpus: int
    load_norm_1: float
    load_norm_5: float
    load_norm_15: float
    uptime: int | None = None
    n_users: int | None = None

    def items(self) -> Iterator[tuple[str, Number]]:
        """Present fields as (name, value) pairs."""
        for f in fields(self):
            value = getattr(self, f.name)
            if value is not None:
                yield f.name, value

    def as_dict(self) -> dict[str, Number]:
        return dict(self.items())

    def __len__(self) -> int:
        return sum(1 for _ in self.items())

    def __iter__(self) -> Iterator[tuple[str, Number]]:
        return self.items()


class SystemCollector(Collector):
    """
    Collector for host load, CPU count, uptime and user count.

    Uses psutil through ``PsutilSource`` unless another source is given.
    """

    NAME = "system"

    def __init__(
        self,
        config: SystemConfig,
        defaults: DefaultsConfig,
        source: HostSource | None = None,
    ):
        """
        Initialize system collector.

        Args:
            config: Options from the 'system' block
            defaults: Defaults providing the fallback interval
            source: Host query implementation
        """
        super().__init__(interval=config.interval_seconds or defaults.interval)

        self.config = config
        self.defaults = defaults
        self.source: HostSource = source or PsutilSource()

        if config.print_configs:
            logger.info(f"system input config: {self.describe()}")

    def describe(self) -> dict[str, Any]:
        return {
            **super().describe(),
            "interval_seconds": self.config.interval_seconds,
            "collect_user_number": self.config.collect_user_number,
        }

    def gather(self) -> SystemFields:
        """Query the host and compute this cycle's fields."""
        try:
            load1, load5, load15 = self.source.load_average()
        except NotSupportedError as e:
            logger.debug(f"Load average unavailable, reporting zeros: {e}")
            load1 = load5 = load15 = 0.0
        except HostQueryError as e:
            raise GatherError(f"failed to gather system load: {e}") from e

        try:
            n_cpus = self.source.cpu_count()
        except HostQueryError as e:
            raise GatherError(f"failed to gather cpu number: {e}") from e
        if n_cpus <= 0:
            raise GatherError(f"failed to gather cpu number: invalid count {n_cpus}")

        return SystemFields(
            load1=load1,
            load5=load5,
            load15=load15,
            n_cpus=n_cpus,
            load_norm_1=load1 / n_cpus,
            load_norm_5=load5 / n_cpus,
            load_norm_15=load15 / n_cpus,
            uptime=self._uptime(),
            n_users=self._user_count() if self.config.collect_user_number else None,
        )

    def _uptime(self) -> int | None:
        try:
            return self.source.uptime()
        except HostQueryError as e:
            logger.warning(f"failed to get host uptime: {e}")
            return None

    def _user_count(self) -> int | None:
        try:
            return self.source.user_count()
        except (FileNotFoundError, PermissionError) as e:
            logger.warning(f"reading os users: {e}")
        except HostQueryError as e:
            logger.warning(f"failed to count os users: {e}")
        return None

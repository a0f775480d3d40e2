"""
Base collector: lifecycle, timed gather loop and sample emission.

A collector owns one asyncio task. ``start(queue)`` spawns it, ``stop()``
sets a private event the loop checks once per iteration. Every tick the
loop runs one gather cycle inside ``gather_once``, which turns whatever
``gather()`` returns into ``Sample`` records and awaits ``queue.put`` for
each of them. Failures never leave the collector: they are classified,
logged and reported through the returned ``GatherResult``.
"""

import asyncio
from abc import ABC, abstractmethod
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Protocol

from ..const import METRIC_SEPARATOR
from ..logging import get_logger
from ..models.sample import Number, Sample

logger = get_logger("collectors")

# Substrings identifying a put on a queue its owner already closed
QUEUE_CLOSED_MARKERS = ("closed queue", "queue is closed", "queue closed", "closed channel")


class SampleQueue(Protocol):
    """Anything with an awaitable ``put``; ``asyncio.Queue`` in practice."""

    async def put(self, item: Sample) -> None: ...


class GatherError(Exception):
    """A failure that aborts the current gather cycle with no output."""

    pass


class CycleStatus(Enum):
    """Outcome of one gather cycle."""

    OK = "ok"  # Samples enqueued
    EMPTY = "empty"  # Nothing to emit
    ABORTED = "aborted"  # Classified fatal error, nothing emitted
    FAILED = "failed"  # Unexpected exception
    SHUTDOWN = "shutdown"  # Queue closed under us


@dataclass
class GatherResult:
    """Result of a gather cycle."""

    status: CycleStatus = CycleStatus.OK

    # Samples actually enqueued
    samples: list[Sample] = field(default_factory=list)

    error: str | None = None

    timestamp: datetime = field(default_factory=datetime.now)

    @property
    def ok(self) -> bool:
        return self.status in (CycleStatus.OK, CycleStatus.EMPTY)

    def __repr__(self) -> str:
        status = self.status.value if self.error is None else f"{self.status.value}: {self.error}"
        return f"GatherResult({len(self.samples)} samples, {status})"


def is_queue_closed(exc: BaseException) -> bool:
    """True if ``exc`` reports a put on a queue that was shut down."""
    shutdown_error = getattr(asyncio, "QueueShutDown", None)
    if shutdown_error is not None and isinstance(exc, shutdown_error):
        return True
    message = str(exc).lower()
    return any(marker in message for marker in QUEUE_CLOSED_MARKERS)


class Collector(ABC):
    """
    Abstract base class for periodic collectors.

    Subclasses set NAME (used as the metric prefix) and implement
    ``gather()``, a synchronous method returning ``(field, value)`` pairs.
    """

    # Input name, prefixes every emitted metric
    NAME: str = "unknown"

    def __init__(self, interval: float):
        """
        Initialize collector.

        Args:
            interval: Seconds between gather cycles
        """
        if interval <= 0:
            raise ValueError(f"interval must be positive, got {interval}")

        self.interval = interval
        self._stop_event = asyncio.Event()
        self._task: asyncio.Task | None = None

    @abstractmethod
    def gather(self) -> Iterable[tuple[str, Number]]:
        """
        Compute one cycle's fields.

        Raises:
            GatherError: If the cycle must produce no samples
        """
        pass

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def stopping(self) -> bool:
        return self._stop_event.is_set()

    def start(self, queue: SampleQueue) -> asyncio.Task:
        """
        Spawn the gather loop writing to ``queue`` and return its task.

        Must be called from a running event loop, once per instance.
        """
        if self._task is not None:
            raise RuntimeError(f"{self.NAME} collector already started")

        self._task = asyncio.create_task(self._loop(queue), name=f"collector:{self.NAME}")
        return self._task

    def stop(self) -> None:
        """Ask the loop to exit. Does not wait; calling it again is a no-op."""
        if self._stop_event.is_set():
            return
        logger.debug(f"Stop requested for {self.NAME} collector")
        self._stop_event.set()

    async def join(self) -> None:
        """Wait until the loop task has finished."""
        if self._task is not None:
            await self._task

    async def _loop(self, queue: SampleQueue) -> None:
        logger.info(f"Starting {self.NAME} collector (interval: {self.interval}s)")

        while not self._stop_event.is_set():
            if await self._wait_interval():
                break
            await self.gather_once(queue)

        logger.info(f"{self.NAME} collector stopped")

    async def _wait_interval(self) -> bool:
        """Sleep one interval; True if stop was requested meanwhile."""
        try:
            await asyncio.wait_for(self._stop_event.wait(), timeout=self.interval)
        except TimeoutError:
            return False
        return True

    def make_samples(self, fields: Iterable[tuple[str, Number]]) -> list[Sample]:
        """Build prefixed samples sharing one timestamp taken now."""
        # Materialize first so the timestamp follows the last computed field
        fields = list(fields)
        now = datetime.now()
        prefix = f"{self.NAME}{METRIC_SEPARATOR}"
        return [Sample(metric=f"{prefix}{name}", value=value, timestamp=now) for name, value in fields]

    async def emit(self, queue: SampleQueue, samples: list[Sample], sent: list[Sample]) -> None:
        """Put samples on the queue in order, recording each one in ``sent``."""
        for sample in samples:
            await queue.put(sample)
            sent.append(sample)

    async def gather_once(self, queue: SampleQueue) -> GatherResult:
        """Run one gather cycle and report its outcome."""
        sent: list[Sample] = []

        try:
            samples = self.make_samples(self.gather())
            if not samples:
                return GatherResult(status=CycleStatus.EMPTY)

            await self.emit(queue, samples, sent)
            logger.debug(f"{self.NAME}: enqueued {len(sent)} samples")
            return GatherResult(samples=sent)

        except GatherError as e:
            logger.error(f"{self.NAME}: {e}")
            return GatherResult(status=CycleStatus.ABORTED, error=str(e))

        except Exception as e:
            if is_queue_closed(e):
                return GatherResult(status=CycleStatus.SHUTDOWN, samples=sent, error=str(e))
            logger.error(f"{self.NAME}: gather metrics failed: {e!r}")
            return GatherResult(status=CycleStatus.FAILED, samples=sent, error=str(e))

    def describe(self) -> dict[str, Any]:
        """Effective settings, for startup logging."""
        return {"name": self.NAME, "interval": self.interval}

    def __repr__(self) -> str:
        state = "running" if self.running else "idle"
        return f"{self.__class__.__name__}({self.NAME!r}, {state}, {self.interval}s)"

"""
Queue consumer that writes samples as text lines.

Line format::

    <metric> <value> <unix_timestamp> [key=value ...]
"""

import asyncio
import sys
from typing import TextIO

from .logging import get_logger
from .models.sample import Sample

logger = get_logger("output")


def format_sample(sample: Sample) -> str:
    """Render a sample as one line (without newline)."""
    value = sample.value
    if isinstance(value, float):
        value = round(value, 4)

    parts = [sample.metric, str(value), str(int(sample.timestamp.timestamp()))]
    parts.extend(f"{key}={val}" for key, val in sorted(sample.tags.items()))
    return " ".join(parts)


class SampleWriter:
    """
    Drains a sample queue to a text stream.

    The writer only reads from the queue; the application owns it.
    """

    def __init__(self, queue: asyncio.Queue, stream: TextIO | None = None):
        self.queue = queue
        self.stream = stream or sys.stdout
        self.written = 0
        self.failed = 0

    def write(self, sample: Sample) -> None:
        self.stream.write(format_sample(sample) + "\n")
        self.written += 1

    def _write_logged(self, sample: Sample) -> bool:
        try:
            self.write(sample)
        except Exception as e:
            self.failed += 1
            logger.error(f"Failed to write sample {sample.metric}: {e}")
            return False
        return True

    async def run(self) -> None:
        """Consume samples until cancelled; a failed write drops only that sample."""
        logger.debug("Sample writer started")
        while True:
            sample = await self.queue.get()
            try:
                self._write_logged(sample)
            finally:
                self.queue.task_done()

    def drain(self) -> int:
        """Write whatever is queued right now, without waiting."""
        count = 0
        while True:
            try:
                sample = self.queue.get_nowait()
            except asyncio.QueueEmpty:
                break
            try:
                if self._write_logged(sample):
                    count += 1
            finally:
                self.queue.task_done()
        try:
            self.stream.flush()
        except Exception as e:
            logger.error(f"Failed to flush sample stream: {e}")
        return count

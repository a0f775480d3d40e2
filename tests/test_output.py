"""
Tests for sample formatting and the queue writer.
"""

import asyncio
import io
from datetime import datetime, timezone

from hoststat.models.sample import Sample
from hoststat.output import SampleWriter, format_sample

WHEN = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)


def test_format_sample() -> None:
    assert format_sample(Sample("system_n_cpus", 4, WHEN)) == "system_n_cpus 4 1704164645"


def test_format_sample_rounds_floats_and_sorts_tags() -> None:
    sample = Sample("system_load_norm_1", 1 / 3, WHEN, tags={"zone": "b", "host": "a"})

    assert format_sample(sample) == "system_load_norm_1 0.3333 1704164645 host=a zone=b"


def test_writer_drains_queue() -> None:
    stream = io.StringIO()

    async def scenario():
        queue: asyncio.Queue = asyncio.Queue()
        writer = SampleWriter(queue, stream)
        await queue.put(Sample("system_load1", 0.5, WHEN))
        await queue.put(Sample("system_load5", 0.25, WHEN))
        return writer.drain(), writer

    count, writer = asyncio.run(scenario())

    assert count == 2
    assert writer.written == 2
    assert stream.getvalue().splitlines() == [
        "system_load1 0.5 1704164645",
        "system_load5 0.25 1704164645",
    ]


def test_writer_run_consumes_until_cancelled() -> None:
    stream = io.StringIO()

    async def scenario():
        queue: asyncio.Queue = asyncio.Queue()
        writer = SampleWriter(queue, stream)
        task = asyncio.create_task(writer.run())
        await queue.put(Sample("system_uptime", 10, WHEN))
        await asyncio.wait_for(queue.join(), timeout=1.0)
        task.cancel()
        await asyncio.gather(task, return_exceptions=True)
        return writer.written

    assert asyncio.run(scenario()) == 1
    assert stream.getvalue() == "system_uptime 10 1704164645\n"


def test_samples_are_hashable() -> None:
    first = Sample("system_load1", 0.5, WHEN, tags={"host": "a"})
    second = Sample("system_load1", 0.5, WHEN, tags={"host": "b"})

    assert hash(first) == hash(second)
    assert first != second
    assert len({first, second, Sample("system_load1", 0.5, WHEN, tags={"host": "a"})}) == 2


class BrokenStream(io.StringIO):
    """Stream whose reader went away."""

    def write(self, text):
        raise BrokenPipeError(32, "Broken pipe")

    def flush(self):
        raise BrokenPipeError(32, "Broken pipe")


def test_writer_survives_failed_writes(caplog) -> None:
    async def scenario():
        queue: asyncio.Queue = asyncio.Queue()
        writer = SampleWriter(queue, BrokenStream())
        task = asyncio.create_task(writer.run())
        for metric in ("system_load1", "system_load5"):
            await queue.put(Sample(metric, 0.5, WHEN))
        await asyncio.wait_for(queue.join(), timeout=1.0)
        alive = not task.done()
        task.cancel()
        await asyncio.gather(task, return_exceptions=True)
        await queue.put(Sample("system_uptime", 10, WHEN))
        return writer, alive, writer.drain()

    writer, alive, drained = asyncio.run(scenario())

    assert alive
    assert drained == 0
    assert writer.written == 0
    assert writer.failed == 3
    assert sum(1 for r in caplog.records if r.name == "hoststat.output" and r.levelname == "ERROR") == 4

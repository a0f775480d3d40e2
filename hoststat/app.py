"""
Main application orchestrator.

Handles:
- Configuration loading and logging setup
- Building collectors through the registry
- Owning the sample queue and its writer
- Graceful shutdown
"""

import asyncio
import signal
from typing import TextIO

from .collectors.base import Collector, GatherResult
from .collectors.registry import CollectorRegistry, default_registry
from .config.loader import ConfigLoader
from .config.schema import Config
from .logging import LogConfig, get_logger, setup_logging
from .output import SampleWriter

logger = get_logger("app")


class Application:
    """
    Runs the configured collectors and writes their samples.

    The application owns the queue: collectors only put onto it, the writer
    only reads from it, and only the application shuts it down.
    """

    def __init__(
        self,
        config: Config,
        registry: CollectorRegistry | None = None,
        stream: TextIO | None = None,
    ):
        """
        Initialize application.

        Args:
            config: Application configuration
            registry: Collector factories (built-in inputs if None)
            stream: Where samples are written (stdout if None)
        """
        self.config = config
        self.registry = registry if registry is not None else default_registry()

        self.queue: asyncio.Queue = asyncio.Queue(maxsize=config.output.queue_size)
        self.writer = SampleWriter(self.queue, stream)
        self.collectors: list[Collector] = []

        self._writer_task: asyncio.Task | None = None
        self._shutdown_event = asyncio.Event()

    def _create_collectors(self) -> list[Collector]:
        collectors = []
        for name, input_config in self.config.inputs():
            collectors.append(self.registry.create(name, input_config, self.config.defaults))
        return collectors

    def _setup_signal_handlers(self) -> None:
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGTERM, signal.SIGINT):
            loop.add_signal_handler(sig, self.request_shutdown)

    def request_shutdown(self) -> None:
        """Handle shutdown signals."""
        logger.info("Received shutdown signal")
        self._shutdown_event.set()

    async def start(self) -> None:
        """Create collectors and start them together with the writer."""
        self.collectors = self._create_collectors()
        logger.info(f"Created {len(self.collectors)} collectors")

        self._writer_task = asyncio.create_task(self.writer.run(), name="sample-writer")
        for collector in self.collectors:
            collector.start(self.queue)

    async def stop(self) -> None:
        """Stop collectors, flush pending samples and close the queue."""
        logger.info("Stopping collectors")

        for collector in self.collectors:
            collector.stop()
        await asyncio.gather(*(c.join() for c in self.collectors), return_exceptions=True)

        if self._writer_task is not None:
            self._writer_task.cancel()
            await asyncio.gather(self._writer_task, return_exceptions=True)
            self._writer_task = None
        self.writer.drain()

        shutdown = getattr(self.queue, "shutdown", None)
        if shutdown is not None:
            shutdown()

        logger.info(f"Stopped, {self.writer.written} samples written")

    async def run(self, install_signal_handlers: bool = True) -> None:
        """Run until a shutdown is requested."""
        await self.start()
        if install_signal_handlers:
            self._setup_signal_handlers()

        try:
            await self._shutdown_event.wait()
        finally:
            await self.stop()

    async def run_once(self) -> list[GatherResult]:
        """Run a single gather cycle for every collector and write the samples."""
        self.collectors = self._create_collectors()

        results = []
        for collector in self.collectors:
            # The queue may be smaller than one cycle, keep it drained
            writer_task = asyncio.create_task(self.writer.run())
            try:
                results.append(await collector.gather_once(self.queue))
                await self.queue.join()
            finally:
                writer_task.cancel()
                await asyncio.gather(writer_task, return_exceptions=True)

        self.writer.drain()
        return results


def build_log_config(config: Config, cli_log_config: LogConfig | None = None) -> LogConfig:
    """
    Merge the file's logging block with command line overrides.

    Command line settings win; the log file from the config file is used
    when the command line did not name one.
    """
    if cli_log_config is None:
        return LogConfig(
            console_level=config.logging.level,
            console_colors=config.logging.colors,
            file_enabled=config.logging.file is not None,
            file_path=config.logging.file_path,
            file_level=config.logging.file_level,
            file_max_bytes=config.logging.file_max_size * 1024 * 1024,
            file_backup_count=config.logging.file_keep,
            format=config.logging.format,
        )

    if not cli_log_config.file_enabled and config.logging.file:
        cli_log_config.file_enabled = True
        cli_log_config.file_path = config.logging.file
        cli_log_config.file_level = config.logging.file_level
        cli_log_config.file_max_bytes = config.logging.file_max_size * 1024 * 1024
        cli_log_config.file_backup_count = config.logging.file_keep
    return cli_log_config


def load_app_config(config_path: str, cli_log_config: LogConfig | None = None) -> Config:
    """Load configuration, set up logging from it and report warnings."""
    loader = ConfigLoader()
    config = loader.load_file(config_path)

    setup_logging(build_log_config(config, cli_log_config))
    logger.info(f"Loaded configuration from {config_path}")

    for warning in loader.validate(config):
        logger.warning(f"Config warning: {warning}")

    return config


async def run_app(config_path: str, cli_log_config: LogConfig | None = None) -> None:
    """
    Load configuration and run the application until signalled.

    Args:
        config_path: Path to configuration file
        cli_log_config: Logging config from CLI args (overrides file config)
    """
    config = load_app_config(config_path, cli_log_config)
    app = Application(config)
    await app.run()


async def run_once(config_path: str, cli_log_config: LogConfig | None = None) -> bool:
    """Gather once from every input; True if no cycle failed."""
    config = load_app_config(config_path, cli_log_config)
    app = Application(config)
    results = await app.run_once()
    return all(result.ok for result in results)

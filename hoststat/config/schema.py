"""
Configuration schema dataclasses.

Each section is built from its parsed block with ``from_block``; a missing
block yields the defaults.
"""

from dataclasses import dataclass, field

from ..const import DEFAULT_INTERVAL, DEFAULT_LOG_FILE, DEFAULT_QUEUE_SIZE
from .parser import Block, ConfigDocument


def _get_bool(block: Block, name: str, default: bool) -> bool:
    value = block.get_value(name)
    return bool(value) if value is not None else default


def _get_number(block: Block, name: str, default: float) -> float:
    value = block.get_value(name, default)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"'{name}' in {block.type} block must be a number, got {value!r}")
    return value


@dataclass
class DefaultsConfig:
    """Settings inherited by every input."""

    interval: float = DEFAULT_INTERVAL  # seconds

    @classmethod
    def from_block(cls, block: Block | None) -> "DefaultsConfig":
        """Create DefaultsConfig from a parsed 'defaults' block."""
        if block is None:
            return cls()

        interval = float(_get_number(block, "interval", DEFAULT_INTERVAL))
        if interval <= 0:
            raise ValueError(f"defaults interval must be positive, got {interval}")
        return cls(interval=interval)


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "info"
    file: str | None = None
    file_level: str = "debug"
    file_max_size: int = 10  # MB
    file_keep: int = 5
    colors: bool = True
    format: str = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

    @classmethod
    def from_block(cls, block: Block | None) -> "LoggingConfig":
        """Create LoggingConfig from a parsed 'logging' block."""
        if block is None:
            return cls()

        defaults = cls()
        return cls(
            level=str(block.get_value("level", defaults.level)),
            file=block.get_value("file"),
            file_level=str(block.get_value("file_level", defaults.file_level)),
            file_max_size=int(_get_number(block, "file_max_size", defaults.file_max_size)),
            file_keep=int(_get_number(block, "file_keep", defaults.file_keep)),
            colors=_get_bool(block, "colors", defaults.colors),
            format=str(block.get_value("format", defaults.format)),
        )

    @property
    def file_path(self) -> str:
        return self.file or DEFAULT_LOG_FILE


@dataclass
class OutputConfig:
    """Sample queue and writer settings."""

    queue_size: int = DEFAULT_QUEUE_SIZE

    @classmethod
    def from_block(cls, block: Block | None) -> "OutputConfig":
        """Create OutputConfig from a parsed 'output' block."""
        if block is None:
            return cls()

        queue_size = int(_get_number(block, "queue_size", DEFAULT_QUEUE_SIZE))
        if queue_size <= 0:
            raise ValueError(f"output queue_size must be positive, got {queue_size}")
        return cls(queue_size=queue_size)


@dataclass(frozen=True)
class SystemConfig:
    """Options of the ``system`` input."""

    interval_seconds: int = 0  # 0 = use defaults.interval
    collect_user_number: bool = False
    print_configs: bool = False

    @classmethod
    def from_block(cls, block: Block | None) -> "SystemConfig":
        """Create SystemConfig from a parsed 'system' block."""
        if block is None:
            return cls()

        interval = _get_number(block, "interval_seconds", 0)
        if interval < 0:
            raise ValueError(f"interval_seconds must be >= 0, got {interval}")
        if not float(interval).is_integer():
            raise ValueError(f"interval_seconds must be a whole number of seconds, got {interval}")

        return cls(
            interval_seconds=int(interval),
            collect_user_number=_get_bool(block, "collect_user_number", False),
            print_configs=_get_bool(block, "print_configs", False),
        )


@dataclass
class Config:
    """Complete application configuration."""

    defaults: DefaultsConfig = field(default_factory=DefaultsConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    output: OutputConfig = field(default_factory=OutputConfig)

    # Inputs
    system: list[SystemConfig] = field(default_factory=list)

    @classmethod
    def from_document(cls, doc: ConfigDocument) -> "Config":
        """Create Config from a parsed ConfigDocument."""
        config = cls(
            defaults=DefaultsConfig.from_block(doc.get_block("defaults")),
            logging=LoggingConfig.from_block(doc.get_block("logging")),
            output=OutputConfig.from_block(doc.get_block("output")),
        )

        for block in doc.get_blocks("system"):
            config.system.append(SystemConfig.from_block(block))

        return config

    def inputs(self) -> list[tuple[str, SystemConfig]]:
        """(input name, input config) pairs in file order."""
        return [("system", sys_config) for sys_config in self.system]

"""
Configuration schema.

Each section is a dataclass built from its parsed block via `from_block`.
Missing blocks and directives fall back to the built-in defaults, so an
empty document yields a working configuration.
"""

from dataclasses import dataclass, field
from typing import Any

from ..const import (
    DEFAULT_BIND_ADDRESS,
    DEFAULT_EXCLUDED_MOUNTPOINTS,
    DEFAULT_FILESYSTEM_INTERVAL,
    DEFAULT_INTERFACE_PREFIXES,
    DEFAULT_METRIC_PREFIX,
    DEFAULT_NETWORK_INTERVAL,
    DEFAULT_PORT,
    DEFAULT_SYSTEM_INTERVAL,
    DEFAULT_ZPOOL_COMMAND,
    DEFAULT_ZPOOL_INTERVAL,
    DEFAULT_ZPOOL_TIMEOUT,
)
from .parser import Block, ConfigDocument


def _seconds(value: Any, directive: str) -> float:
    """Durations arrive as seconds; bare numbers are seconds too."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"'{directive}' expects a duration, got {value!r}")
    if value <= 0:
        raise ValueError(f"'{directive}' must be positive, got {value!r}")
    return float(value)


def port_number(value: Any) -> int:
    """TCP port 0-65535; 0 lets the OS pick one."""
    if isinstance(value, bool):
        raise ValueError(f"'port' expects a number, got {value!r}")
    port = int(value)
    if not 0 <= port <= 65535:
        raise ValueError(f"port {port} is out of range 0-65535")
    return port


def _bool(block: Block | None, name: str, default: bool) -> bool:
    if block is None:
        return default
    value = block.get_value(name)
    return default if value is None else bool(value)


def _interval(block: Block | None, defaults: "DefaultsConfig", builtin: float) -> float:
    if block is not None:
        value = block.get_value("update_interval")
        if value is not None:
            return _seconds(value, "update_interval")
    if defaults.update_interval is not None:
        return defaults.update_interval
    return builtin


@dataclass
class ExporterConfig:
    """HTTP exporter settings."""

    port: int = DEFAULT_PORT
    bind: str = DEFAULT_BIND_ADDRESS
    prefix: str = DEFAULT_METRIC_PREFIX

    @classmethod
    def from_block(cls, block: Block | None) -> "ExporterConfig":
        if block is None:
            return cls()
        return cls(
            port=port_number(block.get_value("port", DEFAULT_PORT)),
            bind=str(block.get_value("bind", DEFAULT_BIND_ADDRESS)),
            prefix=str(block.get_value("prefix", DEFAULT_METRIC_PREFIX)),
        )


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
        if block is None:
            return cls()
        return cls(
            level=str(block.get_value("level", "info")),
            file=block.get_value("file"),
            file_level=str(block.get_value("file_level", "debug")),
            file_max_size=int(block.get_value("file_max_size", 10)),
            file_keep=int(block.get_value("file_keep", 5)),
            colors=_bool(block, "colors", True),
            format=str(block.get_value("format", cls.format)),
        )


@dataclass
class DefaultsConfig:
    """Settings inherited by every collection task."""

    update_interval: float | None = None  # None = per-task built-in default

    @classmethod
    def from_block(cls, block: Block | None) -> "DefaultsConfig":
        if block is None:
            return cls()
        value = block.get_value("update_interval")
        return cls(update_interval=None if value is None else _seconds(value, "update_interval"))


@dataclass
class SystemConfig:
    """RAM, CPU and swap sampling."""

    enabled: bool = True
    memory: bool = True
    cpu: bool = True
    swap: bool = True
    update_interval: float = DEFAULT_SYSTEM_INTERVAL

    @classmethod
    def from_block(cls, block: Block | None, defaults: DefaultsConfig) -> "SystemConfig":
        return cls(
            enabled=_bool(block, "enabled", True),
            memory=_bool(block, "memory", True),
            cpu=_bool(block, "cpu", True),
            swap=_bool(block, "swap", True),
            update_interval=_interval(block, defaults, DEFAULT_SYSTEM_INTERVAL),
        )


@dataclass
class FilesystemConfig:
    """Mounted filesystem usage sampling."""

    enabled: bool = True
    exclude: list[str] = field(default_factory=lambda: list(DEFAULT_EXCLUDED_MOUNTPOINTS))
    update_interval: float = DEFAULT_FILESYSTEM_INTERVAL

    @classmethod
    def from_block(cls, block: Block | None, defaults: DefaultsConfig) -> "FilesystemConfig":
        exclude = [str(v) for v in block.get_all_values("exclude")] if block else []
        return cls(
            enabled=_bool(block, "enabled", True),
            exclude=exclude or list(DEFAULT_EXCLUDED_MOUNTPOINTS),
            update_interval=_interval(block, defaults, DEFAULT_FILESYSTEM_INTERVAL),
        )


@dataclass
class NetworkConfig:
    """Per-interface byte counter sampling."""

    enabled: bool = True
    interfaces: list[str] = field(default_factory=lambda: list(DEFAULT_INTERFACE_PREFIXES))
    update_interval: float = DEFAULT_NETWORK_INTERVAL

    @classmethod
    def from_block(cls, block: Block | None, defaults: DefaultsConfig) -> "NetworkConfig":
        interfaces = [str(v) for v in block.get_all_values("interface")] if block else []
        return cls(
            enabled=_bool(block, "enabled", True),
            interfaces=interfaces or list(DEFAULT_INTERFACE_PREFIXES),
            update_interval=_interval(block, defaults, DEFAULT_NETWORK_INTERVAL),
        )


@dataclass
class ZpoolConfig:
    """Storage pool capacity sampling via an external command."""

    enabled: bool = True
    command: list[str] = field(default_factory=lambda: list(DEFAULT_ZPOOL_COMMAND))
    timeout: float = DEFAULT_ZPOOL_TIMEOUT
    update_interval: float = DEFAULT_ZPOOL_INTERVAL

    @classmethod
    def from_block(cls, block: Block | None, defaults: DefaultsConfig) -> "ZpoolConfig":
        command = [str(v) for v in block.get_all_values("command")] if block else []
        timeout = block.get_value("timeout") if block else None
        return cls(
            enabled=_bool(block, "enabled", True),
            command=command or list(DEFAULT_ZPOOL_COMMAND),
            timeout=DEFAULT_ZPOOL_TIMEOUT if timeout is None else _seconds(timeout, "timeout"),
            update_interval=_interval(block, defaults, DEFAULT_ZPOOL_INTERVAL),
        )


@dataclass
class Config:
    """Complete application configuration."""

    exporter: ExporterConfig = field(default_factory=ExporterConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    defaults: DefaultsConfig = field(default_factory=DefaultsConfig)
    system: SystemConfig = field(default_factory=SystemConfig)
    filesystem: FilesystemConfig = field(default_factory=FilesystemConfig)
    network: NetworkConfig = field(default_factory=NetworkConfig)
    zpool: ZpoolConfig = field(default_factory=ZpoolConfig)

    @classmethod
    def from_document(cls, document: ConfigDocument) -> "Config":
        defaults = DefaultsConfig.from_block(document.get_block("defaults"))
        return cls(
            exporter=ExporterConfig.from_block(document.get_block("exporter")),
            logging=LoggingConfig.from_block(document.get_block("logging")),
            defaults=defaults,
            system=SystemConfig.from_block(document.get_block("system"), defaults),
            filesystem=FilesystemConfig.from_block(document.get_block("filesystem"), defaults),
            network=NetworkConfig.from_block(document.get_block("network"), defaults),
            zpool=ZpoolConfig.from_block(document.get_block("zpool"), defaults),
        )

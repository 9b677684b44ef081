"""
Configuration loader with file reading and validation.
"""

from pathlib import Path

from .parser import ConfigDocument, ParseError, parse_config, parse_config_file
from .schema import Config


class ConfigError(Exception):
    """Exception raised for configuration errors."""

    pass


class ConfigLoader:
    """
    Loads and validates configuration from files or strings.

    Usage:
        loader = ConfigLoader()
        config = loader.load_file("/etc/hostpoll/config.conf")
        warnings = loader.validate(config)
    """

    # Known directives for each block type
    KNOWN_DIRECTIVES = {
        "exporter": {"port", "bind", "prefix"},
        "logging": {"level", "file", "file_level", "file_max_size", "file_keep", "colors", "format"},
        "defaults": {"update_interval"},
        "system": {"enabled", "memory", "cpu", "swap", "update_interval"},
        "filesystem": {"enabled", "exclude", "update_interval"},
        "network": {"enabled", "interface", "update_interval"},
        "zpool": {"enabled", "command", "timeout", "update_interval"},
    }

    def __init__(self):
        self.last_document: ConfigDocument | None = None

    def load_file(self, path: str | Path) -> Config:
        """
        Load configuration from a file.

        Raises:
            ConfigError: If the file cannot be read or parsed
        """
        path = Path(path)

        if not path.exists():
            raise ConfigError(f"Configuration file not found: {path}")

        if not path.is_file():
            raise ConfigError(f"Not a file: {path}")

        try:
            document = parse_config_file(path)
        except ParseError as e:
            raise ConfigError(f"Failed to parse {path}: {e}") from e
        except OSError as e:
            raise ConfigError(f"Failed to read {path}: {e}") from e

        return self._build(document)

    def load_string(self, source: str, filename: str = "<string>") -> Config:
        """
        Load configuration from a string.

        Raises:
            ConfigError: If the text cannot be parsed
        """
        try:
            document = parse_config(source, filename)
        except ParseError as e:
            raise ConfigError(f"Failed to parse {filename}: {e}") from e

        return self._build(document)

    def _build(self, document: ConfigDocument) -> Config:
        self.last_document = document
        try:
            return Config.from_document(document)
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Invalid configuration: {e}") from e

    def validate(self, config: Config) -> list[str]:
        """
        Validate configuration and return warnings.

        Returns:
            List of warning messages (empty if no issues)
        """
        warnings = []

        if self.last_document is not None:
            warnings.extend(self._check_unknown(self.last_document))

        if config.zpool.enabled and config.zpool.timeout >= config.zpool.update_interval:
            warnings.append(
                f"zpool timeout ({config.zpool.timeout}s) is not shorter than its "
                f"update_interval ({config.zpool.update_interval}s)"
            )

        if config.system.enabled and not (
            config.system.memory or config.system.cpu or config.system.swap
        ):
            warnings.append("system block is enabled but samples nothing")

        return warnings

    def _check_unknown(self, document: ConfigDocument) -> list[str]:
        warnings = []

        for directive in document.directives:
            warnings.append(f"Unknown top-level directive '{directive.name}' (line {directive.line})")

        for block in document.blocks:
            known = self.KNOWN_DIRECTIVES.get(block.type)
            if known is None:
                warnings.append(f"Unknown block '{block.type}' (line {block.line})")
                continue
            for directive in block.directives:
                if directive.name not in known:
                    warnings.append(
                        f"Unknown directive '{directive.name}' in {block.type} block "
                        f"(line {directive.line})"
                    )
            for nested in block.blocks:
                warnings.append(
                    f"Unexpected nested block '{nested.type}' in {block.type} block "
                    f"(line {nested.line})"
                )

        return warnings


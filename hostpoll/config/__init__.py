"""
Configuration parsing module with nginx-like syntax support.
"""

from .loader import ConfigError, ConfigLoader
from .parser import ConfigParser, ParseError
from .schema import Config

__all__ = [
    "Config",
    "ConfigError",
    "ConfigLoader",
    "ConfigParser",
    "ParseError",
]

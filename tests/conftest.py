"""
Pytest configuration and fixtures.
"""

import logging
from pathlib import Path

import pytest

from hostpoll.registry import MetricRegistry, define_host_metrics


@pytest.fixture
def registry() -> MetricRegistry:
    return MetricRegistry()


@pytest.fixture
def metrics(registry: MetricRegistry):
    return define_host_metrics(registry)


@pytest.fixture
def reset_logging():
    """Drop handlers installed by setup_logging."""
    yield
    root = logging.getLogger("hostpoll")
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()


@pytest.fixture
def example_config_path() -> Path:
    """Path to the shipped example config file."""
    return Path(__file__).parent.parent / "config.example.conf"

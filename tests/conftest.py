"""
Test configuration and fixtures for the lightwire container tests.
"""

import io
import textwrap
from pathlib import Path

import pytest

from lightwire import Container
from lightwire.shared.logging import LogLevel, StructuredLogger


@pytest.fixture
def container() -> Container:
    """Fresh container with an empty property bag."""
    return Container()


@pytest.fixture
def log_stream() -> io.StringIO:
    """Stream capturing structured log output."""
    return io.StringIO()


@pytest.fixture
def debug_logger(request, log_stream) -> StructuredLogger:
    """Structured logger at DEBUG level writing to ``log_stream``."""
    return StructuredLogger(
        name=f"lightwire.test.{request.node.name}",
        level=LogLevel.DEBUG,
        output=log_stream
    )


@pytest.fixture
def logged_container(debug_logger) -> Container:
    """Container writing its logs to ``log_stream``."""
    return Container(logger=debug_logger)


@pytest.fixture
def config_dir(tmp_path) -> Path:
    """Configuration directory with a base and a test environment file."""
    (tmp_path / "base.yaml").write_text(textwrap.dedent("""
        cache:
          enabled: false
          backend: memory
          ttl: 30
        feature:
          audit: true
        hosts:
          - alpha
          - beta
    """))
    (tmp_path / "test.yaml").write_text(textwrap.dedent("""
        cache:
          enabled: true
          backend: redis
    """))
    return tmp_path

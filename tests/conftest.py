"""
Pytest configuration and shared fixtures for SwiftKit tests.
"""

import pytest
import tempfile
from pathlib import Path
from typing import Generator

from swiftkit.toolchain.system import SystemDescriptor


def pytest_addoption(parser):
    """Add custom command line options."""
    parser.addoption(
        "--integration",
        action="store_true",
        default=False,
        help="run integration tests that require network access and gpg",
    )


def pytest_collection_modifyitems(config, items):
    """Skip integration tests unless --integration flag is provided."""
    if not config.getoption("--integration"):
        skip_integration = pytest.mark.skip(reason="need --integration option to run")
        for item in items:
            if "integration" in item.keywords:
                item.add_marker(skip_integration)


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "integration: marks tests as integration tests (requires --integration)",
    )


# ============================================================================
# Shared Test Fixtures
# ============================================================================


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create temporary directory for test."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def ubuntu_2004() -> SystemDescriptor:
    """The system most tests install for."""
    return SystemDescriptor("ubuntu", "20.04")


@pytest.fixture
def isolated_env(monkeypatch):
    """Environment without SwiftKit or GitHub Actions variables."""
    for name in (
        "GITHUB_PATH",
        "SWIFTKIT_CACHE_DIR",
        "SWIFTKIT_DOWNLOAD_HOST",
        "SWIFTKIT_KEYS_URL",
        "SWIFTKIT_KEYSERVER",
        "SWIFTKIT_KEY_PUBLISHER",
        "SWIFTKIT_GPG_EXECUTABLE",
        "SWIFTKIT_DOWNLOAD_TIMEOUT",
        "SWIFTKIT_LOCK_TIMEOUT",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def no_network(monkeypatch):
    """Disable network access for tests."""
    import socket

    def guard(*args, **kwargs):
        raise RuntimeError("Network access not allowed in this test")

    monkeypatch.setattr(socket, "socket", guard)


@pytest.fixture(autouse=True)
def reset_caches():
    """Reset module-level caches between tests."""
    from swiftkit.core import platform

    platform.clear_platform_cache()

    yield

    platform.clear_platform_cache()

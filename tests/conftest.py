"""Shared pytest fixtures for the better-next-app test suite.

Provides reusable fixtures for:
- Temporary project roots
- ``InstallOptions`` / ``Settings`` factories
- Mocked installer / typegen collaborators
- Mock subprocess helpers
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable
from unittest.mock import AsyncMock, MagicMock

import pytest

from better_next_app.config import InstallOptions, Settings

TEST_NEXT_VERSION = "16.0.0-canary.1"


# ---------------------------------------------------------------------------
# Paths & Directories
# ---------------------------------------------------------------------------

@pytest.fixture
def tmp_project_dir(tmp_path: Path) -> Path:
    """Existing, empty project root (the scaffolder never creates it)."""
    project_dir = tmp_path / "my-app"
    project_dir.mkdir()
    yield project_dir


# ---------------------------------------------------------------------------
# Options & Settings
# ---------------------------------------------------------------------------

@pytest.fixture
def settings() -> Settings:
    """Settings with a pinned next version so manifests are reproducible."""
    return Settings(test_version=TEST_NEXT_VERSION)


@pytest.fixture
def make_options(tmp_project_dir: Path) -> Callable[..., InstallOptions]:
    """Factory for ``InstallOptions`` rooted at ``tmp_project_dir``.

    Usage:
        def test_something(make_options):
            options = make_options(mode="js", tailwind=True)
    """
    def factory(**overrides: Any) -> InstallOptions:
        values: dict[str, Any] = {
            "app_name": tmp_project_dir.name,
            "root": tmp_project_dir,
            "skip_install": True,
        }
        values.update(overrides)
        return InstallOptions(**values)

    return factory


# ---------------------------------------------------------------------------
# Collaborators
# ---------------------------------------------------------------------------

@pytest.fixture
def mock_install() -> AsyncMock:
    """Stand-in for ``installer.install(package_manager, is_online)``."""
    return AsyncMock(return_value=None)


@pytest.fixture
def mock_typegen() -> AsyncMock:
    """Stand-in for ``installer.run_typegen(package_manager)``."""
    return AsyncMock(return_value=None)


@pytest.fixture
def mock_subprocess():
    """Mock asyncio subprocess for testing command execution.

    Returns a factory that creates mock subprocess instances with configurable
    stdout, stderr, and return codes.

    Usage:
        def test_command(mock_subprocess):
            proc = mock_subprocess(stdout="output", returncode=0)
            with patch("asyncio.create_subprocess_exec", return_value=proc):
                ...
    """
    def factory(
        stdout: str = "",
        stderr: str = "",
        returncode: int = 0,
    ) -> AsyncMock:
        mock_proc = AsyncMock()
        mock_proc.communicate = AsyncMock(
            return_value=(stdout.encode("utf-8"), stderr.encode("utf-8"))
        )
        mock_proc.returncode = returncode
        mock_proc.pid = 99999
        mock_proc.kill = MagicMock()
        mock_proc.wait = AsyncMock(return_value=returncode)
        return mock_proc

    return factory

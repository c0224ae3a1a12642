"""Shared utility functions for better-next-app.

Provides async command execution, JSON / text file I/O helpers that run off
the event loop, and Rich-based console output.
"""

from __future__ import annotations

import asyncio
import json
import os
from pathlib import Path
from typing import Any

from rich.console import Console

console = Console()

# ---------------------------------------------------------------------------
# Async command execution
# ---------------------------------------------------------------------------


async def run_command(
    cmd: list[str],
    cwd: str | Path | None = None,
    timeout: int | None = None,
    capture: bool = True,
    env: dict[str, str] | None = None,
) -> tuple[int, str, str]:
    """Run a command asynchronously.

    Args:
        cmd: List of arguments; the first is the executable.
        cwd: Working directory for the child process.
        timeout: Maximum wall-clock seconds before the process is killed.
            ``None`` waits indefinitely.
        capture: Whether to capture stdout/stderr (if ``False`` they inherit
            the parent's streams, which is what package managers want).
        env: Optional extra environment variables merged on top of ``os.environ``.

    Returns:
        A ``(returncode, stdout, stderr)`` tuple.  If *capture* is ``False``
        the stdout/stderr strings will be empty.
    """
    merged_env: dict[str, str] | None = None
    if env:
        merged_env = {**os.environ, **env}

    stdout_pipe = asyncio.subprocess.PIPE if capture else None
    stderr_pipe = asyncio.subprocess.PIPE if capture else None

    process = await asyncio.create_subprocess_exec(
        *cmd,
        stdout=stdout_pipe,
        stderr=stderr_pipe,
        cwd=str(cwd) if cwd else None,
        env=merged_env,
    )

    try:
        stdout_bytes, stderr_bytes = await asyncio.wait_for(
            process.communicate(), timeout=timeout
        )
    except asyncio.TimeoutError:
        process.kill()
        await process.wait()
        return (-1, "", f"Command timed out after {timeout}s: {' '.join(cmd)}")

    stdout_str = (stdout_bytes or b"").decode("utf-8", errors="replace").strip()
    stderr_str = (stderr_bytes or b"").decode("utf-8", errors="replace").strip()
    return (process.returncode or 0, stdout_str, stderr_str)


# ---------------------------------------------------------------------------
# File I/O
# ---------------------------------------------------------------------------


async def read_text(path: Path) -> str:
    """Read a UTF-8 text file on a worker thread, keeping its line endings."""
    return await asyncio.to_thread(_read_file, path)


async def write_text(path: Path, content: str) -> None:
    """Write a UTF-8 text file on a worker thread, without newline translation."""
    await asyncio.to_thread(_write_file, path, content)


async def save_json(data: dict[str, Any] | list[Any], path: str | Path) -> None:
    """Save data as 2-space indented JSON followed by the platform newline.

    Non-ASCII characters are written as-is.  The write itself is performed in
    a thread-pool executor to avoid blocking the event loop.
    """
    content = json.dumps(data, indent=2, ensure_ascii=False) + os.linesep
    await write_text(Path(path), content)


def _read_file(path: Path) -> str:
    with path.open("r", encoding="utf-8", newline="") as fh:
        return fh.read()


def _write_file(path: Path, content: str) -> None:
    with path.open("w", encoding="utf-8", newline="") as fh:
        fh.write(content)


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


def print_success(message: str) -> None:
    """Print a green success message."""
    console.print(f"[bold green]{message}[/bold green]")


def print_error(message: str) -> None:
    """Print a red error message."""
    console.print(f"[bold red]{message}[/bold red]")


def print_warning(message: str) -> None:
    """Print a yellow warning message."""
    console.print(f"[bold yellow]{message}[/bold yellow]")


def print_bullets(title: str, items: list[str]) -> None:
    """Print a heading followed by one cyan ``- item`` line per entry."""
    console.print(f"\n{title}")
    for item in items:
        console.print(f"- [cyan]{item}[/cyan]", highlight=False)

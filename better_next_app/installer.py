"""Package-manager invocations: dependency install and route typegen."""

from __future__ import annotations

from pathlib import Path

from better_next_app.config import PackageManager
from better_next_app.errors import InstallError
from better_next_app.utils import console, print_warning, run_command

# Keeps install output free of ads and funding prompts.
INSTALL_ENV: dict[str, str] = {
    "ADBLOCK": "1",
    "NODE_ENV": "development",
    "DISABLE_OPENCOLLECTIVE": "1",
}

_EXEC_RUNNERS: dict[PackageManager, list[str]] = {
    PackageManager.NPM: ["npx"],
    PackageManager.PNPM: ["pnpm", "exec"],
    PackageManager.YARN: ["yarn"],
    PackageManager.BUN: ["bunx"],
}


def install_command(package_manager: PackageManager, is_online: bool) -> list[str]:
    cmd = [PackageManager(package_manager).value, "install"]
    if not is_online:
        cmd.append("--offline")
    return cmd


def typegen_command(package_manager: PackageManager) -> list[str]:
    return [*_EXEC_RUNNERS[PackageManager(package_manager)], "next", "typegen"]


async def install(
    package_manager: PackageManager,
    is_online: bool,
    cwd: Path | None = None,
) -> None:
    """Install the project's dependencies, streaming the manager's output.

    Raises:
        InstallError: If the package manager exits with a non-zero code.
    """
    if not is_online:
        print_warning("You appear to be offline.\nFalling back to the local cache.")
    await _run(install_command(package_manager, is_online), cwd, INSTALL_ENV)


async def run_typegen(package_manager: PackageManager, cwd: Path | None = None) -> None:
    """Generate Next.js route types once dependencies are installed.

    Raises:
        InstallError: If the command exits with a non-zero code.
    """
    cmd = typegen_command(package_manager)
    console.print(f"[dim]$ {' '.join(cmd)}[/dim]", highlight=False)
    await _run(cmd, cwd)


async def _run(
    cmd: list[str], cwd: Path | None, env: dict[str, str] | None = None
) -> None:
    try:
        returncode, _, _ = await run_command(cmd, cwd=cwd, capture=False, env=env)
    except FileNotFoundError as exc:
        # Package manager binary not on PATH.
        raise InstallError(cmd, 127) from exc
    if returncode != 0:
        raise InstallError(cmd, returncode)

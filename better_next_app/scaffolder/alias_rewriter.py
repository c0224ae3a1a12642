"""Rewrite the default ``@/`` import prefix in every copied file.

Runs only when the user picked an import alias other than ``@/*``.  Files
are processed by a fixed-size pool of workers inside an ``asyncio.TaskGroup``:
at most ``MAX_CONCURRENT_WRITES`` read-modify-write sequences are in flight,
and the first failure cancels the remaining workers.  Files already rewritten
when a failure happens keep their new content.
"""

from __future__ import annotations

import asyncio
import os
import stat
from collections.abc import Iterator
from pathlib import Path

from better_next_app.config import DEFAULT_IMPORT_ALIAS
from better_next_app.errors import AliasRewriteError
from better_next_app.scaffolder.copier import glob_match

MAX_CONCURRENT_WRITES = 8

DEFAULT_ALIAS_PREFIX = DEFAULT_IMPORT_ALIAS.replace("*", "")

# The alias configs were already patched, .git is not ours to touch, and
# fonts/favicons are binary.
ALIAS_IGNORE_PATTERNS: tuple[str, ...] = (
    "tsconfig.json",
    "jsconfig.json",
    ".git/**/*",
    "**/fonts/**",
    "**/favicon.ico",
)


class AliasRewriter:
    """Replaces ``@/`` with the user's alias prefix under *root*."""

    def __init__(
        self,
        root: Path,
        import_alias: str,
        max_workers: int = MAX_CONCURRENT_WRITES,
    ) -> None:
        if max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        self.root = Path(root)
        self.prefix = import_alias.replace("*", "")
        self.max_workers = max_workers

    def collect_files(self) -> list[Path]:
        """Every path under *root* (dotfiles included) not matched by the ignore list."""
        collected: list[Path] = []
        for dirpath, dirnames, filenames in os.walk(self.root):
            for name in (*dirnames, *filenames):
                path = Path(dirpath) / name
                rel = path.relative_to(self.root).as_posix()
                if any(glob_match(rel, p) for p in ALIAS_IGNORE_PATTERNS):
                    continue
                collected.append(path)
        return sorted(collected)

    async def run(self) -> int:
        """Rewrite all collected files; returns how many paths were visited.

        Raises:
            AliasRewriteError: For the first file that could not be read or
                written.  Other in-flight workers are cancelled.
        """
        files = await asyncio.to_thread(self.collect_files)
        if not files:
            return 0

        pending = iter(files)
        try:
            async with asyncio.TaskGroup() as tg:
                for _ in range(min(self.max_workers, len(files))):
                    tg.create_task(self._worker(pending))
        except ExceptionGroup as group:
            # Only one representative error is reported.
            raise group.exceptions[0]
        return len(files)

    async def _worker(self, pending: Iterator[Path]) -> None:
        # Workers share one iterator; next() never suspends, so each path is
        # handed to exactly one worker.
        for path in pending:
            try:
                await self.rewrite_file(path)
            except OSError as exc:
                raise AliasRewriteError(path, str(exc)) from exc

    async def rewrite_file(self, path: Path) -> bool:
        """Rewrite one path; returns ``True`` if its content changed.

        Directories and other non-regular files are skipped.  Bytes that are
        not valid UTF-8 survive the round trip unchanged.
        """
        return await asyncio.to_thread(self._rewrite_sync, path)

    def _rewrite_sync(self, path: Path) -> bool:
        if not stat.S_ISREG(path.stat().st_mode):
            return False
        with path.open(encoding="utf-8", errors="surrogateescape", newline="") as fh:
            content = fh.read()
        updated = content.replace(DEFAULT_ALIAS_PREFIX, self.prefix)
        if updated == content:
            return False
        with path.open("w", encoding="utf-8", errors="surrogateescape", newline="") as fh:
            fh.write(updated)
        return True


async def rewrite_import_aliases(root: Path, import_alias: str) -> int:
    """Rewrite ``@/`` imports under *root* to *import_alias* (no-op for the default)."""
    if import_alias == DEFAULT_IMPORT_ALIAS:
        return 0
    return await AliasRewriter(root, import_alias).run()

"""Copy a template tree into the project root.

The copy source is described by a ``CopyRuleSet``: include patterns (by
default everything) minus one exclusion per optional toolchain the user did
not pick.  Excluded files are never written, instead of being deleted
afterwards.
"""

from __future__ import annotations

import asyncio
import shutil
from dataclasses import dataclass, field
from fnmatch import fnmatchcase
from pathlib import Path

from better_next_app.config import InstallOptions
from better_next_app.errors import TemplateNotFoundError

# Dotfiles are dropped by most packaging tools, so templates ship them
# without the leading dot and the copy step restores it.
_RENAMES: dict[str, str] = {
    "gitignore": ".gitignore",
    # README.md files are stripped from some bundled distributions.
    "README-template.md": "README.md",
}


def rename_entry(name: str) -> str:
    """Map a template file name to the name it gets in the project."""
    return _RENAMES.get(name, name)


def glob_match(rel_path: str, pattern: str) -> bool:
    """Match a POSIX relative path against a glob where ``**/`` may be empty.

    ``*`` crosses directory separators, so ``"**"`` matches every path and
    ``"**/favicon.ico"`` matches both ``favicon.ico`` and ``app/favicon.ico``.
    """
    if fnmatchcase(rel_path, pattern):
        return True
    if "**/" in pattern:
        return glob_match(rel_path, pattern.replace("**/", "", 1))
    return False


@dataclass
class CopyRuleSet:
    """Ordered include/exclude patterns plus the rename transform.

    Patterns prefixed with ``!`` exclude; all others include.
    """

    patterns: list[str] = field(default_factory=lambda: ["**"])

    @classmethod
    def for_options(cls, options: InstallOptions) -> "CopyRuleSet":
        patterns = ["**"]
        if not options.eslint:
            patterns.append("!eslint.config.mjs")
        if not options.biome:
            patterns.append("!biome.json")
        if not options.tailwind:
            patterns.append("!postcss.config.mjs")
        return cls(patterns=patterns)

    @property
    def includes(self) -> list[str]:
        return [p for p in self.patterns if not p.startswith("!")]

    @property
    def excludes(self) -> list[str]:
        return [p[1:] for p in self.patterns if p.startswith("!")]

    def matches(self, rel_path: str) -> bool:
        """Return ``True`` if the template file at *rel_path* should be copied."""
        if not any(glob_match(rel_path, p) for p in self.includes):
            return False
        return not any(glob_match(rel_path, p) for p in self.excludes)

    def destination(self, rel_path: Path) -> Path:
        """Apply the rename transform to every component of *rel_path*."""
        return Path(*(rename_entry(part) for part in rel_path.parts))


async def copy_tree(src: Path, dest: Path, rules: CopyRuleSet | None = None) -> list[Path]:
    """Copy every file under *src* accepted by *rules* into *dest*.

    The directory structure is preserved.  Each file is copied whole.

    Returns:
        Destination paths of the copied files, in source order.

    Raises:
        TemplateNotFoundError: If *src* is not a directory.
    """
    rules = rules or CopyRuleSet()
    if not await asyncio.to_thread(src.is_dir):
        raise TemplateNotFoundError(src)

    sources = await asyncio.to_thread(_list_files, src)
    written: list[Path] = []
    for source in sources:
        rel = source.relative_to(src)
        if not rules.matches(rel.as_posix()):
            continue
        target = dest / rules.destination(rel)
        await asyncio.to_thread(_copy_file, source, target)
        written.append(target)
    return written


def _list_files(root: Path) -> list[Path]:
    return sorted(p for p in root.rglob("*") if p.is_file())


def _copy_file(source: Path, target: Path) -> None:
    target.parent.mkdir(parents=True, exist_ok=True)
    shutil.copy2(source, target)

"""Exceptions raised by the scaffolder and its boundary helpers."""

from __future__ import annotations

from pathlib import Path


class ScaffoldError(Exception):
    """Base class for every error the CLI reports as a failed run."""


class TemplateNotFoundError(ScaffoldError):
    """Raised when the resolved template directory does not exist."""

    def __init__(self, template_dir: Path) -> None:
        self.template_dir = template_dir
        super().__init__(f"Template directory not found: {template_dir}")


class AliasRewriteError(ScaffoldError):
    """Raised when rewriting the import alias in a copied file fails.

    Files rewritten before the failure keep their new content.
    """

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        super().__init__(f"Failed to rewrite import alias in {path}: {reason}")


class InstallError(ScaffoldError):
    """Raised when the package manager (install or typegen) exits non-zero."""

    def __init__(self, command: list[str], returncode: int) -> None:
        self.command = command
        self.returncode = returncode
        super().__init__(f"{' '.join(command)} exited with code {returncode}")


class InvalidInputError(ScaffoldError):
    """Raised when CLI input (name, alias, directory) is rejected."""

    def __init__(self, field: str, problems: list[str]) -> None:
        self.field = field
        self.problems = problems
        super().__init__(f"Invalid {field}: {', '.join(problems)}")

"""Input checks performed by the CLI before the scaffolder runs."""

from __future__ import annotations

import os
import re
from pathlib import Path
from urllib.parse import quote

import httpx

from better_next_app.errors import InvalidInputError

NPM_REGISTRY_URL = "https://registry.npmjs.org"

_MAX_NAME_LENGTH = 214

# Node core modules and names npm refuses outright.
_RESERVED_NAMES = frozenset({
    "assert", "async_hooks", "buffer", "child_process", "cluster", "console",
    "constants", "crypto", "dgram", "dns", "domain", "events", "fs", "http",
    "https", "inspector", "module", "net", "os", "path", "perf_hooks",
    "process", "punycode", "querystring", "readline", "repl", "stream",
    "string_decoder", "sys", "timers", "tls", "trace_events", "tty", "url",
    "util", "v8", "vm", "worker_threads", "zlib",
    "node_modules", "favicon.ico",
})

_SCOPED_NAME = re.compile(r"^(?:@([^/]+?)/)?([^/]+?)$")

# Files that may already sit in a target directory without conflicting
# with a generated project.
ALLOWED_EXISTING_FILES = frozenset({
    ".git",
    ".gitignore",
    ".gitkeep",
    "LICENSE",
    "license",
    "README.md",
    "readme.md",
})


def validate_npm_name(name: str) -> list[str]:
    """Return the problems that make *name* unusable as a new npm package.

    An empty list means the name is valid.

    Examples::

        validate_npm_name("my-app")  -> []
        validate_npm_name("My App")  -> ["name can no longer contain capital letters", ...]
    """
    if not name:
        return ["name length must be greater than zero"]

    problems: list[str] = []
    if name.startswith("."):
        problems.append("name cannot start with a period")
    if name.startswith("_"):
        problems.append("name cannot start with an underscore")
    if name.strip() != name:
        problems.append("name cannot contain leading or trailing spaces")
    if name.lower() in _RESERVED_NAMES:
        problems.append(f"{name} is a blacklisted or core module name")
    if len(name) > _MAX_NAME_LENGTH:
        problems.append(f"name can no longer contain more than {_MAX_NAME_LENGTH} characters")
    if name.lower() != name:
        problems.append("name can no longer contain capital letters")
    if re.search(r"[~'!()*]", name.split("/")[-1]):
        problems.append('name can no longer contain special characters ("~\'!()*")')

    if quote(name, safe="") != name:
        match = _SCOPED_NAME.match(name)
        scope, package = (match.group(1), match.group(2)) if match else (None, None)
        url_safe = (
            scope is not None
            and quote(scope, safe="") == scope
            and quote(package, safe="") == package
        )
        if not url_safe:
            problems.append("name can only contain URL-friendly characters")

    return problems


def conflicting_files(path: Path) -> list[str]:
    """Entries in *path* that would collide with a generated project.

    A missing directory has no conflicts.
    """
    if not path.exists():
        return []
    if not path.is_dir():
        raise InvalidInputError("directory", [f"{path} exists but is not a directory"])
    return sorted(
        entry.name for entry in path.iterdir() if entry.name not in ALLOWED_EXISTING_FILES
    )


def is_writable(path: Path) -> bool:
    """Return ``True`` if files can be created in the directory *path*."""
    return os.access(path, os.W_OK | os.X_OK)


async def is_online(timeout: float = 3.0) -> bool:
    """Return ``True`` if the npm registry answers within *timeout* seconds."""
    try:
        async with httpx.AsyncClient(timeout=httpx.Timeout(timeout)) as client:
            await client.head(NPM_REGISTRY_URL)
    except httpx.HTTPError:
        return False
    return True

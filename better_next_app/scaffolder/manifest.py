"""``package.json`` synthesis and package-manager specific files.

``build_manifest`` is a pure function of the install options and settings;
writing happens separately so the manifest can be inspected in tests.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from better_next_app.config import (
    Bundler,
    InstallOptions,
    PackageManager,
    Settings,
    TemplateMode,
)
from better_next_app.utils import save_json

from .templates import TemplateRenderer

# Do not rename or format. The React sync script relies on this line.
NEXTJS_REACT_PEER_VERSION = "19.2.3"

MANIFEST_VERSION = "0.1.0"

# Packages whose install scripts are skipped: sharp ships prebuilt binaries
# for every platform next-swc supports, and unrs-resolver is not needed.
IGNORED_BUILD_DEPENDENCIES: tuple[str, ...] = ("sharp", "unrs-resolver")

PNPM_WORKSPACE_FILE = "pnpm-workspace.yaml"


def sorted_deps(deps: dict[str, str]) -> dict[str, str]:
    """Return *deps* with keys in alphabetical order."""
    return {name: deps[name] for name in sorted(deps)}


def build_scripts(options: InstallOptions) -> dict[str, str]:
    bundler_flags = " --webpack" if options.bundler == Bundler.WEBPACK else ""
    scripts = {
        "dev": f"next dev{bundler_flags}",
        "build": f"next build{bundler_flags}",
        "start": "next start",
    }
    if options.eslint:
        scripts["lint"] = "eslint"
    if options.biome:
        scripts["lint"] = "biome check"
        scripts["format"] = "biome format --write"
    if options.is_api:
        scripts.pop("lint", None)
        scripts.pop("format", None)
    return scripts


def build_dependencies(options: InstallOptions, settings: Settings) -> dict[str, str]:
    deps = {
        "react": NEXTJS_REACT_PEER_VERSION,
        "react-dom": NEXTJS_REACT_PEER_VERSION,
        "next": settings.next_version,
    }
    if options.bundler == Bundler.RSPACK:
        deps["next-rspack"] = settings.rspack_dependency
    if options.is_api:
        del deps["react"]
        del deps["react-dom"]
    return sorted_deps(deps)


def build_dev_dependencies(options: InstallOptions, settings: Settings) -> dict[str, str]:
    dev_deps: dict[str, str] = {}
    if options.react_compiler:
        dev_deps["babel-plugin-react-compiler"] = "1.0.0"
    if options.mode == TemplateMode.TS:
        dev_deps.update({
            "typescript": "^5",
            "@types/node": "^20",
            "@types/react": "^19",
            "@types/react-dom": "^19",
        })
    if options.tailwind:
        dev_deps.update({
            "@tailwindcss/postcss": "^4",
            "tailwindcss": "^4",
        })
    if options.eslint:
        dev_deps.update({
            "eslint": "^9",
            "eslint-config-next": settings.next_version,
        })
    if options.biome:
        dev_deps["@biomejs/biome"] = "2.2.0"
    if options.is_api:
        # @types/react stays: generated route types under .next/types import it.
        dev_deps.pop("@types/react-dom", None)
    return sorted_deps(dev_deps)


def build_manifest(options: InstallOptions, settings: Settings | None = None) -> dict[str, Any]:
    """Assemble the ``package.json`` content for *options*.

    An empty ``devDependencies`` map is left out entirely.  For bun the
    manifest also lists the ignored build dependencies in both
    ``ignoreScripts`` and ``trustedDependencies`` (bun needs both to stay
    quiet about them).
    """
    settings = settings or Settings()
    manifest: dict[str, Any] = {
        "name": options.app_name,
        "version": MANIFEST_VERSION,
        "private": True,
        "scripts": build_scripts(options),
        "dependencies": build_dependencies(options, settings),
    }
    dev_deps = build_dev_dependencies(options, settings)
    if dev_deps:
        manifest["devDependencies"] = dev_deps

    if options.package_manager == PackageManager.BUN:
        manifest["ignoreScripts"] = list(IGNORED_BUILD_DEPENDENCIES)
        manifest["trustedDependencies"] = list(IGNORED_BUILD_DEPENDENCIES)

    return manifest


async def write_manifest(root: Path, manifest: dict[str, Any]) -> Path:
    """Write ``package.json`` to *root* (2-space indent, platform newline)."""
    path = root / "package.json"
    await save_json(manifest, path)
    return path


async def write_pnpm_workspace(root: Path, renderer: TemplateRenderer | None = None) -> Path:
    """Write ``pnpm-workspace.yaml`` declaring *root* as a single-package workspace.

    ``packages`` is required by pnpm 9; ``ignoredBuiltDependencies`` is the
    pnpm 10 setting that silences the build-script warnings.
    """
    renderer = renderer or TemplateRenderer()
    return await renderer.render_to_file(
        f"{PNPM_WORKSPACE_FILE}.j2",
        root / PNPM_WORKSPACE_FILE,
        {"ignored_built_dependencies": list(IGNORED_BUILD_DEPENDENCIES)},
    )


async def write_package_files(
    options: InstallOptions,
    settings: Settings | None = None,
    renderer: TemplateRenderer | None = None,
) -> dict[str, Any]:
    """Build and write ``package.json`` plus the package-manager extras.

    Returns:
        The manifest that was written.
    """
    manifest = build_manifest(options, settings)
    if options.package_manager == PackageManager.PNPM:
        await write_pnpm_workspace(options.root, renderer)
    await write_manifest(options.root, manifest)
    return manifest

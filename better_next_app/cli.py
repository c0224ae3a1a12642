"""Command-line entry point.

Non-interactive: every choice comes from flags, anything not given uses the
defaults of ``InstallOptions``.

Usage::

    better-next-app my-app --tailwind --eslint --src-dir
    better-next-app ./api --api --use-pnpm --skip-install
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

from pydantic import ValidationError as PydanticValidationError

from better_next_app import __version__
from better_next_app.config import (
    DEFAULT_IMPORT_ALIAS,
    Bundler,
    InstallOptions,
    PackageManager,
    Settings,
    TemplateMode,
    TemplateType,
)
from better_next_app.errors import InvalidInputError, ScaffoldError
from better_next_app.scaffolder import install_template
from better_next_app.utils import console, print_error, print_success
from better_next_app.validate import (
    conflicting_files,
    is_online,
    is_writable,
    validate_npm_name,
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="better-next-app",
        description="Scaffold a Next.js project from a bundled template",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  better-next-app my-app\n"
            "  better-next-app my-app --js --tailwind --biome --use-pnpm\n"
            "  better-next-app my-api --api --src-dir --import-alias '~/*'\n"
        ),
    )
    parser.add_argument("directory", help="Directory to create the project in")
    parser.add_argument("--version", action="version", version=__version__)

    lang = parser.add_mutually_exclusive_group()
    lang.add_argument("--ts", "--typescript", dest="mode", action="store_const",
                      const=TemplateMode.TS, help="TypeScript project (default)")
    lang.add_argument("--js", "--javascript", dest="mode", action="store_const",
                      const=TemplateMode.JS, help="JavaScript project")

    parser.add_argument("--tailwind", action="store_true", help="Add Tailwind CSS")
    lint = parser.add_mutually_exclusive_group()
    lint.add_argument("--eslint", action="store_true", help="Add ESLint")
    lint.add_argument("--biome", action="store_true", help="Add Biome")

    kind = parser.add_mutually_exclusive_group()
    kind.add_argument("--api", action="store_true", help="API-only project (no React)")
    kind.add_argument("--empty", action="store_true", help="Minimal template")

    parser.add_argument("--src-dir", action="store_true", help="Put sources under src/")
    parser.add_argument("--import-alias", default=DEFAULT_IMPORT_ALIAS,
                        help=f"Import alias (default: {DEFAULT_IMPORT_ALIAS})")

    bundler = parser.add_mutually_exclusive_group()
    bundler.add_argument("--webpack", dest="bundler", action="store_const",
                         const=Bundler.WEBPACK, help="Use webpack instead of Turbopack")
    bundler.add_argument("--rspack", dest="bundler", action="store_const",
                         const=Bundler.RSPACK, help="Use Rspack via next-rspack")

    parser.add_argument("--react-compiler", action="store_true",
                        help="Enable the React Compiler")

    pm = parser.add_mutually_exclusive_group()
    for manager in PackageManager:
        pm.add_argument(f"--use-{manager.value}", dest="package_manager",
                        action="store_const", const=manager,
                        help=f"Install with {manager.value}")

    parser.add_argument("--skip-install", action="store_true",
                        help="Write package.json without installing")
    parser.set_defaults(
        mode=TemplateMode.TS,
        bundler=Bundler.TURBOPACK,
        package_manager=PackageManager.NPM,
    )
    return parser


def select_template(args: argparse.Namespace) -> TemplateType:
    if args.api:
        return TemplateType.APP_API
    if args.tailwind:
        return TemplateType.APP_TW_EMPTY if args.empty else TemplateType.APP_TW
    return TemplateType.APP_EMPTY if args.empty else TemplateType.APP


def build_options(args: argparse.Namespace, root: Path) -> InstallOptions:
    """Turn parsed flags into ``InstallOptions``.

    ``is_online`` is left at its default; ``run`` fills it in once the target
    directory has been prepared.

    Raises:
        InvalidInputError: If the model rejects a value (e.g. the import alias).
    """
    try:
        return InstallOptions(
            app_name=root.name,
            root=root,
            package_manager=args.package_manager,
            template=select_template(args),
            mode=args.mode,
            tailwind=args.tailwind,
            eslint=args.eslint,
            biome=args.biome,
            src_dir=args.src_dir,
            skip_install=args.skip_install,
            react_compiler=args.react_compiler,
            import_alias=args.import_alias,
            bundler=args.bundler,
        )
    except PydanticValidationError as exc:
        errors = exc.errors()
        field = " ".join(str(part) for part in errors[0]["loc"]).replace("_", " ")
        problems = [err["msg"].removeprefix("Value error, ") for err in errors]
        raise InvalidInputError(field, problems) from exc


def prepare_root(directory: str | Path) -> Path:
    """Resolve and create the target directory after checking it is usable.

    Raises:
        InvalidInputError: If the name is not a valid npm package name or the
            directory holds conflicting files or is not writable.
    """
    root = Path(directory).expanduser().resolve()
    problems = validate_npm_name(root.name)
    if problems:
        raise InvalidInputError("project name", problems)

    conflicts = conflicting_files(root)
    if conflicts:
        raise InvalidInputError(
            "directory", [f"{root} contains files that could conflict: {', '.join(conflicts)}"]
        )

    root.mkdir(parents=True, exist_ok=True)
    if not is_writable(root):
        raise InvalidInputError("directory", [f"{root} is not writable"])
    return root


async def run(args: argparse.Namespace, settings: Settings) -> Path:
    # Options are validated before anything is created on disk.
    options = build_options(args, Path(args.directory).expanduser().resolve())
    root = prepare_root(options.root)
    if not args.skip_install:
        options = options.model_copy(update={"is_online": await is_online()})

    console.print(f"Creating a new Next.js app in [green]{root}[/green].\n")
    return await install_template(options, settings)


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for ``better-next-app`` / ``python -m better_next_app``."""
    args = build_parser().parse_args(argv)
    try:
        root = asyncio.run(run(args, Settings.from_env()))
    except ScaffoldError as exc:
        print_error(f"Error: {exc}")
        return 1

    print_success(f"Success! Created {root.name} at {root}")
    return 0


if __name__ == "__main__":
    sys.exit(main())

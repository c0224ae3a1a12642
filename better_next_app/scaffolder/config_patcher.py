"""Targeted rewrites of the generated Next config and path-alias config.

Every patch is a single fixed-string substitution against text the bundled
templates are known to contain (the anchors below).  A missing anchor leaves
the file unchanged; ``tests/test_scaffolder/test_templates.py`` checks that
every shipped template still carries its anchors.
"""

from __future__ import annotations

from pathlib import Path

from better_next_app.config import DEFAULT_IMPORT_ALIAS, TemplateMode
from better_next_app.utils import read_text, write_text

RSPACK_IMPORT = 'import withRspack from "next-rspack";\n\n'
RSPACK_EXPORT_ANCHOR = "export default nextConfig;"
RSPACK_EXPORT = "export default withRspack(nextConfig);"

REACT_COMPILER_ANCHOR = "/* config options here */\n"
REACT_COMPILER_OPTION = "  reactCompiler: true,\n"

PATH_ALIAS_ANCHOR = f'"{DEFAULT_IMPORT_ALIAS}": ["./*"]'
PATH_ALIAS_SRC = f'"{DEFAULT_IMPORT_ALIAS}": ["./src/*"]'
PATH_ALIAS_KEY = f'"{DEFAULT_IMPORT_ALIAS}":'


def next_config_name(mode: TemplateMode) -> str:
    return "next.config.mjs" if mode == TemplateMode.JS else "next.config.ts"


def path_alias_config_name(mode: TemplateMode) -> str:
    return "jsconfig.json" if mode == TemplateMode.JS else "tsconfig.json"


# -- Pure text patches ------------------------------------------------------


def patch_rspack(text: str) -> str:
    """Import the Rspack plugin and wrap the default export with it."""
    return RSPACK_IMPORT + text.replace(RSPACK_EXPORT_ANCHOR, RSPACK_EXPORT, 1)


def patch_react_compiler(text: str) -> str:
    """Turn on ``reactCompiler`` below the config-options placeholder."""
    return text.replace(
        REACT_COMPILER_ANCHOR, REACT_COMPILER_ANCHOR + REACT_COMPILER_OPTION, 1
    )


def patch_path_alias(text: str, src_dir: bool, import_alias: str) -> str:
    """Point the alias at ``./src/*`` if requested, then rename the alias key.

    The target switch runs first: it anchors on the default key, which the
    rename step would otherwise have replaced already.
    """
    if src_dir:
        text = text.replace(PATH_ALIAS_ANCHOR, PATH_ALIAS_SRC, 1)
    return text.replace(PATH_ALIAS_KEY, f'"{import_alias}":', 1)


# -- File patches -----------------------------------------------------------


async def apply_rspack(root: Path, mode: TemplateMode) -> Path:
    config_file = root / next_config_name(mode)
    await write_text(config_file, patch_rspack(await read_text(config_file)))
    return config_file


async def apply_react_compiler(root: Path, mode: TemplateMode) -> Path:
    config_file = root / next_config_name(mode)
    await write_text(config_file, patch_react_compiler(await read_text(config_file)))
    return config_file


async def apply_path_alias(
    root: Path, mode: TemplateMode, src_dir: bool, import_alias: str
) -> Path:
    """Patch ``tsconfig.json`` (ts) or ``jsconfig.json`` (js) in *root*."""
    config_file = root / path_alias_config_name(mode)
    text = await read_text(config_file)
    await write_text(config_file, patch_path_alias(text, src_dir, import_alias))
    return config_file

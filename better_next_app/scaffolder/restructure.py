"""Move the top-level source folders under ``src/``."""

from __future__ import annotations

import asyncio
import os
from pathlib import Path

from better_next_app.config import TemplateMode, TemplateType
from better_next_app.utils import read_text, write_text

SRC_DIR_NAMES: tuple[str, ...] = ("app", "pages", "styles")


async def move_to_src(root: Path) -> list[str]:
    """Move each of ``SRC_DIR_NAMES`` present in *root* into ``root/src``.

    A folder the template does not have is skipped; any other failure
    (e.g. ``PermissionError``) propagates.

    Returns:
        The names that were moved.
    """
    src = root / "src"
    await asyncio.to_thread(src.mkdir, parents=True, exist_ok=True)

    async def _move(name: str) -> str | None:
        try:
            await asyncio.to_thread(os.rename, root / name, src / name)
        except FileNotFoundError:
            return None
        return name

    results = await asyncio.gather(*(_move(name) for name in SRC_DIR_NAMES))
    return [name for name in results if name is not None]


def _is_app_router(template: TemplateType | str) -> bool:
    value = template.value if isinstance(template, TemplateType) else template
    return value.startswith("app")


def entry_page_path(template: TemplateType | str, mode: TemplateMode) -> Path:
    """Location of the entry page inside ``src/``, relative to the project root."""
    ext = "tsx" if mode == TemplateMode.TS else "js"
    if _is_app_router(template):
        return Path("src") / "app" / f"page.{ext}"
    return Path("src") / "pages" / f"index.{ext}"


async def fix_entry_page(
    root: Path, template: TemplateType | str, mode: TemplateMode
) -> Path:
    """Rewrite "Get started by editing app/page" to mention the ``src/`` path."""
    old = "app/page" if _is_app_router(template) else "pages/index"
    page = root / entry_page_path(template, mode)
    text = await read_text(page)
    await write_text(page, text.replace(old, f"src/{old}", 1))
    return page


async def restructure(
    root: Path, template: TemplateType | str, mode: TemplateMode
) -> list[str]:
    """Move source folders under ``src/`` and fix the entry page reference."""
    moved = await move_to_src(root)
    if template != TemplateType.APP_API:
        await fix_entry_page(root, template, mode)
    return moved

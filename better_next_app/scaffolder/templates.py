"""Template lookup and Jinja2 rendering for project scaffolding.

Project templates are plain directory trees shipped inside the package under
``better_next_app/templates/<template>/<mode>/`` and are copied verbatim.  The
few files the scaffolder synthesizes itself (``pnpm-workspace.yaml``) are
Jinja2 templates under ``better_next_app/scaffolder/partials/``.
"""

from __future__ import annotations

import asyncio
import os
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, StrictUndefined, select_autoescape

from better_next_app.config import TemplateMode, TemplateType


# ---------------------------------------------------------------------------
# Template directory discovery
# ---------------------------------------------------------------------------

TEMPLATES_ROOT = Path(__file__).resolve().parent.parent / "templates"

_DEFAULT_PARTIALS_DIR = Path(__file__).parent / "partials"


def get_template_dir(template: TemplateType | str, mode: TemplateMode | str) -> Path:
    """Return the directory holding *template* in language *mode*.

    Pure path arithmetic: nothing is checked on disk, a bad combination
    surfaces later as a copy error.
    """
    return TEMPLATES_ROOT / _value(template) / _value(mode)


def get_template_file(
    template: TemplateType | str, mode: TemplateMode | str, file: str
) -> Path:
    """Return the path of *file* inside a template, e.g. ``"next.config.ts"``."""
    return get_template_dir(template, mode) / file


def _value(member: Any) -> str:
    return member.value if hasattr(member, "value") else str(member)


# ---------------------------------------------------------------------------
# TemplateRenderer
# ---------------------------------------------------------------------------


class TemplateRenderer:
    """Renders Jinja2 partials for files the scaffolder generates itself.

    Output uses the platform line separator so generated files match the
    ``package.json`` written next to them.
    """

    def __init__(self, template_dir: str | Path | None = None) -> None:
        if template_dir is None:
            template_dir = _DEFAULT_PARTIALS_DIR
        self.template_dir = Path(template_dir)
        self.env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            autoescape=select_autoescape([]),
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
            undefined=StrictUndefined,
            newline_sequence=os.linesep,
        )

    def render(self, template_path: str, context: dict[str, Any]) -> str:
        """Render a single partial with the provided context.

        Args:
            template_path: Path relative to the partials directory (e.g.
                ``"pnpm-workspace.yaml.j2"``).
            context: Dictionary of variables available inside the template.

        Returns:
            The rendered content as a string.
        """
        template = self.env.get_template(template_path)
        return template.render(**context)

    async def render_to_file(
        self,
        template_path: str,
        output_path: str | Path,
        context: dict[str, Any],
    ) -> Path:
        """Render a partial and write the result to *output_path*."""
        content = self.render(template_path, context)
        out = Path(output_path)
        await asyncio.to_thread(_write_file, out, content)
        return out


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _write_file(path: Path, content: str) -> None:
    """Synchronous helper: write content without newline translation."""
    with path.open("w", encoding="utf-8", newline="") as fh:
        fh.write(content)

"""better-next-app scaffolder -- materializes a Next.js project from a template.

Quick usage::

    from better_next_app.config import InstallOptions
    from better_next_app.scaffolder import install_template

    options = InstallOptions(app_name="my-app", root=Path("/tmp/my-app"))
    await install_template(options)
"""

from better_next_app.scaffolder.generator import ProjectGenerator, install_template
from better_next_app.scaffolder.templates import (
    TemplateRenderer,
    get_template_dir,
    get_template_file,
)

__all__ = [
    "ProjectGenerator",
    "TemplateRenderer",
    "get_template_dir",
    "get_template_file",
    "install_template",
]

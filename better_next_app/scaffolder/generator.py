"""Main scaffolding orchestrator.

Takes an ``InstallOptions`` and materializes a Next.js project in
``options.root``: copy the template, patch configs, rewrite the import alias,
move sources under ``src/``, write ``package.json``, then install and run
typegen.  There is no rollback: a failure after the copy leaves the target
directory partially adapted.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import Any

from better_next_app import installer
from better_next_app.config import Bundler, InstallOptions, PackageManager, Settings
from better_next_app.utils import console, print_bullets, print_error

from . import config_patcher
from .alias_rewriter import rewrite_import_aliases
from .copier import CopyRuleSet, copy_tree
from .manifest import write_package_files
from .restructure import restructure
from .templates import TemplateRenderer, get_template_dir

InstallFn = Callable[[PackageManager, bool], Awaitable[None]]
TypegenFn = Callable[[PackageManager], Awaitable[None]]


class ProjectGenerator:
    """Runs every scaffolding step for one ``InstallOptions``.

    The installer and typegen collaborators are injectable so the flow can
    be exercised without a package manager on ``PATH``.
    """

    def __init__(
        self,
        options: InstallOptions,
        settings: Settings | None = None,
        *,
        install: InstallFn | None = None,
        typegen: TypegenFn | None = None,
        renderer: TemplateRenderer | None = None,
    ) -> None:
        self.options = options
        self.settings = settings or Settings()
        self.renderer = renderer or TemplateRenderer()
        root = options.root
        self._install = install or (
            lambda pm, online: installer.install(pm, online, cwd=root)
        )
        self._typegen = typegen or (lambda pm: installer.run_typegen(pm, cwd=root))

    # -- Public API --------------------------------------------------------

    async def generate(self) -> Path:
        """Generate the project and (unless ``skip_install``) install it.

        Returns:
            The project root.
        """
        opts = self.options
        root = opts.root
        console.print(f"[bold]Using {opts.package_manager.value}.[/bold]")

        # 1. Copy the template tree
        console.print(f"\nInitializing project with template: {opts.template.value}\n")
        await copy_tree(
            get_template_dir(opts.template, opts.mode),
            root,
            CopyRuleSet.for_options(opts),
        )

        # 2. Patch next.config and the path-alias config
        if opts.bundler == Bundler.RSPACK:
            await config_patcher.apply_rspack(root, opts.mode)
        if opts.react_compiler:
            await config_patcher.apply_react_compiler(root, opts.mode)
        await config_patcher.apply_path_alias(
            root, opts.mode, opts.src_dir, opts.import_alias
        )

        # 3. Rewrite "@/" imports for a custom alias
        await rewrite_import_aliases(root, opts.import_alias)

        # 4. Move sources under src/
        if opts.src_dir:
            await restructure(root, opts.template, opts.mode)

        # 5. package.json and package-manager extras
        manifest = await write_package_files(opts, self.settings, self.renderer)

        if opts.skip_install:
            return root

        # 6. Install, then best-effort typegen
        await self._install_dependencies(manifest)
        return root

    # -- Install -----------------------------------------------------------

    async def _install_dependencies(self, manifest: dict[str, Any]) -> None:
        print_bullets("Installing dependencies:", list(manifest["dependencies"]))
        dev_deps = manifest.get("devDependencies")
        if dev_deps:
            print_bullets("Installing devDependencies:", list(dev_deps))
        console.print()

        await self._install(self.options.package_manager, self.options.is_online)
        try:
            console.print()
            await self._typegen(self.options.package_manager)
            console.print()
        except Exception as exc:
            # Project creation still succeeds without generated types.
            print_error(f"Error running typegen: {exc}")


async def install_template(
    options: InstallOptions,
    settings: Settings | None = None,
    **collaborators: Any,
) -> Path:
    """Convenience wrapper: ``ProjectGenerator(options, settings).generate()``."""
    return await ProjectGenerator(options, settings, **collaborators).generate()

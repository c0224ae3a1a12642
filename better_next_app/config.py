"""better-next-app configuration.

Typed input for the scaffolder. ``InstallOptions`` is the immutable option set
produced by the CLI layer; ``Settings`` carries the few process-wide overrides
(read once from the environment at the boundary and then threaded through the
rest of the system explicitly).
"""

from __future__ import annotations

import os
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

from better_next_app import __version__

DEFAULT_IMPORT_ALIAS = "@/*"

# Environment variable overriding the published ``next`` version. When the
# value is an absolute path it also points at a locally packed ``next``
# tarball, next to which a packed ``next-rspack`` archive is expected.
TEST_VERSION_ENV = "NEXT_PRIVATE_TEST_VERSION"


class PackageManager(str, Enum):
    NPM = "npm"
    PNPM = "pnpm"
    YARN = "yarn"
    BUN = "bun"


class TemplateType(str, Enum):
    """Template variants shipped with the package (App Router only)."""

    APP = "app"
    APP_API = "app-api"
    APP_EMPTY = "app-empty"
    APP_TW = "app-tw"
    APP_TW_EMPTY = "app-tw-empty"


class TemplateMode(str, Enum):
    JS = "js"
    TS = "ts"


class Bundler(str, Enum):
    """Build tool selection. Turbopack is the Next.js default."""

    TURBOPACK = "turbopack"
    WEBPACK = "webpack"
    RSPACK = "rspack"


class InstallOptions(BaseModel):
    """Everything the scaffolder needs to materialize one project.

    Constructed once by the CLI layer and never mutated afterwards.
    """

    model_config = ConfigDict(frozen=True)

    app_name: str = Field(..., description="Project name written to package.json")
    root: Path = Field(..., description="Absolute path of the (existing) target directory")
    package_manager: PackageManager = Field(default=PackageManager.NPM)
    is_online: bool = Field(default=True)
    template: TemplateType = Field(default=TemplateType.APP)
    mode: TemplateMode = Field(default=TemplateMode.TS)
    tailwind: bool = False
    eslint: bool = False
    biome: bool = False
    src_dir: bool = False
    skip_install: bool = False
    react_compiler: bool = False
    import_alias: str = Field(default=DEFAULT_IMPORT_ALIAS)
    bundler: Bundler = Field(default=Bundler.TURBOPACK)

    @field_validator("root")
    @classmethod
    def _root_must_be_absolute(cls, value: Path) -> Path:
        if not value.is_absolute():
            raise ValueError(f"root must be an absolute path, got {value}")
        return value

    @field_validator("import_alias")
    @classmethod
    def _alias_must_end_with_wildcard(cls, value: str) -> str:
        if not value.endswith("/*"):
            raise ValueError("import alias must end with '/*'")
        return value

    @property
    def is_api(self) -> bool:
        return self.template == TemplateType.APP_API

    @property
    def alias_prefix(self) -> str:
        """The import alias with its wildcard stripped, e.g. ``"~/"``."""
        return self.import_alias.replace("*", "")


class Settings(BaseModel):
    """Process-wide overrides, populated once at the boundary."""

    test_version: str | None = Field(
        default=None,
        description="Override for the published next version (tests and CI)",
    )

    @property
    def next_version(self) -> str:
        """Version used for ``next``, ``eslint-config-next`` and ``next-rspack``."""
        return self.test_version or __version__

    @property
    def rspack_dependency(self) -> str:
        """Dependency specifier for ``next-rspack``.

        Points at a packed local archive when ``test_version`` is an absolute
        path, otherwise at the same version as ``next``.
        """
        if self.test_version and os.path.isabs(self.test_version):
            return os.path.abspath(
                os.path.join(
                    os.path.dirname(self.test_version),
                    "../next-rspack/next-rspack-packed.tgz",
                )
            )
        return self.next_version

    @classmethod
    def from_env(cls) -> "Settings":
        """Build ``Settings`` from environment variables.

        Recognised variables (all optional): NEXT_PRIVATE_TEST_VERSION.
        """
        return cls(test_version=os.environ.get(TEST_VERSION_ENV) or None)

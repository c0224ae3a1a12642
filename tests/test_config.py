"""Unit tests for InstallOptions and Settings (better_next_app.config).

Tests cover:
- InstallOptions defaults, immutability, root/alias validation
- InstallOptions derived properties (is_api, alias_prefix)
- Settings next_version / rspack_dependency resolution
- Settings.from_env
"""

from __future__ import annotations

import os
from pathlib import Path
from unittest.mock import patch

import pytest
from pydantic import ValidationError

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


# ---------------------------------------------------------------------------
# InstallOptions
# ---------------------------------------------------------------------------


class TestInstallOptions:
    @pytest.mark.unit
    def test_defaults(self, tmp_path: Path):
        options = InstallOptions(app_name="my-app", root=tmp_path)
        assert options.package_manager == PackageManager.NPM
        assert options.template == TemplateType.APP
        assert options.mode == TemplateMode.TS
        assert options.bundler == Bundler.TURBOPACK
        assert options.import_alias == DEFAULT_IMPORT_ALIAS
        assert options.is_online is True
        assert not any([
            options.tailwind,
            options.eslint,
            options.biome,
            options.src_dir,
            options.skip_install,
            options.react_compiler,
        ])

    @pytest.mark.unit
    def test_enums_accept_plain_strings(self, tmp_path: Path):
        options = InstallOptions(
            app_name="my-app",
            root=tmp_path,
            package_manager="pnpm",
            template="app-api",
            mode="js",
            bundler="rspack",
        )
        assert options.package_manager is PackageManager.PNPM
        assert options.template is TemplateType.APP_API
        assert options.mode is TemplateMode.JS
        assert options.bundler is Bundler.RSPACK

    @pytest.mark.unit
    def test_is_frozen(self, tmp_path: Path):
        options = InstallOptions(app_name="my-app", root=tmp_path)
        with pytest.raises(ValidationError):
            options.app_name = "other"

    @pytest.mark.unit
    def test_relative_root_rejected(self):
        with pytest.raises(ValidationError):
            InstallOptions(app_name="my-app", root=Path("relative/dir"))

    @pytest.mark.unit
    def test_alias_without_wildcard_rejected(self, tmp_path: Path):
        with pytest.raises(ValidationError):
            InstallOptions(app_name="my-app", root=tmp_path, import_alias="~")

    @pytest.mark.unit
    def test_unknown_template_rejected(self, tmp_path: Path):
        with pytest.raises(ValidationError):
            InstallOptions(app_name="my-app", root=tmp_path, template="pages")

    @pytest.mark.unit
    def test_is_api(self, tmp_path: Path):
        assert InstallOptions(app_name="a", root=tmp_path, template="app-api").is_api
        assert not InstallOptions(app_name="a", root=tmp_path, template="app").is_api

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "alias, prefix",
        [("@/*", "@/"), ("~/*", "~/"), ("#app/*", "#app/")],
    )
    def test_alias_prefix(self, tmp_path: Path, alias: str, prefix: str):
        options = InstallOptions(app_name="a", root=tmp_path, import_alias=alias)
        assert options.alias_prefix == prefix


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------


class TestSettings:
    @pytest.mark.unit
    def test_next_version_defaults_to_package_version(self):
        assert Settings().next_version == __version__

    @pytest.mark.unit
    def test_next_version_override(self):
        assert Settings(test_version="15.0.0").next_version == "15.0.0"

    @pytest.mark.unit
    def test_rspack_dependency_follows_version(self):
        assert Settings(test_version="15.0.0").rspack_dependency == "15.0.0"
        assert Settings().rspack_dependency == __version__

    @pytest.mark.unit
    def test_rspack_dependency_local_archive(self, tmp_path: Path):
        packed = tmp_path / "next" / "next-packed.tgz"
        settings = Settings(test_version=str(packed))
        expected = tmp_path / "next-rspack" / "next-rspack-packed.tgz"
        assert Path(settings.rspack_dependency) == expected
        # next itself still points at the packed next tarball
        assert settings.next_version == str(packed)


class TestSettingsFromEnv:
    @pytest.mark.unit
    def test_defaults_when_no_env(self):
        with patch.dict(os.environ, {}, clear=True):
            settings = Settings.from_env()
        assert settings.test_version is None

    @pytest.mark.unit
    def test_test_version_from_env(self):
        env = {"NEXT_PRIVATE_TEST_VERSION": "canary"}
        with patch.dict(os.environ, env, clear=True):
            settings = Settings.from_env()
        assert settings.test_version == "canary"
        assert settings.next_version == "canary"

    @pytest.mark.unit
    def test_empty_value_ignored(self):
        env = {"NEXT_PRIVATE_TEST_VERSION": ""}
        with patch.dict(os.environ, env, clear=True):
            settings = Settings.from_env()
        assert settings.test_version is None

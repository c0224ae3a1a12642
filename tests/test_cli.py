"""Tests for the argparse front end (better_next_app.cli)."""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest
from pydantic import ValidationError as PydanticValidationError

from better_next_app.cli import (
    build_options,
    build_parser,
    main,
    prepare_root,
    select_template,
)
from better_next_app.config import (
    TEST_VERSION_ENV,
    Bundler,
    PackageManager,
    TemplateMode,
    TemplateType,
)
from better_next_app.errors import InvalidInputError

pytestmark = pytest.mark.unit


class TestParser:
    def test_defaults(self):
        args = build_parser().parse_args(["my-app"])
        assert args.directory == "my-app"
        assert args.mode == TemplateMode.TS
        assert args.bundler == Bundler.TURBOPACK
        assert args.package_manager == PackageManager.NPM
        assert args.import_alias == "@/*"
        assert not args.tailwind
        assert not args.skip_install

    def test_flags(self):
        args = build_parser().parse_args(
            ["x", "--js", "--biome", "--rspack", "--use-bun", "--src-dir", "--react-compiler"]
        )
        assert args.mode == TemplateMode.JS
        assert args.biome and not args.eslint
        assert args.bundler == Bundler.RSPACK
        assert args.package_manager == PackageManager.BUN
        assert args.src_dir
        assert args.react_compiler

    @pytest.mark.parametrize(
        "flags",
        [["--eslint", "--biome"], ["--api", "--empty"], ["--webpack", "--rspack"],
         ["--use-npm", "--use-pnpm"], ["--ts", "--js"]],
    )
    def test_mutually_exclusive(self, flags: list[str]):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["x", *flags])

    @pytest.mark.parametrize(
        "flags, expected",
        [
            ([], TemplateType.APP),
            (["--empty"], TemplateType.APP_EMPTY),
            (["--tailwind"], TemplateType.APP_TW),
            (["--tailwind", "--empty"], TemplateType.APP_TW_EMPTY),
            (["--api"], TemplateType.APP_API),
            (["--api", "--tailwind"], TemplateType.APP_API),
        ],
    )
    def test_select_template(self, flags: list[str], expected: TemplateType):
        assert select_template(build_parser().parse_args(["x", *flags])) == expected


class TestBuildOptions:
    def test_maps_flags(self, tmp_path: Path):
        args = build_parser().parse_args(["x", "--tailwind", "--import-alias", "~/*"])
        options = build_options(args, tmp_path / "web")

        assert options.app_name == "web"
        assert options.root == tmp_path / "web"
        assert options.template == TemplateType.APP_TW
        assert options.import_alias == "~/*"
        assert options.is_online is True

    @pytest.mark.parametrize("alias", ["@", "@/", "~*", ""])
    def test_invalid_alias(self, tmp_path: Path, alias: str):
        args = build_parser().parse_args(["x", "--import-alias", alias])
        with pytest.raises(InvalidInputError) as exc_info:
            build_options(args, tmp_path / "web")

        assert exc_info.value.field == "import alias"
        assert exc_info.value.problems == ["import alias must end with '/*'"]
        assert isinstance(exc_info.value.__cause__, PydanticValidationError)

    def test_relative_root_rejected(self):
        args = build_parser().parse_args(["x"])
        with pytest.raises(InvalidInputError) as exc_info:
            build_options(args, Path("relative"))
        assert exc_info.value.field == "root"


class TestPrepareRoot:
    def test_creates_directory(self, tmp_path: Path):
        root = prepare_root(str(tmp_path / "new-app"))
        assert root.is_dir()
        assert root.is_absolute()

    def test_invalid_name(self, tmp_path: Path):
        with pytest.raises(InvalidInputError) as exc_info:
            prepare_root(str(tmp_path / "MyApp"))
        assert exc_info.value.field == "project name"
        assert not (tmp_path / "MyApp").exists()

    def test_conflicting_files(self, tmp_path: Path):
        target = tmp_path / "taken"
        target.mkdir()
        (target / "package.json").write_text("{}", encoding="utf-8")
        with pytest.raises(InvalidInputError) as exc_info:
            prepare_root(str(target))
        assert "package.json" in str(exc_info.value)

    def test_allowed_files_ok(self, tmp_path: Path):
        target = tmp_path / "repo"
        target.mkdir()
        (target / ".gitignore").write_text("", encoding="utf-8")
        assert prepare_root(str(target)) == target.resolve()


class TestMain:
    def test_success_skip_install(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv(TEST_VERSION_ENV, "16.0.0-canary.1")
        target = tmp_path / "cli-app"
        with patch("better_next_app.cli.is_online", AsyncMock()) as mock_online, patch(
            "better_next_app.cli.print_success"
        ) as mock_success:
            code = main([str(target), "--skip-install", "--eslint"])

        assert code == 0
        mock_online.assert_not_awaited()
        assert mock_success.call_args.args[0].startswith("Success! Created cli-app")
        manifest = json.loads((target / "package.json").read_text(encoding="utf-8"))
        assert manifest["name"] == "cli-app"
        assert manifest["dependencies"]["next"] == "16.0.0-canary.1"
        assert manifest["scripts"]["lint"] == "eslint"

    def test_invalid_alias_returns_error(self, tmp_path: Path):
        with patch("better_next_app.cli.print_error") as mock_error:
            code = main([str(tmp_path / "app"), "--import-alias", "~", "--skip-install"])
        assert code == 1
        assert mock_error.call_args.args[0].startswith("Error: Invalid import alias")
        assert not (tmp_path / "app").exists()

    def test_install_checks_connectivity(self, tmp_path: Path):
        target = tmp_path / "online-app"
        with patch(
            "better_next_app.cli.is_online", AsyncMock(return_value=False)
        ), patch(
            "better_next_app.cli.install_template", AsyncMock(return_value=target)
        ) as mock_template, patch("better_next_app.cli.print_success"):
            code = main([str(target), "--use-pnpm"])

        assert code == 0
        options = mock_template.await_args.args[0]
        assert options.is_online is False
        assert options.package_manager == PackageManager.PNPM
        assert options.root == target.resolve()

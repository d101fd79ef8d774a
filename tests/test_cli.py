"""Tests for the command-line entry point."""

from __future__ import annotations

import json
from unittest.mock import AsyncMock, patch

import pytest

from mobile_scaffold.cli import build_parser, main, run
from mobile_scaffold.errors import CommandError, ResolutionAborted

pytestmark = pytest.mark.unit


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for var in (
        "MOBILE_SCAFFOLD_CONFIG_PATH",
        "MOBILE_SCAFFOLD_TEMPLATE_DIR",
        "MOBILE_SCAFFOLD_RN_VERSION",
        "MOBILE_SCAFFOLD_BOILERPLATE",
        "MOBILE_SCAFFOLD_DEBUG",
    ):
        monkeypatch.delenv(var, raising=False)


class TestParser:
    def test_generate_alias(self):
        args = build_parser().parse_args(["g", "entity", "Foo", "--jh-dir=../backend"])
        assert args.kind == "entity"
        assert args.name == "Foo"
        assert args.jh_dir == "../backend"

    def test_new_backend_directory(self):
        args = build_parser().parse_args(["new", "--jh-dir", "../backend"])
        assert args.name == ""
        assert args.jh_dir == "../backend"

    def test_new_flags(self):
        args = build_parser().parse_args(
            ["new", "MyApp", "--auth-type", "session", "--skip-git", "-b", "my-boilerplate"]
        )
        assert args.auth_type == "session"
        assert args.skip_git is True
        assert args.boilerplate == "my-boilerplate"

    def test_rejects_unknown_kind(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["generate", "screen", "Foo"])


class TestGenerateEntity:
    def test_blank_name_prints_usage(self, capsys):
        assert run(["generate", "entity"]) == 0
        out = capsys.readouterr().out
        assert "mobile-scaffold generate entity <name>" in out
        assert "A name is required." in out

    def test_override_scenario(self, tmp_path, app_dir, make_entity, sample_entity, monkeypatch):
        make_entity(tmp_path / "test", "Foo", sample_entity)
        monkeypatch.chdir(app_dir)

        assert run(["generate", "entity", "Foo", "--jh-dir=../test"]) == 0

        assert (app_dir / ".jhipster" / "Foo.json").is_file()
        config = json.loads((app_dir / "ignite" / "ignite.json").read_text(encoding="utf-8"))
        assert config["jhipsterDirectory"] == "../test"
        assert (app_dir / "App" / "Containers" / "FooEntityScreen.js").is_file()

    def test_missing_override_is_fatal(self, tmp_path, app_dir, monkeypatch, capsys):
        monkeypatch.chdir(app_dir)

        assert run(["generate", "entity", "Foo", f"--jh-dir={tmp_path / 'nowhere'}"]) == 1

        assert "No entity configuration file found" in capsys.readouterr().out
        assert not (app_dir / ".jhipster").exists()

    def test_abort_exit_code(self, app_dir, monkeypatch):
        monkeypatch.chdir(app_dir)
        with patch(
            "mobile_scaffold.cli.EntityGenerator.generate",
            new_callable=AsyncMock,
            side_effect=ResolutionAborted("cancelled"),
        ):
            assert run(["g", "entity", "Foo"]) == 130


class TestNew:
    def test_blank_name(self, capsys):
        assert run(["new"]) == 0
        assert "mobile-scaffold new <name>" in capsys.readouterr().out

    def test_invalid_option_value(self, capsys):
        assert run(["new", "MyApp", "--dev-screens", "maybe"]) == 0
        assert "Invalid options" in capsys.readouterr().out

    def test_command_failure(self, tmp_path, monkeypatch, capsys):
        monkeypatch.chdir(tmp_path)
        with patch(
            "mobile_scaffold.cli.Bootstrapper.run",
            new_callable=AsyncMock,
            side_effect=CommandError("npx react-native init MyApp", 1),
        ) as mocked:
            assert run(["new", "MyApp", "--auth-type", "jwt", "--skip-git"]) == 1

        options = mocked.await_args.args[0]
        assert options.name == "MyApp"
        assert options.skip_git is True
        assert "exit code 1" in capsys.readouterr().out

    def test_debug_flag(self, monkeypatch):
        monkeypatch.setattr("mobile_scaffold.utils._debug_enabled", False)
        seen = {}

        async def fake_run(self, options):
            seen["debug"] = options.debug
            return None

        monkeypatch.setattr("mobile_scaffold.cli.Bootstrapper.run", fake_run)
        assert run(["--debug", "new", "MyApp", "--auth-type", "jwt"]) == 0
        assert seen["debug"] is True

    def test_backend_directory_without_name(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        with patch("mobile_scaffold.cli.Bootstrapper.run", new_callable=AsyncMock) as mocked:
            assert run(["new", "--jh-dir=../backend"]) == 0

        options = mocked.await_args.args[0]
        assert options.name == ""
        assert options.backend_dir == "../backend"

    def test_missing_backend_config(self, tmp_path, monkeypatch, capsys):
        monkeypatch.chdir(tmp_path)

        assert run(["new", f"--jh-dir={tmp_path / 'nowhere'}"]) == 1

        assert "Couldn't load JHipster configuration" in capsys.readouterr().out


def test_main_exits_with_code(monkeypatch):
    monkeypatch.setattr("sys.argv", ["mobile-scaffold", "generate", "entity", ""])
    with pytest.raises(SystemExit) as exc_info:
        main()
    assert exc_info.value.code == 0

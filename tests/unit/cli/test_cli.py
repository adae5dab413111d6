from __future__ import annotations

import json
from pathlib import Path

import pytest

from promptstack.cli._dispatcher import build_parser, discover_commands, main
from promptstack.cli._utils import parse_params


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """A project with a default prompt and an ``overrides`` layer."""
    (tmp_path / "prompts").mkdir()
    (tmp_path / "prompts" / "persona.md").write_text(
        "# Persona\n\nYou are {{role}}.\n", encoding="utf-8"
    )
    (tmp_path / "overrides").mkdir()
    return tmp_path


def _compose(project: Path, *extra: str) -> int:
    return main(
        [
            "compose",
            str(project / "prompts" / "persona.md"),
            "--repo-root",
            str(project),
            *extra,
        ]
    )


class TestDispatcher:
    def test_discovers_commands(self) -> None:
        commands = discover_commands()

        assert {"compose", "resolve"} <= set(commands)
        assert all(info["main"] for info in commands.values())

    def test_no_command_prints_help(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert main([]) == 0
        assert "compose" in capsys.readouterr().out

    def test_version(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc:
            build_parser().parse_args(["--version"])

        assert exc.value.code == 0
        assert "promptstack" in capsys.readouterr().out


class TestCompose:
    def test_without_layers(self, project: Path, capsys: pytest.CaptureFixture[str]) -> None:
        assert _compose(project, "--param", "role=helpful", "--separator", "markdown") == 0

        out = capsys.readouterr().out
        assert "Persona" in out
        assert "You are helpful." in out

    def test_fragments_wrap_default(self, project: Path, capsys: pytest.CaptureFixture[str]) -> None:
        (project / "overrides" / "persona-pre.md").write_text("Read this first.", encoding="utf-8")
        (project / "overrides" / "persona-post.md").write_text("Always cite sources.", encoding="utf-8")

        assert _compose(project, "--param", "role=helpful") == 0

        out = capsys.readouterr().out
        assert out.index("Read this first.") < out.index("You are helpful.") < out.index("Always cite sources.")

    def test_override_rejected_when_disabled(self, project: Path, capsys: pytest.CaptureFixture[str]) -> None:
        (project / "overrides" / "persona.md").write_text("Replaced.", encoding="utf-8")

        assert _compose(project) == 1

        err = capsys.readouterr().err
        assert "overrides are not enabled" in err

    def test_override_flag_allows_replacement(self, project: Path, capsys: pytest.CaptureFixture[str]) -> None:
        (project / "overrides" / "persona.md").write_text("Replaced.", encoding="utf-8")

        assert _compose(project, "--overrides") == 0

        out = capsys.readouterr().out
        assert "Replaced." in out
        assert "You are" not in out

    def test_override_enabled_by_project_config(self, project: Path, capsys: pytest.CaptureFixture[str]) -> None:
        (project / "overrides" / "persona.md").write_text("Replaced.", encoding="utf-8")
        (project / ".promptstack").mkdir()
        (project / ".promptstack" / "config.yaml").write_text("override:\n  overrides: true\n", encoding="utf-8")

        assert _compose(project) == 0
        assert "Replaced." in capsys.readouterr().out

    def test_config_dir_flag_replaces_configured_layers(
        self, project: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        (project / "overrides" / "persona-post.md").write_text("From default layer.", encoding="utf-8")
        (project / "team").mkdir()
        (project / "team" / "persona-post.md").write_text("From team layer.", encoding="utf-8")

        assert _compose(project, "--config-dir", str(project / "team")) == 0

        out = capsys.readouterr().out
        assert "From team layer." in out
        assert "From default layer." not in out

    def test_json_output(self, project: Path, capsys: pytest.CaptureFixture[str]) -> None:
        assert _compose(project, "--json", "--param", "role=helpful") == 0

        payload = json.loads(capsys.readouterr().out)
        assert payload["status"] == "success"
        assert payload["name"] == "persona.md"
        assert "You are helpful." in payload["text"]
        assert payload["section"]["items"][0]["title"] == "Persona"

    def test_bad_param_is_usage_error(self, project: Path, capsys: pytest.CaptureFixture[str]) -> None:
        assert _compose(project, "--param", "novalue") == 2
        assert "Expected key=value" in capsys.readouterr().err

    def test_missing_file(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["compose", str(tmp_path / "missing.md"), "--repo-root", str(tmp_path)]) == 1
        assert "Error:" in capsys.readouterr().err

    def test_invalid_config_reported(self, project: Path, capsys: pytest.CaptureFixture[str]) -> None:
        (project / ".promptstack").mkdir()
        (project / ".promptstack" / "config.yaml").write_text("override: [\n", encoding="utf-8")

        assert _compose(project, "--json") == 1

        payload = json.loads(capsys.readouterr().err)
        assert payload["error"] == "ConfigError"


class TestResolve:
    def test_reports_each_layer(self, project: Path, capsys: pytest.CaptureFixture[str]) -> None:
        (project / "team").mkdir()
        (project / "overrides" / "persona-pre.md").write_text("pre", encoding="utf-8")
        (project / "team" / "persona.md").write_text("full", encoding="utf-8")
        (project / "team" / "persona-post.md").write_text("post", encoding="utf-8")

        code = main(
            [
                "resolve",
                "persona.md",
                "--json",
                "--repo-root",
                str(project),
                "--config-dir",
                str(project / "overrides"),
                "--config-dir",
                str(project / "team"),
            ]
        )

        assert code == 0
        payload = json.loads(capsys.readouterr().out)
        assert [layer["index"] for layer in payload["layers"]] == [0, 1]
        assert payload["override"] == str((project / "team" / "persona.md").resolve())
        assert payload["prepends"] == [str((project / "overrides" / "persona-pre.md").resolve())]
        assert payload["appends"] == [str((project / "team" / "persona-post.md").resolve())]

    def test_text_output(self, project: Path, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["resolve", "persona.md", "--repo-root", str(project)]) == 0

        out = capsys.readouterr().out
        assert out.startswith("persona.md:")
        assert "override: none" in out


def test_parse_params() -> None:
    assert parse_params(["a=1", " b =x=y"]) == {"a": "1", "b": "x=y"}
    assert parse_params(None) == {}
    with pytest.raises(ValueError):
        parse_params(["=nokey"])

"""Integration tests for the CLI via Click's CliRunner."""

from __future__ import annotations

from pathlib import Path

import pytest
from click.testing import CliRunner

from gitignore_tools import __version__
from gitignore_tools.cli import cli


@pytest.fixture
def invoke(tmp_path: Path, template_dir: Path):
    """Run the CLI against a workspace, with state kept under tmp_path/state."""
    state = tmp_path / "state"

    def _invoke(ws: Path, *args: str, input: str | None = None, templates: bool = True):
        base = ["--workspace-root", str(ws), "--state-dir", str(state)]
        if templates:
            base += ["--templates-dir", str(template_dir)]
        return CliRunner().invoke(cli, [*base, *args], input=input)

    _invoke.state = state  # type: ignore[attr-defined]
    return _invoke


# ── Informational commands ──────────────────────────────────────────


def test_no_arguments_shows_help():
    result = CliRunner().invoke(cli, [])
    assert result.exit_code == 0
    assert "TEMPLATES" in result.output
    assert "--exec" in result.output


def test_list(make_workspace, invoke, capture_logs):
    result = invoke(make_workspace(), "--list")
    assert result.exit_code == 0
    logs = capture_logs.getvalue()
    assert "PROGRAMMING LANGUAGES:" in logs
    assert "✓ python" in logs
    assert "✓ legacy" in logs


def test_list_missing_templates_dir(make_workspace, invoke, tmp_path, capture_logs):
    result = invoke(make_workspace(), "--list", "--templates-dir", str(tmp_path / "none"), templates=False)
    assert result.exit_code == 1
    assert "--install" in capture_logs.getvalue()


def test_changelog():
    result = CliRunner().invoke(cli, ["--changelog"])
    assert result.exit_code == 0
    assert "v2.0.0" in result.output


def test_version():
    result = CliRunner().invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_prerequis(make_workspace, invoke, capture_logs):
    result = invoke(make_workspace(), "-pr")
    assert result.exit_code == 0
    assert "All prerequisites are met" in capture_logs.getvalue()


def test_install_creates_templates_dir(make_workspace, invoke, tmp_path):
    custom = tmp_path / "custom_templates"
    result = invoke(make_workspace(), "--install", "--templates-dir", str(custom), templates=False)
    assert result.exit_code == 0
    assert custom.is_dir()
    assert (invoke.state / "backup").is_dir()


# ── Execute mode ────────────────────────────────────────────────────


def test_create(make_workspace, invoke, capture_logs):
    ws = make_workspace()
    result = invoke(ws, "--exec", "python")

    assert result.exit_code == 0
    content = (ws / ".gitignore").read_text()
    assert "# Template: python" in content
    assert "__pycache__/" in content
    assert "# Maintainer :" not in content

    logs = capture_logs.getvalue()
    assert "EXECUTION SUMMARY" in logs
    assert "Created new .gitignore with template 'python'" in logs
    assert "Operation completed successfully" in logs


def test_create_writes_log_and_docs(make_workspace, invoke):
    ws = make_workspace()
    result = invoke(ws, "-exe", "python")

    assert result.exit_code == 0
    state = invoke.state
    log_files = list((state / "logs").glob("*.log"))
    assert len(log_files) == 1
    assert "Created new .gitignore with template 'python'" in log_files[0].read_text(encoding="utf-8")
    assert (state / "README.gitignore-kit.md").is_file()
    assert "/backup" in (state / ".gitignore").read_text()


def test_no_log_and_no_docs(make_workspace, invoke):
    ws = make_workspace()
    result = invoke(ws, "--exec", "--no-log", "--no-docs", "python")

    assert result.exit_code == 0
    assert not (invoke.state / "logs").exists()
    assert not (invoke.state / "README.gitignore-kit.md").exists()


def test_templates_without_exec(make_workspace, invoke, capture_logs):
    ws = make_workspace()
    result = invoke(ws, "python")

    assert result.exit_code == 1
    assert "Usage:" in result.output
    assert "--exec argument missing" in capture_logs.getvalue()
    assert not (ws / ".gitignore").exists()
    assert not invoke.state.exists()


def test_exec_without_templates(make_workspace, invoke, capture_logs):
    result = invoke(make_workspace(), "--exec")
    assert result.exit_code == 1
    assert "No templates specified" in capture_logs.getvalue()


def test_typo(make_workspace, invoke, capture_logs):
    ws = make_workspace(gitignore="*.log\n")
    result = invoke(ws, "--exec", "phyton")

    assert result.exit_code == 1
    assert (ws / ".gitignore").read_text() == "*.log\n"
    assert "Template 'phyton' not found" in capture_logs.getvalue()


def test_interactive_replace(make_workspace, invoke):
    ws = make_workspace(gitignore="*.log\n")
    result = invoke(ws, "--exec", "java", input="r\n")

    assert result.exit_code == 0
    backups = list((invoke.state / "backup").iterdir())
    assert len(backups) == 1
    assert backups[0].name.startswith(".gitignore.backup.")
    assert backups[0].read_text() == "*.log\n"
    assert "*.log" not in (ws / ".gitignore").read_text()


def test_interactive_invalid_choice(make_workspace, invoke):
    ws = make_workspace(gitignore="*.log\n")
    result = invoke(ws, "--exec", "java", input="z\n")

    assert result.exit_code == 1
    assert (ws / ".gitignore").read_text() == "*.log\n"


def test_auto_append_flag(make_workspace, invoke):
    ws = make_workspace(gitignore="*.log\n")
    result = invoke(ws, "--exec", "--auto-append", "vscode")

    assert result.exit_code == 0
    content = (ws / ".gitignore").read_text()
    assert content.startswith("*.log\n\n# ====")
    assert content.endswith(".vscode/\n!.vscode/settings.json\n")


def test_auto_append_from_config(make_workspace, invoke):
    ws = make_workspace(
        gitignore="*.log\n",
        config_yaml="""\
        gitignore:
            auto_append: true
        """,
    )
    result = invoke(ws, "--exec", "vscode")
    assert result.exit_code == 0
    assert ".vscode/" in (ws / ".gitignore").read_text()


def test_target_from_config(make_workspace, invoke):
    ws = make_workspace(
        config_yaml="""\
        gitignore:
            target: sub.gitignore
        """,
    )
    result = invoke(ws, "--exec", "java")
    assert result.exit_code == 0
    assert (ws / "sub.gitignore").is_file()
    assert not (ws / ".gitignore").exists()


def test_simulate_changes_nothing(make_workspace, invoke, capture_logs):
    ws = make_workspace(gitignore="*.log\n")
    result = invoke(ws, "--exec", "--simulate", "python", "vscode")

    assert result.exit_code == 0
    assert (ws / ".gitignore").read_text() == "*.log\n"
    assert not invoke.state.exists()
    logs = capture_logs.getvalue()
    assert "SIMULATION MODE ENABLED" in logs
    assert "[DRY-RUN] Would prompt for append or replace" in logs
    assert "  1. Executed in simulation mode" in logs


# ── State directory failures ─────────────────────────────────────────


@pytest.mark.parametrize("extra", [(), ("--no-log",)])
def test_state_dir_cannot_be_created(make_workspace, invoke, tmp_path, capture_logs, extra):
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory\n")
    ws = make_workspace()

    result = invoke(ws, "--exec", "--state-dir", str(blocker / "sub"), *extra, "python")

    assert result.exit_code == 1
    assert isinstance(result.exception, SystemExit)
    logs = capture_logs.getvalue()
    assert f"Could not write {blocker / 'sub'}" in logs
    assert "--prerequis" in logs
    assert not (ws / ".gitignore").exists()

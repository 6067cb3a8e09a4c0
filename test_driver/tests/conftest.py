"""Shared fixtures for gitignore-kit tests."""

from __future__ import annotations

import io
import logging
import textwrap
from datetime import datetime
from pathlib import Path

import pytest

from gitignore_tools.core import AuditTrail, RunContext, RunMode
from gitignore_tools.templates import TemplateStore

FIXED_NOW = datetime(2026, 1, 30, 22, 0, 0)

PYTHON_TEMPLATE = """\
# Template : Python
# Description : Python bytecode, virtual environments
# Maintainer : Bruno DELNOZ
# Last update : 2025-10-25
# Compatible with : Python 3.x, pip, poetry

# Byte-compiled
__pycache__/
*.py[cod]

# Environments
.venv
"""

VSCODE_TEMPLATE = """\
# Template : VSCode
.vscode/
!.vscode/settings.json
"""

JAVA_TEMPLATE = """\
# Template : Java
*.class
target/
"""


class FakePrompter:
    """Returns canned answers in order and remembers the questions asked."""

    def __init__(self, *answers: str) -> None:
        self.answers = list(answers)
        self.questions: list[str] = []

    def ask(self, question: str) -> str:
        self.questions.append(question)
        if not self.answers:
            raise AssertionError(f"Unexpected prompt: {question}")
        return self.answers.pop(0)


@pytest.fixture(autouse=True)
def _terminal_sections(monkeypatch):
    """Section headers go through the logger unless a test opts into CI mode."""
    monkeypatch.delenv("GITHUB_ACTIONS", raising=False)


@pytest.fixture
def template_dir(tmp_path: Path) -> Path:
    """A small template store: python, vscode, java, plus a template_<name>.txt entry."""
    root = tmp_path / "templates"
    root.mkdir()
    (root / "python.gitignore").write_text(PYTHON_TEMPLATE, encoding="utf-8")
    (root / "vscode.gitignore").write_text(VSCODE_TEMPLATE, encoding="utf-8")
    (root / "java.gitignore").write_text(JAVA_TEMPLATE, encoding="utf-8")
    (root / "template_legacy.txt").write_text("# Template : Legacy\nold/\n", encoding="utf-8")
    return root


@pytest.fixture
def make_workspace(tmp_path: Path):
    """Factory that creates a temp project directory.

    Usage::

        ws = make_workspace(gitignore="*.log\\n", config_yaml=\"\"\"
            gitignore:
                auto_append: true
        \"\"\")
    """
    _counter = 0

    def _make(
        gitignore: str | None = None,
        config_yaml: str | None = None,
    ) -> Path:
        nonlocal _counter
        ws = tmp_path / f"workspace_{_counter}"
        ws.mkdir()
        _counter += 1

        if gitignore is not None:
            (ws / ".gitignore").write_text(gitignore, encoding="utf-8")
        if config_yaml is not None:
            (ws / "config.yaml").write_text(
                textwrap.dedent(config_yaml), encoding="utf-8",
            )
        return ws

    return _make


@pytest.fixture
def make_run_context(tmp_path: Path, template_dir: Path):
    """Factory to build a RunContext rooted in a temp workspace.

    Usage::

        ctx = make_run_context(existing="*.log\\n", answers=["r"])
        apply_templates(ctx, ["java"])
    """

    def _make(
        existing: str | None = None,
        answers: list[str] | None = None,
        dry_run: bool = False,
        auto_append: bool = False,
        workspace_root: Path | None = None,
    ) -> RunContext:
        ws = workspace_root or tmp_path / "ws"
        ws.mkdir(exist_ok=True)
        target = ws / ".gitignore"
        if existing is not None:
            target.write_text(existing, encoding="utf-8")

        return RunContext(
            workspace_root=ws,
            target=target,
            store=TemplateStore(template_dir),
            backup_dir=tmp_path / "state" / "backup",
            mode=RunMode(dry_run=dry_run, auto_append=auto_append, logging_enabled=False),
            audit=AuditTrail(),
            prompter=FakePrompter(*(answers or [])),
            clock=lambda: FIXED_NOW,
        )

    return _make


@pytest.fixture
def capture_logs():
    """Capture gitignore_tools logger output into a StringIO buffer.

    The logger has propagate=False and its own StreamHandler that points
    at the original sys.stderr fd, so capsys/capfd/caplog cannot see it.
    This fixture adds a temporary StringIO handler.
    """
    buf = io.StringIO()
    handler = logging.StreamHandler(buf)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger = logging.getLogger("gitignore_tools")
    logger.addHandler(handler)
    yield buf
    logger.removeHandler(handler)

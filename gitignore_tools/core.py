"""Core framework: logging, run context, audit trail, config loading, utilities."""

from __future__ import annotations

import contextlib
import dataclasses
import logging
import os
from collections.abc import Callable, Generator
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING, Any, Protocol

import click
import yaml
from colorama import Fore, Style

if TYPE_CHECKING:
    from .templates import TemplateStore


# ── Logging ──────────────────────────────────────────────────────────


def _level_color(levelno: int) -> str:
    if levelno >= logging.ERROR:
        return Fore.RED
    if levelno >= logging.WARNING:
        return Fore.YELLOW
    return Fore.CYAN


class ToolFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        color = _level_color(record.levelno)
        message = record.getMessage()
        return f"{color}[{record.levelname.lower()}]{Style.RESET_ALL} {message}"


logger = logging.getLogger("gitignore_tools")
if not logger.handlers:
    handler = logging.StreamHandler()
    handler.setFormatter(ToolFormatter())
    logger.addHandler(handler)
    logger.setLevel(logging.INFO)
    logger.propagate = False


LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


@contextlib.contextmanager
def file_log(log_file: Path, header: str) -> Generator[None, None, None]:
    """Mirror everything the logger emits into *log_file* (append mode).

    The parent directory must already exist.
    """
    file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
    file_handler.setFormatter(logging.Formatter("%(asctime)s - %(message)s", LOG_DATE_FORMAT))
    logger.addHandler(file_handler)
    try:
        logger.info(header)
        yield
    finally:
        logger.removeHandler(file_handler)
        file_handler.close()


def _is_ci() -> bool:
    return os.environ.get("GITHUB_ACTIONS") == "true"


@contextlib.contextmanager
def log_section(title: str) -> Generator[None, None, None]:
    """Foldable CI section or styled terminal header."""
    if _is_ci():
        print(f"::group::{title}", flush=True)
    else:
        logger.info(f"── {title} ──")
    try:
        yield
    finally:
        if _is_ci():
            print("::endgroup::", flush=True)


# ── Audit Trail ──────────────────────────────────────────────────────


class AuditTrail:
    """Append-only record of every side effect performed during a run."""

    def __init__(self) -> None:
        self._entries: list[str] = []

    def record(self, entry: str) -> None:
        self._entries.append(entry)
        logger.debug(f"[audit] {entry}")

    @property
    def entries(self) -> tuple[str, ...]:
        return tuple(self._entries)

    def render(self) -> list[str]:
        """Return the entries as a 1-indexed numbered list (empty when nothing happened)."""
        return [f"  {i}. {entry}" for i, entry in enumerate(self._entries, 1)]

    def __len__(self) -> int:
        return len(self._entries)


# ── Prompting ────────────────────────────────────────────────────────


class Prompter(Protocol):
    def ask(self, question: str) -> str: ...


class ConsolePrompter:
    """Reads the answer from standard input."""

    def ask(self, question: str) -> str:
        return click.prompt(question, default="", show_default=False)


# ── RunContext ───────────────────────────────────────────────────────


@dataclasses.dataclass(frozen=True)
class RunMode:
    dry_run: bool = False
    auto_append: bool = False
    logging_enabled: bool = True


@dataclasses.dataclass(frozen=True)
class RunContext:
    """Everything a single run needs, passed explicitly to every stage."""

    workspace_root: Path
    target: Path
    store: TemplateStore
    backup_dir: Path
    mode: RunMode = dataclasses.field(default_factory=RunMode)
    audit: AuditTrail = dataclasses.field(default_factory=AuditTrail)
    prompter: Prompter = dataclasses.field(default_factory=ConsolePrompter)
    clock: Callable[[], datetime] = datetime.now


def ensure_directory(ctx: RunContext, path: Path) -> None:
    """Create *path* if missing and record it. Dry run only reports."""
    if path.is_dir():
        return
    if ctx.mode.dry_run:
        logger.info(f"[DRY-RUN] Would create directory: {path}")
        ctx.audit.record(f"[DRY-RUN] Would create directory: {path}")
        return
    path.mkdir(parents=True, exist_ok=True)
    logger.info(f"Created directory: {path}")
    ctx.audit.record(f"Created directory: {path}")


# ── Config Loading ───────────────────────────────────────────────────


CONFIG_SECTION = "gitignore"


def load_config(workspace_root: str | Path) -> dict[str, Any]:
    """Load config.yaml from workspace root."""
    config_path = Path(workspace_root) / "config.yaml"
    if not config_path.exists():
        return {}
    data = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise TypeError("config.yaml must contain a top-level mapping.")
    return data


def tool_config(config: dict[str, Any]) -> dict[str, Any]:
    """Return the ``gitignore`` section, or an empty dict when absent or malformed."""
    section = config.get(CONFIG_SECTION, {})
    if not isinstance(section, dict):
        return {}
    return section

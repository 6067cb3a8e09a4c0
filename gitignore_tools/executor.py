"""Apply a planned MergeAction to the filesystem."""

from __future__ import annotations

import contextlib
import os
import shutil
import tempfile
from datetime import datetime
from pathlib import Path

from .core import LOG_DATE_FORMAT, RunContext, ensure_directory, logger
from .errors import BackupFailedError, WriteFailedError
from .planner import Append, Create, MergeAction, Replace, Undecided
from .templates import Template

BANNER_RULE = "# " + "=" * 40


def banner(name: str, when: datetime) -> str:
    """Provenance comment inserted before each template's content."""
    return (
        f"{BANNER_RULE}\n"
        f"# Template: {name}\n"
        f"# Added: {when.strftime(LOG_DATE_FORMAT)}\n"
        f"{BANNER_RULE}\n"
    )


def section(template: Template, when: datetime) -> str:
    return banner(template.name, when) + template.content


def compose(templates: list[Template], when: datetime) -> str:
    """Content of a freshly created file: sections separated by a blank line."""
    return "\n".join(section(t, when) for t in templates)


def _quote_names(templates: list[Template]) -> str:
    names = ", ".join(f"'{t.name}'" for t in templates)
    return f"template {names}" if len(templates) == 1 else f"templates {names}"


def _write_new(path: Path, text: str) -> None:
    with open(path, "x", encoding="utf-8", newline="") as f:
        f.write(text)


def _write_atomic(path: Path, text: str) -> None:
    """Write through a temp file in the same directory, then swap it in.

    The existing file keeps its permission bits.
    """
    fd, tmp = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
            f.write(text)
        shutil.copymode(path, tmp)
        os.replace(tmp, path)
    except BaseException:
        with contextlib.suppress(OSError):
            os.unlink(tmp)
        raise


# ── Actions ──────────────────────────────────────────────────────────


def _create(ctx: RunContext, action: Create) -> None:
    label = _quote_names(action.templates)
    if ctx.mode.dry_run:
        logger.info(f"[DRY-RUN] Would create {ctx.target.name} with {label}")
        ctx.audit.record(f"[DRY-RUN] Would create new {ctx.target.name} with {label}")
        return
    try:
        _write_new(ctx.target, compose(action.templates, ctx.clock()))
    except OSError as exc:
        raise WriteFailedError(ctx.target, exc) from exc
    logger.info(f"Created {ctx.target.name} with {label}")
    ctx.audit.record(f"Created new {ctx.target.name} with {label}")


def _append(ctx: RunContext, action: Append) -> None:
    name = ctx.target.name
    prefix = "[DRY-RUN] Would auto-append" if ctx.mode.dry_run else "Auto-appended"
    if action.auto:
        logger.info(f"Auto-append mode: adding to existing {name}")
        ctx.audit.record(f"Auto-append mode: adding to existing {name}")
    else:
        logger.info(f"Appending to existing {name}")
        ctx.audit.record(f"Chose to append to existing {name}")
        prefix = "[DRY-RUN] Would append" if ctx.mode.dry_run else "Appended"

    if ctx.mode.dry_run:
        for template in action.templates:
            ctx.audit.record(f"{prefix} template '{template.name}' to existing {name}")
        return

    try:
        existing = ctx.target.read_bytes()
    except OSError as exc:
        raise WriteFailedError(ctx.target, exc) from exc

    needs_newline = bool(existing) and not existing.endswith(b"\n")
    for template in action.templates:
        chunk = "\n" + section(template, ctx.clock())
        if needs_newline:
            chunk = "\n" + chunk
            needs_newline = False
        try:
            with open(ctx.target, "a", encoding="utf-8", newline="") as f:
                f.write(chunk)
        except OSError as exc:
            raise WriteFailedError(ctx.target, exc) from exc
        logger.info(f"Template '{template.name}' added to existing {name}")
        ctx.audit.record(f"{prefix} template '{template.name}' to existing {name}")


def _backup(ctx: RunContext, backup_path: Path) -> None:
    """Copy the target to *backup_path* and check the copy byte-for-byte."""
    try:
        ensure_directory(ctx, backup_path.parent)
        shutil.copyfile(ctx.target, backup_path)
        if backup_path.read_bytes() != ctx.target.read_bytes():
            raise BackupFailedError(backup_path, "backup content does not match the original")
    except OSError as exc:
        raise BackupFailedError(backup_path, exc) from exc
    logger.info(f"Backup created: {backup_path}")
    ctx.audit.record(f"Created backup: {backup_path}")


def _replace(ctx: RunContext, action: Replace) -> None:
    label = _quote_names(action.templates)
    name = ctx.target.name
    if ctx.mode.dry_run:
        logger.info(f"[DRY-RUN] Would back up {ctx.target} to {action.backup_path}")
        ctx.audit.record(f"[DRY-RUN] Would create backup: {action.backup_path}")
        ctx.audit.record(f"[DRY-RUN] Would replace {name} with {label}")
        return

    _backup(ctx, action.backup_path)
    try:
        _write_atomic(ctx.target, compose(action.templates, ctx.clock()))
    except OSError as exc:
        raise WriteFailedError(ctx.target, exc) from exc
    logger.info(f"Replaced {name} with {label}")
    ctx.audit.record(f"Replaced {name} with {label}")


def _undecided(ctx: RunContext, action: Undecided) -> None:
    logger.info("[DRY-RUN] Would prompt for append or replace")
    ctx.audit.record("[DRY-RUN] Would prompt for append or replace")
    for template in action.templates:
        ctx.audit.record(f"[DRY-RUN] Would create/append template '{template.name}'")


def execute(ctx: RunContext, action: MergeAction) -> None:
    """Perform *action*.  Under dry run nothing on disk changes."""
    if isinstance(action, Create):
        _create(ctx, action)
    elif isinstance(action, Append):
        _append(ctx, action)
    elif isinstance(action, Replace):
        _replace(ctx, action)
    elif isinstance(action, Undecided):
        _undecided(ctx, action)
    else:
        raise TypeError(f"Unknown merge action: {action!r}")

"""``--prerequis`` and ``--install``: environment checks outside the engine."""

from __future__ import annotations

import os
import shutil
import sys
from pathlib import Path

from .core import AuditTrail, log_section, logger
from .templates import TemplateStore

MIN_PYTHON = (3, 10)


def check_prerequisites(store: TemplateStore, workspace_root: Path) -> int:
    """Log one line per check; return the number of failed checks."""
    missing = 0
    with log_section("Checking prerequisites"):
        version = ".".join(str(v) for v in sys.version_info[:3])
        if sys.version_info[:2] < MIN_PYTHON:
            logger.error(f"✗ Python {'.'.join(map(str, MIN_PYTHON))}+ required (current: {version})")
            missing += 1
        else:
            logger.info(f"✓ Python version: {version}")

        if not store.exists():
            logger.error(f"✗ Templates directory not found: {store.root}")
            missing += 1
        elif not os.access(store.root, os.R_OK):
            logger.error(f"✗ No read permission on templates directory: {store.root}")
            missing += 1
        else:
            logger.info(f"✓ Templates directory found: {store.root}")
            logger.info(f"  → {len(store.available())} template files available")

        if not os.access(workspace_root, os.W_OK):
            logger.error(f"✗ No write permission in {workspace_root}")
            missing += 1
        else:
            logger.info(f"✓ Write permission in {workspace_root}")

        git = shutil.which("git")
        if git:
            logger.info(f"✓ git found: {git}")
        else:
            logger.warning("git not found on PATH (optional)")

    if missing == 0:
        logger.info("✓ All prerequisites are met")
    else:
        logger.error(f"✗ {missing} prerequisite(s) missing")
        logger.error("  Run with --install to attempt automatic installation")
    return missing


def install_prerequisites(
    store: TemplateStore,
    state_dirs: list[Path],
    *,
    dry_run: bool = False,
    audit: AuditTrail | None = None,
) -> None:
    """Create the templates directory and state directories when missing."""
    with log_section("Installing prerequisites"):
        for path in [store.root, *state_dirs]:
            if path.is_dir():
                logger.info(f"✓ Directory already exists: {path}")
                continue
            if dry_run:
                logger.info(f"[DRY-RUN] Would create directory: {path}")
                continue
            path.mkdir(parents=True, exist_ok=True)
            logger.info(f"✓ Created directory: {path}")
            if audit is not None:
                audit.record(f"Created directory: {path}")

        count = len(store.available())
        if count == 0:
            logger.warning(f"No template files found in {store.root}")
            logger.warning("  Expected format: <name>.gitignore or template_<name>.txt")
        else:
            logger.info(f"✓ Found {count} template files")
    logger.info("✓ Installation check complete. Run --prerequis to verify all requirements")

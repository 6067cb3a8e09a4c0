"""Entry point: main(), click command, config merge, end-of-run summary."""

from __future__ import annotations

import contextlib
from pathlib import Path
from typing import Any

import click

from . import __version__
from .core import (
    RunContext,
    RunMode,
    ensure_directory,
    file_log,
    load_config,
    log_section,
    logger,
    tool_config,
)
from .docs import CHANGELOG, PROG, sync_docs
from .engine import report_error, run
from .errors import WriteFailedError
from .gitignore import patch_gitignore
from .prereqs import check_prerequisites, install_prerequisites
from .templates import BUNDLED_TEMPLATES_DIR, CATEGORIES, TemplateStore

DEFAULT_TARGET = ".gitignore"

_EPILOG = "\b\nTEMPLATES:\n" + "\n".join(
    f"  {category}: {', '.join(names)}" for category, names in CATEGORIES.items()
) + (
    "\n\n\b\nEXAMPLES:\n"
    f"  {PROG} --list\n"
    f"  {PROG} --exec python vscode macos\n"
    f"  {PROG} --exec --simulate python vscode\n"
    f"  {PROG} --exec --auto-append docker terraform\n"
    "\n\b\nBEHAVIOR:\n"
    "  If .gitignore exists you are asked to append or replace (unless --auto-append).\n"
    "  Replacing first copies the file to <state-dir>/backup/.gitignore.backup.YYYYMMDD_HHMMSS."
)


# ── Settings ─────────────────────────────────────────────────────────


def _resolve_dir(workspace_root: Path, value: str | Path) -> Path:
    path = Path(value).expanduser()
    if not path.is_absolute():
        path = workspace_root / path
    return path


def _failed_path(exc: OSError, fallback: Path) -> Path:
    return Path(exc.filename) if exc.filename else fallback


def _merge_settings(workspace_root: Path, cli_args: dict[str, Any]) -> dict[str, Any]:
    """Merge: defaults < config.yaml ``gitignore`` section < CLI flags."""
    settings: dict[str, Any] = {
        "target": DEFAULT_TARGET,
        "templates_dir": BUNDLED_TEMPLATES_DIR,
        "state_dir": click.get_app_dir(PROG),
        "auto_append": False,
        "log": True,
        "docs": True,
    }
    for k, v in tool_config(load_config(workspace_root)).items():
        if k in settings and v is not None:
            settings[k] = v
    for k, v in cli_args.items():
        if v is not None:
            settings[k] = v

    settings["target"] = _resolve_dir(workspace_root, settings["target"])
    settings["templates_dir"] = _resolve_dir(workspace_root, settings["templates_dir"])
    settings["state_dir"] = _resolve_dir(workspace_root, settings["state_dir"])
    return settings


# ── Informational commands ───────────────────────────────────────────


def _list_templates(store: TemplateStore) -> int:
    with log_section("AVAILABLE TEMPLATES"):
        if not store.exists():
            logger.error(f"✗ Templates directory not found: {store.root}")
            logger.error("  Run --install to create the directory")
            return 1
        for category, names in store.by_category().items():
            if not names:
                continue
            logger.info(f"{category}:")
            for name in names:
                logger.info(f"  ✓ {name}")
    logger.info("Use --exec <template> to create .gitignore with selected template(s)")
    return 0


def _print_summary(run_ctx: RunContext) -> None:
    lines = run_ctx.audit.render()
    if not lines:
        return
    with log_section("EXECUTION SUMMARY - Actions Performed"):
        for line in lines:
            logger.info(line)


# ── Command ──────────────────────────────────────────────────────────


@click.command(
    name=PROG,
    context_settings={"help_option_names": ["-h", "--help"]},
    epilog=_EPILOG,
)
@click.argument("templates", nargs=-1)
@click.option("--exec", "-exe", "exec_mode", is_flag=True, help="Execute (mandatory for creating or modifying .gitignore)")
@click.option("--simulate", "-s", "dry_run", is_flag=True, help="Simulation mode (dry run, no actual changes)")
@click.option("--no-log", is_flag=True, help="Disable logging to file")
@click.option("--auto-append", is_flag=True, help="Append to an existing file without confirmation")
@click.option("--list", "list_mode", is_flag=True, help="List all available templates")
@click.option("--prerequis", "-pr", is_flag=True, help="Check prerequisites")
@click.option("--install", "-i", is_flag=True, help="Install missing prerequisites")
@click.option("--changelog", "-ch", is_flag=True, help="Display the complete changelog")
@click.option("--target", type=click.Path(dir_okay=False), default=None, help="Ignore-file to build [default: .gitignore]")
@click.option("--templates-dir", type=click.Path(file_okay=False), default=None, help="Template directory [default: bundled templates]")
@click.option("--state-dir", type=click.Path(file_okay=False), default=None, help="Where logs, backups and docs are kept")
@click.option("--no-docs", is_flag=True, help="Skip regenerating README/USAGE/CHANGELOG markdown")
@click.option(
    "--workspace-root",
    type=click.Path(exists=True, file_okay=False),
    default=None,
    hidden=True,
)
@click.version_option(__version__, "--version")
@click.pass_context
def cli(
    ctx: click.Context,
    templates: tuple[str, ...],
    exec_mode: bool,
    dry_run: bool,
    no_log: bool,
    auto_append: bool,
    list_mode: bool,
    prerequis: bool,
    install: bool,
    changelog: bool,
    target: str | None,
    templates_dir: str | None,
    state_dir: str | None,
    no_docs: bool,
    workspace_root: str | None,
) -> None:
    """Create and manage .gitignore files from predefined templates.

    TEMPLATES are merged into the target in the order given.
    """
    if not any([templates, exec_mode, dry_run, list_mode, prerequis, install, changelog]):
        click.echo(ctx.get_help())
        ctx.exit(0)

    workspace = Path(workspace_root) if workspace_root else Path.cwd()
    settings = _merge_settings(
        workspace,
        {
            "target": target,
            "templates_dir": templates_dir,
            "state_dir": state_dir,
            "auto_append": True if auto_append else None,
            "log": False if no_log else None,
            "docs": False if no_docs else None,
        },
    )
    store = TemplateStore(settings["templates_dir"])
    state_root: Path = settings["state_dir"]
    logs_dir = state_root / "logs"
    backup_dir = state_root / "backup"

    # Informational commands never reach the engine.
    if changelog:
        click.echo(f"{PROG} changelog\n\n{CHANGELOG}")
        ctx.exit(0)
    if list_mode:
        ctx.exit(_list_templates(store))
    if prerequis:
        ctx.exit(1 if check_prerequisites(store, workspace) else 0)

    mode = RunMode(
        dry_run=dry_run,
        auto_append=bool(settings["auto_append"]),
        logging_enabled=bool(settings["log"]),
    )
    run_ctx = RunContext(
        workspace_root=workspace,
        target=settings["target"],
        store=store,
        backup_dir=backup_dir,
        mode=mode,
    )

    if install:
        install_prerequisites(store, [logs_dir, backup_dir], dry_run=dry_run, audit=run_ctx.audit)
        _print_summary(run_ctx)
        ctx.exit(0)

    if dry_run:
        logger.warning("SIMULATION MODE ENABLED")
        run_ctx.audit.record("Executed in simulation mode")

    if not exec_mode:
        if templates:
            run(run_ctx, list(templates), execute_mode=False)
        click.echo(ctx.get_help())
        ctx.exit(1 if templates else 0)

    log_sink: contextlib.AbstractContextManager[None] = contextlib.nullcontext()
    if mode.logging_enabled:
        try:
            ensure_directory(run_ctx, logs_dir)
        except OSError as exc:
            ctx.exit(report_error(WriteFailedError(_failed_path(exc, logs_dir), exc)))
        if logs_dir.is_dir():
            log_file = logs_dir / f"log.{PROG}.v{__version__}.log"
            log_sink = file_log(log_file, f"Script execution started, version {__version__}")
        else:
            logger.warning(f"Log directory {logs_dir} does not exist, file logging skipped")

    with log_sink:
        if templates:
            try:
                with log_section("State directory housekeeping"):
                    patch_gitignore(state_root / ".gitignore", dry_run=dry_run, audit=run_ctx.audit)
                    if settings["docs"]:
                        sync_docs(state_root, dry_run=dry_run, audit=run_ctx.audit)
            except OSError as exc:
                code = report_error(WriteFailedError(_failed_path(exc, state_root), exc))
                _print_summary(run_ctx)
                ctx.exit(code)

        code = run(run_ctx, list(templates), execute_mode=True)
        _print_summary(run_ctx)
        if code == 0:
            logger.info("✓ Operation completed successfully")
    ctx.exit(code)


def main() -> None:
    """Console-script entry point."""
    from colorama import init as colorama_init
    colorama_init()

    cli(prog_name=PROG, standalone_mode=True)


if __name__ == "__main__":
    main()

"""Resolve → plan → execute, and the error boundary around it."""

from __future__ import annotations

import dataclasses

from .core import RunContext, log_section, logger
from .errors import GitignoreError, MissingExecuteModeError, NoTemplatesError
from .executor import execute
from .planner import MergeAction, TargetState, plan
from .templates import resolve


def _dry(ctx: RunContext) -> RunContext:
    return dataclasses.replace(ctx, mode=dataclasses.replace(ctx.mode, dry_run=True))


def apply_templates(ctx: RunContext, names: list[str], *, execute_mode: bool = True) -> MergeAction:
    """Merge the named templates into the target file.

    All names are resolved before the target is even read, so an unknown
    name leaves everything on disk untouched.  Without *execute_mode* the
    batch is planned and reported as a dry run, then refused.
    """
    if not names:
        raise NoTemplatesError()

    with log_section(f"Processing templates: {' '.join(names)}"):
        templates = resolve(ctx.store, names)
        if not execute_mode:
            ctx = _dry(ctx)

        state = TargetState.read(ctx.target)
        action = plan(ctx, state, templates)
        logger.debug(f"Planned action: {type(action).__name__}")
        execute(ctx, action)

        if not execute_mode:
            raise MissingExecuteModeError(names)
    return action


def report_error(exc: GitignoreError) -> int:
    """Log *exc* with its hint; returns the exit code for it."""
    logger.error(str(exc))
    if exc.hint:
        logger.error(f"  {exc.hint}")
    return 1


def run(ctx: RunContext, names: list[str], *, execute_mode: bool = True) -> int:
    """Run :func:`apply_templates` and turn failures into an exit code."""
    try:
        apply_templates(ctx, names, execute_mode=execute_mode)
    except GitignoreError as exc:
        return report_error(exc)
    return 0

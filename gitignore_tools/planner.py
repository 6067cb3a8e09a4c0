"""Decide how the target ignore-file will be changed."""

from __future__ import annotations

import dataclasses
from pathlib import Path
from typing import Union

from .core import RunContext, logger
from .errors import InvalidChoiceError
from .templates import Template

PROMPT = "Action: [a]ppend or [r]eplace? (a/r)"
BACKUP_STAMP = "%Y%m%d_%H%M%S"

_APPEND_ANSWERS = {"a", "append"}
_REPLACE_ANSWERS = {"r", "replace"}


@dataclasses.dataclass(frozen=True)
class TargetState:
    path: Path
    exists: bool
    content: bytes = b""

    @classmethod
    def read(cls, path: Path) -> TargetState:
        if path.is_file():
            return cls(path=path, exists=True, content=path.read_bytes())
        return cls(path=path, exists=False)


@dataclasses.dataclass(frozen=True)
class Create:
    templates: list[Template]


@dataclasses.dataclass(frozen=True)
class Append:
    templates: list[Template]
    auto: bool = False


@dataclasses.dataclass(frozen=True)
class Replace:
    templates: list[Template]
    backup_path: Path


@dataclasses.dataclass(frozen=True)
class Undecided:
    """Dry run against an existing file without --auto-append: nothing to ask yet."""

    templates: list[Template]


MergeAction = Union[Create, Append, Replace, Undecided]


def backup_path_for(ctx: RunContext) -> Path:
    """Timestamped backup location that does not exist yet."""
    stamp = ctx.clock().strftime(BACKUP_STAMP)
    base = ctx.backup_dir / f"{ctx.target.name}.backup.{stamp}"
    candidate = base
    counter = 1
    while candidate.exists():
        candidate = base.with_name(f"{base.name}_{counter}")
        counter += 1
    return candidate


def plan(ctx: RunContext, state: TargetState, templates: list[Template]) -> MergeAction:
    """Pick exactly one action for this run.

    Absent target → Create.  Existing target → Append when auto-append is
    on, Undecided under dry run, otherwise whatever the prompter answers.
    """
    if not state.exists:
        return Create(templates)

    logger.warning(f"{state.path.name} already exists")
    if ctx.mode.auto_append:
        return Append(templates, auto=True)
    if ctx.mode.dry_run:
        return Undecided(templates)

    answer = ctx.prompter.ask(PROMPT)
    choice = (answer or "").strip().lower()
    if choice in _APPEND_ANSWERS:
        return Append(templates, auto=False)
    if choice in _REPLACE_ANSWERS:
        return Replace(templates, backup_path_for(ctx))
    raise InvalidChoiceError(answer)

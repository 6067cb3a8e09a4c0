"""Errors raised by the template engine.

Every error carries a human-readable message naming the template or path
involved, plus a ``hint`` telling the user what to run next.
"""

from __future__ import annotations

from pathlib import Path


class GitignoreError(Exception):
    """Base class for all engine failures."""

    hint: str = ""


class UnresolvedTemplateError(GitignoreError):
    hint = "Use --list to see all available templates"

    def __init__(self, name: str, locations: list[Path]) -> None:
        self.name = name
        self.locations = locations
        expected = "\n".join(f"    - {loc}" for loc in locations)
        super().__init__(f"Template '{name}' not found\n  Expected locations:\n{expected}")


class TemplateReadError(GitignoreError):
    hint = "Template files must be readable UTF-8 text"

    def __init__(self, path: Path, cause: BaseException) -> None:
        self.path = path
        self.cause = cause
        super().__init__(f"Could not read template {path}: {cause}")


class InvalidChoiceError(GitignoreError):
    hint = "Answer 'a' to append or 'r' to replace, or rerun with --auto-append"

    def __init__(self, choice: str) -> None:
        self.choice = choice
        super().__init__(f"Invalid choice '{choice}'. Operation cancelled.")


class BackupFailedError(GitignoreError):
    hint = "Check write permission on the backup directory (see --prerequis)"

    def __init__(self, path: Path, cause: BaseException | str) -> None:
        self.path = path
        self.cause = cause
        super().__init__(f"Backup to {path} failed: {cause}. The original file was left untouched.")


class WriteFailedError(GitignoreError):
    hint = "Check write permission on that path and its parent directory (see --prerequis)"

    def __init__(self, path: Path, cause: BaseException) -> None:
        self.path = path
        self.cause = cause
        super().__init__(f"Could not write {path}: {cause}")


class MissingExecuteModeError(GitignoreError):
    def __init__(self, templates: list[str]) -> None:
        self.templates = templates
        self.hint = f"Use --exec to execute the script. Example: gitignore-kit --exec {templates[0]}"
        super().__init__("Templates specified but --exec argument missing")


class NoTemplatesError(GitignoreError):
    hint = "Use --list to see available templates, --help for usage information"

    def __init__(self) -> None:
        super().__init__("No templates specified")

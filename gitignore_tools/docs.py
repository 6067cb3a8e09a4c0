"""Generate the README / USAGE / CHANGELOG markdown kept next to the logs."""

from __future__ import annotations

from pathlib import Path

from . import __version__
from .core import AuditTrail, logger
from .templates import CATEGORIES

PROG = "gitignore-kit"

CHANGELOG = """\
## v2.0.0

- Mandatory `--exec` flag before any .gitignore is touched
- `--prerequis` checks prerequisites, `--install` creates what is missing
- `--changelog` prints this history
- The state directory keeps its own .gitignore (`/logs`, `/backup`)
- README / USAGE / CHANGELOG markdown regenerated on every run
- Numbered summary of every action at the end of a run
- Help lists all bundled templates by category
- Replacing a file copies it to `backup/` before anything is overwritten

## v1.0.0

- Template management from a templates directory
- `--list`, `--simulate`, `--no-log`, `--auto-append`
- Log file
- Template existence checks
- Interactive append / replace choice
"""


def _template_lines() -> str:
    return "\n".join(
        f"- **{category}**: {', '.join(names)}"
        for category, names in CATEGORIES.items()
    )


def render_readme() -> str:
    return f"""\
# {PROG}

**Version:** {__version__}

`{PROG}` builds `.gitignore` files from predefined templates covering
languages, frameworks, operating systems, editors and DevOps tools.

## Features

- Combine several templates in one run, in the order given
- Automatic backup before an existing `.gitignore` is replaced
- Simulation mode (`--simulate`)
- Log file, disabled with `--no-log`
- Non-interactive `--auto-append`
- Prerequisite check and installation

## Templates

{_template_lines()}

## Quick start

```bash
{PROG} --list
{PROG} --exec python
{PROG} --exec python vscode macos
{PROG} --exec --simulate python vscode
```

See `USAGE.{PROG}.md` and `CHANGELOG.{PROG}.md`.
"""


def render_usage() -> str:
    return f"""\
# {PROG} usage

**Version:** {__version__}

| Option | Effect |
|---|---|
| `--exec`, `-exe` | Execute (required to create or modify `.gitignore`) |
| `--simulate`, `-s` | Dry run, nothing on disk changes |
| `--auto-append` | Append to an existing file without asking |
| `--no-log` | Console output only |
| `--list` | List available templates |
| `--prerequis`, `-pr` | Check prerequisites |
| `--install`, `-i` | Install missing prerequisites |
| `--changelog`, `-ch` | Show the changelog |
| `--help`, `-h` | Show help |

## Examples

```bash
{PROG} --exec web node vscode macos
{PROG} --exec --auto-append docker terraform
{PROG} --exec --auto-append --no-log python vscode
```

## Troubleshooting

An unknown name such as `phyton` aborts before anything is written; run
`{PROG} --list` for valid names.

Replaced files are kept as `backup/.gitignore.backup.YYYYMMDD_HHMMSS`.
"""


def render_changelog() -> str:
    return f"# {PROG} changelog\n\n{CHANGELOG}"


DOCS = {
    "README": render_readme,
    "USAGE": render_usage,
    "CHANGELOG": render_changelog,
}


def sync_docs(state_dir: Path, *, dry_run: bool = False, audit: AuditTrail | None = None) -> list[Path]:
    """(Re)write every generated markdown file under *state_dir*."""
    written: list[Path] = []
    for kind, render in DOCS.items():
        path = state_dir / f"{kind}.{PROG}.md"
        if dry_run:
            logger.info(f"[DRY-RUN] Would generate {path.name}")
            if audit is not None:
                audit.record(f"[DRY-RUN] Would generate {kind}.md documentation")
            continue
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(render(), encoding="utf-8")
        logger.info(f"[DocSync] File '{path.name}' updated automatically")
        if audit is not None:
            audit.record(f"Generated {kind}.md documentation")
        written.append(path)
    return written

"""Keep the state directory's own .gitignore free of logs and backups."""

from __future__ import annotations

from pathlib import Path

from .core import AuditTrail, logger

ENTRIES = ["/logs", "/backup"]
MARKER = "# Section added automatically by gitignore-kit"


def patch_gitignore(
    path: Path,
    entries: list[str] = ENTRIES,
    marker: str = MARKER,
    *,
    dry_run: bool = False,
    audit: AuditTrail | None = None,
) -> list[str]:
    """Ensure *entries* exist in the gitignore file under *marker*.

    Creates the file if absent.  Preserves original line endings (CRLF/LF).
    Returns the entries that were (or, under *dry_run*, would be) added;
    an empty list means nothing needed changing.
    """
    raw = b""
    if path.exists():
        raw = path.read_bytes()

    # Detect line ending style from existing content.
    eol = "\r\n" if b"\r\n" in raw else "\n"

    text = raw.decode()
    existing_lines = {l.rstrip("\r\n") for l in text.splitlines()}

    missing = [e for e in entries if e not in existing_lines]
    if not missing:
        logger.info(f"No modifications needed, all entries already present in {path}")
        return []

    if dry_run:
        for entry in missing:
            logger.info(f"[DRY-RUN] Would add entry: {entry}")
            if audit is not None:
                audit.record(f"[DRY-RUN] Would add '{entry}' to {path}")
        return missing

    parts: list[str] = []

    if text and not text.endswith("\n"):
        parts.append(eol)

    # Blank separator + marker (only when file already has content and
    # the marker isn't present yet).
    if text and marker not in existing_lines:
        parts.append(eol)
        parts.append(marker + eol)
    elif not text:
        parts.append(marker + eol)

    for entry in missing:
        parts.append(entry + eol)

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(text.encode() + "".join(parts).encode())
    for entry in missing:
        logger.info(f"Added entry: {entry}")
        if audit is not None:
            audit.record(f"Added '{entry}' to {path}")
    return missing

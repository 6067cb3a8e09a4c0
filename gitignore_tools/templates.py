"""Template store and resolution.

A template is a static ``.gitignore`` fragment kept in a templates
directory.  Each name is looked up through an ordered list of naming
conventions; the first convention with an existing file wins:

1. ``<name>.gitignore``
2. ``template_<name>.txt``
"""

from __future__ import annotations

import dataclasses
import os
from collections.abc import Callable
from pathlib import Path

from .core import logger
from .errors import TemplateReadError, UnresolvedTemplateError

BUNDLED_TEMPLATES_DIR = Path(__file__).parent / "templates"

# Header comments that describe a template but never belong in a target file.
METADATA_PREFIXES = (
    "# Template :",
    "# Description :",
    "# Maintainer :",
    "# Last update :",
    "# Compatible with :",
)

CATEGORIES: dict[str, list[str]] = {
    "PROGRAMMING LANGUAGES": [
        "python", "web", "node", "java", "cpp", "rust", "go",
        "ruby", "php", "dotnet", "swift", "android",
    ],
    "FRAMEWORKS & CMS": ["django", "laravel", "rails", "unity"],
    "OPERATING SYSTEMS": ["macos", "linux", "windows"],
    "IDEs & EDITORS": ["vscode", "jetbrains", "vim", "sublime"],
    "DEVOPS & TOOLS": ["docker", "terraform"],
}


# ── Naming conventions ───────────────────────────────────────────────


def _plain_name(name: str) -> str:
    return f"{name}.gitignore"


def _prefixed_name(name: str) -> str:
    return f"template_{name}.txt"


# Checked in order; first existing file wins.
CONVENTIONS: list[Callable[[str], str]] = [_plain_name, _prefixed_name]

# A name is a key inside the store, never a path.
_SEPARATORS = {"/", "\\", os.sep} | ({os.altsep} if os.altsep else set())


def is_valid_name(name: str) -> bool:
    return bool(name) and not any(c.isspace() or c in _SEPARATORS for c in name)


def _is_metadata(line: str) -> bool:
    return line.startswith(METADATA_PREFIXES)


def strip_metadata(lines: list[str]) -> list[str]:
    """Drop template header lines; everything else passes through verbatim."""
    return [line for line in lines if not _is_metadata(line)]


@dataclasses.dataclass(frozen=True)
class Template:
    name: str
    path: Path
    lines: tuple[str, ...]

    @classmethod
    def load(cls, name: str, path: Path) -> Template:
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise TemplateReadError(path, exc) from exc
        return cls(name=name, path=path, lines=tuple(text.splitlines(keepends=True)))

    @property
    def metadata(self) -> dict[str, str]:
        """Header fields, e.g. ``{"Template": "Python", "Maintainer": ...}``."""
        fields: dict[str, str] = {}
        for line in self.lines:
            if _is_metadata(line):
                key, _, value = line[2:].partition(" :")
                fields[key.strip()] = value.strip()
        return fields

    @property
    def content(self) -> str:
        """Metadata-stripped text, newline-terminated when non-empty."""
        text = "".join(strip_metadata(list(self.lines)))
        if text and not text.endswith("\n"):
            text += "\n"
        return text


class TemplateStore:
    """Read-only view over a templates directory."""

    def __init__(
        self,
        root: Path = BUNDLED_TEMPLATES_DIR,
        conventions: list[Callable[[str], str]] | None = None,
    ) -> None:
        self.root = Path(root)
        self.conventions = conventions if conventions is not None else CONVENTIONS

    def candidates(self, name: str) -> list[Path]:
        """All locations *name* may live at, in lookup order."""
        return [self.root / convention(name) for convention in self.conventions]

    def find(self, name: str) -> Path | None:
        if not is_valid_name(name):
            return None
        for path in self.candidates(name):
            if path.is_file():
                return path
        return None

    def get(self, name: str) -> Template:
        path = self.find(name)
        if path is None:
            raise UnresolvedTemplateError(name, self.candidates(name))
        return Template.load(name, path)

    def exists(self) -> bool:
        return self.root.is_dir()

    def available(self) -> list[str]:
        """Names of every template present on disk, sorted."""
        if not self.root.is_dir():
            return []
        names: set[str] = set()
        for path in self.root.iterdir():
            if not path.is_file():
                continue
            if path.suffix == ".gitignore":
                names.add(path.stem)
            elif path.name.startswith("template_") and path.suffix == ".txt":
                names.add(path.stem[len("template_"):])
        return sorted(names)

    def by_category(self) -> dict[str, list[str]]:
        """Available templates grouped like ``--list`` shows them.

        Templates outside the known categories are grouped under ``OTHER``.
        """
        available = set(self.available())
        grouped: dict[str, list[str]] = {}
        known: set[str] = set()
        for category, names in CATEGORIES.items():
            known.update(names)
            grouped[category] = [n for n in names if n in available]
        other = sorted(available - known)
        if other:
            grouped["OTHER"] = other
        return grouped


def resolve(store: TemplateStore, names: list[str]) -> list[Template]:
    """Resolve every name or fail on the first unknown one.

    Pure: nothing is written before all names are known.  Duplicates are
    kept and resolve once per occurrence.
    """
    templates: list[Template] = []
    for name in names:
        template = store.get(name)
        logger.debug(f"Resolved template '{name}' -> {template.path}")
        templates.append(template)
    return templates

"""Import directive extraction, merging and dependency discovery."""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Sequence, Tuple

from ..logging import get_logger
from ..models import DirectiveSet
from ..parsing.scanner import UNIT_DECLARATION

_IMPORT = re.compile(r"^\s*import\s+((?:static\s+)?[\w.]+(?:\.\*)?)\s*;", re.MULTILINE)
_IMPORT_LINE = re.compile(r"^\s*import\s+")
_PACKAGE_LINE = re.compile(r"^\s*package\s+")
_ANNOTATION_LINE = re.compile(r"^\s*@")
_DEPENDENCY_IMPORT = re.compile(
    r"^\s*import\s+(static\s+)?([\w.]+?)(\.\*)?\s*;", re.MULTILINE
)

_EXCLUDED_DIRS = {
    ".git",
    ".hg",
    ".svn",
    ".gradle",
    ".idea",
    ".mvn",
    "build",
    "target",
    "out",
    "node_modules",
}

logger = get_logger("merge.directives")


def extract_directives(source: str) -> List[str]:
    """Return import targets in file order, duplicates included.

    Static imports keep their ``static`` prefix, wildcard imports keep ``.*``.
    """
    return [" ".join(match.group(1).split()) for match in _IMPORT.finditer(source)]


def directive_set(source: str) -> DirectiveSet:
    return DirectiveSet.from_iterable(extract_directives(source))


def missing_directives(existing: str, fragment: str) -> DirectiveSet:
    """Return imports of ``fragment`` absent from ``existing``, in fragment order."""
    return directive_set(fragment).difference(directive_set(existing))


def merge_directives(existing: str, fragment: str) -> str:
    """Add the fragment's missing imports to ``existing``.

    New imports go after the last existing import. Without imports they go
    before the class declaration (and its annotations), or after the package
    line when no class is declared. Returns ``existing`` unchanged when
    nothing is missing.
    """
    additions = missing_directives(existing, fragment)
    if not additions:
        return existing

    lines = existing.split("\n")
    insert_at, after_import = _insertion_point(lines)
    new_lines = [f"import {directive};" for directive in additions]
    if not after_import:
        new_lines.append("")
    lines[insert_at:insert_at] = new_lines
    return "\n".join(lines)


def _insertion_point(lines: Sequence[str]) -> Tuple[int, bool]:
    last_import = -1
    package_line = -1
    unit_line = -1
    for index, line in enumerate(lines):
        if UNIT_DECLARATION.match(line):
            unit_line = index
            break
        if _IMPORT_LINE.match(line):
            last_import = index
        elif _PACKAGE_LINE.match(line):
            package_line = index

    if last_import >= 0:
        return last_import + 1, True
    if unit_line >= 0:
        start = unit_line
        while start > 0 and _ANNOTATION_LINE.match(lines[start - 1]):
            start -= 1
        return start, False
    return package_line + 1, False


def dependency_directives(source: str, standard_prefixes: Iterable[str]) -> List[str]:
    """Return project-local import targets, dropping platform and test libraries.

    Wildcards are reduced to their package and static imports to their
    declaring class.
    """
    prefixes = tuple(standard_prefixes)
    targets: List[str] = []
    for match in _DEPENDENCY_IMPORT.finditer(source):
        is_static, target, wildcard = match.groups()
        if is_static and not wildcard and "." in target:
            target = target.rsplit(".", 1)[0]
        if prefixes and target.startswith(prefixes):
            continue
        if target not in targets:
            targets.append(target)
    return targets


def find_dependency_units(root: Path, directives: Iterable[str]) -> Dict[str, Path]:
    """Map each import target to a matching ``.java`` file under ``root``.

    Test directories are not searched. The first match in sorted path order
    wins; unmatched targets are omitted.
    """
    root = Path(root)
    sources = sorted(_iter_source_files(root))
    found: Dict[str, Path] = {}
    for directive in directives:
        relative = directive.replace(".", "/") + ".java"
        for candidate in sources:
            if candidate == relative or candidate.endswith(f"/{relative}"):
                found[directive] = root / candidate
                break
        else:
            logger.debug("No workspace source found for import %s", directive)
    return found


def _iter_source_files(root: Path) -> Iterator[str]:
    for dirpath, dirnames, filenames in os.walk(root):
        current_dir = Path(dirpath)
        rel_dir = current_dir.relative_to(root).as_posix() if current_dir != root else ""
        dirnames[:] = [
            name for name in dirnames if name not in _EXCLUDED_DIRS and name != "test"
        ]
        for filename in filenames:
            if filename.endswith(".java"):
                yield f"{rel_dir}/{filename}" if rel_dir else filename


__all__ = [
    "dependency_directives",
    "directive_set",
    "extract_directives",
    "find_dependency_units",
    "merge_directives",
    "missing_directives",
]

"""File persistence for generated and merged test classes."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path
from typing import Optional

from .logging import get_logger

logger = get_logger("workspace")


@dataclass(frozen=True)
class SaveResult:
    """Outcome of writing a test file."""

    path: Path
    created: bool


def read_unit(path: Path) -> str:
    return Path(path).read_text(encoding="utf-8")


def save_unit(path: Path, content: str) -> SaveResult:
    """Write ``content`` to ``path``, creating parent directories as needed."""
    path = Path(path)
    existed = path.exists()
    if existed and not path.is_file():
        raise IsADirectoryError(f"Path exists but is not a file: {path}")
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    logger.debug("%s %s", "Updated" if existed else "Created", path)
    return SaveResult(path=path, created=not existed)


def create_backup(path: Path, *, now: datetime | None = None) -> Optional[Path]:
    """Copy an existing file to ``<name>.backup-<timestamp><ext>`` beside it.

    Returns None when there is nothing to back up.
    """
    path = Path(path)
    if not path.is_file():
        return None
    stamp = (now or datetime.now(UTC)).isoformat().replace(":", "-").replace(".", "-")
    backup = path.with_name(f"{path.stem}.backup-{stamp}{path.suffix}")
    backup.write_bytes(path.read_bytes())
    logger.debug("Backed up %s to %s", path, backup)
    return backup


__all__ = ["SaveResult", "create_backup", "read_unit", "save_unit"]

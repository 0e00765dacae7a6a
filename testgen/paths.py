"""Map source files to their test counterparts under Maven/Gradle layouts."""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Optional, Sequence

from .config import DEFAULT_TEST_SUFFIX
from .errors import PathResolutionError
from .models import LocationInfo


@dataclass(frozen=True)
class LayoutConvention:
    """Pairs a main source root with its test source root."""

    source_root: str
    test_root: str

    def apply(self, path: str) -> Optional[str]:
        """Return ``path`` rewritten into the test root, or None if it does not apply."""
        padded = f"/{path}"
        marker = f"/{self.source_root}/"
        position = padded.find(marker)
        if position == -1:
            return None
        rewritten = f"{padded[:position]}/{self.test_root}/{padded[position + len(marker):]}"
        return rewritten[1:]


DEFAULT_CONVENTIONS: Sequence[LayoutConvention] = (
    LayoutConvention("src/main/java", "src/test/java"),
    LayoutConvention("main/java", "test/java"),
    LayoutConvention("src/main/kotlin", "src/test/kotlin"),
)

DEFAULT_TEST_ROOT = "src/test/java"

_SOURCE_MARKER = re.compile(r"(?:^|/)(?:java|kotlin)/(.+)/[^/]+$")


def normalize_path(path: str) -> str:
    """Return ``path`` with forward slashes and no leading ``./``."""
    normalized = path.replace("\\", "/")
    while normalized.startswith("./"):
        normalized = normalized[2:]
    return normalized


class PathResolver:
    """Resolves test file locations following Maven/Gradle conventions.

    Converts ``src/main/java/com/example/Service.java`` into
    ``src/test/java/com/example/ServiceTest.java``.
    """

    def __init__(
        self,
        *,
        test_suffix: str = DEFAULT_TEST_SUFFIX,
        conventions: Sequence[LayoutConvention] = DEFAULT_CONVENTIONS,
    ) -> None:
        self.test_suffix = test_suffix
        self.conventions = tuple(conventions)

    def resolve_counterpart_path(self, relative_path: str, override: str | None = None) -> str:
        """Return the workspace-relative test path for a source path.

        An override, when given, is returned verbatim.
        """
        if override:
            return override

        test_path = self._to_test_layout(normalize_path(relative_path))
        parsed = PurePosixPath(test_path)
        if not parsed.stem.endswith(self.test_suffix):
            test_path = str(parsed.with_name(f"{parsed.stem}{self.test_suffix}{parsed.suffix}"))
        return test_path

    def resolve_test_file(
        self,
        source: Path,
        workspace_root: Path,
        override: str | None = None,
    ) -> Path:
        """Return the absolute test file location for ``source`` inside the workspace."""
        root = Path(workspace_root)
        if override:
            return root / override
        relative = self._relative_to_root(Path(source), root)
        return root / self.resolve_counterpart_path(relative)

    def parse_location(self, relative_path: str) -> LocationInfo:
        """Derive package, class name and test status from a relative path."""
        normalized = normalize_path(relative_path)
        parsed = PurePosixPath(normalized)

        match = _SOURCE_MARKER.search(normalized)
        namespace = match.group(1).replace("/", ".") if match else ""
        name = parsed.stem
        in_test_dir = "test" in parsed.parts[:-1]
        return LocationInfo(
            namespace=namespace,
            name=name,
            is_counterpart=in_test_dir or name.endswith(self.test_suffix),
            relative_path=normalized,
        )

    def parse_workspace_location(self, source: Path, workspace_root: Path) -> LocationInfo:
        return self.parse_location(self._relative_to_root(Path(source), Path(workspace_root)))

    def _to_test_layout(self, path: str) -> str:
        for convention in self.conventions:
            rewritten = convention.apply(path)
            if rewritten is not None:
                return rewritten
        return str(PurePosixPath(DEFAULT_TEST_ROOT) / path)

    @staticmethod
    def _relative_to_root(source: Path, root: Path) -> str:
        try:
            relative = source.resolve().relative_to(root.resolve())
        except ValueError as exc:
            raise PathResolutionError(
                f"{source} is not inside the workspace {root}. Open a folder or workspace."
            ) from exc
        return relative.as_posix()


__all__ = [
    "DEFAULT_CONVENTIONS",
    "LayoutConvention",
    "PathResolver",
    "normalize_path",
]

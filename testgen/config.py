"""Configuration loading for testgen (.testgen.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

import yaml

from .errors import ConfigError

CONFIG_FILENAME = ".testgen.yml"

DEFAULT_BUILD_TIMEOUT = 300.0
DEFAULT_SUMMARY_LINES = 30
DEFAULT_SUMMARY_FALLBACK_CHARS = 1000
DEFAULT_TEST_SUFFIX = "Test"
DEFAULT_STANDARD_PREFIXES: Tuple[str, ...] = (
    "java.",
    "javax.",
    "org.junit",
    "org.mockito",
)


@dataclass
class GenerationConfig:
    """Options forwarded to the external test generation backend."""

    test_framework: str = "junit5"
    mocking_framework: str = "mockito"
    coverage_target: int = 80
    include_edge_cases: bool = True
    include_dependencies: bool = True


@dataclass
class BuildConfig:
    """Build tool execution limits and summary formatting."""

    timeout: float = DEFAULT_BUILD_TIMEOUT
    summary_lines: int = DEFAULT_SUMMARY_LINES
    summary_fallback_chars: int = DEFAULT_SUMMARY_FALLBACK_CHARS


@dataclass
class ResolverConfig:
    """Test path naming and dependency filtering."""

    test_suffix: str = DEFAULT_TEST_SUFFIX
    standard_prefixes: List[str] = field(
        default_factory=lambda: list(DEFAULT_STANDARD_PREFIXES)
    )


@dataclass
class LogConfig:
    """Where the CLI writes its DEBUG log, relative to the workspace root."""

    file: Optional[str] = None


@dataclass
class TestGenConfig:
    """Represents the settings defined in .testgen.yml."""

    __test__ = False

    root: Path
    generation: GenerationConfig = field(default_factory=GenerationConfig)
    build: BuildConfig = field(default_factory=BuildConfig)
    resolver: ResolverConfig = field(default_factory=ResolverConfig)
    log: LogConfig = field(default_factory=LogConfig)

    @property
    def log_path(self) -> Optional[Path]:
        if not self.log.file:
            return None
        return self.root / self.log.file


def load_config(config_path: Path) -> TestGenConfig:
    """Load configuration from disk, returning defaults when the file is absent."""
    config_file = _resolve_config_path(Path(config_path))
    root = config_file.parent.resolve()

    if not config_file.exists():
        return TestGenConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    generation = GenerationConfig()
    generation_data = _as_dict(data.get("generation"))
    if generation_data:
        generation.test_framework = (
            _as_str(generation_data.get("test_framework")) or generation.test_framework
        )
        generation.mocking_framework = (
            _as_str(generation_data.get("mocking_framework")) or generation.mocking_framework
        )
        coverage = _as_int(generation_data.get("coverage_target"))
        if coverage is not None:
            generation.coverage_target = coverage
        edge_cases = _as_bool(generation_data.get("include_edge_cases"))
        if edge_cases is not None:
            generation.include_edge_cases = edge_cases
        dependencies = _as_bool(generation_data.get("include_dependencies"))
        if dependencies is not None:
            generation.include_dependencies = dependencies

    build = BuildConfig()
    build_data = _as_dict(data.get("build"))
    if build_data:
        timeout = _as_float(build_data.get("timeout"))
        if timeout is not None and timeout > 0:
            build.timeout = timeout
        summary_lines = _as_int(build_data.get("summary_lines"))
        if summary_lines is not None and summary_lines > 0:
            build.summary_lines = summary_lines
        fallback = _as_int(build_data.get("summary_fallback_chars"))
        if fallback is not None and fallback > 0:
            build.summary_fallback_chars = fallback

    resolver = ResolverConfig()
    resolver_data = _as_dict(data.get("resolver"))
    if resolver_data:
        resolver.test_suffix = _as_str(resolver_data.get("test_suffix")) or resolver.test_suffix
        if "standard_prefixes" in resolver_data:
            resolver.standard_prefixes = _as_str_list(resolver_data.get("standard_prefixes"))

    log = LogConfig(file=_as_str(_as_dict(data.get("log")).get("file")))

    return TestGenConfig(
        root=root, generation=generation, build=build, resolver=resolver, log=log
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    if config_path.name != CONFIG_FILENAME:
        return (config_path.parent / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float)) and not isinstance(value, bool) else None


def _as_float(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float))]
    return []

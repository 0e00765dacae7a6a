"""CLI entrypoints for testgen commands."""

from __future__ import annotations

import argparse
import json
import sys
from dataclasses import asdict
from pathlib import Path

from .build import run_tests
from .config import TestGenConfig, load_config
from .errors import TestGenError
from .logging import configure_logging
from .merge import dependency_directives, find_dependency_units, merge_generated
from .parsing import extract_unit_info
from .paths import PathResolver
from .workspace import create_backup, read_unit, save_unit


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _add_log_file_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    parser.add_argument(
        "--log-file",
        default=argparse.SUPPRESS if suppress_default else None,
        help="Append a DEBUG log, including raw build output, to this file.",
    )


def _add_root_option(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--root",
        default=".",
        help="Workspace root containing the build file (defaults to current directory).",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="testgen",
        description="Inspect Java sources, merge generated tests and run them.",
    )
    _add_verbose_option(parser)
    _add_log_file_option(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    scan_parser = subparsers.add_parser(
        "scan",
        help="List the package, class and methods declared in a Java file.",
    )
    _add_verbose_option(scan_parser, suppress_default=True)
    _add_log_file_option(scan_parser, suppress_default=True)
    scan_parser.add_argument("file", help="Java source file to scan.")

    resolve_parser = subparsers.add_parser(
        "resolve",
        help="Print the test file location for a Java source file.",
    )
    _add_verbose_option(resolve_parser, suppress_default=True)
    _add_log_file_option(resolve_parser, suppress_default=True)
    _add_root_option(resolve_parser)
    resolve_parser.add_argument("file", help="Java source file inside the workspace.")
    resolve_parser.add_argument(
        "--override",
        help="Workspace-relative test path to use instead of the computed one.",
    )

    merge_parser = subparsers.add_parser(
        "merge",
        help="Merge a generated test class into an existing one.",
    )
    _add_verbose_option(merge_parser, suppress_default=True)
    _add_log_file_option(merge_parser, suppress_default=True)
    merge_parser.add_argument("existing", help="Existing test class file.")
    merge_parser.add_argument("fragment", help="Generated test class file.")
    merge_parser.add_argument(
        "--write",
        action="store_true",
        help="Write the merged class back to the existing file instead of printing it.",
    )
    merge_parser.add_argument(
        "--backup",
        action="store_true",
        help="Keep a timestamped copy of the existing file before writing.",
    )

    deps_parser = subparsers.add_parser(
        "deps",
        help="List workspace sources matching a file's project imports.",
    )
    _add_verbose_option(deps_parser, suppress_default=True)
    _add_log_file_option(deps_parser, suppress_default=True)
    _add_root_option(deps_parser)
    deps_parser.add_argument("file", help="Java source file to inspect.")

    test_parser = subparsers.add_parser(
        "test",
        help="Run the project's tests with Gradle or Maven.",
    )
    _add_verbose_option(test_parser, suppress_default=True)
    _add_log_file_option(test_parser, suppress_default=True)
    test_parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Path to the project root (defaults to current directory).",
    )
    test_parser.add_argument(
        "--target",
        help="Run a single test class (qualified names and trailing * allowed).",
    )

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for testgen commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), log_file=_cli_log_file(args))

    try:
        if args.command == "scan":
            _scan(parser, args)
        elif args.command == "resolve":
            _resolve(args)
        elif args.command == "merge":
            _merge(args)
        elif args.command == "deps":
            _deps(args)
        elif args.command == "test":
            _test(parser, args)
        else:  # pragma: no cover - argparse enforces choices
            parser.exit(1, "Unknown command\n")
    except FileNotFoundError as exc:
        parser.exit(1, f"{exc}\n")
    except TestGenError as exc:
        parser.exit(1, f"testgen {args.command} failed: {exc}\n")


def _scan(parser: argparse.ArgumentParser, args: argparse.Namespace) -> None:
    info = extract_unit_info(read_unit(Path(args.file)))
    if info is None:
        parser.exit(1, f"No class declaration found in {args.file}\n")
    print(json.dumps(asdict(info), indent=2))


def _resolve(args: argparse.Namespace) -> None:
    root = Path(args.root)
    config = _load_config(args, root)
    resolver = PathResolver(test_suffix=config.resolver.test_suffix)
    test_path = resolver.resolve_test_file(Path(args.file), root, override=args.override)
    print(_relativize(test_path))


def _merge(args: argparse.Namespace) -> None:
    existing_path = Path(args.existing)
    merged = merge_generated(read_unit(existing_path), read_unit(Path(args.fragment)))
    if not args.write:
        print(merged)
        return
    if args.backup:
        backup = create_backup(existing_path)
        if backup is not None:
            print(f"Backup written to {_relativize(backup)}")
    save_unit(existing_path, merged)
    print(f"Merged tests written to {_relativize(existing_path)}")


def _deps(args: argparse.Namespace) -> None:
    root = Path(args.root)
    config = _load_config(args, root)
    imports = dependency_directives(
        read_unit(Path(args.file)), config.resolver.standard_prefixes
    )
    for directive, path in find_dependency_units(root, imports).items():
        print(f"{directive}\t{_relativize(path)}")


def _test(parser: argparse.ArgumentParser, args: argparse.Namespace) -> None:
    root = Path(args.path)
    config = _load_config(args, root)
    result = run_tests(root, args.target, config=config.build)
    print(result.summary)
    if result.passed:
        print("All tests passed!")
    else:
        parser.exit(1, "Some tests failed. Check the results above.\n")


def _cli_log_file(args: argparse.Namespace) -> Path | None:
    return Path(args.log_file) if args.log_file else None


def _load_config(args: argparse.Namespace, root: Path) -> TestGenConfig:
    """Load the workspace config and switch to its log file unless one was given."""
    config = load_config(root)
    if _cli_log_file(args) is None and config.log_path is not None:
        configure_logging(verbose=bool(args.verbose), log_file=config.log_path)
    return config


def _relativize(path: Path) -> str:
    try:
        return str(path.resolve().relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])

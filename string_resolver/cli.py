"""Command-line interface for the string resolver."""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from .changes import change_detail, compute_changes
from .errors import ConfigurationError, StringResolverError
from .loader import scan_content
from .log import configure_logging
from .resolver import EntryMerger

DEFAULT_DIFF_PLATFORM = EntryMerger.IOS
DEFAULT_DIFF_VERSION = "1.0.0"


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with its build and diff commands."""
    parser = argparse.ArgumentParser(
        prog="string-resolver",
        description="Merge localized string documents and compare content versions.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s build content/ --ios --version=1.2.3 --culture en --culture en-AU
  %(prog)s build --config strings.config.json --android --version=2.0.0 --code
  %(prog)s diff before/ after/ --platform android --version 1.0.0
        """
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    build = subparsers.add_parser("build", help="Resolve a content directory into culture tables")
    build.add_argument(
        "content",
        type=Path,
        nargs="?",
        help="Directory of JSON content documents (defaults to content.path in the config)"
    )
    platform_group = build.add_mutually_exclusive_group()
    platform_group.add_argument("--ios", action="store_true", help="Resolve for iOS")
    platform_group.add_argument("--android", action="store_true", help="Resolve for Android")
    build.add_argument("--version", help="App version, e.g. 1.2.3")
    build.add_argument(
        "--culture", "-c",
        action="append",
        dest="cultures",
        help="Target culture, repeatable; the first one is the base culture by default"
    )
    build.add_argument("--base-culture", help="Culture used when a target culture lacks a value")
    build.add_argument("--config", type=Path, help="JSON configuration file")
    build.add_argument("--output", "-o", type=Path, help="Write the result to this file instead of stdout")
    build.add_argument("--code", action="store_true", help="Include accessor descriptors for code generation")
    build.add_argument("--no-progress", action="store_true", help="Hide progress bars")

    diff = subparsers.add_parser("diff", help="Show the strings that changed between two content directories")
    diff.add_argument("before", type=Path, help="Content directory before the change")
    diff.add_argument("after", type=Path, help="Content directory after the change")
    diff.add_argument(
        "--platform",
        choices=[EntryMerger.IOS, EntryMerger.ANDROID],
        default=DEFAULT_DIFF_PLATFORM,
        help=f"Platform to resolve for (default: {DEFAULT_DIFF_PLATFORM})"
    )
    diff.add_argument(
        "--version",
        default=DEFAULT_DIFF_VERSION,
        help=f"App version to resolve for (default: {DEFAULT_DIFF_VERSION})"
    )
    diff.add_argument("--no-progress", action="store_true", help="Hide progress bars")

    return parser


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    return build_parser().parse_args(argv)


def load_config(path: Path) -> dict:
    """Read a JSON configuration file."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            config = json.load(f)
    except (OSError, ValueError) as e:
        raise ConfigurationError(f"Could not read config file {path}: {e}") from e
    if not isinstance(config, dict):
        raise ConfigurationError(f"Config file {path} must contain a JSON object")
    return config


def resolve_build_config(args: argparse.Namespace) -> dict:
    """Combine the config file and command-line flags; flags win."""
    config = load_config(args.config) if args.config else {}
    content = config.get("content") or {}
    output = config.get("output") or {}

    if not (args.ios or args.android):
        raise ConfigurationError("iOS or Android format must be specified with --ios or --android")
    platform = EntryMerger.IOS if args.ios else EntryMerger.ANDROID

    version = args.version or config.get("version")
    if not version:
        raise ConfigurationError("App version must be specified with --version=x.y.z")

    cultures = args.cultures or config.get("cultures")
    if not cultures:
        raise ConfigurationError("Target cultures must be specified with --culture or in the config file")

    content_path = args.content or (Path(content["path"]) if content.get("path") else None)
    if content_path is None:
        raise ConfigurationError("Content directory must be specified on the command line or in the config file")

    output_path = args.output or (Path(output["strings"]) if output.get("strings") else None)

    return {
        "platform": platform,
        "version": version,
        "cultures": list(cultures),
        "base_culture": args.base_culture or config.get("baseCulture") or cultures[0],
        "content_path": content_path,
        "output": output_path,
        "source_id": config.get("sourceId") or str(content_path),
    }


def validate_directory(path: Path, label: str) -> None:
    """Exit with an error if the path is not a directory."""
    if not path.exists():
        print(f"Error: {label} does not exist: {path}", file=sys.stderr)
        sys.exit(1)
    if not path.is_dir():
        print(f"Error: {label} is not a directory: {path}", file=sys.stderr)
        sys.exit(1)


def write_json(data: dict, output: Optional[Path], indent="\t") -> None:
    """Print JSON to stdout or write it to a file."""
    text = json.dumps(data, indent=indent, ensure_ascii=False)
    if output is None:
        print(text)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(text + "\n", encoding="utf-8")
    print(f"Wrote {output}", file=sys.stderr)


def run_build(args: argparse.Namespace) -> dict:
    """Resolve a content directory and emit its culture tables."""
    config = resolve_build_config(args)
    validate_directory(config["content_path"], "Content directory")

    merger = EntryMerger(config["platform"], config["version"], source_id=config["source_id"])
    documents, _ = scan_content(
        config["content_path"], "Loading content", progress=not args.no_progress
    )
    merger.add_entries(info.document for info in documents)

    tables = merger.culture_tables(config["cultures"], config["base_culture"])
    result = {
        "sourceId": merger.source_id,
        "platform": merger.platform.value,
        "version": merger.version,
        "cultures": {
            culture: [row.to_dict() for row in rows]
            for culture, rows in tables.items()
        },
    }
    if args.code:
        result["accessors"] = [a.to_dict() for a in merger.accessor_strings(config["cultures"][0])]

    print(
        f"Resolved {len(merger)} strings from {len(documents)} documents "
        f"for {merger.platform.value} {merger.version}",
        file=sys.stderr
    )
    write_json(result, config["output"])
    return result


def run_diff(args: argparse.Namespace) -> dict:
    """Compare two content directories for one platform and version."""
    validate_directory(args.before, "Before directory")
    validate_directory(args.after, "After directory")

    before, _ = scan_content(args.before, "Loading before", progress=not args.no_progress)
    after, _ = scan_content(args.after, "Loading after", progress=not args.no_progress)

    changed = change_detail(
        [info.document for info in before],
        [info.document for info in after]
    )
    diff = compute_changes(changed, args.platform, args.version)
    write_json(diff, None)
    return diff


def main(argv: Optional[Sequence[str]] = None) -> None:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(level=logging.DEBUG if args.verbose else logging.WARNING)

    action = "generate diff" if args.command == "diff" else "generate strings"
    try:
        if args.command == "diff":
            run_diff(args)
        else:
            run_build(args)
    except (StringResolverError, OSError) as e:
        parser.print_usage(sys.stderr)
        print(f"Failed to {action}:\n{e}\n", file=sys.stderr)
        sys.exit(1)

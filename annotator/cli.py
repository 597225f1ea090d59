"""Command-line interface for the annotation toolkit."""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional

from .config import Config
from .document import DocumentParser
from .pipeline import ExportPipeline
from .serializer import serialize_document
from .verbs import VerbIndex


def setup_logging(verbose: bool = False) -> None:
    """Configure logging for the CLI."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        description="Parse, normalize and export annotated Tibetan documents",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Dump the block tree of a document as JSON
  annotator parse stanza.txt --output stanza.json

  # Re-serialize a document in canonical notation
  annotator format stanza.txt --output stanza.normalized.txt

  # Report words that could not be aligned with the raw text
  annotator check stanza.txt

  # Export all analyzed words of a directory
  annotator export --config config.yaml
  annotator export --input data/annotated --output output/words.csv

  # Look up a verb form
  annotator lookup བསྐྱོད་པ --index tibetan_verb_index.json
        """,
    )
    subparsers = parser.add_subparsers(dest="command", required=True, help="Command to run")

    parse_parser = subparsers.add_parser("parse", help="Parse a document to JSON")
    parse_parser.add_argument("file", type=Path, help="Annotated document")
    parse_parser.add_argument("--output", "-o", type=Path, help="Output JSON file (default: stdout)")

    format_parser = subparsers.add_parser("format", help="Re-serialize a document")
    format_parser.add_argument("file", type=Path, help="Annotated document")
    format_parser.add_argument("--output", "-o", type=Path, help="Output file (default: stdout)")

    check_parser = subparsers.add_parser("check", help="Report alignment problems")
    check_parser.add_argument("file", type=Path, help="Annotated document")

    export_parser = subparsers.add_parser("export", help="Export analyzed words")
    export_parser.add_argument("--config", type=Path, help="Path to YAML configuration file")
    export_parser.add_argument("--input", type=Path, help="Document or directory of documents")
    export_parser.add_argument("--output", type=Path, help="Output file path")
    export_parser.add_argument(
        "--format", choices=["csv", "json"], help="Output format (default: csv)"
    )
    export_parser.add_argument("--index", type=Path, help="Verb index JSON used to polish verbs")
    export_parser.add_argument(
        "--no-children", action="store_true", help="Skip sub-words of compounds"
    )

    lookup_parser = subparsers.add_parser("lookup", help="Look up a verb form")
    lookup_parser.add_argument("word", help="Verb form or root")
    lookup_parser.add_argument("--index", type=Path, required=True, help="Verb index JSON")

    for sub in (parse_parser, format_parser, check_parser, export_parser, lookup_parser):
        sub.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")

    return parser


def build_config(args: argparse.Namespace) -> Config:
    """Build export configuration from arguments."""
    if args.config:
        config = Config.from_yaml(args.config)
    else:
        config = Config()

    if args.input:
        config.input.input_path = args.input
    if args.output:
        config.output.output_path = args.output
    if args.format:
        config.output.format = args.format
    if args.index:
        config.verb_index.path = args.index
    if args.no_children:
        config.output.include_children = False

    return config


def _write_output(text: str, output: Optional[Path]) -> None:
    if output is None:
        sys.stdout.write(text)
    else:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(text, encoding="utf-8")


def handle_parse(args: argparse.Namespace) -> int:
    """Handle parse command."""
    blocks = DocumentParser().parse(args.file.read_text(encoding="utf-8"))
    data = [block.to_dict() for block in blocks]
    _write_output(json.dumps(data, ensure_ascii=False, indent=2) + "\n", args.output)
    return 0


def handle_format(args: argparse.Namespace) -> int:
    """Handle format command."""
    blocks = DocumentParser().parse(args.file.read_text(encoding="utf-8"))
    _write_output(serialize_document(blocks), args.output)
    return 0


def handle_check(args: argparse.Namespace) -> int:
    """Handle check command."""
    parser = DocumentParser()
    blocks = parser.parse(args.file.read_text(encoding="utf-8"))
    word_count = sum(len(block.words) for block in blocks)
    print(f"{len(blocks)} blocks, {word_count} words")
    for miss in parser.misses:
        print(f"Not found: {miss.surface_text} (from offset {miss.cursor})")
    return 1 if parser.misses else 0


def handle_export(args: argparse.Namespace) -> int:
    """Handle export command."""
    try:
        config = build_config(args)
        pipeline = ExportPipeline(config)
        row_count = pipeline.run()
    except FileNotFoundError as e:
        print(f"Error: File not found - {e}", file=sys.stderr)
        return 1
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"\nExported {row_count} words")
    return 0


def handle_lookup(args: argparse.Namespace) -> int:
    """Handle lookup command."""
    try:
        index = VerbIndex.from_json(args.index)
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    entries = index.lookup(args.word)
    if not entries:
        print(f"No entries for {args.word}")
        return 1
    for entry in entries:
        print(json.dumps(entry.to_dict(), ensure_ascii=False))
    return 0


HANDLERS = {
    "parse": handle_parse,
    "format": handle_format,
    "check": handle_check,
    "export": handle_export,
    "lookup": handle_lookup,
}


def main(argv: Optional[list] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)

    if hasattr(args, "file") and not args.file.exists():
        print(f"Error: File not found - {args.file}", file=sys.stderr)
        return 1
    return HANDLERS[args.command](args)


if __name__ == "__main__":
    sys.exit(main())

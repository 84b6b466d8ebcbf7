"""CLI entry point for texdoc.

Builds LaTeX documents from YAML document descriptions and renders them
with the configured executable.

Usage::

    # Build and render a document (opens the PDF on success)
    python -m texdoc.cli build report.yaml

    # Render under a fixed name without opening a viewer
    python -m texdoc.cli build report.yaml --output-name q1 --no-open

    # Print the generated markup without running the renderer
    python -m texdoc.cli preview report.yaml

    # Show the configuration and body of a description
    python -m texdoc.cli inspect report.yaml -v
"""

import argparse
import logging
import sys
from pathlib import Path

import yaml

from texdoc.errors import TexDocError
from texdoc.generator.latex_builder import builder_from_spec
from texdoc.schema.loader import load_document
from texdoc.schema.models import Directive


# ---------------------------------------------------------------------------
# Document loading
# ---------------------------------------------------------------------------

def _load_document(args):
    """Load a DocumentSpec from the CLI's document argument."""
    path = Path(args.document)
    if not path.exists():
        _error(f"Document file not found: {path}")
    try:
        return load_document(path)
    except (KeyError, ValueError, FileNotFoundError, yaml.YAMLError) as e:
        _error(f"Invalid document {path}: {e}")


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

def cmd_build(args):
    """Build the document and run the renderer."""
    spec = _load_document(args)
    _info(f"Document: {args.document} ({len(spec.body)} body items)")

    try:
        builder = builder_from_spec(spec)
    except (TexDocError, ZeroDivisionError) as e:
        _error(str(e))

    output_name = args.output_name or spec.output_name
    _info(f"Rendering with {spec.executable}...")
    try:
        exit_code = builder.render(output_name, open_viewer=not args.no_open)
    except TexDocError as e:
        _error(str(e))

    if exit_code == 0:
        _info(f"Rendered into {builder.folder}")
    else:
        _warn(f"Renderer exited with code {exit_code}")
    sys.exit(exit_code)


def cmd_preview(args):
    """Print or write the generated markup without rendering."""
    spec = _load_document(args)
    try:
        builder = builder_from_spec(spec)
    except (TexDocError, ZeroDivisionError) as e:
        _error(str(e))

    markup = builder.to_string()
    if args.output:
        output = Path(args.output)
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(markup + "\n", encoding="utf-8")
        _info(f"Written: {output} ({len(markup):,} chars)")
    else:
        print(markup)


def cmd_inspect(args):
    """Show document configuration and body."""
    spec = _load_document(args)
    m = spec.margins

    print(f"Executable:  {spec.executable}")
    print(f"Folder:      {spec.folder}")
    print(f"Margins:     top={m.top} bottom={m.bottom} left={m.left} right={m.right}")
    print(f"Packages:    {len(spec.packages)}")
    print(f"Body items:  {len(spec.body)} ({len(spec.elements())} elements)")

    if args.verbose:
        print()
        for i, item in enumerate(spec.body):
            if isinstance(item, Directive):
                print(f"  [{i:2d}] directive {item.command.value}")
            else:
                print(f"  [{i:2d}] {item.kind.value}")


# ---------------------------------------------------------------------------
# Output helpers
# ---------------------------------------------------------------------------

def _info(msg):
    print(f"  {msg}", file=sys.stderr)


def _warn(msg):
    print(f"  WARNING: {msg}", file=sys.stderr)


def _error(msg):
    print(f"  ERROR: {msg}", file=sys.stderr)
    sys.exit(1)


# ---------------------------------------------------------------------------
# Argument parsing
# ---------------------------------------------------------------------------

def build_parser():
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="texdoc",
        description="Assemble and render LaTeX documents from YAML descriptions.",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level for library messages (default: WARNING).",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    # ---- build ----
    build = subparsers.add_parser(
        "build",
        help="Build the markup and run the renderer.",
    )
    _add_document_arg(build)
    build.add_argument(
        "--output-name",
        help="Output file name without extension (default: timestamp).",
    )
    build.add_argument(
        "--no-open",
        action="store_true",
        default=False,
        help="Don't open the rendered document.",
    )
    build.set_defaults(func=cmd_build)

    # ---- preview ----
    prev = subparsers.add_parser(
        "preview",
        help="Print the generated markup without rendering.",
    )
    _add_document_arg(prev)
    prev.add_argument(
        "-o", "--output",
        help="Write the markup to this file instead of stdout.",
    )
    prev.set_defaults(func=cmd_preview)

    # ---- inspect ----
    insp = subparsers.add_parser(
        "inspect",
        help="Show document configuration and body.",
    )
    _add_document_arg(insp)
    insp.add_argument(
        "-v", "--verbose",
        action="store_true",
        default=False,
        help="List every body item.",
    )
    insp.set_defaults(func=cmd_inspect)

    return parser


def _add_document_arg(parser):
    """Add the positional document path to a subparser."""
    parser.add_argument(
        "document",
        help="Path to the YAML document description.",
    )


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------

def main(argv=None):
    """CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=args.log_level,
                        format="%(levelname)s %(name)s: %(message)s")
    args.func(args)


if __name__ == "__main__":
    main()

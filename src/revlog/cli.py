#!/usr/bin/env python3
"""
CLI for revision log ingestion and export.

Usage:
    revlog add       <basename> <input.csv> [--json]
    revlog export    <basename> <revision_id> [--out FILE]
    revlog revisions <basename>
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from .config import RevlogConfig
from .core.exceptions import RevisionNotFoundError, RevlogError
from .log import RevisionLog
from .runner import add, export


def setup_logging(verbose: bool = False) -> None:
    """Configure logging."""
    log_level = logging.DEBUG if verbose else logging.INFO
    
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def cmd_add(args, config: RevlogConfig) -> int:
    """Ingest a snapshot and append a revision if anything changed."""
    report = add(args.basename, Path(args.input), config=config)
    
    print(report.summary())
    
    if args.json:
        print("\n" + json.dumps(report.to_dict(), indent=2))
    
    return 0


def cmd_export(args, config: RevlogConfig) -> int:
    """Export one revision as CSV."""
    logger = logging.getLogger(__name__)
    
    # Look the revision up before touching the output file
    log = RevisionLog(config.get_paths(args.basename))
    if log.index.find(args.revision_id) is None:
        print(str(RevisionNotFoundError(args.revision_id)), file=sys.stderr)
        return 1
    
    try:
        if args.out:
            with open(args.out, "w", encoding="utf-8", newline="") as sink:
                rows = export(args.basename, args.revision_id, sink, config=config)
        else:
            rows = export(args.basename, args.revision_id, sys.stdout, config=config)
    except RevisionNotFoundError as e:
        print(str(e), file=sys.stderr)
        return 1
    
    logger.info(f"Exported {rows:,} rows from revision {args.revision_id}")
    return 0


def cmd_revisions(args, config: RevlogConfig) -> int:
    """List committed revisions."""
    log = RevisionLog(config.get_paths(args.basename))
    revisions = log.revisions()
    
    if not revisions:
        print("No revisions")
        return 0
    
    for revision in revisions:
        print(f"{revision.id}\t{revision.byte_offset}\t{revision.rows}")
    return 0


def parse_args(argv=None):
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Revision log for CSV snapshots",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose/debug logging",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="Path to configuration YAML file",
    )
    
    subparsers = parser.add_subparsers(dest="command", help="Command to run")
    
    # Add command
    add_parser = subparsers.add_parser("add", help="Ingest a CSV snapshot")
    add_parser.add_argument("basename", help="Log basename (files are <basename>.csv, ...)")
    add_parser.add_argument("input", help="Path to the CSV snapshot")
    add_parser.add_argument("--json", action="store_true", help="Output report as JSON")
    
    # Export command
    export_parser = subparsers.add_parser("export", help="Export a revision as CSV")
    export_parser.add_argument("basename", help="Log basename")
    export_parser.add_argument("revision_id", type=int, help="Revision id to export")
    export_parser.add_argument("--out", help="Output file (default: stdout)")
    
    # Revisions command
    revisions_parser = subparsers.add_parser("revisions", help="List committed revisions")
    revisions_parser.add_argument("basename", help="Log basename")
    
    return parser.parse_args(argv)


def main(argv=None) -> int:
    """Main entry point."""
    args = parse_args(argv)
    
    setup_logging(verbose=args.verbose)
    logger = logging.getLogger(__name__)
    
    commands = {
        "add": cmd_add,
        "export": cmd_export,
        "revisions": cmd_revisions,
    }
    command = commands.get(args.command)
    if command is None:
        print("No command specified. Use --help for usage.", file=sys.stderr)
        return 1
    
    try:
        config = RevlogConfig(config_path=args.config)
        return command(args, config)
    except (RevlogError, OSError) as e:
        logger.error(f"error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())

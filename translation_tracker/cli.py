"""Command-line interface for translation progress reports."""

import argparse
import json
import logging
import sys
from pathlib import Path

from .config import load_config
from .exceptions import TranslationTrackerError
from .report_generator import ReportGenerator
from .scheduler import ManualScheduler
from .session import TranslationSession
from .tracker import TranslationTracker


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="track-translation",
        description="Translation progress and MT abuse tracking",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Print progress and sections with MT abuse warnings
  track-translation report session.yaml

  # Use custom thresholds and write an HTML report
  track-translation report session.yaml --config tracker.yaml --report report.html

  # Machine-readable aggregate progress
  track-translation report session.yaml --json
        """
    )

    parser.add_argument(
        "--version",
        action="version",
        version="%(prog)s 0.1.0"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    report = subparsers.add_parser("report", help="Restore a session and report its progress")
    report.add_argument(
        "session",
        help="Session snapshot file (YAML or JSON)"
    )
    report.add_argument(
        "-c", "--config",
        default="tracker.yaml",
        help="Configuration file (default: tracker.yaml)"
    )
    report.add_argument(
        "-r", "--report",
        help="Write an HTML report to this path"
    )
    report.add_argument(
        "--json",
        action="store_true",
        help="Print aggregate progress as JSON"
    )
    report.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Verbose logging"
    )

    return parser


def run_report(args) -> int:
    """Restore a session snapshot and report on it.

    Returns:
        0 if no section has warnings, 1 if some have, 2 on errors
    """
    try:
        session = TranslationSession.load(args.session)
        config = load_config(
            args.config,
            source_language=session.source_language,
            target_language=session.target_language,
        )
    except TranslationTrackerError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    editor = session.build_editor()
    tracker = TranslationTracker(editor, config, scheduler=ManualScheduler())
    tracker.init(session.sections, session.saved_units, session.progress)

    progress = tracker.get_translation_progress()
    nodes_with_issues = tracker.get_nodes_with_issues()
    unmodified_tokens = tracker.get_unmodified_mt_percentage_in_translation()

    if args.json:
        print(json.dumps(progress.to_dict(), indent=2))
    else:
        print("=" * 60)
        print(f"Translation progress: {session.title or Path(args.session).name}")
        print("=" * 60)
        print(f"  Sections:            {len(tracker.sections)}")
        print(f"  Any translation:     {progress.any:.0%}")
        print(f"  Human modified:      {progress.human:.0%}")
        print(f"  Unmodified MT:       {progress.mt:.0%}")
        print(f"  Unmodified tokens:   {unmodified_tokens:.1f}%")
        if nodes_with_issues:
            print(f"  MT abuse warnings:   {', '.join(str(node) for node in nodes_with_issues)}")
        else:
            print("  MT abuse warnings:   none")

    if args.report:
        report_path = ReportGenerator().generate_report(
            args.report,
            sections=[tracker.sections[number] for number in sorted(tracker.sections)],
            progress=progress,
            source_language=config.source_language,
            target_language=config.target_language,
            unmodified_tokens=unmodified_tokens,
            title=session.title,
        )
        if not args.json:
            print(f"  Report: {report_path}")

    return 1 if nodes_with_issues else 0


def main(argv=None) -> int:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    if args.command == "report":
        return run_report(args)

    return 2


if __name__ == "__main__":
    sys.exit(main())

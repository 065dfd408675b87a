# mud_capture/main.py
# AI-Mind (C) 2025 by Martin Bukowski is licensed under CC BY-NC-SA 4.0
"""
CLI entry point for mud-capture.

Usage:
    python -m mud_capture replay session.log --config config/capture.example.yaml
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from .config import CaptureConfig, load_config
from .exceptions import CaptureError
from .hub import CaptureHub

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mud_capture",
        description="Passively capture score sheets and room occupants from MUD output",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    # Replay a transcript with default settings
    python -m mud_capture replay session.log

    # With a config file, known players and Redis publishing
    python -m mud_capture replay session.log --config config/capture.example.yaml \\
        --known-player Scynox --redis-url redis://localhost:6379
        """,
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose (debug) logging",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    replay = subparsers.add_parser("replay", help="Feed a captured transcript through both capture families")
    replay.add_argument("transcript", type=Path, help="Transcript file, one server line per line")
    replay.add_argument("--config", type=Path, help="Path to capture configuration YAML file")
    replay.add_argument("--redis-url", help="Publish snapshots to Redis streams at this URL")
    replay.add_argument(
        "--known-player",
        action="append",
        default=[],
        metavar="NAME",
        help="Known player name (repeatable)",
    )
    replay.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        dest="verbose_replay",
        help="Enable verbose (debug) logging",
    )
    return parser


def replay(args: argparse.Namespace) -> int:
    """Replay a transcript and print a JSON summary."""
    try:
        config = load_config(args.config) if args.config else CaptureConfig()
    except CaptureError as e:
        logger.error(str(e))
        return 1

    try:
        with open(args.transcript, encoding="utf-8", errors="replace") as f:
            lines = f.read().splitlines()
    except OSError as e:
        logger.error(f"Cannot read transcript {args.transcript}: {e}")
        return 1

    try:
        hub = CaptureHub.from_config(
            config,
            redis_url=args.redis_url,
            known_players=args.known_player,
        )
    except CaptureError as e:
        logger.error(f"Capture setup failed: {e}")
        return 1

    results = hub.feed_lines(lines)
    logger.info(f"Replayed {len(lines)} lines, {len(results)} capture sessions ended")

    summary = hub.summary()
    summary["sessions"] = [r.model_dump(mode="json", exclude={"snapshot", "entities"}) for r in results]
    print(json.dumps(summary, indent=2))
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point for the mud-capture CLI.

    Returns:
        Exit code (0 for success, non-zero for failure).
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    verbose = args.verbose or getattr(args, "verbose_replay", False)
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    if args.command == "replay":
        return replay(args)

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())

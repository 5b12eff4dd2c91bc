"""
Command line entry point for the BigBlueButton stress test.
"""

import argparse
import asyncio
import sys
from datetime import datetime
from typing import List, Optional

from bbb_stress.bbb import BBBClient
from bbb_stress.config import settings, get_logger, setup_logging
from bbb_stress.core.exceptions import StressTestException
from bbb_stress.meeting_handler import StressTestLauncher

main_logger = get_logger("main")


def positive_int(value: str) -> int:
    """argparse type for counts that must be at least 1."""
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be a positive integer, got {value}")
    return number


def build_parser() -> argparse.ArgumentParser:
    """Build the CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="bbb-stress",
        description="Join simulated participants to a BigBlueButton meeting.",
    )
    parser.add_argument("meeting_id", help="ID of a running meeting")
    parser.add_argument(
        "-d", "--duration", type=float, default=60.0,
        help="Seconds to keep participants in the meeting after joining (default: 60)",
    )
    parser.add_argument(
        "-c", "--camera", type=int, default=0,
        help="Participants sharing a webcam and microphone",
    )
    parser.add_argument(
        "-m", "--microphone", type=int, default=0,
        help="Participants with microphone only",
    )
    parser.add_argument(
        "-l", "--listen", type=int, default=1,
        help="Listen-only participants (default: 1)",
    )
    parser.add_argument(
        "--concurrency", type=positive_int, default=None,
        help="Participants joining at the same time (default: JOIN_MAX_CONCURRENT_JOINS or 1)",
    )
    parser.add_argument(
        "--log-level", default=None, type=str.upper,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Override LOG_LEVEL (DEBUG, INFO, WARNING, ERROR)",
    )
    return parser


async def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    if args.log_level:
        settings.log_level = args.log_level
    if args.concurrency is not None:
        settings.join.max_concurrent_joins = args.concurrency
    setup_logging()

    main_logger.info(f"Starting stress test at {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
    main_logger.info(
        f"Meeting: {args.meeting_id} | camera: {args.camera} | "
        f"microphone: {args.microphone} | listen-only: {args.listen} | "
        f"duration: {args.duration}s"
    )

    async with BBBClient() as bbb_client:
        launcher = StressTestLauncher(bbb_client)
        await launcher.start(
            args.meeting_id,
            args.duration,
            clients_with_camera=args.camera,
            clients_with_microphone=args.microphone,
            clients_listening=args.listen,
        )


def run(argv: Optional[List[str]] = None) -> None:
    """Run the stress test (synchronous entry point)."""
    try:
        asyncio.run(main(argv))
    except KeyboardInterrupt:
        print("\nGoodbye!")
    except StressTestException as e:
        print(f"\nFatal error: {e.message}")
        sys.exit(1)
    except Exception as e:
        print(f"\nFatal error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    run()

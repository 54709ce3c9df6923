"""Command-line entry point.

Usage:
    tf-sender x y z yaw pitch roll frame_id child_frame_id period_ms
    tf-sender x y z qx qy qz qw frame_id child_frame_id period_ms
    tf-sender --urdf robot.urdf --joint camera_joint --period-ms 100

With --interactive, ``field=value`` lines on stdin (for example ``yaw=1.57``
or ``angle_units=degrees``) edit the transform while it is being published.
"""

from __future__ import annotations

import argparse
import logging
import sys
import threading
from typing import Optional, Sequence, TextIO

from tf_sender.config import USAGE, SenderConfig
from tf_sender.exceptions import ConfigurationError
from tf_sender.io import load_joint_origin
from tf_sender.log import setup_logging
from tf_sender.reconfigure import ReconfigurationController, ReconfigureServer
from tf_sender.reconfigure.server import parse_assignment
from tf_sender.sender import StreamBroadcaster, TransformSender

logger = logging.getLogger(__name__)


def _positive_int(text: str) -> int:
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected an integer, got {text!r}")
    if value < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {value}")
    return value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tf-sender",
        description="Periodically republish a transform between two frames.",
        epilog=USAGE,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("values", nargs="*", help="Positional transform arguments")
    parser.add_argument("--urdf", help="Read the transform from a URDF joint origin")
    parser.add_argument("--joint", help="Joint name to read with --urdf")
    parser.add_argument("--period-ms", type=float, help="Publish period with --urdf")
    parser.add_argument("--count", type=_positive_int, default=None,
                        help="Stop after this many transforms (default: run until interrupted)")
    parser.add_argument("--interactive", action="store_true",
                        help="Apply field=value edits read from stdin")
    parser.add_argument("--log-level", default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return parser


def load_config(args: argparse.Namespace) -> SenderConfig:
    """Build the SenderConfig from parsed arguments."""
    if args.urdf:
        if args.values:
            raise ConfigurationError("positional values cannot be combined with --urdf")
        if not args.joint or args.period_ms is None:
            raise ConfigurationError("--urdf needs --joint and --period-ms")
        return SenderConfig.from_joint_origin(load_joint_origin(args.urdf, args.joint), args.period_ms)
    return SenderConfig.from_argv(args.values)


def read_edits(stream: TextIO, server: ReconfigureServer, stop_event: threading.Event) -> None:
    """Apply ``field=value`` lines from ``stream`` until EOF or shutdown."""
    for line in stream:
        if stop_event.is_set():
            break
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        try:
            name, value = parse_assignment(line)
            result = server.update(**{name: value})
        except ConfigurationError as exc:
            logger.warning("Ignoring edit: %s", exc)
            continue
        logger.info("Applied %s=%s, updated %s", name, value, sorted(result.values))


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(getattr(logging, args.log_level))

    try:
        config = load_config(args)
    except ConfigurationError as exc:
        print(USAGE, file=sys.stderr)
        logger.error("tf-sender exited due to invalid arguments: %s", exc)
        return 1

    state = config.build_state()
    server = ReconfigureServer(ReconfigurationController(state))
    server.start()
    sender = TransformSender(state, StreamBroadcaster(sys.stdout), config.period)

    stop_event = threading.Event()
    if args.interactive:
        threading.Thread(
            target=read_edits, args=(sys.stdin, server, stop_event), daemon=True
        ).start()

    try:
        sender.run(stop_event, max_ticks=args.count)
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down")
    finally:
        stop_event.set()
    return 0


if __name__ == "__main__":
    sys.exit(main())

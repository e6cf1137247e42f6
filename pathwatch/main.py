"""Command line entry point for PathWatch.

Usage:
    pathwatch record [--url URL]
    pathwatch replay [--headed]
    pathwatch replay --env-file /etc/pathwatch/pathwatch.env
"""

import argparse
import asyncio
import logging
import os
import signal
import sys
from typing import Optional, Sequence

from dotenv import dotenv_values

from .config import Config, load_config, validate_config
from .pipeline.recorder import Recorder
from .pipeline.replayer import Replayer
from .reporter.smtp_reporter import SMTPAlertReporter
from .storage.steps import StepStore, StoreFormatError, StoreNotFoundError

logger = logging.getLogger(__name__)


def _load_env_file(path: str) -> None:
    """Load environment variables from a .env-style file."""
    values = dotenv_values(path)
    for key, value in values.items():
        if value is None:
            continue
        os.environ[key] = value


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=[
            logging.StreamHandler(sys.stdout),
        ],
    )


async def run_record(config: Config) -> int:
    """Record a click path until the browser is closed or a signal arrives."""
    store = StepStore(config.steps_path)
    recorder = Recorder(config, store)

    loop = asyncio.get_running_loop()
    shutdown_tasks: set[asyncio.Task] = set()

    def _on_signal(sig: signal.Signals) -> None:
        task = asyncio.create_task(recorder.shutdown(f"signal {sig.name}"))
        shutdown_tasks.add(task)
        task.add_done_callback(shutdown_tasks.discard)

    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, _on_signal, sig)

    try:
        await recorder.start()
    except Exception as e:
        logger.error(f"Recorder failed to start: {e}")
        await recorder.shutdown("startup failure")
        return 1

    steps = await recorder.run()
    logger.info(f"Recording finished with {len(steps)} steps in {store.path}")
    return 0


async def run_replay(config: Config) -> int:
    """Replay the recorded path. Failed steps are reported, not an error exit."""
    store = StepStore(config.steps_path)
    try:
        steps = store.load()
    except (StoreNotFoundError, StoreFormatError) as e:
        logger.error(f"Cannot load recorded steps: {e}")
        return 1

    if not steps:
        logger.error(f"No recorded steps found in {store.path}")
        return 1

    validation_errors = validate_config(config)
    if validation_errors:
        for err in validation_errors:
            logger.error(err)
        return 1

    alerter = SMTPAlertReporter(
        host=config.smtp_host,
        port=config.smtp_port,
        username=config.smtp_username,
        password=config.smtp_password,
        from_email=config.sender,
        to_email=config.alert_to,
        use_tls=config.smtp_use_tls,
    )
    replayer = Replayer(config, alerter)
    await replayer.run(steps)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pathwatch",
        description="Record a click path through a site and verify its content on replay",
    )
    parser.add_argument("--env-file", help="Load settings from this .env file")
    parser.add_argument("--verbose", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    record = sub.add_parser("record", help="Record a click path in a visible browser")
    record.add_argument("--url", help="Entry URL (default: START_URL)")

    replay = sub.add_parser("replay", help="Replay the recorded path and verify content")
    replay.add_argument("--headed", action="store_true", help="Show the browser during replay")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Entry point."""
    args = build_parser().parse_args(argv)
    _configure_logging(args.verbose)

    if args.env_file:
        _load_env_file(args.env_file)
    config = load_config()

    if args.command == "record":
        if args.url:
            config.start_url = args.url
        return asyncio.run(run_record(config))

    if args.headed:
        config.headless = False
    return asyncio.run(run_replay(config))


if __name__ == "__main__":
    sys.exit(main())

"""Command-line entry point for job board maintenance tasks."""

from dotenv import load_dotenv
load_dotenv()

import argparse
import json
import sys
import time
from pathlib import Path
from typing import List, Optional, Tuple

from jobboard.config.environment import EnvironmentConfig
from jobboard.config.exceptions import ConfigurationError
from jobboard.config.loader import load_config
from jobboard.config.models import AppConfig
from jobboard.logging import get_logger
from jobboard.logging.config import configure_logging
from jobboard.migrations import count_legacy_salaries, run_backfill
from jobboard.persistence.database import close_database, init_database

logger = get_logger(__name__, component="cli")

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def load_runtime_config(
    config_path: Optional[Path], log_level_override: Optional[str]
) -> Tuple[AppConfig, EnvironmentConfig]:
    """
    Load and prepare runtime configuration.

    Args:
        config_path: Path to configuration file, or None for the default lookup
        log_level_override: Log level from CLI (takes precedence)

    Returns:
        Tuple of (AppConfig, EnvironmentConfig) with the effective log level resolved

    Raises:
        ConfigurationError: If configuration is invalid
    """
    app_config, env_config = load_config(config_path)

    # Log level priority: CLI > Environment > Config
    if log_level_override:
        env_config.log_level = log_level_override
    elif not env_config.log_level:
        env_config.log_level = app_config.logging.level

    return app_config, env_config


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="jobboard",
        description="Job board maintenance: salary backfill and verification",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to configuration file (default: config.yaml or config/config.yaml if present)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=LOG_LEVELS,
        help="Log level (overrides config and environment)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    backfill_parser = subparsers.add_parser(
        "backfill", help="Rewrite legacy salary objects as a single canonical number"
    )
    backfill_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Report what would change without writing",
    )
    backfill_parser.add_argument(
        "--batch-size",
        type=int,
        default=None,
        help="Rows per transaction (overrides config)",
    )

    subparsers.add_parser(
        "verify", help="Count jobs whose salary is still stored in the legacy shape"
    )

    return parser


def _run_backfill(args: argparse.Namespace, app_config: AppConfig) -> int:
    batch_size = args.batch_size or app_config.backfill.batch_size
    dry_run = args.dry_run or app_config.backfill.dry_run

    result = run_backfill(batch_size=batch_size, dry_run=dry_run)

    if result.skipped:
        print("Backfill skipped: another run is in progress", file=sys.stderr)
        return 1

    summary = {**result.as_dict(), "dry_run": result.dry_run}
    print(json.dumps(summary))

    for failure in result.failures:
        print(
            f"job {failure.job_id}: {failure.error_type}: {failure.error_message}",
            file=sys.stderr,
        )

    return 1 if result.had_errors else 0


def _run_verify() -> int:
    remaining = count_legacy_salaries()
    print(json.dumps({"legacy_salaries": remaining}))

    if remaining:
        logger.warning(
            f"{remaining} jobs still store a legacy salary",
            extra={"event": "verify.legacy_remaining", "legacy_salaries": remaining},
        )
        return 1

    logger.info(
        "No legacy salaries remain",
        extra={"event": "verify.completed", "legacy_salaries": 0},
    )
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the job board CLI.

    Returns:
        Exit code: 0 on success; 1 on configuration errors, failed records,
        or legacy salaries remaining.
    """
    start_time = time.time()
    args = build_parser().parse_args(argv)

    if args.command == "backfill" and args.batch_size is not None and args.batch_size < 1:
        print("Error: --batch-size must be at least 1", file=sys.stderr)
        return 1

    try:
        app_config, env_config = load_runtime_config(args.config, args.log_level)

        configure_logging(
            level=env_config.log_level,
            format_type=app_config.logging.format,
            environment=env_config.environment,
        )

        logger.info(
            f"Running {args.command}",
            extra={
                "event": "cli.command.starting",
                "command": args.command,
                "log_level": env_config.log_level,
            },
        )

        init_database(env_config.database_url)

        try:
            if args.command == "backfill":
                exit_code = _run_backfill(args, app_config)
            else:
                exit_code = _run_verify()
        finally:
            close_database()

        logger.info(
            f"Finished {args.command}",
            extra={
                "event": "cli.command.completed",
                "command": args.command,
                "exit_code": exit_code,
                "duration_seconds": round(time.time() - start_time, 2),
            },
        )
        return exit_code

    except ConfigurationError as e:
        print(f"Configuration Error: {e}", file=sys.stderr)
        logger.error(
            f"Configuration error: {e}",
            extra={"event": "config.error", "error_type": "ConfigurationError"},
        )
        return 1
    except KeyboardInterrupt:
        print("\nInterrupted; re-run to continue where the backfill stopped", file=sys.stderr)
        return 1
    except Exception as e:
        print(f"Fatal error: {e}", file=sys.stderr)
        logger.critical(
            f"{args.command} failed",
            extra={
                "event": "cli.command.failed",
                "command": args.command,
                "error_type": type(e).__name__,
            },
            exc_info=True,
        )
        return 1


if __name__ == "__main__":
    sys.exit(main())

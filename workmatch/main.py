"""Command-line entry point for WorkMatch."""

from dotenv import load_dotenv
load_dotenv()

import argparse
import json
import sys
import time
from pathlib import Path
from typing import List, Optional, Tuple

from workmatch.config.environment import EnvironmentConfig
from workmatch.config.exceptions import ConfigurationError
from workmatch.config.loader import load_config, validate_config_file
from workmatch.config.models import AppConfig
from workmatch.logging import get_logger
from workmatch.logging.config import configure_logging
from workmatch.matching.engine import WorkerMatcher
from workmatch.matching.utils import format_match_summary, format_worker_directory
from workmatch.persistence.database import close_database, init_database
from workmatch.service import MarketplaceService, MatchService, WorkMatchError
from workmatch.service.seeding import SeedError, load_seed_file, seed_database

logger = get_logger(__name__, component="cli")


def load_runtime_config(
    config_path: Optional[Path], log_level_override: Optional[str]
) -> Tuple[AppConfig, EnvironmentConfig]:
    """
    Load configuration and settle the effective log level.

    Args:
        config_path: Path to configuration file (None for default lookup)
        log_level_override: Log level from CLI (takes precedence)

    Returns:
        Tuple of (AppConfig, EnvironmentConfig); env_config.log_level holds
        the effective level

    Raises:
        ConfigurationError: If configuration is invalid
    """
    app_config, env_config = load_config(config_path)

    # Log level priority: CLI > Environment > Config
    if log_level_override:
        env_config.log_level = log_level_override
    elif env_config.log_level:
        pass
    elif app_config.logging and app_config.logging.level:
        env_config.log_level = app_config.logging.level
    else:
        env_config.log_level = "INFO"

    return app_config, env_config


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="workmatch",
        description="WorkMatch - rank marketplace workers against a job posting",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to configuration file (default: config.yaml if present)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Log level (overrides config and environment)",
    )

    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("init-db", help="Create the database schema")

    seed = commands.add_parser("seed", help="Load profiles, workers, jobs and reviews from YAML")
    seed.add_argument("file", type=Path, help="Seed file")

    match = commands.add_parser("match", help="Rank the worker pool for a job")
    match.add_argument("job_id", help="Job identifier")
    match.add_argument(
        "--summary",
        action="store_true",
        help="Print a short ranking table instead of the JSON response",
    )

    commands.add_parser("workers", help="List registered workers with their ratings")
    commands.add_parser("stats", help="Count registered workers and posted jobs")

    assign = commands.add_parser("assign", help="Offer a job to a worker")
    assign.add_argument("job_id", help="Job identifier")
    assign.add_argument("worker_id", help="Worker identifier")

    respond = commands.add_parser("respond", help="Accept or decline an offer")
    respond.add_argument("application_id", help="Application identifier")
    decision = respond.add_mutually_exclusive_group(required=True)
    decision.add_argument("--accept", action="store_true", help="Accept the offer")
    decision.add_argument("--decline", action="store_true", help="Decline the offer")

    validate = commands.add_parser("validate-config", help="Validate a configuration file")
    validate.add_argument("file", type=Path, help="Configuration file")

    return parser


def run_command(args: argparse.Namespace) -> int:
    """Dispatch a parsed command against an initialized database."""
    if args.command == "init-db":
        print("Database ready")
        return 0

    marketplace = MarketplaceService()

    if args.command == "seed":
        summary = seed_database(load_seed_file(args.file), marketplace)
        print(
            f"Seeded {summary.profiles} profiles, {summary.workers} workers, "
            f"{summary.jobs} jobs, {summary.reviews} reviews, "
            f"{summary.applications} applications"
        )
        return 0

    if args.command == "match":
        service = MatchService(matcher=WorkerMatcher())
        if args.summary:
            response = service.find_matches(args.job_id)
            print(f'Top matches for "{response.job.title}":')
            print(format_match_summary(response.matches))
            return 0
        status, body = service.handle_request({"jobId": args.job_id})
        print(json.dumps(body, indent=2))
        return 0 if status == 200 else 1

    if args.command == "workers":
        print(format_worker_directory(marketplace.list_workers()))
        return 0

    if args.command == "stats":
        counts = marketplace.get_counts()
        print(f"Workers: {counts.workers}")
        print(f"Jobs: {counts.jobs}")
        return 0

    if args.command == "assign":
        application = marketplace.assign_worker(args.job_id, args.worker_id)
        print(f"Worker assigned. Application {application.id} is {application.status}")
        return 0

    if args.command == "respond":
        application = marketplace.respond_to_offer(args.application_id, accept=args.accept)
        print(f"Application {application.id} {application.status}")
        return 0

    raise ValueError(f"Unknown command: {args.command}")


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the WorkMatch CLI.

    Returns:
        Exit code (0 for success, non-zero for failure).
    """
    start_time = time.time()
    args = build_parser().parse_args(argv)

    if args.command == "validate-config":
        return 0 if validate_config_file(args.file) else 1

    try:
        app_config, env_config = load_runtime_config(args.config, args.log_level)

        configure_logging(
            level=env_config.log_level,
            format_type=app_config.logging.format,
            environment=env_config.environment,
        )

        database_url = app_config.resolve_database_url(env_config.database_url)
        init_database(database_url, echo=app_config.database.echo)

        logger.debug(
            f"Running command: {args.command}",
            extra={"event": "cli.command.started", "command": args.command},
        )

        try:
            exit_code = run_command(args)
        finally:
            close_database()

        logger.debug(
            f"Command finished: {args.command}",
            extra={
                "event": "cli.command.completed",
                "command": args.command,
                "exit_code": exit_code,
                "duration_seconds": round(time.time() - start_time, 3),
            },
        )
        return exit_code

    except ConfigurationError as e:
        print(f"Configuration Error: {e}", file=sys.stderr)
        return 1
    except (WorkMatchError, SeedError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\nInterrupted by user", file=sys.stderr)
        return 130
    except Exception as e:
        print(f"Fatal error: {e}", file=sys.stderr)
        logger.critical(
            "Fatal error",
            extra={
                "event": "cli.command.failed",
                "error_type": type(e).__name__,
                "error": str(e),
            },
            exc_info=True,
        )
        return 1


if __name__ == "__main__":
    sys.exit(main())

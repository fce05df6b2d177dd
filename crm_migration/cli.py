"""Command line entry point for the CRM migration."""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from dotenv import find_dotenv, load_dotenv

from .config import MigrationConfig
from .exceptions import ConfigError, MappingError, MigrationError
from .extractors.file_extractor import JSONFileExtractor
from .models.migration import MigrationOutcome
from .orchestrator import MigrationRunner
from .scheduler import map_batch, partition
from .services.entity_registry import ENTITIES, get_entity, list_entities

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_CONFIG_ERROR = 2

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(verbose: bool = False, log_dir: Optional[str] = None) -> None:
    """
    Configure root logging: console, plus migration.log and error.log files.

    Args:
        verbose: Log at DEBUG instead of INFO
        log_dir: Directory for the log files, or None for console only
    """
    level = logging.DEBUG if verbose else logging.INFO
    handlers: List[logging.Handler] = [logging.StreamHandler()]

    if log_dir is not None:
        directory = Path(log_dir)
        directory.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(directory / "migration.log"))
        error_handler = logging.FileHandler(directory / "error.log")
        error_handler.setLevel(logging.ERROR)
        handlers.append(error_handler)

    logging.basicConfig(level=level, format=LOG_FORMAT, handlers=handlers, force=True)
    # Connection pool chatter is noise at INFO
    logging.getLogger("urllib3").setLevel(logging.WARNING)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="crm-migrate",
        description="CRM Migration Tool - Migrate contacts and tasks from Zoho CRM to Twenty"
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Run migration
    run_parser = subparsers.add_parser("run", help="Run a migration for one entity type")
    run_parser.add_argument("entity", choices=sorted(ENTITIES), help="Entity type to migrate")
    run_parser.add_argument("--dry-run", action="store_true", help="Map and batch without writing")
    run_parser.add_argument("--verbose", "-v", action="store_true", help="Verbose output")
    run_parser.add_argument("--env-file", help="Path to a .env file (default: ./.env if present)")
    run_parser.add_argument("--log-dir", default=".", help="Directory for migration.log and error.log")
    run_parser.add_argument("--no-log-files", action="store_true", help="Log to the console only")

    # Preview mapping
    preview_parser = subparsers.add_parser("preview", help="Preview mapped payloads from a JSON file")
    preview_parser.add_argument("entity", choices=sorted(ENTITIES), help="Entity type of the input")
    preview_parser.add_argument("--input", required=True, help="Path to input JSON file")
    preview_parser.add_argument("--batch-size", type=int, default=0,
                                help="Group the output into batches of this size")

    # List entities
    subparsers.add_parser("entities", help="List supported entity types")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "run":
        configure_logging(
            verbose=args.verbose,
            log_dir=None if args.no_log_files else args.log_dir,
        )
        return run_migration(args)
    elif args.command == "preview":
        logging.basicConfig(level=logging.WARNING, format=LOG_FORMAT)
        return run_preview(args)
    elif args.command == "entities":
        return run_list_entities(args)

    parser.print_help()
    return EXIT_FAILURE


def run_migration(args) -> int:
    """Run a migration from environment configuration."""
    load_dotenv(args.env_file or find_dotenv(usecwd=True), override=False)

    try:
        config = MigrationConfig.from_env()
    except ConfigError as e:
        logger.error("Environment validation failed")
        for error in e.errors:
            logger.error(f"  {error}")
        return EXIT_CONFIG_ERROR

    if args.dry_run:
        config = config.model_copy(update={"dry_run": True})

    logger.debug(f"Configuration: {config.to_dict()}")
    entity = get_entity(args.entity)

    try:
        outcome = MigrationRunner(config, entity).run()
    except Exception:
        logger.exception("Unexpected error")
        return EXIT_FAILURE

    print_outcome(outcome)
    return EXIT_OK if outcome.succeeded else EXIT_FAILURE


def print_outcome(outcome: MigrationOutcome) -> None:
    print("\n" + "=" * 60)
    print("MIGRATION COMPLETE" if outcome.succeeded else "MIGRATION FAILED")
    print("=" * 60)
    print(f"Entity: {outcome.entity}{' (dry run)' if outcome.dry_run else ''}")
    print(f"Status: {outcome.status.value}")
    print(f"Records Fetched: {outcome.records_fetched}")
    print(f"Records Written: {outcome.records_written}")
    print(f"Batches Written: {outcome.batches_written}")
    if outcome.error:
        print(f"Error: {outcome.error}")
    if outcome.duration_seconds is not None:
        print(f"Duration: {outcome.duration_seconds:.2f} seconds")


def run_preview(args) -> int:
    """Preview the destination payloads for records in a JSON file."""
    entity = get_entity(args.entity)

    try:
        records = JSONFileExtractor(args.input).fetch_all(entity)
    except (OSError, MigrationError) as e:
        print(f"Could not read {args.input}: {e}", file=sys.stderr)
        return EXIT_FAILURE

    batch_size = args.batch_size if args.batch_size > 0 else max(len(records), 1)
    output = []
    try:
        for batch in partition(records, batch_size):
            output.append({
                "batch_number": batch.number,
                "destination_path": entity.destination_path,
                "records": map_batch(batch, entity.mapper),
            })
    except MappingError as e:
        print(f"Could not map {args.input}: {e}", file=sys.stderr)
        return EXIT_FAILURE

    print(json.dumps(output, indent=2, default=str))
    return EXIT_OK


def run_list_entities(args) -> int:
    """Print the supported entity types."""
    for entity in list_entities():
        print(f"{entity.name}: GET {entity.source_path} -> POST {entity.destination_path}")
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())

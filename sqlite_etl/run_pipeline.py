"""
Command-line entry point: extract, load and query the HR table.

Usage:
    sqlite-etl extract --timeout 10
    sqlite-etl load
    sqlite-etl all
"""
import sys
import logging
import argparse
from dataclasses import replace as dataclass_replace
from functools import partial
from typing import Callable, Dict, List, Optional

from .config import PipelineConfig, load_config, parse_assignment
from .extract import extract
from .instrument import ResourceSampler, StepResult, track
from .load import load
from .queries import create_row, delete_rows, read_rows, update_rows
from .storage import connect
from .utils.logger import setup_logger

logger = logging.getLogger(__name__)

ACTIONS = ["extract", "load", "create", "read", "update", "delete"]


def _run_query(query: Callable, config: PipelineConfig) -> str:
    with connect(config.database) as conn:
        return query(conn, config.query)


def _run_extract(config: PipelineConfig) -> str:
    path = extract(config.url, config.file_path, config.timeout)
    return f"Downloaded {config.url} to {path}"


def build_steps(config: PipelineConfig) -> Dict[str, Callable[[], str]]:
    """Map each action name to a zero-argument callable bound to ``config``."""
    return {
        "extract": partial(_run_extract, config),
        "load": partial(load, config.file_path, config.database, config.query.table, config.replace),
        "create": partial(_run_query, create_row, config),
        "read": partial(_run_query, read_rows, config),
        "update": partial(_run_query, update_rows, config),
        "delete": partial(_run_query, delete_rows, config),
    }


def run_action(
    action: str,
    config: PipelineConfig,
    sampler: Optional[ResourceSampler] = None,
    echo: Callable[[str], None] = print
) -> List[StepResult]:
    """
    Run one action, or every action in order for "all".

    A failing step is reported and the remaining steps still run.

    Args:
        action: One of ACTIONS or "all"
        config: Pipeline configuration
        sampler: Memory sampler passed to the instrumentation wrapper
        echo: Output function for report lines

    Returns:
        One StepResult per executed step
    """
    if action == "all":
        selected = ACTIONS
    elif action in ACTIONS:
        selected = [action]
    else:
        raise ValueError(f"Unknown action: {action}")

    steps = build_steps(config)
    results = []
    for name in selected:
        result = track(name.capitalize(), steps[name], sampler=sampler, echo=echo)
        if result.ok:
            echo(result.message)
        else:
            echo(f"Error in {name}: {result.message}")
        results.append(result)
    return results


def build_parser(defaults: PipelineConfig) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='SQLite ETL and query pipeline with memory and runtime tracking'
    )
    parser.add_argument('-u', '--url', type=str, default=defaults.url, help='URL of the source CSV file')
    parser.add_argument('-f', '--file-path', type=str, default=defaults.file_path,
                        help='Local path for the downloaded CSV file')
    parser.add_argument('--db', type=str, default=defaults.db_path,
                        help='Path to SQLite database (default: file path with .db suffix)')
    parser.add_argument('--table', type=str, default=defaults.query.table, help='Destination table name')
    parser.add_argument('--key-column', type=str, default=defaults.query.key_column,
                        help='Column identifying the row targeted by create, update and delete')
    parser.add_argument('--key-value', type=str, default=defaults.query.key_value,
                        help='Key value of the targeted row')
    parser.add_argument('--update-column', type=str, default=defaults.query.update_column,
                        help='Column set by the update step')
    parser.add_argument('--update-value', type=str, default=defaults.query.update_value,
                        help='Value written by the update step')
    parser.add_argument('--create-value', type=parse_assignment, action='append', metavar='COLUMN=VALUE',
                        help='Column value for the row inserted by create (repeatable)')
    parser.add_argument('--log-level', type=str, default=defaults.log_level, help='Logging level')
    parser.add_argument('--log-dir', type=str, default=defaults.log_dir,
                        help='Directory for the log file (console only when omitted)')

    subparsers = parser.add_subparsers(dest='action', required=True)

    extract_parser = subparsers.add_parser('extract', help='Download the source CSV file')
    extract_parser.add_argument('-t', '--timeout', type=int, default=defaults.timeout,
                                help='Request timeout in seconds')

    load_parser = subparsers.add_parser('load', help='Load the CSV file into the table')
    load_parser.add_argument('--replace', action='store_true', help='Drop the table before loading')

    subparsers.add_parser('create', help='Insert the configured row')

    read_parser = subparsers.add_parser('read', help='Read the first rows of the table')
    read_parser.add_argument('-n', '--limit', type=int, default=defaults.query.read_limit,
                             help='Number of rows to read')

    subparsers.add_parser('update', help='Update the configured row')
    subparsers.add_parser('delete', help='Delete the configured row')

    all_parser = subparsers.add_parser('all', help='Run every step in order')
    all_parser.add_argument('-t', '--timeout', type=int, default=defaults.timeout,
                            help='Request timeout in seconds')
    all_parser.add_argument('--replace', action='store_true', help='Drop the table before loading')

    return parser


def config_from_args(args: argparse.Namespace, defaults: PipelineConfig) -> PipelineConfig:
    query = dataclass_replace(
        defaults.query,
        table=args.table,
        read_limit=getattr(args, 'limit', defaults.query.read_limit),
        update_column=args.update_column,
        update_value=args.update_value,
    ).with_key(args.key_column, args.key_value)
    if args.create_value:
        query = query.with_create_values(dict(args.create_value))
    return dataclass_replace(
        defaults,
        url=args.url,
        file_path=args.file_path,
        db_path=args.db,
        timeout=getattr(args, 'timeout', defaults.timeout),
        replace=getattr(args, 'replace', defaults.replace),
        log_level=args.log_level,
        log_dir=args.log_dir,
        query=query,
    )


def main(argv: Optional[List[str]] = None) -> int:
    """Command-line entry point; returns 1 when any executed step failed."""
    try:
        defaults = load_config()
    except ValueError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 2

    parser = build_parser(defaults)
    args = parser.parse_args(argv)
    config = config_from_args(args, defaults)

    try:
        setup_logger("sqlite_etl", level=config.log_level, log_dir=config.log_dir)
    except (ValueError, OSError) as e:
        parser.error(str(e))

    logger.info(f"Running '{args.action}' against {config.database}")
    results = run_action(args.action, config)

    failed = [result.name for result in results if not result.ok]
    if failed:
        logger.warning(f"Failed steps: {', '.join(failed)}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())

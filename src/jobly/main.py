import argparse
import asyncio
import json
import logging
import sys
from typing import Any

from jobly.db import Database
from jobly.errors import JoblyError
from jobly.managers.company import Company
from jobly.managers.job import Job

logger = logging.getLogger(__name__)


def setup_logging() -> None:
    """Set up logging once, in the application entry point only."""
    from jobly.config import LOG_LEVEL

    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s", level=LOG_LEVEL
    )


def build_filters(args: argparse.Namespace) -> dict[str, Any]:
    """Collect the search options the user actually passed."""
    options = {
        "name": getattr(args, "name", None),
        "minEmployees": getattr(args, "min_employees", None),
        "maxEmployees": getattr(args, "max_employees", None),
        "title": getattr(args, "title", None),
        "minSalary": getattr(args, "min_salary", None),
    }
    filters = {key: value for key, value in options.items() if value is not None}
    if getattr(args, "has_equity", False):
        filters["hasEquity"] = True
    return filters


async def run_command(args: argparse.Namespace, db: Database) -> Any:
    """Dispatch one CLI command against the database and return its result."""
    companies = Company(db)
    jobs = Job(db)

    if args.command == "init-db":
        return {"database": db.db_path}
    if args.command == "companies":
        return await companies.find_all(build_filters(args))
    if args.command == "company":
        return await companies.get(args.handle)
    if args.command == "jobs":
        return await jobs.find_all(build_filters(args))
    if args.command == "job":
        return await jobs.get(args.id)
    raise ValueError(f"Unknown command: {args.command}")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="jobly",
        description="Query the companies and jobs stored in a Jobly database.",
    )
    parser.add_argument(
        "--db",
        default=None,
        metavar="PATH",
        help="SQLite database file (overrides JOBLY_DB_PATH env var).",
    )

    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("init-db", help="Create the tables if they don't exist.")

    companies = commands.add_parser("companies", help="List companies, optionally filtered.")
    companies.add_argument("--name", help="Case-insensitive partial match on the name.")
    companies.add_argument("--min-employees", type=int, metavar="N")
    companies.add_argument("--max-employees", type=int, metavar="N")

    company = commands.add_parser("company", help="Show one company and its jobs.")
    company.add_argument("handle")

    jobs = commands.add_parser("jobs", help="List jobs, optionally filtered.")
    jobs.add_argument("--title", help="Case-insensitive partial match on the title.")
    jobs.add_argument("--min-salary", type=int, metavar="AMOUNT")
    jobs.add_argument(
        "--has-equity",
        action="store_true",
        help="Only jobs offering a non-zero equity share.",
    )

    job = commands.add_parser("job", help="Show one job and its company.")
    job.add_argument("id", type=int)

    return parser.parse_args(argv)


def cli(argv: list[str] | None = None) -> None:
    """CLI entry point for the package."""
    args = parse_args(argv)
    setup_logging()

    if args.db is not None:
        db_path = args.db
    else:
        from jobly.config import DB_PATH

        db_path = DB_PATH

    with Database(db_path=db_path) as db:
        try:
            result = asyncio.run(run_command(args, db))
        except JoblyError as e:
            logger.error(e.message)
            sys.exit(1)

    print(json.dumps(result, indent=2))


if __name__ == "__main__":
    cli()

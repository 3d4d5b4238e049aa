"""Run SQL statements against a named database as one transaction.

Usage: python -m localstore NAME "CREATE TABLE ..." "SELECT ..."
"""

import argparse
import asyncio
import json
import sys

from localstore.config import configure_logging
from localstore.database import Database
from localstore.db.backend import ResultSet
from localstore.errors import StatementError, TransactionError
from localstore.models.callbacks import TransactionCallbacks
from localstore.models.statement import Statement
from localstore.models.status import ErrorAction


async def run(name: str, statements: list[str]) -> int:
    """Execute ``statements`` in one transaction, printing rows as JSON lines."""
    failed: list[TransactionError] = []

    def _print_rows(_statement: Statement, result_set: ResultSet) -> None:
        for row in result_set:
            print(json.dumps(dict(zip(row.keys(), tuple(row), strict=True)), default=str))

    def _abort(_statement: Statement, error: StatementError) -> ErrorAction:
        print(f"error: {error}", file=sys.stderr)
        return ErrorAction.ABORT

    async with await Database.open(name) as db:
        if not db.available:
            return 1
        db.transaction(
            statements,
            TransactionCallbacks(
                on_query_data=_print_rows,
                on_query_error=_abort,
                on_error=failed.append,
            ),
        )
        await db.drain()

    for error in failed:
        print(f"error: {error}", file=sys.stderr)
    return 1 if failed else 0


def main(argv: list[str] | None = None) -> int:
    """Parse arguments and run the statements."""
    parser = argparse.ArgumentParser(prog="localstore", description=__doc__.splitlines()[0])
    parser.add_argument("name", help='database name (":memory:" for a throwaway database)')
    parser.add_argument("statements", nargs="+", help="SQL statements, run in order")
    args = parser.parse_args(argv)

    configure_logging()
    return asyncio.run(run(args.name, args.statements))


if __name__ == "__main__":
    sys.exit(main())

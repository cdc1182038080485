"""Print the tables and columns of the configured database.

Useful for checking a deployed schema against the models before a release.

Run inside Docker:
    docker compose exec backend python -m scripts.inspect_schema
    docker compose exec backend python -m scripts.inspect_schema orders order_items
"""

import asyncio
import sys
from pathlib import Path

# Add project root to path so imports work when run as a script
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from sqlalchemy import inspect

import zamora.models  # noqa: F401  (registers every table on Base.metadata)
from zamora.database import Base, engine


def _describe(sync_conn, only: set[str]) -> list[str]:
    inspector = inspect(sync_conn)
    lines: list[str] = []
    existing = set(inspector.get_table_names())

    for table in sorted(existing):
        if only and table not in only:
            continue
        lines.append(f"\n{table}")
        for column in inspector.get_columns(table):
            nullable = "" if column["nullable"] else " NOT NULL"
            lines.append(f"    {column['name']:<28} {column['type']}{nullable}")

    missing = sorted(set(Base.metadata.tables) - existing)
    if missing and not only:
        lines.append("\n⚠️  Tables defined in models but missing from the database:")
        lines.extend(f"    {name}" for name in missing)
    return lines


async def main(tables: list[str]) -> None:
    async with engine.connect() as conn:
        lines = await conn.run_sync(_describe, set(tables))
    await engine.dispose()
    print("\n".join(lines) if lines else "No tables found.")


if __name__ == "__main__":
    asyncio.run(main(sys.argv[1:]))

"""
Schema migrations and consistency checks for the ledger database.

Migration files are named ``vNNN_name.sql`` and applied in version order.
Each script runs in one transaction together with its ``schema_migrations``
row, so a failing script leaves the database at the previous version.
"""

import argparse
import asyncio
import hashlib
import json
import re
import time
from dataclasses import dataclass
from pathlib import Path

import aiosqlite

from storeledger.config import get_logger, get_settings

logger = get_logger(__name__)

MIGRATIONS_DIR = Path(__file__).parent
FILENAME_PATTERN = re.compile(r"v(\d{3})_([a-z0-9_]+)\.sql")

# Ledger columns holding JSON arrays
DOCUMENT_COLUMNS = (
    "opening_stock_json",
    "purchases_json",
    "available_stock_json",
    "transfers_json",
    "remaining_stock_json",
    "reconciliation_json",
    "final_stock_json",
)


@dataclass(frozen=True)
class Migration:
    """One versioned schema script."""

    version: str
    name: str
    sql: str

    @property
    def checksum(self) -> str:
        return hashlib.sha256(self.sql.encode()).hexdigest()[:16]

    @classmethod
    def load(cls, path: Path) -> "Migration":
        match = FILENAME_PATTERN.fullmatch(path.name)
        if not match:
            raise ValueError(f"Invalid migration filename: {path.name}")
        return cls(
            version=match.group(1),
            name=match.group(2),
            sql=path.read_text(encoding="utf-8"),
        )


@dataclass
class MigrationResult:
    """Outcome of applying one migration."""

    version: str
    name: str
    success: bool
    execution_time_ms: int
    error: str | None = None


def discover_migrations(directory: Path = MIGRATIONS_DIR) -> list[Migration]:
    """All migration scripts in version order."""
    return [Migration.load(path) for path in sorted(directory.glob("v*.sql"))]


async def applied_versions(conn: aiosqlite.Connection) -> dict[str, str]:
    """Applied migration versions mapped to the checksum they were applied with."""
    try:
        cursor = await conn.execute("SELECT version, checksum FROM schema_migrations")
    except aiosqlite.OperationalError:
        # Fresh database
        return {}
    return {row[0]: row[1] for row in await cursor.fetchall()}


async def apply_migration(conn: aiosqlite.Connection, migration: Migration) -> MigrationResult:
    """Run one script and record it, or roll both back."""
    started = time.perf_counter()

    try:
        await conn.executescript(f"BEGIN;\n{migration.sql}")
        elapsed_ms = int((time.perf_counter() - started) * 1000)
        await conn.execute(
            "INSERT INTO schema_migrations (version, name, checksum, execution_time_ms) "
            "VALUES (?, ?, ?, ?)",
            (migration.version, migration.name, migration.checksum, elapsed_ms),
        )
        await conn.commit()
    except aiosqlite.Error as e:
        await conn.rollback()
        logger.error("migration_failed", version=migration.version, error=str(e))
        return MigrationResult(
            version=migration.version,
            name=migration.name,
            success=False,
            execution_time_ms=int((time.perf_counter() - started) * 1000),
            error=str(e),
        )

    logger.info(
        "migration_applied",
        version=migration.version,
        name=migration.name,
        execution_time_ms=elapsed_ms,
    )
    return MigrationResult(
        version=migration.version,
        name=migration.name,
        success=True,
        execution_time_ms=elapsed_ms,
    )


async def migrate(db_path: Path | None = None) -> list[MigrationResult]:
    """Apply pending migrations, stopping at the first failure."""
    db_path = db_path or get_settings().storage.db_path
    db_path.parent.mkdir(parents=True, exist_ok=True)

    results: list[MigrationResult] = []
    async with aiosqlite.connect(db_path) as conn:
        await conn.execute("PRAGMA journal_mode=WAL")
        applied = await applied_versions(conn)

        for migration in discover_migrations():
            if migration.version in applied:
                if applied[migration.version] != migration.checksum:
                    logger.warning(
                        "migration_checksum_changed",
                        version=migration.version,
                        applied=applied[migration.version],
                        current=migration.checksum,
                    )
                continue

            result = await apply_migration(conn, migration)
            results.append(result)
            if not result.success:
                break

    logger.info(
        "database_migrated",
        db_path=str(db_path),
        applied=sum(1 for r in results if r.success),
    )
    return results


async def migration_status(db_path: Path | None = None) -> dict:
    """Current schema version and the migrations still pending."""
    db_path = db_path or get_settings().storage.db_path
    known = [m.version for m in discover_migrations()]

    if not db_path.exists():
        return {"exists": False, "current_version": None, "pending": known}

    async with aiosqlite.connect(db_path) as conn:
        applied = await applied_versions(conn)

    return {
        "exists": True,
        "current_version": max(applied, default=None),
        "pending": [v for v in known if v not in applied],
    }


def _quantities(document: str) -> list[tuple]:
    return sorted(
        (line["product_type"], line.get("pieces", 0), line.get("weight", 0.0))
        for line in json.loads(document)
    )


def _check(name: str, failures: list, **extra) -> dict:
    return {"check": name, "status": "FAIL" if failures else "PASS", **extra}


async def check_ledgers(db_path: Path | None = None) -> list[dict]:
    """
    Consistency checks over the stored ledgers.

    - ``integrity``: SQLite's own page-level check
    - ``ledger_table``: the ledger table exists
    - ``document_columns``: every stock and document column holds a JSON array
    - ``day_continuity``: each finalized day's final stock equals the next
      day's opening stock
    """
    db_path = db_path or get_settings().storage.db_path

    async with aiosqlite.connect(db_path) as conn:
        cursor = await conn.execute("PRAGMA integrity_check")
        (integrity,) = await cursor.fetchone()
        checks = [
            {
                "check": "integrity",
                "status": "PASS" if integrity == "ok" else "FAIL",
                "result": integrity,
            }
        ]

        cursor = await conn.execute(
            "SELECT 1 FROM sqlite_master WHERE type = 'table' AND name = 'daily_ledgers'"
        )
        missing = [] if await cursor.fetchone() else ["daily_ledgers"]
        checks.append(_check("ledger_table", missing, missing=missing))
        if missing:
            return checks

        not_arrays = " OR ".join(
            f"(CASE WHEN json_valid({column}) THEN json_type({column}) END) IS NOT 'array'"
            for column in DOCUMENT_COLUMNS
        )
        cursor = await conn.execute(
            f"SELECT ledger_date FROM daily_ledgers WHERE {not_arrays} ORDER BY ledger_date"
        )
        malformed = [row[0] for row in await cursor.fetchall()]
        checks.append(_check("document_columns", malformed, ledger_dates=malformed))

        cursor = await conn.execute(
            """
            SELECT d.ledger_date, n.ledger_date, d.final_stock_json, n.opening_stock_json
            FROM daily_ledgers AS d
            JOIN daily_ledgers AS n ON n.ledger_date = date(d.ledger_date, '+1 day')
            WHERE d.status = 'FINALIZED'
            ORDER BY d.ledger_date
            """
        )
        breaks = []
        for ledger_date, next_date, final_stock, next_opening in await cursor.fetchall():
            if ledger_date in malformed or next_date in malformed:
                continue
            if _quantities(final_stock) != _quantities(next_opening):
                breaks.append(ledger_date)
        checks.append(_check("day_continuity", breaks, ledger_dates=breaks))

    return checks


def main() -> None:
    """CLI entry point: migrate, or report status / consistency."""
    parser = argparse.ArgumentParser(description="Store Ledger database migrator")
    parser.add_argument("--db-path", type=Path, help="Database path (default from settings)")
    parser.add_argument("--status", action="store_true", help="Show migration status")
    parser.add_argument("--check", action="store_true", help="Check stored ledgers")
    args = parser.parse_args()

    async def run() -> int:
        if args.status:
            status = await migration_status(args.db_path)
            print(f"Database exists: {status['exists']}")
            print(f"Current version: {status['current_version'] or 'none'}")
            print(f"Pending migrations: {status['pending']}")
            return 0

        if args.check:
            checks = await check_ledgers(args.db_path)
            for check in checks:
                print(f"[{check['status']}] {check['check']}")
                for key, value in check.items():
                    if key not in ("check", "status") and value:
                        print(f"       {key}: {value}")
            return 0 if all(c["status"] == "PASS" for c in checks) else 1

        results = await migrate(args.db_path)
        for result in results:
            outcome = "SUCCESS" if result.success else "FAILED"
            print(f"[{outcome}] v{result.version}: {result.name} ({result.execution_time_ms}ms)")
            if result.error:
                print(f"         Error: {result.error}")
        return 0 if all(r.success for r in results) else 1

    raise SystemExit(asyncio.run(run()))


if __name__ == "__main__":
    main()

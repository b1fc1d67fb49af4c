"""SQLite implementation of daily ledger storage."""

from datetime import date, datetime

import aiosqlite
from pydantic import TypeAdapter

from storeledger.config import get_logger
from storeledger.core.entities.ledger import (
    DailyLedger,
    LedgerStatus,
    ProductLine,
    Purchase,
    ReconciliationLine,
    Transfer,
)
from storeledger.core.exceptions import DatabaseError, DuplicateLedgerError, LedgerNotFoundError
from storeledger.core.interfaces.ledger_store import ILedgerStore
from storeledger.infrastructure.storage.sqlite.connection import get_connection, get_transaction

logger = get_logger(__name__)

_lines = TypeAdapter(list[ProductLine])
_purchases = TypeAdapter(list[Purchase])
_transfers = TypeAdapter(list[Transfer])
_reconciliation = TypeAdapter(list[ReconciliationLine])

_COLUMNS = (
    "ledger_date",
    "status",
    "opening_stock_json",
    "purchases_json",
    "available_stock_json",
    "transfers_json",
    "remaining_stock_json",
    "reconciliation_json",
    "final_stock_json",
    "notes",
    "shop_stock_description",
    "created_by",
    "last_modified_by",
    "created_at",
    "updated_at",
)


class SQLiteLedgerStore(ILedgerStore):
    """SQLite implementation of daily ledger storage, one row per date."""

    async def get(self, ledger_id: int) -> DailyLedger | None:
        """Get ledger by ID."""
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM daily_ledgers WHERE id = ?", (ledger_id,)
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_ledger(row)

    async def get_by_date(self, ledger_date: date) -> DailyLedger | None:
        """Get the ledger of a calendar date."""
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM daily_ledgers WHERE ledger_date = ?",
                (ledger_date.isoformat(),),
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_ledger(row)

    async def create(self, ledger: DailyLedger) -> DailyLedger:
        """Insert a new ledger."""
        try:
            async with get_transaction() as conn:
                await self._insert(conn, ledger)
        except aiosqlite.IntegrityError as e:
            logger.warning(
                "ledger_date_conflict",
                ledger_date=ledger.ledger_date.isoformat(),
            )
            raise DuplicateLedgerError(ledger.ledger_date.isoformat()) from e
        except aiosqlite.Error as e:
            raise DatabaseError("create ledger", str(e)) from e
        return ledger

    async def save(self, ledger: DailyLedger) -> DailyLedger:
        """Insert or fully replace a ledger."""
        saved = await self.save_many([ledger])
        return saved[0]

    async def save_many(self, ledgers: list[DailyLedger]) -> list[DailyLedger]:
        """Insert or replace several ledgers atomically."""
        try:
            async with get_transaction() as conn:
                for ledger in ledgers:
                    if ledger.id is None:
                        await self._insert(conn, ledger)
                    else:
                        await self._update(conn, ledger)
        except aiosqlite.IntegrityError as e:
            raise DuplicateLedgerError(
                ", ".join(ledger.ledger_date.isoformat() for ledger in ledgers)
            ) from e
        except aiosqlite.Error as e:
            raise DatabaseError("save ledgers", str(e)) from e
        return ledgers

    async def list_between(
        self, start: date, end: date, limit: int = 100
    ) -> list[DailyLedger]:
        """List ledgers in a date range, newest first."""
        async with get_connection() as conn:
            cursor = await conn.execute(
                """
                SELECT * FROM daily_ledgers
                WHERE ledger_date >= ? AND ledger_date <= ?
                ORDER BY ledger_date DESC
                LIMIT ?
                """,
                (start.isoformat(), end.isoformat(), limit),
            )
            rows = await cursor.fetchall()
            return [self._row_to_ledger(row) for row in rows]

    async def _insert(self, conn: aiosqlite.Connection, ledger: DailyLedger) -> None:
        placeholders = ", ".join("?" for _ in _COLUMNS)
        cursor = await conn.execute(
            f"INSERT INTO daily_ledgers ({', '.join(_COLUMNS)}) VALUES ({placeholders})",
            self._ledger_to_params(ledger),
        )
        ledger.id = cursor.lastrowid
        logger.info(
            "ledger_created",
            ledger_id=ledger.id,
            ledger_date=ledger.ledger_date.isoformat(),
            status=ledger.status.value,
        )

    async def _update(self, conn: aiosqlite.Connection, ledger: DailyLedger) -> None:
        assignments = ", ".join(f"{column} = ?" for column in _COLUMNS)
        cursor = await conn.execute(
            f"UPDATE daily_ledgers SET {assignments} WHERE id = ?",
            (*self._ledger_to_params(ledger), ledger.id),
        )
        if cursor.rowcount == 0:
            raise LedgerNotFoundError(ledger.id)
        logger.info(
            "ledger_saved",
            ledger_id=ledger.id,
            ledger_date=ledger.ledger_date.isoformat(),
            status=ledger.status.value,
        )

    @staticmethod
    def _ledger_to_params(ledger: DailyLedger) -> tuple:
        return (
            ledger.ledger_date.isoformat(),
            ledger.status.value,
            _lines.dump_json(ledger.opening_stock).decode(),
            _purchases.dump_json(ledger.purchases).decode(),
            _lines.dump_json(ledger.available_stock).decode(),
            _transfers.dump_json(ledger.transfers).decode(),
            _lines.dump_json(ledger.remaining_stock).decode(),
            _reconciliation.dump_json(ledger.reconciliation).decode(),
            _lines.dump_json(ledger.final_stock).decode(),
            ledger.notes,
            ledger.shop_stock_description,
            ledger.created_by,
            ledger.last_modified_by,
            ledger.created_at.isoformat(),
            ledger.updated_at.isoformat(),
        )

    @classmethod
    def _row_to_ledger(cls, row: aiosqlite.Row) -> DailyLedger:
        """Convert a database row to a DailyLedger entity."""
        try:
            return cls._decode(row)
        except ValueError as e:
            logger.error("ledger_row_unreadable", ledger_id=row["id"], error=str(e))
            raise DatabaseError("read ledger", f"ledger {row['id']} could not be decoded") from e

    @staticmethod
    def _decode(row: aiosqlite.Row) -> DailyLedger:
        return DailyLedger(
            id=row["id"],
            ledger_date=date.fromisoformat(row["ledger_date"]),
            status=LedgerStatus(row["status"]),
            opening_stock=_lines.validate_json(row["opening_stock_json"] or "[]"),
            purchases=_purchases.validate_json(row["purchases_json"] or "[]"),
            available_stock=_lines.validate_json(row["available_stock_json"] or "[]"),
            transfers=_transfers.validate_json(row["transfers_json"] or "[]"),
            remaining_stock=_lines.validate_json(row["remaining_stock_json"] or "[]"),
            reconciliation=_reconciliation.validate_json(row["reconciliation_json"] or "[]"),
            final_stock=_lines.validate_json(row["final_stock_json"] or "[]"),
            notes=row["notes"],
            shop_stock_description=row["shop_stock_description"] or "",
            created_by=row["created_by"],
            last_modified_by=row["last_modified_by"],
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )

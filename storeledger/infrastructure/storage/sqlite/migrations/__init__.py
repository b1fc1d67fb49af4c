"""Database migrations module."""

from storeledger.infrastructure.storage.sqlite.migrations.migrator import (
    Migration,
    MigrationResult,
    check_ledgers,
    discover_migrations,
    migrate,
    migration_status,
)

__all__ = [
    "Migration",
    "MigrationResult",
    "check_ledgers",
    "discover_migrations",
    "migrate",
    "migration_status",
]

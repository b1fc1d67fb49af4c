"""Infrastructure layer implementations."""

from storeledger.infrastructure import storage

__all__ = ["storage"]

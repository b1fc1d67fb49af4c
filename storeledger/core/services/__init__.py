"""
Core business logic services.

Layer-pure services that depend only on:
- storeledger/core/entities/*
- storeledger/core/interfaces/*
- storeledger/core/exceptions.py

NO infrastructure imports. All dependencies injected via constructor.
"""

from storeledger.core.services.day_chaining import DayChainingService, opening_from_previous
from storeledger.core.services.lifecycle import MUTABLE_STATUSES, LifecycleGate
from storeledger.core.services.stock_flow import StockFlowCalculator

__all__ = [
    # Stock flow
    "StockFlowCalculator",
    # Lifecycle
    "LifecycleGate",
    "MUTABLE_STATUSES",
    # Day chaining
    "DayChainingService",
    "opening_from_previous",
]

"""Reconcile the policy/procedure tracking list with the search index."""

from .engine import Reconciler
from .models import (
    MalformedTimestamp,
    RowError,
    SyncMode,
    SyncOptions,
    SyncReport,
    UpsertPolicy,
    parse_timestamp,
)
from .whitelist import DepartmentWhitelist

__all__ = [
    "Reconciler",
    "MalformedTimestamp",
    "RowError",
    "SyncMode",
    "SyncOptions",
    "SyncReport",
    "UpsertPolicy",
    "parse_timestamp",
    "DepartmentWhitelist",
]

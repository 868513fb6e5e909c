"""
Data loading, parsing and storage.

This package handles all file and network I/O: the static catalog, the
official record stores and the row <-> model mapping between them.
"""

from .loader import DataLoader
from .parser import RecordParser
from .store import RecordStore, LocalStore
from .supabase import SupabaseStore
from .repository import RecordRepository

__all__ = [
    "DataLoader",
    "RecordParser",
    "RecordStore",
    "LocalStore",
    "SupabaseStore",
    "RecordRepository",
]

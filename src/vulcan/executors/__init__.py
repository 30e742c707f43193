"""
Query executors.

- MemoryQueryExecutor: filters plain dicts in memory
- MongoQueryExecutor: runs filters with pymongo
"""

from .base import Page, QueryExecutor, total_pages_for
from .memory import MemoryQueryExecutor
from .mongodb import MongoQueryExecutor

__all__ = [
    "Page",
    "QueryExecutor",
    "total_pages_for",
    "MemoryQueryExecutor",
    "MongoQueryExecutor",
]

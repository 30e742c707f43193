"""
MongoDB query executor.

Filters built by vulcan.filters.predicates are plain MQL, so they are passed
to pymongo unchanged.

Example:
    client = MongoClient(settings.mongodb_uri.get_secret_value())
    executor = MongoQueryExecutor(client[settings.mongodb_database]["fugazi"])
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from pymongo import MongoClient

from ..config.settings import Settings
from ..errors import ConfigurationError
from ..filters.predicates import Predicate
from ..sorting import Sort
from .base import Page, total_pages_for

if TYPE_CHECKING:
    from pymongo.collection import Collection

logger = logging.getLogger("vulcan.executors.mongodb")


class MongoQueryExecutor:
    """
    Executes filters with a synchronous pymongo collection.

    Attributes:
        collection: Collection searched
        projection: Optional projection applied to returned documents
    """

    def __init__(self, collection: Collection, projection: dict[str, Any] | None = None):
        self.collection = collection
        self.projection = projection

    @classmethod
    def from_settings(cls, settings: Settings, client: MongoClient | None = None) -> MongoQueryExecutor:
        """
        Build an executor for the configured database and collection.

        Raises:
            ConfigurationError: If the collection (or a URI when no client is
                given) is not configured
        """
        if not settings.mongodb_collection:
            raise ConfigurationError("VULCAN_MONGODB_COLLECTION is not set")
        if client is None:
            if settings.mongodb_uri is None:
                raise ConfigurationError("VULCAN_MONGODB_URI is not set")
            client = MongoClient(settings.mongodb_uri.get_secret_value())
        return cls(client[settings.mongodb_database][settings.mongodb_collection])

    def count(self, predicate: Predicate) -> int:
        return self.collection.count_documents(predicate)

    def find_page(self, predicate: Predicate, page_number: int, page_size: int, sort: Sort) -> Page:
        total_records = self.collection.count_documents(predicate)
        cursor = self.collection.find(predicate, self.projection)
        if sort.is_sorted():
            cursor = cursor.sort(sort.to_pymongo())
        cursor = cursor.skip((page_number - 1) * page_size).limit(page_size)
        rows = list(cursor)
        logger.debug(f"[MONGODB] {self.collection.name}: {total_records} matches, {len(rows)} returned")
        return Page(
            rows=rows,
            total_records=total_records,
            total_pages=total_pages_for(total_records, page_size),
        )

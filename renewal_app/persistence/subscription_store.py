"""Subscription record persistence: one record per subscription id."""

import sqlite3
import threading
from abc import ABC, abstractmethod
from contextlib import contextmanager
from pathlib import Path
from typing import Optional

import orjson

from ..errors import PersistenceError
from ..logging.config import get_logger
from ..state.models import SubscriptionRecord

MAX_SUBSCRIPTION_ID = 2**64 - 1


class SubscriptionStore(ABC):
    """Keyed record store. Transactions are the host's concern, not the store's."""

    @abstractmethod
    def get(self, subscription_id: int) -> Optional[SubscriptionRecord]:
        """Return the record for the id, or None if absent."""

    @abstractmethod
    def set(self, subscription_id: int, record: SubscriptionRecord) -> None:
        """Write the full record for the id."""

    def exists(self, subscription_id: int) -> bool:
        return self.get(subscription_id) is not None


class InMemorySubscriptionStore(SubscriptionStore):
    """Dict-backed store; records are immutable so reads are already copies."""

    def __init__(self) -> None:
        self._records: dict[int, SubscriptionRecord] = {}

    def get(self, subscription_id: int) -> Optional[SubscriptionRecord]:
        return self._records.get(subscription_id)

    def set(self, subscription_id: int, record: SubscriptionRecord) -> None:
        self._records[subscription_id] = record

    def exists(self, subscription_id: int) -> bool:
        return subscription_id in self._records

    def __len__(self) -> int:
        return len(self._records)


class SQLiteSubscriptionStore(SubscriptionStore):
    """
    SQLite-based record store, one row per subscription id.

    SQLite integers are signed 64-bit, so ids are stored as their decimal
    text to cover the full unsigned 64-bit range.
    """

    def __init__(self, db_path: str = "subscriptions.db"):
        self.db_path = Path(db_path)
        self.logger = get_logger("subscription.store")
        self._lock = threading.Lock()

        self._init_database()

    def _init_database(self) -> None:
        """Initialize database schema."""
        with self._get_connection() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS subscriptions (
                    subscription_id TEXT PRIMARY KEY,
                    record_data BLOB NOT NULL
                )
            """)
            conn.commit()

    @contextmanager
    def _get_connection(self):
        """Get database connection, translating sqlite errors."""
        conn = None
        try:
            conn = sqlite3.connect(self.db_path, timeout=30.0)
            conn.row_factory = sqlite3.Row
            yield conn
        except sqlite3.Error as e:
            if conn:
                conn.rollback()
            self.logger.error("Database error", db_path=str(self.db_path), error=str(e))
            raise PersistenceError(
                f"Database error: {e}",
                operation="connection",
                target=str(self.db_path)
            ) from e
        finally:
            if conn:
                conn.close()

    def _key(self, subscription_id: int) -> str:
        if (
            not isinstance(subscription_id, int)
            or isinstance(subscription_id, bool)
            or not 0 <= subscription_id <= MAX_SUBSCRIPTION_ID
        ):
            raise PersistenceError(
                f"Subscription id out of range: {subscription_id!r}",
                operation="key",
                target=str(self.db_path)
            )
        return str(subscription_id)

    def get(self, subscription_id: int) -> Optional[SubscriptionRecord]:
        with self._get_connection() as conn:
            row = conn.execute(
                "SELECT record_data FROM subscriptions WHERE subscription_id = ?",
                (self._key(subscription_id),)
            ).fetchone()

        if row is None:
            return None
        return SubscriptionRecord.from_dict(orjson.loads(row["record_data"]))

    def set(self, subscription_id: int, record: SubscriptionRecord) -> None:
        with self._lock:
            with self._get_connection() as conn:
                conn.execute(
                    "INSERT OR REPLACE INTO subscriptions (subscription_id, record_data) VALUES (?, ?)",
                    (self._key(subscription_id), orjson.dumps(record.to_dict()))
                )
                conn.commit()

        self.logger.debug(
            "Subscription record stored",
            subscription_id=subscription_id,
            state=record.state.value,
            failure_count=record.failure_count
        )

    def exists(self, subscription_id: int) -> bool:
        with self._get_connection() as conn:
            row = conn.execute(
                "SELECT 1 FROM subscriptions WHERE subscription_id = ?",
                (self._key(subscription_id),)
            ).fetchone()
        return row is not None

    def count(self) -> int:
        with self._get_connection() as conn:
            return conn.execute("SELECT COUNT(*) FROM subscriptions").fetchone()[0]

"""Durable, append-only SQLite history of completed calculations."""
from datetime import datetime, timezone
from pathlib import Path
import sqlite3
import threading
from typing import Callable, List, Optional, Union

from arithmetic_history_service.common.errors import StorageUnavailableError
from arithmetic_history_service.common.logger import logger
from arithmetic_history_service.common.models import HistoryRecord, Operation

MEMORY_DB = ":memory:"

SCHEMA = """
    CREATE TABLE IF NOT EXISTS history (
        id          INTEGER PRIMARY KEY AUTOINCREMENT,
        operation   TEXT NOT NULL,
        operand1    REAL NOT NULL,
        operand2    REAL NOT NULL,
        result      REAL NOT NULL,
        created_at  TEXT NOT NULL
    );
"""


def utc_now() -> datetime:
    """Current time, timezone-aware in UTC."""
    return datetime.now(timezone.utc)


class HistoryStore:
    """
    Append-only store of HistoryRecords backed by a single SQLite file.

    Guarantees:
        - The schema is created on first use (idempotent, safe on every startup).
        - ``append`` commits with synchronous=FULL before returning, so an
          acknowledged record survives a crash.
        - Identifiers and timestamps are assigned by the store, never by callers.
        - A single lock serialises id assignment and commit, so concurrent
          appends keep a global order that ``list_recent`` reflects.
        - A failed append is rolled back and never becomes visible.
    """

    def __init__(
        self,
        db_path: Union[str, Path],
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        """
        :param db_path: SQLite file path, or ":memory:" for a private in-memory store
        :param clock: Source of record timestamps
        """
        self.db_path = db_path
        self._clock = clock
        self._lock = threading.Lock()
        self._conn: Optional[sqlite3.Connection] = None

    def _connect(self) -> sqlite3.Connection:
        """
        Return the open connection, creating the data directory and schema on first use.

        Must be called with the lock held.

        :return: Open SQLite connection
        :rtype: sqlite3.Connection
        :raises StorageUnavailableError: If the database cannot be opened or initialised
        """
        if self._conn is not None:
            return self._conn

        conn: Optional[sqlite3.Connection] = None
        try:
            if str(self.db_path) != MEMORY_DB:
                Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
            # Requests are served from a threadpool; the lock guards every use
            conn = sqlite3.connect(str(self.db_path), check_same_thread=False)
            conn.row_factory = sqlite3.Row
            conn.execute("PRAGMA journal_mode=WAL")
            conn.execute("PRAGMA synchronous=FULL")
            conn.executescript(SCHEMA)
            conn.commit()
        except (sqlite3.Error, OSError) as exc:
            if conn is not None:
                conn.close()
            logger.error(f"🗄️❌ Could not open history database {self.db_path}: {exc}")
            raise StorageUnavailableError("History storage is unavailable") from exc

        logger.info(f"🗄️ History database ready at {self.db_path}")
        self._conn = conn
        return conn

    def init(self) -> None:
        """
        Ensure the backing database and table exist.

        :raises StorageUnavailableError: If the database cannot be opened or initialised
        """
        with self._lock:
            self._connect()

    def append(
        self, operation: Operation, operand1: float, operand2: float, result: float
    ) -> HistoryRecord:
        """
        Durably write a new history record.

        :param Operation operation: Operation that was applied
        :param float operand1: Left operand
        :param float operand2: Right operand
        :param float result: Computed result

        :return: The stored record, with its assigned id and timestamp
        :rtype: HistoryRecord
        :raises StorageUnavailableError: If the record could not be committed
        """
        operation = Operation(operation)
        with self._lock:
            conn = self._connect()
            created_at = self._clock()
            try:
                # Commits on success, rolls back on error
                with conn:
                    cursor = conn.execute(
                        "INSERT INTO history (operation, operand1, operand2, result, created_at) "
                        "VALUES (?, ?, ?, ?, ?)",
                        (operation.value, operand1, operand2, result, created_at.isoformat()),
                    )
            except sqlite3.Error as exc:
                logger.error(f"🗄️❌ History insert failed: {exc}")
                raise StorageUnavailableError("Could not append history record") from exc

        return HistoryRecord(
            id=cursor.lastrowid,
            operation=operation,
            operand1=operand1,
            operand2=operand2,
            result=result,
            created_at=created_at,
        )

    def list_recent(self, limit: int) -> List[HistoryRecord]:
        """
        Return up to ``limit`` records, newest first.

        :param int limit: Maximum number of records to return

        :return: Records ordered by descending id
        :rtype: List[HistoryRecord]
        :raises ValueError: If limit is negative
        :raises StorageUnavailableError: If the records could not be read
        """
        if limit < 0:
            raise ValueError(f"limit must be non-negative, got {limit}")

        with self._lock:
            conn = self._connect()
            try:
                rows = conn.execute(
                    "SELECT id, operation, operand1, operand2, result, created_at "
                    "FROM history ORDER BY id DESC LIMIT ?",
                    (limit,),
                ).fetchall()
            except sqlite3.Error as exc:
                logger.error(f"🗄️❌ History fetch failed: {exc}")
                raise StorageUnavailableError("Could not read history records") from exc

        return [HistoryRecord(**dict(row)) for row in rows]

    def close(self) -> None:
        """Close the connection; the next use reopens it."""
        with self._lock:
            if self._conn is not None:
                self._conn.close()
                self._conn = None

"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

services/fingerprint_store.py
SQLite-backed filename → fingerprint table.

Schema:
    images(filename TEXT PRIMARY KEY NOT NULL, imagehash TEXT UNIQUE)
    settings(key TEXT PRIMARY KEY NOT NULL, value TEXT NOT NULL)

The settings table records which hash configuration produced the stored
fingerprints, so a run with another configuration can tell they are not comparable.

Every insert is committed immediately; there is no transaction spanning a scan.
"""
import os
import sqlite3
import logging
from pathlib import Path
from typing import Iterator, Optional

from phashsort.core.models import Fingerprint, ImageRecord
from phashsort.exceptions import StoreError

logger = logging.getLogger(__name__)

MEMORY_DB = ":memory:"

_SCHEMA = """
    CREATE TABLE IF NOT EXISTS images (
        filename    TEXT    PRIMARY KEY     NOT NULL,
        imagehash   TEXT    UNIQUE
    )
"""

_SETTINGS_SCHEMA = """
    CREATE TABLE IF NOT EXISTS settings (
        key         TEXT    PRIMARY KEY     NOT NULL,
        value       TEXT    NOT NULL
    )
"""

HASH_CONFIG_KEY = "hash_config"


class SqliteFingerprintStore:
    """
    Durable mapping from filename to fingerprint.
    Query methods raise StoreError; deciding whether that is fatal is up to the caller.
    """

    def __init__(self, db_path: str):
        self.db_path = os.fspath(db_path)
        self._conn: Optional[sqlite3.Connection] = None

    # ---- lifecycle ----

    def ensure_initialized(self) -> bool:
        """
        Open the database and create the schema if absent.

        Returns:
            True if the table had to be created.

        Raises:
            StoreError: if the database cannot be opened or the schema created.
        """
        conn = self._connection()
        try:
            row = conn.execute(
                "SELECT name FROM sqlite_master WHERE type='table' AND name='images'"
            ).fetchone()
            created = row is None
            if created:
                conn.execute(_SCHEMA)
            conn.execute(_SETTINGS_SCHEMA)
            conn.commit()
        except sqlite3.Error as e:
            raise StoreError(f"Failed to create schema in {self.db_path}: {e}") from e
        if created:
            logger.info(f"Created fingerprint table in {self.db_path}")
        return created

    def reset(self) -> None:
        """
        Drop the whole database. The next ensure_initialized() starts from nothing.

        Raises:
            StoreError: if the database file cannot be removed.
        """
        self.close()
        if self.db_path == MEMORY_DB:
            return
        for suffix in ("", "-journal", "-wal", "-shm"):
            try:
                Path(self.db_path + suffix).unlink()
            except FileNotFoundError:
                continue
            except OSError as e:
                raise StoreError(f"Failed to drop database {self.db_path}: {e}") from e
        logger.debug(f"Dropped database {self.db_path}")

    def close(self) -> None:
        if self._conn is not None:
            try:
                self._conn.close()
            except sqlite3.Error as e:
                logger.warning(f"Error closing {self.db_path}: {e}")
            self._conn = None

    def __enter__(self):
        self.ensure_initialized()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    # ---- queries ----

    def exists(self, filename: str) -> bool:
        """True iff a record with this filename was previously stored."""
        row = self._fetch_one("SELECT 1 FROM images WHERE filename = ?", (filename,))
        return row is not None

    def lookup_by_fingerprint(self, fingerprint: Fingerprint) -> Optional[str]:
        """Filename of the canonical record sharing this fingerprint, or None."""
        row = self._fetch_one(
            "SELECT filename FROM images WHERE imagehash = ?", (fingerprint.encoding,)
        )
        return row[0] if row is not None else None

    def insert(self, filename: str, fingerprint: Fingerprint) -> None:
        """
        Store a new record.

        Raises:
            StoreError: on duplicate filename, duplicate fingerprint, or database failure.
        """
        conn = self._connection()
        try:
            with conn:
                conn.execute(
                    "INSERT INTO images (filename, imagehash) VALUES (?, ?)",
                    (filename, fingerprint.encoding)
                )
        except sqlite3.IntegrityError as e:
            raise StoreError(f"Record rejected for {filename}: {e}") from e
        except sqlite3.Error as e:
            raise StoreError(f"Failed to insert {filename}: {e}") from e

    def hash_config(self) -> Optional[str]:
        """Hash configuration (e.g. "dhash:8") the stored fingerprints were made with, if recorded."""
        row = self._fetch_one("SELECT value FROM settings WHERE key = ?", (HASH_CONFIG_KEY,))
        return row[0] if row is not None else None

    def set_hash_config(self, config: str) -> None:
        """
        Record the hash configuration of the stored fingerprints.

        Raises:
            StoreError: on database failure.
        """
        conn = self._connection()
        try:
            with conn:
                conn.execute(
                    "INSERT OR REPLACE INTO settings (key, value) VALUES (?, ?)",
                    (HASH_CONFIG_KEY, config)
                )
        except sqlite3.Error as e:
            raise StoreError(f"Failed to record hash configuration in {self.db_path}: {e}") from e

    def records(self) -> Iterator[ImageRecord]:
        """All stored records, ordered by filename."""
        conn = self._connection()
        try:
            rows = conn.execute(
                "SELECT filename, imagehash FROM images ORDER BY filename"
            ).fetchall()
        except sqlite3.Error as e:
            raise StoreError(f"Failed to read records: {e}") from e
        for filename, encoding in rows:
            yield ImageRecord(filename=filename, fingerprint=Fingerprint(encoding))

    def __len__(self) -> int:
        row = self._fetch_one("SELECT COUNT(*) FROM images", ())
        return int(row[0])

    # ---- internals ----

    def _connection(self) -> sqlite3.Connection:
        if self._conn is None:
            try:
                self._conn = sqlite3.connect(self.db_path)
            except sqlite3.Error as e:
                raise StoreError(f"Cannot open database {self.db_path}: {e}") from e
        return self._conn

    def _fetch_one(self, query: str, params: tuple) -> Optional[tuple]:
        conn = self._connection()
        try:
            return conn.execute(query, params).fetchone()
        except sqlite3.Error as e:
            raise StoreError(f"Query failed on {self.db_path}: {e}") from e

    def __repr__(self):
        return f"<SqliteFingerprintStore db_path={self.db_path}>"

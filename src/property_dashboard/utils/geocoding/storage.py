"""
Storage backends for geocoding results.

Implements durable key-value stores (DuckDB, in-memory) and the
GeocodeCache that persists address → coordinate lookups into one
named entry of such a store.
"""


import json
import logging
import threading
from pathlib import Path
from typing import Optional, Dict

import duckdb

from .base import KeyValueStore
from .models import Coords


logger = logging.getLogger(__name__)

DEFAULT_CACHE_KEY = "geocodeCache"


class DuckDBKeyValueStore(KeyValueStore):
    """
    DuckDB storage backend for serialized key-value entries.

    A single connection is shared; every operation is serialized with a lock
    so the store can be used from loader threads.
    """

    DDL = """
    CREATE TABLE IF NOT EXISTS kv_store (
        key TEXT PRIMARY KEY,
        value TEXT
    );
    """

    def __init__(self, db_path: Path | str):
        """
        Initialize DuckDB storage.

        Args:
            db_path: Path to DuckDB database file
        """
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self.lock = threading.Lock()
        self.con = duckdb.connect(str(self.db_path))
        self.con.execute(self.DDL)
        logger.info(f"Initialized DuckDB key-value store: {self.db_path}")

    def get(self, key: str) -> Optional[str]:
        with self.lock:
            row = self.con.execute(
                "SELECT value FROM kv_store WHERE key = ?", [key]
            ).fetchone()
        return row[0] if row else None

    def set(self, key: str, value: str) -> None:
        with self.lock:
            self.con.execute(
                """
                INSERT INTO kv_store (key, value)
                VALUES (?, ?)
                ON CONFLICT(key) DO UPDATE SET value = excluded.value
                """,
                [key, value],
            )

    def remove(self, key: str) -> None:
        with self.lock:
            self.con.execute("DELETE FROM kv_store WHERE key = ?", [key])

    def close(self) -> None:
        """Close database connection."""
        with self.lock:
            if self.con:
                self.con.close()
                self.con = None
                logger.info("Closed DuckDB connection")


class InMemoryKeyValueStore(KeyValueStore):
    """
    Process-local store (for testing/development, or when no cache path is configured).
    """

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self.values: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self.values.get(key)

    def set(self, key: str, value: str) -> None:
        self.values[key] = value

    def remove(self, key: str) -> None:
        self.values.pop(key, None)


class GeocodeCache:
    """
    Persistent mapping from lower-cased cleaned address to coordinates.

    The whole mapping lives in one named entry of a KeyValueStore, as a JSON
    array of ``[address, {"lat": .., "lng": ..}]`` pairs. It is loaded once on
    construction and rewritten after every put(). Durability is best-effort:
    unreadable entries load as empty, failed writes are logged.
    """

    def __init__(self, store: KeyValueStore, key: str = DEFAULT_CACHE_KEY):
        self.store = store
        self.key = key
        self.lock = threading.RLock()
        self.entries: Dict[str, Coords] = self.load()

    @staticmethod
    def make_key(address: str) -> str:
        return address.strip().lower()

    def load(self) -> Dict[str, Coords]:
        """
        Deserialize the cache entry from the store.

        Returns:
            Mapping of address key → Coords; empty on a missing key or corrupt data
        """
        try:
            raw = self.store.get(self.key)
        except Exception as e:
            logger.warning(f"Failed to read geocode cache '{self.key}': {e}")
            return {}

        if not raw:
            return {}

        try:
            pairs = json.loads(raw)
            entries = {str(k): Coords.from_dict(v) for k, v in pairs}
        except (ValueError, TypeError, KeyError) as e:
            logger.warning(f"Failed to load geocode cache '{self.key}', starting empty: {e}")
            return {}

        logger.debug(f"Loaded {len(entries)} cached geocodes")
        return entries

    def get(self, key: str) -> Optional[Coords]:
        with self.lock:
            return self.entries.get(key)

    def put(self, key: str, coords: Coords) -> None:
        """Store a coordinate and persist the whole mapping."""
        with self.lock:
            self.entries[key] = coords
            self.persist()

    def persist(self) -> None:
        """Serialize the entire mapping back to the store. Failures are logged only."""
        with self.lock:
            payload = json.dumps([[k, v.to_dict()] for k, v in self.entries.items()])
            try:
                self.store.set(self.key, payload)
            except Exception as e:
                logger.warning(f"Failed to save geocode cache '{self.key}': {e}")

    def clear(self) -> None:
        """Empty the in-memory mapping and remove the durable entry."""
        with self.lock:
            self.entries.clear()
            try:
                self.store.remove(self.key)
            except Exception as e:
                logger.warning(f"Failed to remove geocode cache '{self.key}': {e}")
        logger.info("Cleared geocode cache")

    def __len__(self) -> int:
        return len(self.entries)

    def __contains__(self, key: object) -> bool:
        return key in self.entries

"""
Persistence for PlayHub view state.

The view engine only needs a string key/value store (order overlay, filter and
sort selections). SQLiteStore also keeps user tags, which feed the tag filter
dimension.

Tag operations follow the same shape as the rest of the app's storage code:
an async public method wrapping a synchronous ``_method`` run in a worker
thread, each call on its own connection.
"""

import asyncio
import sqlite3
import threading
from pathlib import Path
from typing import Optional, List

import appdirs

from .config import APP_AUTHOR, APP_NAME
from .logger import setup_logger
from .models import Tag

logger = setup_logger()


class PersistenceStore:
    """Minimal key/value contract used by the view engine."""

    def get(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def set(self, key: str, value: str) -> None:
        raise NotImplementedError


class MemoryStore(PersistenceStore):
    """In-process store, used for tests and the CLI."""

    def __init__(self, initial: dict | None = None):
        self._lock = threading.Lock()
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._data.get(str(key))

    def set(self, key: str, value: str) -> None:
        with self._lock:
            self._data[str(key)] = value


def get_db_path() -> Path:
    config_dir = appdirs.user_config_dir(APP_NAME, APP_AUTHOR)
    return Path(config_dir) / "games.db"


class SQLiteStore(PersistenceStore):
    """
    SQLite-backed preferences and tags.

    Writes are serialized with a lock so read-modify-write sequences from the
    UI thread and worker threads do not interleave.
    """

    def __init__(self, db_path=None):
        self.db_path = Path(db_path) if db_path else get_db_path()
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._write_lock = threading.Lock()
        self._create_schema()
        logger.info(f"Database path: {self.db_path}")

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self.db_path))
        conn.execute("PRAGMA foreign_keys = ON")
        return conn

    def _create_schema(self):
        conn = self._connect()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                CREATE TABLE IF NOT EXISTS preferences (
                    key TEXT PRIMARY KEY,
                    value TEXT,
                    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                )
            """)

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS tags (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    name TEXT NOT NULL UNIQUE
                )
            """)

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS entry_tags (
                    entry_id TEXT NOT NULL,
                    tag_id INTEGER NOT NULL,
                    PRIMARY KEY (entry_id, tag_id),
                    FOREIGN KEY (tag_id) REFERENCES tags(id) ON DELETE CASCADE
                )
            """)

            cursor.execute("CREATE INDEX IF NOT EXISTS idx_entry_tags_tag ON entry_tags(tag_id)")

            conn.commit()
            logger.debug("Database schema created/verified")

        except Exception as e:
            logger.error(f"Error creating schema: {e}", exc_info=True)
            conn.rollback()
            raise
        finally:
            conn.close()

    # =========================================================================
    # Preferences
    # =========================================================================

    def get(self, key: str) -> Optional[str]:
        conn = self._connect()
        try:
            row = conn.execute("SELECT value FROM preferences WHERE key = ?", (str(key),)).fetchone()
            return row[0] if row else None
        except sqlite3.Error as e:
            logger.error(f"Error reading preference {key}: {e}", exc_info=True)
            return None
        finally:
            conn.close()

    def set(self, key: str, value: str) -> None:
        with self._write_lock:
            conn = self._connect()
            try:
                conn.execute("""
                    INSERT INTO preferences (key, value, updated_at)
                    VALUES (?, ?, CURRENT_TIMESTAMP)
                    ON CONFLICT(key) DO UPDATE SET
                        value = excluded.value,
                        updated_at = CURRENT_TIMESTAMP
                """, (str(key), value))
                conn.commit()
            except sqlite3.Error as e:
                logger.error(f"Error writing preference {key}: {e}", exc_info=True)
                conn.rollback()
            finally:
                conn.close()

    # =========================================================================
    # Tags
    # =========================================================================

    async def get_all_tags(self) -> List[Tag]:
        """Get all tags ordered by name"""
        return await asyncio.to_thread(self._get_all_tags)

    def _get_all_tags(self) -> List[Tag]:
        conn = self._connect()
        try:
            rows = conn.execute("SELECT id, name FROM tags ORDER BY name ASC").fetchall()
            return [Tag(id=row[0], name=row[1]) for row in rows]
        except Exception as e:
            logger.error(f"Failed to get all tags: {e}", exc_info=True)
            return []
        finally:
            conn.close()

    async def create_tag(self, name: str) -> Optional[Tag]:
        return await asyncio.to_thread(self._create_tag, name)

    def _create_tag(self, name: str) -> Optional[Tag]:
        clean = name.strip()
        if not clean:
            logger.warning("Refusing to create tag with empty name")
            return None

        with self._write_lock:
            conn = self._connect()
            try:
                cursor = conn.execute("INSERT INTO tags (name) VALUES (?)", (clean,))
                conn.commit()
                return Tag(id=cursor.lastrowid, name=clean)
            except Exception as e:
                logger.error(f"Failed to create tag {name}: {e}", exc_info=True)
                conn.rollback()
                return None
            finally:
                conn.close()

    async def delete_tag(self, tag_id: int) -> bool:
        return await asyncio.to_thread(self._delete_tag, tag_id)

    def _delete_tag(self, tag_id: int) -> bool:
        with self._write_lock:
            conn = self._connect()
            try:
                conn.execute("DELETE FROM entry_tags WHERE tag_id = ?", (tag_id,))
                conn.execute("DELETE FROM tags WHERE id = ?", (tag_id,))
                conn.commit()
                return True
            except Exception as e:
                logger.error(f"Failed to delete tag {tag_id}: {e}", exc_info=True)
                conn.rollback()
                return False
            finally:
                conn.close()

    async def get_entry_tags(self, entry_id: str) -> List[Tag]:
        return await asyncio.to_thread(self._get_entry_tags, entry_id)

    def _get_entry_tags(self, entry_id: str) -> List[Tag]:
        conn = self._connect()
        try:
            rows = conn.execute("""
                SELECT t.id, t.name FROM tags t
                JOIN entry_tags et ON t.id = et.tag_id
                WHERE et.entry_id = ?
                ORDER BY t.name ASC
            """, (entry_id,)).fetchall()
            return [Tag(id=row[0], name=row[1]) for row in rows]
        except Exception as e:
            logger.error(f"Failed to get tags for entry {entry_id}: {e}", exc_info=True)
            return []
        finally:
            conn.close()

    async def add_tag_to_entry(self, entry_id: str, tag_id: int) -> bool:
        return await asyncio.to_thread(self._add_tag_to_entry, entry_id, tag_id)

    def _add_tag_to_entry(self, entry_id: str, tag_id: int) -> bool:
        with self._write_lock:
            conn = self._connect()
            try:
                conn.execute(
                    "INSERT OR IGNORE INTO entry_tags (entry_id, tag_id) VALUES (?, ?)",
                    (entry_id, tag_id),
                )
                conn.commit()
                return True
            except Exception as e:
                logger.error(f"Failed to add tag {tag_id} to entry {entry_id}: {e}", exc_info=True)
                conn.rollback()
                return False
            finally:
                conn.close()

    async def remove_tag_from_entry(self, entry_id: str, tag_id: int) -> bool:
        return await asyncio.to_thread(self._remove_tag_from_entry, entry_id, tag_id)

    def _remove_tag_from_entry(self, entry_id: str, tag_id: int) -> bool:
        with self._write_lock:
            conn = self._connect()
            try:
                conn.execute(
                    "DELETE FROM entry_tags WHERE entry_id = ? AND tag_id = ?",
                    (entry_id, tag_id),
                )
                conn.commit()
                return True
            except Exception as e:
                logger.error(f"Failed to remove tag {tag_id} from entry {entry_id}: {e}", exc_info=True)
                conn.rollback()
                return False
            finally:
                conn.close()

    async def get_entries_by_tag(self, tag_id: int) -> List[str]:
        """Entry ids carrying ``tag_id``; feeds FilterDimensions.tag_entry_ids"""
        return await asyncio.to_thread(self._get_entries_by_tag, tag_id)

    def _get_entries_by_tag(self, tag_id: int) -> List[str]:
        conn = self._connect()
        try:
            rows = conn.execute(
                "SELECT entry_id FROM entry_tags WHERE tag_id = ? ORDER BY entry_id",
                (tag_id,),
            ).fetchall()
            return [row[0] for row in rows]
        except Exception as e:
            logger.error(f"Failed to get entries for tag {tag_id}: {e}", exc_info=True)
            return []
        finally:
            conn.close()


_default_store: SQLiteStore | None = None
_default_store_lock = threading.Lock()


def get_default_store() -> SQLiteStore:
    """Process-wide SQLiteStore at the default location, created on first use."""
    global _default_store
    if _default_store is None:
        with _default_store_lock:
            if _default_store is None:
                _default_store = SQLiteStore()
    return _default_store

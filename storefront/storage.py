# storefront/storage.py
import json
import os
import sqlite3
import time
from email.utils import formatdate
from typing import Dict, List, Optional
from urllib.parse import quote, unquote

from requests.cookies import CookieConflictError, RequestsCookieJar

from .logger import get_logger
from .models import WishlistEntry

logger = get_logger(__name__)

WISHLIST_KEY = os.getenv("WISHLIST_KEY", "shopify_wishlist")
DB_PATH = os.getenv("WISHLIST_DB_PATH", "/data/wishlist_widget.sqlite3")
COOKIE_DAYS = int(os.getenv("COOKIE_DAYS", "365"))

# Characters encodeURIComponent leaves alone
_COOKIE_SAFE = "-_.!~*'()"


class StorageError(Exception):
    """Durable storage could not be read or written."""


class StorageUnavailable(StorageError):
    """Durable storage is disabled for this origin."""


class SqliteStore:
    """
    Origin-scoped key-value store backed by a single SQLite table.
    An empty path means storage is disabled.
    """

    def __init__(self, path: str = DB_PATH):
        self.path = path

    def _connect(self) -> sqlite3.Connection:
        if not self.path:
            raise StorageUnavailable("Durable storage is disabled (no database path).")
        try:
            db_dir = os.path.dirname(self.path)
            if db_dir:
                os.makedirs(db_dir, exist_ok=True)
            con = sqlite3.connect(self.path)
        except (OSError, sqlite3.Error) as e:
            raise StorageError(f"Cannot open {self.path}: {e}") from e
        try:
            con.execute(
                """
                CREATE TABLE IF NOT EXISTS kv (
                    key TEXT PRIMARY KEY,
                    value TEXT
                )
            """
            )
            return con
        except sqlite3.Error as e:
            con.close()
            raise StorageError(f"Cannot open {self.path}: {e}") from e

    def get(self, key: str) -> Optional[str]:
        con = self._connect()
        try:
            with con:
                row = con.execute("SELECT value FROM kv WHERE key=?", (key,)).fetchone()
        except sqlite3.Error as e:
            raise StorageError(f"Read of {key!r} failed: {e}") from e
        finally:
            con.close()
        return row[0] if row else None

    def set(self, key: str, value: str) -> None:
        con = self._connect()
        try:
            with con:
                con.execute(
                    """
                    INSERT INTO kv (key, value) VALUES (?, ?)
                    ON CONFLICT(key) DO UPDATE SET value=excluded.value
                """,
                    (key, value),
                )
        except sqlite3.Error as e:
            raise StorageError(f"Write of {key!r} failed: {e}") from e
        finally:
            con.close()


class MemoryStore:
    """In-process key-value store; quota caps the size of a single value."""

    def __init__(self, available: bool = True, quota: int | None = None):
        self.available = available
        self.quota = quota
        self._data: Dict[str, str] = {}

    def _check(self) -> None:
        if not self.available:
            raise StorageUnavailable("Durable storage is disabled.")

    def get(self, key: str) -> Optional[str]:
        self._check()
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._check()
        if self.quota is not None and len(value) > self.quota:
            raise StorageError(
                f"Quota exceeded writing {key!r} ({len(value)} > {self.quota} chars)"
            )
        self._data[key] = value


class CookieMirror:
    """Cookie copy of the wishlist, kept in a requests cookie jar."""

    def __init__(self, jar: RequestsCookieJar | None = None, days: int = COOKIE_DAYS):
        self.jar = jar if jar is not None else RequestsCookieJar()
        self.days = days

    def write(self, name: str, value: str) -> None:
        expires = int(time.time()) + self.days * 24 * 60 * 60
        self.jar.set(
            name,
            quote(value, safe=_COOKIE_SAFE),
            expires=expires,
            path="/",
            rest={"SameSite": "Lax"},
        )

    def read(self, name: str) -> Optional[str]:
        raw = self.jar.get(name, path="/")
        if raw is None:
            return None
        return unquote(raw)

    def header(self, name: str) -> Optional[str]:
        """Cookie string as a page would assign it to document.cookie."""
        for cookie in self.jar:
            if cookie.name == name and cookie.path == "/":
                expires = formatdate(cookie.expires, usegmt=True)
                return f"{name}={cookie.value};expires={expires};path=/;SameSite=Lax"
        return None


def _parse_entries(raw: str) -> List[WishlistEntry]:
    data = json.loads(raw)
    if not isinstance(data, list):
        raise ValueError(f"Stored wishlist is not an array ({type(data).__name__})")

    entries: List[WishlistEntry] = []
    seen = set()
    for item in data:
        entry = WishlistEntry.from_dict(item)
        if entry.id in seen:
            logger.warning("Dropping duplicate stored wishlist entry %s", entry.id)
            continue
        seen.add(entry.id)
        entries.append(entry)
    return entries


def dump_entries(entries: List[WishlistEntry]) -> str:
    return json.dumps(
        [e.to_dict() for e in entries], separators=(",", ":"), ensure_ascii=False
    )


class WishlistStorage:
    """
    Loads and saves the wishlist: primary store first, cookie mirror as fallback.
    """

    def __init__(self, store, cookies: CookieMirror | None = None, key: str = WISHLIST_KEY):
        self.store = store
        self.cookies = cookies if cookies is not None else CookieMirror()
        self.key = key

    def load(self) -> List[WishlistEntry]:
        try:
            raw = None
            try:
                raw = self.store.get(self.key)
            except StorageUnavailable as e:
                logger.debug("Primary storage unavailable, trying cookie: %s", e)

            if raw:
                return _parse_entries(raw)

            cookie_value = self.cookies.read(self.key)
            if cookie_value:
                return _parse_entries(cookie_value)

            return []
        except (StorageError, ValueError, CookieConflictError) as e:
            logger.warning("Failed to load wishlist: %s", e)
            return []

    def save(self, entries: List[WishlistEntry]) -> bool:
        """Returns False when the write failed; nothing is rolled back."""
        data = dump_entries(entries)
        try:
            try:
                self.store.set(self.key, data)
            except StorageUnavailable as e:
                logger.debug("Primary storage unavailable, writing cookie only: %s", e)

            self.cookies.write(self.key, data)
        except StorageError as e:
            logger.warning("Failed to save wishlist: %s", e)
            return False

        logger.debug("Saved wishlist (%d items).", len(entries))
        return True

"""Key-value table I/O over a dbm engine.

Each logical table (catalog, track) is a single dbm database. The engine
decides how many files back it:

    dbm.gnu / dbm.sqlite3:  <base>
    dbm.ndbm:               <base>.db  or  <base>.dir + <base>.pag
    dbm.dumb:               <base>.dat + <base>.dir (+ <base>.bak)

The Table handles opening, resetting and closing that database and
translates engine errors into EngineFailure.
"""

import dbm
import importlib
import logging
from collections.abc import Iterator
from pathlib import Path
from typing import Self

from exceptions import EngineFailure, StoreNotOpen

logger = logging.getLogger(__name__)

# Every file any dbm engine may leave next to the base name
ENGINE_SUFFIXES = ("", ".dir", ".pag", ".db", ".dat", ".bak")


def backing_files(path: Path | str) -> list[Path]:
    """All candidate backing files for a table with the given base path."""
    base = Path(path)
    return [base.with_name(base.name + suffix) for suffix in ENGINE_SUFFIXES]


def load_backend(name: str | None):
    """Import the dbm module used to open tables (None = dbm auto-select)."""
    if name is None:
        return dbm
    try:
        return importlib.import_module(name)
    except ImportError as e:
        raise EngineFailure(f"dbm backend not available: {name}") from e


class Table:
    """A single open dbm database holding one logical table.

    Opens (creating if absent) on construction. With ``reset=True`` every
    backing file is unlinked first and the database is recreated empty.
    """

    def __init__(
        self,
        path: Path | str,
        backend: str | None = None,
        mode: int = 0o644,
        reset: bool = False,
    ):
        self.path = Path(path)
        self.backend = backend
        self._handle = None

        module = load_backend(backend)
        try:
            if reset:
                self.remove_files(self.path)
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self._handle = module.open(str(self.path), "n" if reset else "c", mode)
        except dbm.error as e:
            raise EngineFailure(f"Unable to open table {self.path}: {e}") from e

        logger.debug(f"Opened table {self.path} (backend={backend or 'auto'}, reset={reset})")

    @staticmethod
    def remove_files(path: Path | str) -> None:
        """Irrecoverably delete every backing file of a table."""
        for file in backing_files(path):
            file.unlink(missing_ok=True)

    @property
    def is_open(self) -> bool:
        return self._handle is not None

    def _require_open(self):
        if self._handle is None:
            raise StoreNotOpen(f"Table is closed: {self.path}")
        return self._handle

    def fetch(self, key: bytes) -> bytes | None:
        """Exact-match lookup. Returns None if the key is absent."""
        handle = self._require_open()
        try:
            return handle[key]
        except KeyError:
            return None
        except dbm.error as e:
            raise EngineFailure(f"Fetch failed on {self.path}: {e}") from e

    def store(self, key: bytes, value: bytes) -> None:
        """Insert or replace the value stored under key."""
        handle = self._require_open()
        try:
            handle[key] = value
        except dbm.error as e:
            raise EngineFailure(f"Store failed on {self.path}: {e}") from e
        logger.debug(f"Stored {len(value)} bytes under key_len={len(key)} in {self.path.name}")

    def delete(self, key: bytes) -> bool:
        """Remove key. Returns False if it was not present."""
        handle = self._require_open()
        try:
            del handle[key]
        except KeyError:
            return False
        except dbm.error as e:
            raise EngineFailure(f"Delete failed on {self.path}: {e}") from e
        logger.debug(f"Deleted key_len={len(key)} from {self.path.name}")
        return True

    def iter_keys(self) -> Iterator[bytes]:
        """Yield every key in engine order.

        Engines with firstkey/nextkey are walked lazily; the rest are walked
        over a snapshot of the key list taken on the first step.
        """
        handle = self._require_open()
        try:
            if hasattr(handle, "firstkey"):
                key = handle.firstkey()
                while key is not None:
                    yield key
                    key = self._require_open().nextkey(key)
            else:
                yield from list(handle.keys())
        except dbm.error as e:
            raise EngineFailure(f"Iteration failed on {self.path}: {e}") from e

    def sync(self) -> None:
        """Flush pending writes if the engine supports it."""
        handle = self._require_open()
        if hasattr(handle, "sync"):
            handle.sync()

    def close(self) -> None:
        """Close the table."""
        if self._handle is not None:
            try:
                self._handle.close()
            except dbm.error as e:
                raise EngineFailure(f"Close failed on {self.path}: {e}") from e
            finally:
                self._handle = None
            logger.debug(f"Closed table {self.path}")

    def __enter__(self) -> Self:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

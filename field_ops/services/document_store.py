"""
Document store for field ops data.

The whole database is one JSON document of named collections plus the
settings record and the identifier counters. It is loaded once and
rewritten in full after every mutation.
"""

import copy
import json
import logging
import os
import tempfile
import threading
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional

from ..exceptions import NotFoundError, StorageError

logger = logging.getLogger(__name__)

COLLECTIONS = (
    "customers",
    "team",
    "products",
    "requests",
    "jobs",
    "quotes",
    "invoices",
    "payments",
)

SETTINGS_KEY = "settings"
COUNTERS_KEY = "_counters"

# Sequences behind quote_number / invoice_number, kept apart from record ids
QUOTE_NUMBER_SEQUENCE = "quote_number"
INVOICE_NUMBER_SEQUENCE = "invoice_number"


class StorageBackend(ABC):
    """Abstract base class for document storage backends"""

    @abstractmethod
    def load(self) -> Optional[Dict[str, Any]]:
        """Return the stored document, or None when nothing has been written yet"""
        pass

    @abstractmethod
    def save(self, document: Dict[str, Any]) -> None:
        """Replace the stored document"""
        pass


class MemoryBackend(StorageBackend):
    """In-memory backend (tests and throwaway instances)"""

    def __init__(self, document: Optional[Dict[str, Any]] = None):
        self.document = copy.deepcopy(document) if document is not None else None
        self.save_count = 0

    def load(self) -> Optional[Dict[str, Any]]:
        return copy.deepcopy(self.document) if self.document is not None else None

    def save(self, document: Dict[str, Any]) -> None:
        self.document = copy.deepcopy(document)
        self.save_count += 1


class JsonFileBackend(StorageBackend):
    """Local JSON file backend.

    Writes go to a temp file in the same directory which is then renamed over
    the target, so a crash mid-write leaves the previous document intact.
    """

    def __init__(self, path: str):
        self.path = os.path.abspath(path)

    def load(self) -> Optional[Dict[str, Any]]:
        if not os.path.exists(self.path):
            return None
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                document = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"❌ Error loading document from {self.path}: {e}")
            raise StorageError(f"could not load {self.path}: {e}") from e
        if not isinstance(document, dict):
            raise StorageError(f"{self.path} does not contain a JSON object")
        return document

    def save(self, document: Dict[str, Any]) -> None:
        directory = os.path.dirname(self.path)
        tmp_path = None
        try:
            os.makedirs(directory, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(prefix=".field_ops-", suffix=".json", dir=directory)
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                json.dump(document, f, indent=2, default=str)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, self.path)
            logger.debug(f"Document saved to {self.path}", extra={"evt": "store_saved"})
        except OSError as e:
            if tmp_path and os.path.exists(tmp_path):
                os.remove(tmp_path)
            logger.error(f"❌ Error saving document to {self.path}: {e}")
            raise StorageError(f"could not save {self.path}: {e}") from e


class Collection:
    """Typed accessor for one named collection of the document"""

    def __init__(self, store: "DocumentStore", name: str, label: str):
        self._store = store
        self.name = name
        self.label = label

    @property
    def _records(self) -> List[Dict[str, Any]]:
        return self._store._document[self.name]

    def all(self) -> List[Dict[str, Any]]:
        with self._store._lock:
            return list(self._records)

    def get(self, record_id: int) -> Optional[Dict[str, Any]]:
        with self._store._lock:
            for record in self._records:
                if record.get("id") == record_id:
                    return record
        return None

    def require(self, record_id: int) -> Dict[str, Any]:
        record = self.get(record_id)
        if record is None:
            raise NotFoundError(self.label, record_id)
        return record

    def find(self, **filters: Any) -> List[Dict[str, Any]]:
        with self._store._lock:
            return [
                record for record in self._records
                if all(record.get(key) == value for key, value in filters.items())
            ]

    def insert(self, record: Dict[str, Any]) -> Dict[str, Any]:
        with self._store.transaction():
            self._records.append(record)
        return record

    def replace(self, record: Dict[str, Any]) -> Dict[str, Any]:
        with self._store.transaction():
            records = self._records
            for index, existing in enumerate(records):
                if existing.get("id") == record["id"]:
                    records[index] = record
                    return record
            raise NotFoundError(self.label, record["id"])

    def delete(self, record_id: int) -> None:
        with self._store.transaction():
            records = self._records
            for index, existing in enumerate(records):
                if existing.get("id") == record_id:
                    del records[index]
                    return
            raise NotFoundError(self.label, record_id)

    def __len__(self) -> int:
        with self._store._lock:
            return len(self._records)


class DocumentStore:
    """Single-document store with per-collection identifier counters.

    Mutations run inside ``transaction()``: a re-entrant lock is held for the
    whole read-modify-write, the document is persisted once when the
    outermost transaction exits, and an exception restores the snapshot taken
    on entry.
    """

    def __init__(self, backend: StorageBackend, default_settings: Optional[Dict[str, Any]] = None):
        self.backend = backend
        self._lock = threading.RLock()
        self._depth = 0
        self._document = self._initial_document(backend.load(), default_settings or {})

        self.customers = Collection(self, "customers", "Customer")
        self.team = Collection(self, "team", "Team member")
        self.products = Collection(self, "products", "Product")
        self.requests = Collection(self, "requests", "Service request")
        self.jobs = Collection(self, "jobs", "Job")
        self.quotes = Collection(self, "quotes", "Quote")
        self.invoices = Collection(self, "invoices", "Invoice")
        self.payments = Collection(self, "payments", "Payment")

    @staticmethod
    def _initial_document(loaded: Optional[Dict[str, Any]], default_settings: Dict[str, Any]) -> Dict[str, Any]:
        document = loaded or {}
        for name in COLLECTIONS:
            document.setdefault(name, [])
        settings = dict(default_settings)
        settings.update(document.get(SETTINGS_KEY) or {})
        document[SETTINGS_KEY] = settings
        document.setdefault(COUNTERS_KEY, {})
        if loaded is None:
            logger.info("Starting a new document", extra={"evt": "store_init"})
        return document

    def collection(self, name: str) -> Collection:
        if name not in COLLECTIONS:
            raise KeyError(name)
        return getattr(self, name)

    @contextmanager
    def transaction(self) -> Iterator["DocumentStore"]:
        with self._lock:
            if self._depth:
                self._depth += 1
                try:
                    yield self
                finally:
                    self._depth -= 1
                return

            snapshot = copy.deepcopy(self._document)
            self._depth = 1
            try:
                yield self
                self.backend.save(self._document)
            except Exception:
                self._document = snapshot
                raise
            finally:
                self._depth = 0

    def next_id(self, name: str) -> int:
        """Allocate the next id for a collection; ids are never reused"""
        with self.transaction():
            counters = self._document[COUNTERS_KEY]
            counters[name] = int(counters.get(name, 0)) + 1
            return counters[name]

    def next_sequence(self, name: str) -> int:
        """Allocate the next document-number sequence value"""
        return self.next_id(name)

    def counter(self, name: str) -> int:
        with self._lock:
            return int(self._document[COUNTERS_KEY].get(name, 0))

    @property
    def settings(self) -> Dict[str, Any]:
        with self._lock:
            return dict(self._document[SETTINGS_KEY])

    def update_settings(self, values: Dict[str, Any]) -> Dict[str, Any]:
        with self.transaction():
            self._document[SETTINGS_KEY].update(values)
        return self.settings

    def export(self) -> Dict[str, Any]:
        """Deep copy of the whole document"""
        with self._lock:
            return copy.deepcopy(self._document)

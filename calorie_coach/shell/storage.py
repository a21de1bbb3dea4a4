"""Key-Value Storage - Durable string storage for app state.

This module handles all database I/O. Every backend catches its own errors
and logs them. A missing key reads as None, a failed read raises
StorageError, and a failed write returns False. Callers decide how to
degrade, but must never treat an unreachable backend as empty data they
can overwrite.
"""

import json
import logging
import os
import tempfile
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Protocol

from google.cloud import firestore


logger = logging.getLogger(__name__)


class StorageError(Exception):
    """The backend could not be read. Distinct from a missing key."""


class KeyValueStore(Protocol):
    """Minimal durable storage used by the history and settings stores."""

    def get(self, key: str) -> str | None:
        """None for a missing key; raises StorageError if unreadable."""
        ...

    def set(self, key: str, value: str) -> bool:
        ...


@dataclass
class FirestoreConfig:
    """Configuration for Firestore storage.

    Attributes:
        project_id: GCP project ID (None for default)
        database: Firestore database name (None for default database)
        device_id: Document ID grouping one user's state
    """

    project_id: str | None = None
    database: str | None = None
    device_id: str = "default"


class FirestoreKeyValueStore:
    """Key-value storage on Firestore.

    Document structure:
        devices/{device_id}/
            storage/{key}: { value: "<serialized payload>" }
    """

    def __init__(self, config: FirestoreConfig | None = None) -> None:
        self.config = config or FirestoreConfig()
        self._client: firestore.Client | None = None

    @property
    def client(self) -> firestore.Client:
        """Lazy initialization of Firestore client."""
        if self._client is None:
            kwargs: dict[str, Any] = {}
            if self.config.project_id:
                kwargs["project"] = self.config.project_id
            if self.config.database:
                kwargs["database"] = self.config.database
            self._client = firestore.Client(**kwargs)
        return self._client

    def _entry_ref(self, key: str) -> firestore.DocumentReference:
        return (
            self.client.collection("devices")
            .document(self.config.device_id)
            .collection("storage")
            .document(key)
        )

    def get(self, key: str) -> str | None:
        """Fetch a stored value.

        Args:
            key: Storage key

        Returns:
            The stored string, or None if the document is missing

        Raises:
            StorageError: If Firestore could not be reached
        """
        logger.debug("Fetching %s for device %s", key, self.config.device_id)
        try:
            doc = self._entry_ref(key).get()
        except Exception as e:
            logger.error("Failed to fetch %s: %s", key, str(e))
            raise StorageError(f"Failed to fetch {key}") from e

        if not doc.exists:
            return None
        value = (doc.to_dict() or {}).get("value")
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> bool:
        """Store a value, replacing any previous one.

        Args:
            key: Storage key
            value: Serialized payload

        Returns:
            True if successful
        """
        logger.debug("Saving %s for device %s", key, self.config.device_id)
        try:
            self._entry_ref(key).set({"value": value})
            return True
        except Exception as e:
            logger.error("Failed to save %s: %s", key, str(e))
            return False


class JsonFileKeyValueStore:
    """Key-value storage in a single local JSON file.

    Writes go through a temporary file and os.replace so a crash never
    leaves a half-written file behind.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self._lock = threading.Lock()

    def _read_all(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        data = json.loads(self.path.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError(f"{self.path} does not contain a JSON object")
        return data

    def get(self, key: str) -> str | None:
        """Fetch a stored value; a corrupt file reads as missing."""
        with self._lock:
            try:
                data = self._read_all()
            except ValueError as e:
                logger.warning("Ignoring unreadable data file %s: %s", self.path, str(e))
                return None
            except OSError as e:
                logger.error("Failed to read %s from %s: %s", key, self.path, str(e))
                raise StorageError(f"Failed to read {self.path}") from e
        value = data.get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> bool:
        with self._lock:
            try:
                try:
                    data = self._read_all()
                except ValueError:
                    logger.warning("Replacing unreadable data file %s", self.path)
                    data = {}
                data[key] = value

                self.path.parent.mkdir(parents=True, exist_ok=True)
                fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, suffix=".tmp")
                try:
                    with os.fdopen(fd, "w", encoding="utf-8") as f:
                        json.dump(data, f, ensure_ascii=False)
                    os.replace(tmp_path, self.path)
                except BaseException:
                    os.unlink(tmp_path)
                    raise
                return True
            except Exception as e:
                logger.error("Failed to write %s to %s: %s", key, self.path, str(e))
                return False


class InMemoryKeyValueStore:
    """Process-local storage, lost on restart."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})
        self._lock = threading.Lock()

    def get(self, key: str) -> str | None:
        with self._lock:
            return self._data.get(key)

    def set(self, key: str, value: str) -> bool:
        with self._lock:
            self._data[key] = value
            return True


def create_store(backend: str, **options: Any) -> KeyValueStore:
    """Build a storage backend by name.

    Args:
        backend: "firestore", "file" or "memory"
        **options: firestore_config for Firestore, path for the file backend

    Returns:
        The configured KeyValueStore

    Raises:
        ValueError: If the backend name is unknown
    """
    if backend == "firestore":
        return FirestoreKeyValueStore(options.get("firestore_config"))
    if backend == "file":
        return JsonFileKeyValueStore(options.get("path", "calorie_coach_data.json"))
    if backend == "memory":
        return InMemoryKeyValueStore()
    raise ValueError(f"Unknown storage backend: {backend}")

"""
storefront/repositories/kv_store.py
String key-value stores the cart is persisted in (localStorage-like: get/set/remove of text).

- MemoryKeyValueStore: process memory, one per session.
- JsonFileKeyValueStore: one JSON object file per session on local disk.
- FirestoreKeyValueStore: one document per session, one field per key.
"""
import json
import logging
import os
from typing import Dict, Optional

from google.cloud import firestore as gcf

logger = logging.getLogger("storefront.kv_store")


class KeyValueStore:
    def get_item(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def set_item(self, key: str, value: str) -> None:
        raise NotImplementedError

    def remove_item(self, key: str) -> None:
        raise NotImplementedError


class MemoryKeyValueStore(KeyValueStore):
    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove_item(self, key: str) -> None:
        self._data.pop(key, None)


class JsonFileKeyValueStore(KeyValueStore):
    """
    Whole store lives in a single JSON object file. A file that is missing or not a JSON
    object reads as an empty store; the next write replaces it.
    """

    def __init__(self, path: str):
        self.path = path

    def _read_all(self) -> Dict[str, str]:
        try:
            with open(self.path, "r", encoding="utf-8") as fh:
                data = json.load(fh)
        except FileNotFoundError:
            return {}
        except ValueError as exc:
            logger.warning("Unreadable store file %s: %s", self.path, exc)
            return {}
        if not isinstance(data, dict):
            return {}
        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def _write_all(self, data: Dict[str, str]) -> None:
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        tmp = f"{self.path}.tmp"
        with open(tmp, "w", encoding="utf-8") as fh:
            json.dump(data, fh, ensure_ascii=False)
        os.replace(tmp, self.path)

    def get_item(self, key: str) -> Optional[str]:
        return self._read_all().get(key)

    def set_item(self, key: str, value: str) -> None:
        data = self._read_all()
        data[key] = value
        self._write_all(data)

    def remove_item(self, key: str) -> None:
        data = self._read_all()
        if key in data:
            del data[key]
            self._write_all(data)


class FirestoreKeyValueStore(KeyValueStore):
    """`<collection>/<document_id>` holds one string field per key."""

    def __init__(self, db, collection: str, document_id: str):
        self._ref = db.collection(collection).document(document_id)

    def get_item(self, key: str) -> Optional[str]:
        snap = self._ref.get()
        if not snap.exists:
            return None
        value = (snap.to_dict() or {}).get(key)
        return value if isinstance(value, str) else None

    def set_item(self, key: str, value: str) -> None:
        self._ref.set({key: value}, merge=True)

    def remove_item(self, key: str) -> None:
        if self._ref.get().exists:
            self._ref.update({key: gcf.DELETE_FIELD})

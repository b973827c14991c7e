"""User-owned documents on top of a flat key-value store.

Layout::

    document:{id}             -> JSON record {id, userId, type, title, data, createdAt, updatedAt}
    user_documents:{ownerId}  -> JSON array of ids, insertion order

The store has no transactions, so a save writes the record before touching
the index and a delete removes the record before touching the index. A crash
in between leaves an orphan record (save) or a dangling index entry (delete);
``list_documents`` skips ids that no longer resolve, so both are harmless.

Index updates are read-modify-write. They are serialized per owner inside
one process; two processes writing the same owner's index at once can still
lose an append or a removal. The HTTP handlers are ``async def`` and call the
repository on the event-loop thread, so the locks only contend when the
repository is driven from worker threads (sync callers, scripts, tests).

Records written by older clients may carry non-string timestamps or miss a
title. Listing skips records without a string ``id``/``type``/``title`` and
treats unusable timestamps as missing, sorting them last.
"""
import json
import logging
import threading
import time
import weakref
from datetime import datetime, timezone
from typing import Any

from resume_builder.exceptions import DocumentAccessError, DocumentNotFoundError
from resume_builder.services.kv_store import KeyValueStore
from resume_builder.utils.security import generate_suffix
from resume_builder.utils.timestamps import parse_iso8601

logger = logging.getLogger("resume_builder.documents")

DOCUMENT_TYPES = ("resume", "cover-letter", "resignation-letter", "other-letter")

SUMMARY_FIELDS = ("id", "type", "title", "createdAt", "updatedAt")

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def document_key(document_id: str) -> str:
    return f"document:{document_id}"


def index_key(owner_id: str) -> str:
    return f"user_documents:{owner_id}"


def generate_document_id(owner_id: str) -> str:
    millis = time.time_ns() // 1_000_000
    return f"doc_{owner_id}_{millis}_{generate_suffix()}"


class OwnerLocks:
    """One lock per owner id, created on first use and dropped once nobody holds a reference."""

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: weakref.WeakValueDictionary[str, threading.Lock] = weakref.WeakValueDictionary()

    def for_owner(self, owner_id: str) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(owner_id)
            if lock is None:
                lock = self._locks[owner_id] = threading.Lock()
            return lock


owner_locks = OwnerLocks()


def _updated_sort_key(summary: dict) -> datetime:
    value = summary.get("updatedAt")
    if not isinstance(value, str):
        return _EPOCH
    try:
        return parse_iso8601(value)
    except ValueError:
        return _EPOCH


def _summarize(record: dict) -> dict | None:
    if not all(isinstance(record.get(field), str) for field in ("id", "type", "title")):
        return None
    summary = {field: record.get(field) for field in SUMMARY_FIELDS}
    for field in ("createdAt", "updatedAt"):
        if not isinstance(summary[field], str):
            summary[field] = None
    return summary


class DocumentRepository:
    def __init__(self, store: KeyValueStore, locks: OwnerLocks | None = None):
        self._store = store
        self._locks = locks or owner_locks

    def _read_json(self, key: str) -> Any:
        raw = self._store.get(key)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Ignoring unparseable value at %s", key)
            return None

    def _read_index(self, owner_id: str) -> list[str]:
        ids = self._read_json(index_key(owner_id))
        return ids if isinstance(ids, list) else []

    def save(
        self,
        owner_id: str,
        doc_type: str,
        title: str,
        payload: Any,
        created_at: str,
        updated_at: str,
    ) -> str:
        if doc_type not in DOCUMENT_TYPES:
            raise ValueError(f"Unknown document type: {doc_type}")

        document_id = generate_document_id(owner_id)
        record = {
            "id": document_id,
            "userId": owner_id,
            "type": doc_type,
            "title": title,
            "data": payload,
            "createdAt": created_at,
            "updatedAt": updated_at,
        }
        self._store.set(document_key(document_id), json.dumps(record))

        with self._locks.for_owner(owner_id):
            ids = self._read_index(owner_id)
            ids.append(document_id)
            self._store.set(index_key(owner_id), json.dumps(ids))

        logger.info("Document saved: %s for user %s", document_id, owner_id)
        return document_id

    def list_documents(self, owner_id: str) -> list[dict]:
        summaries = []
        for document_id in self._read_index(owner_id):
            record = self._read_json(document_key(document_id))
            if not isinstance(record, dict):
                logger.warning("Skipping stale index entry %s for user %s", document_id, owner_id)
                continue
            if record.get("userId") != owner_id:
                logger.warning("Skipping foreign document %s in index of user %s", document_id, owner_id)
                continue
            summary = _summarize(record)
            if summary is None:
                logger.warning("Skipping malformed document %s for user %s", document_id, owner_id)
                continue
            summaries.append(summary)

        # sorted() is stable, so equal timestamps keep index order
        return sorted(summaries, key=_updated_sort_key, reverse=True)

    def get(self, owner_id: str, document_id: str) -> dict:
        record = self._read_json(document_key(document_id))
        if not isinstance(record, dict):
            raise DocumentNotFoundError(document_id)
        if record.get("userId") != owner_id:
            raise DocumentAccessError(document_id, owner_id)
        return record

    def delete(self, owner_id: str, document_id: str) -> None:
        self.get(owner_id, document_id)
        self._store.delete(document_key(document_id))

        with self._locks.for_owner(owner_id):
            ids = self._read_index(owner_id)
            self._store.set(
                index_key(owner_id),
                json.dumps([i for i in ids if i != document_id]),
            )

        logger.info("Document deleted: %s for user %s", document_id, owner_id)

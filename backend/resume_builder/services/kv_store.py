import logging
from typing import Protocol

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from resume_builder.exceptions import StoreError
from resume_builder.models.kv import KeyValue

logger = logging.getLogger("resume_builder.kv_store")


class KeyValueStore(Protocol):
    """String-to-string store with per-key atomic get/set/delete and nothing more."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...


class SqlKeyValueStore:
    """Key-value store over the ``kv_store`` table. Every write commits on its own."""

    def __init__(self, db: Session):
        self._db = db

    def get(self, key: str) -> str | None:
        try:
            row = self._db.get(KeyValue, key)
        except SQLAlchemyError as exc:
            logger.error("kv get failed for %s: %s", key, exc)
            raise StoreError(f"Could not read {key}") from exc
        return row.value if row else None

    def set(self, key: str, value: str) -> None:
        try:
            self._db.merge(KeyValue(key=key, value=value))
            self._db.commit()
        except SQLAlchemyError as exc:
            self._db.rollback()
            logger.error("kv set failed for %s: %s", key, exc)
            raise StoreError(f"Could not write {key}") from exc

    def delete(self, key: str) -> None:
        try:
            self._db.query(KeyValue).filter(KeyValue.key == key).delete()
            self._db.commit()
        except SQLAlchemyError as exc:
            self._db.rollback()
            logger.error("kv delete failed for %s: %s", key, exc)
            raise StoreError(f"Could not delete {key}") from exc


class InMemoryKeyValueStore:
    def __init__(self, data: dict[str, str] | None = None):
        self.data: dict[str, str] = dict(data or {})

    def get(self, key: str) -> str | None:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value

    def delete(self, key: str) -> None:
        self.data.pop(key, None)

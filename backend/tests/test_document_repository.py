import json
from concurrent.futures import ThreadPoolExecutor

import pytest

from resume_builder.exceptions import DocumentAccessError, DocumentNotFoundError
from resume_builder.services.document_repository import (
    DocumentRepository,
    OwnerLocks,
    document_key,
    generate_document_id,
    index_key,
)


def _save(repo, owner="u1", title="My Resume", doc_type="resume", updated="2024-01-01T00:00:00.000Z", payload=None):
    return repo.save(owner, doc_type, title, payload or {"personal": {"fullName": "Ada"}}, "2024-01-01T00:00:00.000Z", updated)


class TestSave:
    def test_save_writes_record_and_index(self, memory_store):
        repo = DocumentRepository(memory_store)
        doc_id = _save(repo)

        record = json.loads(memory_store.get(document_key(doc_id)))
        assert record["userId"] == "u1"
        assert record["type"] == "resume"
        assert record["data"] == {"personal": {"fullName": "Ada"}}
        assert json.loads(memory_store.get(index_key("u1"))) == [doc_id]

    def test_ids_are_unique_and_embed_owner(self, memory_store):
        repo = DocumentRepository(memory_store)
        ids = {_save(repo) for _ in range(50)}
        assert len(ids) == 50
        assert all(i.startswith("doc_u1_") for i in ids)

    def test_generate_document_id_has_random_suffix(self):
        assert generate_document_id("u1") != generate_document_id("u1")

    def test_duplicate_titles_allowed(self, memory_store):
        repo = DocumentRepository(memory_store)
        _save(repo, title="Same")
        _save(repo, title="Same")
        assert [d["title"] for d in repo.list_documents("u1")] == ["Same", "Same"]

    def test_unknown_type_rejected(self, memory_store):
        repo = DocumentRepository(memory_store)
        with pytest.raises(ValueError):
            _save(repo, doc_type="invoice")
        assert memory_store.data == {}

    def test_payload_stored_verbatim(self, memory_store):
        repo = DocumentRepository(memory_store)
        payload = {"nested": [1, 2, {"x": None}], "text": "Grüße"}
        doc_id = _save(repo, payload=payload)
        assert repo.get("u1", doc_id)["data"] == payload


class TestList:
    def test_empty_when_no_index(self, memory_store):
        assert DocumentRepository(memory_store).list_documents("nobody") == []

    def test_summary_excludes_payload(self, memory_store):
        repo = DocumentRepository(memory_store)
        doc_id = _save(repo)
        [summary] = repo.list_documents("u1")
        assert summary == {
            "id": doc_id,
            "type": "resume",
            "title": "My Resume",
            "createdAt": "2024-01-01T00:00:00.000Z",
            "updatedAt": "2024-01-01T00:00:00.000Z",
        }

    def test_ordered_by_updated_at_descending(self, memory_store):
        repo = DocumentRepository(memory_store)
        _save(repo, title="T2", updated="2024-02-01T00:00:00.000Z")
        _save(repo, title="T1", updated="2024-01-01T00:00:00.000Z")
        _save(repo, title="T3", updated="2024-03-01T00:00:00.000Z")
        assert [d["title"] for d in repo.list_documents("u1")] == ["T3", "T2", "T1"]

    def test_ordering_compares_instants_not_strings(self, memory_store):
        repo = DocumentRepository(memory_store)
        _save(repo, title="earlier", updated="2024-01-01T10:00:00+02:00")
        _save(repo, title="later", updated="2024-01-01T09:00:00Z")
        assert [d["title"] for d in repo.list_documents("u1")] == ["later", "earlier"]

    def test_ties_keep_index_order(self, memory_store):
        repo = DocumentRepository(memory_store)
        _save(repo, title="first")
        _save(repo, title="second")
        assert [d["title"] for d in repo.list_documents("u1")] == ["first", "second"]

    def test_stale_index_entries_skipped(self, memory_store):
        repo = DocumentRepository(memory_store)
        kept = _save(repo, title="kept")
        gone = _save(repo, title="gone")
        # simulate a crash between record delete and index rewrite
        memory_store.delete(document_key(gone))
        assert [d["id"] for d in repo.list_documents("u1")] == [kept]

    def test_orphan_record_not_listed(self, memory_store):
        repo = DocumentRepository(memory_store)
        orphan = {"id": "doc_u1_1", "userId": "u1", "type": "resume", "title": "x",
                  "data": {}, "createdAt": None, "updatedAt": None}
        memory_store.set(document_key("doc_u1_1"), json.dumps(orphan))
        assert repo.list_documents("u1") == []

    def test_never_lists_other_owners_documents(self, memory_store):
        repo = DocumentRepository(memory_store)
        for i in range(5):
            _save(repo, owner="u1", title=f"u1-{i}")
            _save(repo, owner="u2", title=f"u2-{i}")
        assert all(d["title"].startswith("u1-") for d in repo.list_documents("u1"))
        assert all(d["title"].startswith("u2-") for d in repo.list_documents("u2"))

    def test_foreign_id_in_index_skipped(self, memory_store):
        repo = DocumentRepository(memory_store)
        foreign = _save(repo, owner="u2")
        memory_store.set(index_key("u1"), json.dumps([foreign]))
        assert repo.list_documents("u1") == []


class TestGetAndDelete:
    def test_get_missing_raises_not_found(self, memory_store):
        with pytest.raises(DocumentNotFoundError):
            DocumentRepository(memory_store).get("u1", "doc_missing")

    def test_get_by_non_owner_raises_access_error(self, memory_store):
        repo = DocumentRepository(memory_store)
        doc_id = _save(repo, owner="u1")
        with pytest.raises(DocumentAccessError):
            repo.get("u2", doc_id)

    def test_delete_removes_record_and_index_entry(self, memory_store):
        repo = DocumentRepository(memory_store)
        keep = _save(repo)
        drop = _save(repo)
        repo.delete("u1", drop)

        assert memory_store.get(document_key(drop)) is None
        assert json.loads(memory_store.get(index_key("u1"))) == [keep]
        with pytest.raises(DocumentNotFoundError):
            repo.get("u1", drop)

    def test_second_delete_raises_not_found(self, memory_store):
        repo = DocumentRepository(memory_store)
        doc_id = _save(repo)
        repo.delete("u1", doc_id)
        with pytest.raises(DocumentNotFoundError):
            repo.delete("u1", doc_id)

    def test_delete_by_non_owner_leaves_document(self, memory_store):
        repo = DocumentRepository(memory_store)
        doc_id = _save(repo, owner="u1")
        with pytest.raises(DocumentAccessError):
            repo.delete("u2", doc_id)
        assert repo.get("u1", doc_id)["id"] == doc_id

    def test_deleted_id_never_reappears(self, memory_store):
        repo = DocumentRepository(memory_store)
        doc_id = _save(repo)
        repo.delete("u1", doc_id)
        _save(repo)
        assert doc_id not in [d["id"] for d in repo.list_documents("u1")]


class TestLegacyRecords:
    def _plant(self, store, owner, record):
        store.set(document_key(record["id"]), json.dumps(record))
        ids = json.loads(store.get(index_key(owner)) or "[]")
        store.set(index_key(owner), json.dumps(ids + [record["id"]]))

    def test_numeric_updated_at_sorts_last(self, memory_store):
        repo = DocumentRepository(memory_store)
        valid = _save(repo, title="valid")
        self._plant(memory_store, "u1", {"id": "legacy", "userId": "u1", "type": "resume",
                                         "title": "old", "updatedAt": 1700000000000})

        docs = repo.list_documents("u1")
        assert [d["id"] for d in docs] == [valid, "legacy"]
        assert docs[1]["updatedAt"] is None

    def test_unparseable_updated_at_sorts_last(self, memory_store):
        repo = DocumentRepository(memory_store)
        self._plant(memory_store, "u1", {"id": "legacy", "userId": "u1", "type": "resume",
                                         "title": "old", "updatedAt": "last tuesday"})
        valid = _save(repo, title="valid")
        assert [d["id"] for d in repo.list_documents("u1")] == [valid, "legacy"]

    def test_record_without_title_skipped(self, memory_store):
        repo = DocumentRepository(memory_store)
        valid = _save(repo)
        self._plant(memory_store, "u1", {"id": "untitled", "userId": "u1", "type": "resume",
                                         "updatedAt": "2024-05-01T00:00:00Z"})
        assert [d["id"] for d in repo.list_documents("u1")] == [valid]


class TestOwnerLocks:
    def test_locks_released_after_use(self, memory_store):
        locks = OwnerLocks()
        repo = DocumentRepository(memory_store, locks=locks)
        for i in range(100):
            doc_id = _save(repo, owner=f"owner-{i}")
            repo.delete(f"owner-{i}", doc_id)
        assert len(locks._locks) == 0

    def test_same_owner_shares_lock_while_held(self):
        locks = OwnerLocks()
        lock = locks.for_owner("u1")
        assert locks.for_owner("u1") is lock
        assert locks.for_owner("u2") is not lock

    def test_concurrent_saves_keep_every_id(self, memory_store):
        repo = DocumentRepository(memory_store, locks=OwnerLocks())
        with ThreadPoolExecutor(max_workers=8) as pool:
            ids = list(pool.map(lambda i: _save(repo, title=f"t{i}"), range(40)))
        assert sorted(json.loads(memory_store.get(index_key("u1")))) == sorted(ids)

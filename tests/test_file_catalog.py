# Copyright (c) 2024 File-Catalog Contributors
# SPDX-License-Identifier: MIT

"""Tests for the FileCatalog facade.

Covers the save/delete lifecycle: a file is kept exactly as long as at
least one relation references it.
"""

import sqlite3
from uuid import uuid4

import pytest

from file_catalog.config import RELATIONS_RECORD_NAME, RelationIndexConfig
from file_catalog.domain_models import RelationType
from file_catalog.errors import PersistenceError
from file_catalog.catalog import FileCatalog
from file_catalog.relations.relation_index import RelationIndex
from file_catalog.relations.relation_record import RelationRecord
from file_catalog.storage.file_blob_store import FileSystemBlobStore
from file_catalog.storage.memory_stores import InMemoryBlobStore, InMemoryRecordStore
from file_catalog.storage.sqlite_record_store import SQLiteRecordStore
from tests import make_document, make_file

DRAWING = RelationType.DRAWING
PHOTO = RelationType.INSPECTION_PHOTO


class FailingBlobStore(InMemoryBlobStore):
    """Blob store whose writes fail"""

    def put(self, key, data):
        raise PersistenceError("read-only filesystem", key=str(key))


class FailingRecordStore(InMemoryRecordStore):
    """Record store whose writes fail"""

    def put(self, name, data):
        raise PersistenceError("disk full", key=name)


class LockedRecordStore(InMemoryRecordStore):
    """Record store whose reads fail while locked"""

    locked = False

    def get(self, name):
        if self.locked:
            raise PersistenceError("database is locked", key=name)
        return super().get(name)


class LockedBlobStore(InMemoryBlobStore):
    """Blob store whose reads fail while locked"""

    locked = False

    def get(self, key):
        if self.locked:
            raise PersistenceError("permission denied", key=str(key))
        return super().get(key)


def _ids(files):
    return [f.id for f in files]


def _persisted(record_store):
    return RelationRecord.from_bytes(record_store.get(RELATIONS_RECORD_NAME)).relations


class TestLifecycle:
    """Add and delete scenarios"""

    def test_add_then_delete_single_drawing(self, catalog, blob_store, entity_id):
        file = make_file()

        catalog.add([file], DRAWING, entity_id)

        assert _ids(catalog.get_files(DRAWING, entity_id)) == [file.id]
        assert blob_store.get(file.id) is not None

        catalog.delete_by_files([file], DRAWING, entity_id)

        assert catalog.get_files(DRAWING, entity_id) == []
        assert blob_store.get(file.id) is None
        assert catalog.get_file_by_id(file.id) is None

    def test_two_tags_same_entity(self, catalog, blob_store, entity_id):
        file = make_file()
        catalog.add([file], PHOTO, entity_id)
        catalog.add([file], DRAWING, entity_id)

        assert _ids(catalog.get_files(PHOTO, entity_id)) == [file.id]
        assert _ids(catalog.get_files(DRAWING, entity_id)) == [file.id]

        catalog.delete_by_files([file], PHOTO, entity_id)

        assert catalog.get_files(PHOTO, entity_id) == []
        assert _ids(catalog.get_files(DRAWING, entity_id)) == [file.id]
        assert blob_store.get(file.id) is not None

    def test_add_is_idempotent(self, catalog, record_store, entity_id):
        files = [make_file(), make_file()]

        first = catalog.add(files, DRAWING, entity_id)
        second = catalog.add(files, DRAWING, entity_id)

        assert first.attached == 2 and first.blobs_written == 2
        assert second.attached == 0 and second.blobs_written == 0
        assert sorted(_ids(catalog.get_files(DRAWING, entity_id))) == sorted(_ids(files))
        assert all(len(seq) == 1 for seq in _persisted(record_store).values())

    def test_merge_by_document(self, catalog, blob_store, entity_id, other_entity_id):
        doc = make_document()
        original = make_file(doc=doc)
        refetched = make_file(doc=doc, payload=b"same document, new local id")
        catalog.add([original], PHOTO, entity_id)

        stats = catalog.add([refetched], DRAWING, other_entity_id)

        assert stats.blobs_written == 0
        assert _ids(catalog.get_files(DRAWING, other_entity_id)) == [original.id]
        assert blob_store.get(refetched.id) is None
        assert len(catalog.open_index()) == 1

    def test_same_document_twice_in_one_batch(self, catalog, blob_store, entity_id):
        doc = make_document()
        first, second = make_file(doc=doc), make_file(doc=doc)

        catalog.add([first, second], DRAWING, entity_id)

        assert blob_store.keys() == [first.id]
        assert _ids(catalog.get_files(DRAWING, entity_id)) == [first.id]

    def test_delete_keeps_file_tagged_for_other_entity(self, catalog, blob_store,
                                                       entity_id, other_entity_id):
        file = make_file()
        catalog.add([file], DRAWING, entity_id)
        catalog.add([file], DRAWING, other_entity_id)

        catalog.delete_by_files([file], DRAWING, entity_id)

        assert _ids(catalog.get_files(DRAWING, other_entity_id)) == [file.id]
        assert blob_store.get(file.id) is not None


class TestDeletes:
    """Delete variants"""

    def test_delete_by_docs(self, catalog, blob_store, entity_id):
        file = make_file()
        catalog.add([file], DRAWING, entity_id)

        stats = catalog.delete_by_docs([file.doc], DRAWING, entity_id)

        assert stats.detached == 1 and stats.blobs_deleted == 1
        assert blob_store.get(file.id) is None
        assert catalog.get_file_by_doc_id(file.doc.id) is None

    def test_delete_by_files_matches_document_when_id_differs(self, catalog, blob_store, entity_id):
        doc = make_document()
        stored = make_file(doc=doc)
        catalog.add([stored], DRAWING, entity_id)

        catalog.delete_by_files([make_file(doc=doc)], DRAWING, entity_id)

        assert blob_store.get(stored.id) is None
        assert len(catalog.open_index()) == 0

    def test_delete_missing_relation_is_noop(self, catalog, blob_store, entity_id, other_entity_id):
        file = make_file()
        catalog.add([file], DRAWING, entity_id)

        stats = catalog.delete_by_files([file], PHOTO, other_entity_id)

        assert not stats.changed
        assert blob_store.get(file.id) is not None

    def test_delete_all_files(self, catalog, blob_store, entity_id, other_entity_id):
        doomed = [make_file(), make_file()]
        shared = make_file()
        catalog.add(doomed + [shared], RelationType.PROJECT_DOCUMENT, entity_id)
        catalog.add([shared], RelationType.PROJECT_DOCUMENT, other_entity_id)

        stats = catalog.delete_all_files(RelationType.PROJECT_DOCUMENT, entity_id)

        assert stats.detached == 3 and stats.blobs_deleted == 2
        assert catalog.get_files(RelationType.PROJECT_DOCUMENT, entity_id) == []
        assert blob_store.keys() == [shared.id]

    def test_empty_batch_still_persists(self, catalog, record_store, entity_id):
        catalog.delete_by_docs([], DRAWING, entity_id)
        assert _persisted(record_store) == {}


class TestReads:
    """Read paths degrade to None/skip instead of raising"""

    def test_get_file_by_id_round_trips_payload(self, catalog, entity_id):
        file = make_file(payload=b"\x00\xff binary")
        catalog.add([file], DRAWING, entity_id)

        assert catalog.get_file_by_id(file.id) == file

    def test_get_file_by_doc_id(self, catalog, entity_id):
        file = make_file()
        catalog.add([file], DRAWING, entity_id)

        assert catalog.get_file_by_doc_id(file.doc.id) == file
        assert catalog.get_file_by_doc_id(uuid4()) is None

    def test_unknown_file_id(self, catalog):
        assert catalog.get_file_by_id(uuid4()) is None

    def test_corrupt_blob_is_unavailable(self, catalog, blob_store, entity_id):
        file = make_file()
        catalog.add([file], DRAWING, entity_id)
        blob_store.put(file.id, b"corrupted")

        assert catalog.get_file_by_id(file.id) is None
        assert catalog.get_file_by_doc_id(file.doc.id) is None

    def test_dangling_entry_skipped_in_get_files(self, catalog, blob_store, entity_id):
        kept, lost = make_file(), make_file()
        catalog.add([kept, lost], DRAWING, entity_id)
        blob_store.delete(lost.id)

        assert _ids(catalog.get_files(DRAWING, entity_id)) == [kept.id]

    def test_corrupt_index_reads_as_empty(self, catalog, record_store, entity_id):
        record_store.put(RELATIONS_RECORD_NAME, b"not a record")
        assert catalog.get_files(DRAWING, entity_id) == []

    def test_unreadable_index_reads_as_empty(self, blob_store, entity_id):
        record_store = LockedRecordStore()
        catalog = FileCatalog(blob_store, record_store)
        file = make_file()
        catalog.add([file], DRAWING, entity_id)

        record_store.locked = True

        assert catalog.get_files(DRAWING, entity_id) == []
        assert catalog.get_file_by_doc_id(file.doc.id) is None

    def test_unreadable_blob_is_skipped(self, record_store, entity_id):
        blob_store = LockedBlobStore()
        catalog = FileCatalog(blob_store, record_store)
        file = make_file()
        catalog.add([file], DRAWING, entity_id)

        blob_store.locked = True

        assert catalog.get_file_by_id(file.id) is None
        assert catalog.get_files(DRAWING, entity_id) == []


class TestFailures:
    """Write-path errors surface to the caller"""

    def test_blob_write_failure_leaves_index_untouched(self, record_store, entity_id):
        catalog = FileCatalog(FailingBlobStore(), record_store)

        with pytest.raises(PersistenceError):
            catalog.add([make_file()], DRAWING, entity_id)
        assert record_store.get(RELATIONS_RECORD_NAME) is None

    def test_index_write_failure_does_not_roll_back_blobs(self, blob_store, entity_id):
        catalog = FileCatalog(blob_store, FailingRecordStore())
        file = make_file()

        with pytest.raises(PersistenceError):
            catalog.add([file], DRAWING, entity_id)
        assert blob_store.get(file.id) is not None

    def test_unreadable_index_blocks_mutations(self, blob_store, entity_id):
        record_store = LockedRecordStore()
        catalog = FileCatalog(blob_store, record_store)
        kept = make_file()
        catalog.add([kept], DRAWING, entity_id)

        record_store.locked = True
        with pytest.raises(PersistenceError):
            catalog.add([make_file()], DRAWING, entity_id)
        with pytest.raises(PersistenceError):
            catalog.delete_by_files([kept], DRAWING, entity_id)
        with pytest.raises(PersistenceError):
            catalog.delete_by_docs([kept.doc], DRAWING, entity_id)
        with pytest.raises(PersistenceError):
            catalog.delete_all_files(DRAWING, entity_id)
        record_store.locked = False

        assert _ids(catalog.get_files(DRAWING, entity_id)) == [kept.id]
        assert blob_store.keys() == [kept.id]

    def test_locked_database_does_not_overwrite_relations(self, files_dir, records_path,
                                                          monkeypatch):
        record_store = SQLiteRecordStore(records_path)
        catalog = FileCatalog(FileSystemBlobStore(files_dir), record_store)
        first_entity, second_entity = uuid4(), uuid4()
        kept = make_file()
        catalog.add([kept], DRAWING, first_entity)

        connect = record_store._get_connection
        calls = {'count': 0}

        def locked_once():
            calls['count'] += 1
            if calls['count'] == 1:
                raise sqlite3.OperationalError("database is locked")
            return connect()

        monkeypatch.setattr(record_store, "_get_connection", locked_once)
        with pytest.raises(PersistenceError, match="database is locked"):
            catalog.add([make_file()], DRAWING, second_entity)

        assert catalog.get_files(DRAWING, first_entity) == [kept]
        assert catalog.get_files(DRAWING, second_entity) == []


class TestConfiguration:
    """Relation index settings flow through the facade"""

    def test_record_name_from_config(self, blob_store, record_store, entity_id):
        catalog = FileCatalog(blob_store, record_store,
                              relations_config=RelationIndexConfig(record_name="Tags"))
        catalog.add([make_file()], DRAWING, entity_id)

        assert "Tags" in record_store.records
        assert isinstance(catalog.open_index(), RelationIndex)
        assert catalog.open_index().record_name == "Tags"

# Copyright (c) 2024 File-Catalog Contributors
# SPDX-License-Identifier: MIT

"""
File catalog facade.

Public API over the relation index and the blob store. Every call loads
the whole index, mutates an in-memory copy and persists it once, so no
partial index update is ever observable.

Not safe for concurrent use: two overlapping mutations race on the index
record and the later persist silently drops the earlier one's changes.
Callers sharing an instance across threads must wrap each call in their
own lock.

Usage:
    catalog = FileCatalog(blob_store, record_store)
    catalog.add([file], RelationType.DRAWING, inspection_id)
    photos = catalog.get_files(RelationType.INSPECTION_PHOTO, inspection_id)
    catalog.delete_all_files(RelationType.PROJECT_DOCUMENT, project_id)
"""
import logging
from typing import Iterable, List, Optional
from uuid import UUID

from file_catalog.config import RelationIndexConfig
from file_catalog.domain_models import Document, File, RelationType
from file_catalog.errors import DecodeError, PersistenceError
from file_catalog.relations.relation_index import RelationIndex
from file_catalog.storage.interfaces import BlobStore, RecordStore
from file_catalog.value_objects import CatalogChangeStats, DetachResult

logger = logging.getLogger(__name__)


class FileCatalog:
    """Entity- and document-level access to locally stored files

    Owns neither the relations nor the payloads; it orchestrates the
    relation index (kept in the record store) and the blob store.
    """

    def __init__(self, blob_store: BlobStore, record_store: RecordStore,
                 relations_config: Optional[RelationIndexConfig] = None):
        self.blob_store = blob_store
        self.record_store = record_store
        self.relations_config = relations_config or RelationIndexConfig()

    def open_index(self) -> RelationIndex:
        """Fresh in-memory copy of the persisted relation index"""
        return RelationIndex(
            self.record_store,
            record_name=self.relations_config.record_name,
            warn_on_duplicates=self.relations_config.warn_on_duplicates
        )

    # Reads

    def get_file_by_doc_id(self, doc_id: UUID) -> Optional[File]:
        """File holding the external document, or None

        An unreadable record store also yields None.
        """
        try:
            file_id = self.open_index().find_file_id(doc_id)
        except PersistenceError as e:
            logger.warning(f"Relation index unavailable, no file for document {doc_id}: {e}")
            return None
        if file_id is None:
            return None
        return self._load_file(file_id)

    def get_file_by_id(self, file_id: UUID) -> Optional[File]:
        """File stored under file_id, or None if missing or corrupt"""
        return self._load_file(file_id)

    def get_files(self, relation_type: RelationType, entity_id: UUID) -> List[File]:
        """Files tagged with (relation_type, entity_id), in index order

        Entries whose blob cannot be loaded are skipped. An unreadable
        record store yields no files.
        """
        try:
            return self._matching_files(self.open_index(), relation_type, entity_id)
        except PersistenceError as e:
            logger.warning(f"Relation index unavailable, no {relation_type.value} files: {e}")
            return []

    def _matching_files(self, index: RelationIndex, relation_type: RelationType,
                        entity_id: UUID) -> List[File]:
        files = []
        for file_id in index.files_matching(relation_type, entity_id):
            file = self._load_file(file_id)
            if file is not None:
                files.append(file)
        return files

    def _load_file(self, file_id: UUID) -> Optional[File]:
        try:
            data = self.blob_store.get(file_id)
        except PersistenceError as e:
            logger.warning(f"File {file_id} is unavailable: {e}")
            return None
        if data is None:
            logger.debug(f"No blob stored for file {file_id}")
            return None
        try:
            return File.from_bytes(data)
        except DecodeError as e:
            logger.warning(f"File {file_id} is unavailable: {e}")
            return None

    # Mutations

    def add(self, files: Iterable[File], relation_type: RelationType,
            entity_id: UUID) -> CatalogChangeStats:
        """Tag files with (relation_type, entity_id), storing new payloads

        A file whose document is not yet held by any entry has its blob
        written before the entry is created. All attaches share one index
        copy persisted once at the end; blob writes are not rolled back if
        a later step fails.

        Raises:
            PersistenceError: If a blob or the index write fails
        """
        index = self.open_index()
        stats = CatalogChangeStats()

        for file in files:
            if index.resolve_target(file.id, file.doc.id) is None:
                self.blob_store.put(file.id, file.to_bytes())
            result = index.attach(file.id, file.doc.id, entity_id, relation_type)
            stats = stats.add_attach(result)

        index.persist()
        logger.info(f"Added {relation_type.value} files for entity {entity_id}: {stats}")
        return stats

    def delete_by_docs(self, docs: Iterable[Document], relation_type: RelationType,
                       entity_id: UUID) -> CatalogChangeStats:
        """Untag every file holding one of docs; delete files left untagged

        Raises:
            PersistenceError: If a blob delete or the index write fails
        """
        index = self.open_index()
        stats = CatalogChangeStats()

        for doc in docs:
            results = index.detach(relation_type, entity_id, doc_id=doc.id)
            stats = stats.add(self._drop_emptied(results))

        index.persist()
        logger.info(f"Deleted {relation_type.value} documents for entity {entity_id}: {stats}")
        return stats

    def delete_by_files(self, files: Iterable[File], relation_type: RelationType,
                        entity_id: UUID) -> CatalogChangeStats:
        """Like delete_by_docs, matching each file by its id or its document

        Raises:
            PersistenceError: If a blob delete or the index write fails
        """
        index = self.open_index()
        stats = CatalogChangeStats()

        for file in files:
            results = index.detach(relation_type, entity_id, file_id=file.id, doc_id=file.doc.id)
            stats = stats.add(self._drop_emptied(results))

        index.persist()
        logger.info(f"Deleted {relation_type.value} files for entity {entity_id}: {stats}")
        return stats

    def delete_all_files(self, relation_type: RelationType,
                         entity_id: UUID) -> CatalogChangeStats:
        """Remove (relation_type, entity_id) from every file carrying it

        Raises:
            PersistenceError: If the index cannot be read or written
        """
        files = self._matching_files(self.open_index(), relation_type, entity_id)
        return self.delete_by_files(files, relation_type, entity_id)

    def _drop_emptied(self, results: List[DetachResult]) -> CatalogChangeStats:
        """Delete blobs of entries the index just removed"""
        stats = CatalogChangeStats()
        for result in results:
            if result.emptied:
                self.blob_store.delete(result.file_id)
            stats = stats.add_detach(result)
        return stats

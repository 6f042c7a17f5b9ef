# Copyright (c) 2024 File-Catalog Contributors
# SPDX-License-Identifier: MIT

"""Relation index

Maps each stored file id to the relations that keep it alive. The index is
read from the record store once, mutated in memory and written back whole
by persist(). It never writes partially and never merges with state that
another writer persisted in the meantime.

Invariants kept for every state the index exposes:
- every key maps to a non-empty relation sequence
- a (doc_id, entity_id, type) relation appears at most once per file
"""
import logging
from typing import Dict, List, Optional, Tuple
from uuid import UUID

from file_catalog.config import RELATIONS_RECORD_NAME
from file_catalog.domain_models import Relation, RelationType
from file_catalog.errors import DecodeError
from file_catalog.relations.relation_record import RelationRecord
from file_catalog.storage.interfaces import RecordStore
from file_catalog.value_objects import AttachResult, DetachResult

logger = logging.getLogger(__name__)


class RelationIndex:
    """In-memory copy of the persisted relation index

    Example:
        index = RelationIndex(record_store)
        index.attach(file.id, file.doc.id, inspection_id, RelationType.DRAWING)
        index.persist()
    """

    def __init__(self, record_store: RecordStore,
                 record_name: str = RELATIONS_RECORD_NAME,
                 warn_on_duplicates: bool = True):
        self._record_store = record_store
        self.record_name = record_name
        self._warn_on_duplicates = warn_on_duplicates
        self._relations: Optional[Dict[UUID, List[Relation]]] = None

    @property
    def relations(self) -> Dict[UUID, List[Relation]]:
        """Live mapping, loaded on first access"""
        if self._relations is None:
            self._relations = self._load()
        return self._relations

    def _load(self) -> Dict[UUID, List[Relation]]:
        """Read the record; missing or undecodable means an empty index

        Raises:
            PersistenceError: If the record store cannot be read
        """
        data = self._record_store.get(self.record_name)
        if data is None:
            return {}

        try:
            record = RelationRecord.from_bytes(data)
        except DecodeError as e:
            logger.warning(f"Ignoring unreadable '{self.record_name}' record, starting empty: {e}")
            return {}

        relations = {}
        dropped = 0
        for file_id, sequence in record.relations.items():
            if not sequence:
                dropped += 1
                continue
            relations[file_id] = list(sequence)
        if dropped:
            logger.warning(f"Dropped {dropped} empty entries from '{self.record_name}' record")
        logger.debug(f"Loaded relation index with {len(relations)} files")
        return relations

    def reload(self) -> None:
        """Discard in-memory changes and read the record again"""
        self._relations = self._load()

    def persist(self) -> None:
        """Write the whole index as one record, replacing the previous one

        Raises:
            PersistenceError: If the record store write fails. The in-memory
                state is kept as is.
        """
        record = RelationRecord(relations={
            file_id: sequence for file_id, sequence in self.relations.items() if sequence
        })
        self._record_store.put(self.record_name, record.to_bytes())
        logger.debug(f"Persisted relation index with {len(record.relations)} files")

    # Queries

    def all_relations(self) -> Dict[UUID, Tuple[Relation, ...]]:
        """Snapshot of the index; mutating it does not affect the index"""
        return {file_id: tuple(sequence) for file_id, sequence in self.relations.items()}

    def find_file_id(self, doc_id: UUID) -> Optional[UUID]:
        """First file, in index order, holding a relation for doc_id

        Several files can hold the same document after duplicate ingestion.
        The first one in index order wins; that order is insertion order
        and survives a persist/load round trip.
        """
        holders = self._files_holding(doc_id)
        if not holders:
            return None
        if len(holders) > 1 and self._warn_on_duplicates:
            logger.warning(
                f"Document {doc_id} is held by {len(holders)} files, using {holders[0]}"
            )
        return holders[0]

    def files_matching(self, relation_type: RelationType, entity_id: UUID) -> List[UUID]:
        """Files carrying at least one (relation_type, entity_id) relation"""
        return [
            file_id for file_id, sequence in self.relations.items()
            if any(relation.matches(relation_type, entity_id) for relation in sequence)
        ]

    def duplicate_documents(self) -> Dict[UUID, List[UUID]]:
        """Doc ids held by more than one file, with the files holding them"""
        holders: Dict[UUID, List[UUID]] = {}
        for file_id, sequence in self.relations.items():
            for doc_id in dict.fromkeys(relation.doc_id for relation in sequence):
                holders.setdefault(doc_id, []).append(file_id)
        return {doc_id: files for doc_id, files in holders.items() if len(files) > 1}

    def resolve_target(self, file_id: UUID, doc_id: UUID) -> Optional[UUID]:
        """Entry that attach() would extend, or None if it would create one"""
        if file_id in self.relations:
            return file_id
        holders = self._files_holding(doc_id)
        return holders[0] if holders else None

    def _files_holding(self, doc_id: UUID) -> List[UUID]:
        return [
            file_id for file_id, sequence in self.relations.items()
            if any(relation.doc_id == doc_id for relation in sequence)
        ]

    # Mutations

    def attach(self, file_id: UUID, doc_id: UUID, entity_id: UUID,
               relation_type: RelationType) -> AttachResult:
        """Tag a file with a relation

        Extends file_id's entry if it exists, otherwise the entry of any
        file already holding doc_id, so one document keeps one file even
        when re-submitted under another local id. Only when neither exists
        is a new entry created; the caller must have stored the blob.
        """
        relation = Relation(doc_id=doc_id, entity_id=entity_id, type=relation_type)
        target = self.resolve_target(file_id, doc_id)

        if target is None:
            self.relations[file_id] = [relation]
            logger.debug(f"New index entry {file_id} for document {doc_id}")
            return AttachResult.new_entry(file_id)

        sequence = self.relations[target]
        if relation in sequence:
            return AttachResult.unchanged(target)
        sequence.append(relation)
        return AttachResult.extended(target)

    def detach(self, relation_type: RelationType, entity_id: UUID,
               file_id: Optional[UUID] = None,
               doc_id: Optional[UUID] = None) -> List[DetachResult]:
        """Remove every (relation_type, entity_id) relation from matching files

        A file matches when its key equals file_id or any of its relations
        carries doc_id. Entries left empty are removed from the index; the
        caller deletes their blobs. Detaching a relation that is not there
        is a no-op for that file.
        """
        if file_id is None and doc_id is None:
            raise ValueError("detach needs a file_id or a doc_id")

        results = []
        for key in list(self.relations):
            sequence = self.relations[key]
            if not self._entry_matches(key, sequence, file_id, doc_id):
                continue

            kept = [relation for relation in sequence
                    if not relation.matches(relation_type, entity_id)]
            if kept:
                self.relations[key] = kept
            else:
                del self.relations[key]
                logger.debug(f"Index entry {key} emptied")
            results.append(DetachResult(
                file_id=key,
                removed=len(sequence) - len(kept),
                emptied=not kept
            ))
        return results

    def discard(self, file_id: UUID) -> bool:
        """Drop an entry with all its relations. Returns whether it existed."""
        return self.relations.pop(file_id, None) is not None

    @staticmethod
    def _entry_matches(key: UUID, sequence: List[Relation],
                       file_id: Optional[UUID], doc_id: Optional[UUID]) -> bool:
        if file_id is not None and key == file_id:
            return True
        return doc_id is not None and any(relation.doc_id == doc_id for relation in sequence)

    def __len__(self) -> int:
        return len(self.relations)

    def __contains__(self, file_id: UUID) -> bool:
        return file_id in self.relations

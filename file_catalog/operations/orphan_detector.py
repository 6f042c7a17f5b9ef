# Copyright (c) 2024 File-Catalog Contributors
# SPDX-License-Identifier: MIT

"""Detects index entries and blobs that no longer belong together

Two kinds of orphans:
1. Dangling entries - index keys whose blob is missing or undecodable
2. Orphan blobs - stored blobs that no index entry references
"""
from typing import List
from uuid import UUID

from file_catalog.domain_models import File
from file_catalog.errors import DecodeError
from file_catalog.relations.relation_index import RelationIndex
from file_catalog.storage.interfaces import BlobStore


class OrphanDetector:
    """Read-only orphan detection with injectable index and blob store"""

    def __init__(self, index: RelationIndex, blob_store: BlobStore):
        self.index = index
        self.blob_store = blob_store

    def find_dangling_entries(self) -> List[UUID]:
        """Index keys, in index order, whose blob cannot be loaded"""
        return [
            file_id for file_id in self.index.all_relations()
            if not self._blob_loads(file_id)
        ]

    def find_orphan_blobs(self) -> List[UUID]:
        """Blob keys absent from the index"""
        return [key for key in self.blob_store.keys() if key not in self.index]

    def _blob_loads(self, file_id: UUID) -> bool:
        data = self.blob_store.get(file_id)
        if data is None:
            return False
        try:
            File.from_bytes(data)
        except DecodeError:
            return False
        return True

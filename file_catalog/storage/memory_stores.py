# Copyright (c) 2024 File-Catalog Contributors
# SPDX-License-Identifier: MIT

"""In-process store implementations

Used by the 'memory' backend and as backend-agnostic test doubles.
"""
from typing import Dict, List, Optional
from uuid import UUID

from file_catalog.storage.interfaces import BlobStore, RecordStore


class InMemoryBlobStore(BlobStore):
    """Dict-backed blob store"""

    def __init__(self):
        self.blobs: Dict[UUID, bytes] = {}

    def get(self, key: UUID) -> Optional[bytes]:
        return self.blobs.get(key)

    def put(self, key: UUID, data: bytes) -> None:
        self.blobs[key] = bytes(data)

    def delete(self, key: UUID) -> None:
        self.blobs.pop(key, None)

    def keys(self) -> List[UUID]:
        return list(self.blobs)


class InMemoryRecordStore(RecordStore):
    """Dict-backed record store"""

    def __init__(self):
        self.records: Dict[str, bytes] = {}

    def get(self, name: str) -> Optional[bytes]:
        return self.records.get(name)

    def put(self, name: str, data: bytes) -> None:
        self.records[name] = bytes(data)

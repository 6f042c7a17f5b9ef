# Copyright (c) 2024 File-Catalog Contributors
# SPDX-License-Identifier: MIT

"""
Storage abstraction layer interfaces.

These ABCs define the contract every persistence backend follows:
- get returns None when nothing is stored (NotFound is not an error) and
  raises PersistenceError when the store itself cannot be read
- put and delete raise PersistenceError when the underlying I/O fails
- deleting a missing key succeeds silently

Usage:
    from file_catalog.storage.storage_factory import StorageFactory

    blobs = StorageFactory.create_blob_store(config.storage)
"""
from abc import ABC, abstractmethod
from typing import List, Optional
from uuid import UUID


class BlobStore(ABC):
    """Byte payloads keyed by file id.

    Key-to-location mapping (directory, extension) is the backend's concern.
    """

    @abstractmethod
    def get(self, key: UUID) -> Optional[bytes]:
        """Return stored bytes, or None if the key is absent

        Raises:
            PersistenceError: If the store cannot be read
        """

    @abstractmethod
    def put(self, key: UUID, data: bytes) -> None:
        """Store bytes under key, replacing any previous value

        Raises:
            PersistenceError: If the write fails
        """

    @abstractmethod
    def delete(self, key: UUID) -> None:
        """Remove key; a missing key is not an error

        Raises:
            PersistenceError: If the delete fails
        """

    @abstractmethod
    def keys(self) -> List[UUID]:
        """List every stored key"""

    def exists(self, key: UUID) -> bool:
        return self.get(key) is not None


class RecordStore(ABC):
    """Single serialized records under fixed names. No versioning."""

    @abstractmethod
    def get(self, name: str) -> Optional[bytes]:
        """Return the record, or None if it was never written

        Raises:
            PersistenceError: If the store cannot be read
        """

    @abstractmethod
    def put(self, name: str, data: bytes) -> None:
        """Replace the record entirely (last writer wins)

        Raises:
            PersistenceError: If the write fails
        """

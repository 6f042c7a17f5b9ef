# Copyright (c) 2024 File-Catalog Contributors
# SPDX-License-Identifier: MIT

"""
Value objects for the file catalog.

Principles:
- Immutable data structures
- Named results instead of bare tuples and flags
"""

from dataclasses import dataclass
from uuid import UUID

@dataclass(frozen=True)
class AttachResult:
    """Outcome of attaching one relation to the index.

    file_id is the entry that now holds the relation, which differs from
    the requested id when the document was already held by another file.
    """
    file_id: UUID
    created: bool
    added: bool

    @classmethod
    def new_entry(cls, file_id: UUID) -> 'AttachResult':
        """Relation stored under a freshly created index entry."""
        return cls(file_id=file_id, created=True, added=True)

    @classmethod
    def extended(cls, file_id: UUID) -> 'AttachResult':
        """Relation appended to an existing entry."""
        return cls(file_id=file_id, created=False, added=True)

    @classmethod
    def unchanged(cls, file_id: UUID) -> 'AttachResult':
        """Identical relation already present; nothing changed."""
        return cls(file_id=file_id, created=False, added=False)

@dataclass(frozen=True)
class DetachResult:
    """Outcome of detaching a relation from one index entry."""
    file_id: UUID
    removed: int
    emptied: bool

@dataclass(frozen=True)
class CatalogChangeStats:
    """Immutable summary of one facade mutation."""
    attached: int = 0
    blobs_written: int = 0
    detached: int = 0
    blobs_deleted: int = 0

    def add_attach(self, result: AttachResult) -> 'CatalogChangeStats':
        """Return new stats with an attach outcome counted."""
        return CatalogChangeStats(
            attached=self.attached + (1 if result.added else 0),
            blobs_written=self.blobs_written + (1 if result.created else 0),
            detached=self.detached,
            blobs_deleted=self.blobs_deleted
        )

    def add_detach(self, result: DetachResult) -> 'CatalogChangeStats':
        """Return new stats with a detach outcome counted."""
        return CatalogChangeStats(
            attached=self.attached,
            blobs_written=self.blobs_written,
            detached=self.detached + result.removed,
            blobs_deleted=self.blobs_deleted + (1 if result.emptied else 0)
        )

    def add(self, other: 'CatalogChangeStats') -> 'CatalogChangeStats':
        """Combine two stats objects."""
        return CatalogChangeStats(
            attached=self.attached + other.attached,
            blobs_written=self.blobs_written + other.blobs_written,
            detached=self.detached + other.detached,
            blobs_deleted=self.blobs_deleted + other.blobs_deleted
        )

    @property
    def changed(self) -> bool:
        return any((self.attached, self.blobs_written, self.detached, self.blobs_deleted))

    def __str__(self) -> str:
        return (f"{self.attached} attached, {self.blobs_written} written, "
                f"{self.detached} detached, {self.blobs_deleted} deleted")

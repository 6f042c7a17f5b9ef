# Copyright (c) 2024 File-Catalog Contributors
# SPDX-License-Identifier: MIT

"""Orphan data cleanup service

Cleans up orphan data from the catalog:
1. Dangling entries - dropped from the index, along with any corrupt blob
2. Orphan blobs - deleted from the blob store

The index is persisted once at the end, like every facade mutation.
"""
import logging
from dataclasses import dataclass
from typing import Optional

from file_catalog.config import RelationIndexConfig
from file_catalog.operations.orphan_detector import OrphanDetector
from file_catalog.relations.relation_index import RelationIndex
from file_catalog.storage.interfaces import BlobStore, RecordStore

logger = logging.getLogger(__name__)


@dataclass
class OrphanCleanupResult:
    """Result of orphan cleanup operation"""
    dry_run: bool
    dangling_entries_found: int
    dangling_entries_removed: int
    orphan_blobs_found: int
    orphan_blobs_deleted: int
    message: str


class OrphanCleaner:
    """Catalog orphan cleanup service with injectable stores

    Example:
        cleaner = OrphanCleaner(record_store, blob_store)
        result = cleaner.clean(dry_run=True)
        if result.orphan_blobs_found > 0:
            result = cleaner.clean(dry_run=False)
    """

    def __init__(self, record_store: RecordStore, blob_store: BlobStore,
                 relations_config: Optional[RelationIndexConfig] = None):
        self.record_store = record_store
        self.blob_store = blob_store
        self.relations_config = relations_config or RelationIndexConfig()

    def clean(self, dry_run: bool = False) -> OrphanCleanupResult:
        """Find and optionally remove orphan data

        Args:
            dry_run: If True, only report what would be removed.

        Raises:
            PersistenceError: If the index cannot be read, or a blob delete
                or the index write fails. Nothing is deleted when the index
                cannot be read.
        """
        index = RelationIndex(
            self.record_store,
            record_name=self.relations_config.record_name,
            warn_on_duplicates=False
        )
        detector = OrphanDetector(index, self.blob_store)
        dangling = detector.find_dangling_entries()
        orphans = detector.find_orphan_blobs()

        removed = deleted = 0
        if not dry_run:
            for file_id in dangling:
                index.discard(file_id)
                # A corrupt blob may still be on disk
                self.blob_store.delete(file_id)
                removed += 1
            for key in orphans:
                self.blob_store.delete(key)
                deleted += 1
            if dangling:
                index.persist()

        return self._build_result(dry_run, len(dangling), removed, len(orphans), deleted)

    def _build_result(self, dry_run: bool, dangling_found: int, removed: int,
                      orphans_found: int, deleted: int) -> OrphanCleanupResult:
        if dangling_found == 0 and orphans_found == 0:
            message = "No orphans found"
        elif dry_run:
            message = (f"Dry run: would remove {dangling_found} dangling entries "
                       f"and delete {orphans_found} orphan blobs")
        else:
            message = (f"Removed {removed} dangling entries "
                       f"and deleted {deleted} orphan blobs")
        logger.info(message)

        return OrphanCleanupResult(
            dry_run=dry_run,
            dangling_entries_found=dangling_found,
            dangling_entries_removed=removed,
            orphan_blobs_found=orphans_found,
            orphan_blobs_deleted=deleted,
            message=message
        )

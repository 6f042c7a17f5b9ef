# Copyright (c) 2024 File-Catalog Contributors
# SPDX-License-Identifier: MIT

"""Catalog integrity checking service

Verifies catalog consistency:
1. Duplicate documents (same doc id held by several files)
2. Dangling entries (index entry without a loadable blob)
3. Orphan blobs (blob not referenced by the index)

Reports only; OrphanCleaner repairs 2 and 3. Duplicates need a decision
about which file wins and are left to the caller.
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from file_catalog.config import RelationIndexConfig
from file_catalog.operations.orphan_detector import OrphanDetector
from file_catalog.relations.relation_index import RelationIndex
from file_catalog.storage.interfaces import BlobStore, RecordStore

logger = logging.getLogger(__name__)


@dataclass
class IntegrityCheck:
    """Result of a single integrity check"""
    name: str
    passed: bool
    details: str


@dataclass
class IntegrityResult:
    """Complete integrity check result"""
    healthy: bool
    issues: List[str] = field(default_factory=list)
    checks: List[Dict[str, Any]] = field(default_factory=list)
    counts: Dict[str, int] = field(default_factory=dict)


class IntegrityChecker:
    """Catalog integrity checker with injectable stores

    Example:
        checker = IntegrityChecker(record_store, blob_store)
        result = checker.check()
        if not result.healthy:
            print(f"Issues: {result.issues}")
    """

    def __init__(self, record_store: RecordStore, blob_store: BlobStore,
                 relations_config: Optional[RelationIndexConfig] = None):
        self.record_store = record_store
        self.blob_store = blob_store
        self.relations_config = relations_config or RelationIndexConfig()

    def check(self) -> IntegrityResult:
        """Run all integrity checks and return structured result

        Raises:
            PersistenceError: If the index or a blob cannot be read
        """
        index = RelationIndex(
            self.record_store,
            record_name=self.relations_config.record_name,
            warn_on_duplicates=False
        )
        detector = OrphanDetector(index, self.blob_store)

        checks = [
            self._check_duplicate_documents(index),
            self._check_dangling_entries(detector),
            self._check_orphan_blobs(detector),
        ]

        issues = [check.details for check in checks if not check.passed]
        for issue in issues:
            logger.warning(f"Integrity issue: {issue}")

        return IntegrityResult(
            healthy=not issues,
            issues=issues,
            checks=[
                {'name': c.name, 'passed': c.passed, 'details': c.details}
                for c in checks
            ],
            counts=self._get_counts(index)
        )

    def _get_counts(self, index: RelationIndex) -> Dict[str, int]:
        snapshot = index.all_relations()
        return {
            'files': len(snapshot),
            'relations': sum(len(sequence) for sequence in snapshot.values()),
            'blobs': len(self.blob_store.keys()),
        }

    def _check_duplicate_documents(self, index: RelationIndex) -> IntegrityCheck:
        duplicates = index.duplicate_documents()
        if not duplicates:
            return IntegrityCheck(
                name="Duplicate documents",
                passed=True,
                details="Every document is held by one file"
            )
        listed = ", ".join(
            f"{doc_id} ({len(files)} files)" for doc_id, files in duplicates.items()
        )
        return IntegrityCheck(
            name="Duplicate documents",
            passed=False,
            details=f"{len(duplicates)} documents held by several files: {listed}"
        )

    def _check_dangling_entries(self, detector: OrphanDetector) -> IntegrityCheck:
        dangling = detector.find_dangling_entries()
        return IntegrityCheck(
            name="Dangling entries",
            passed=not dangling,
            details=(f"{len(dangling)} index entries without a loadable blob"
                     if dangling else "Every index entry has its blob")
        )

    def _check_orphan_blobs(self, detector: OrphanDetector) -> IntegrityCheck:
        orphans = detector.find_orphan_blobs()
        return IntegrityCheck(
            name="Orphan blobs",
            passed=not orphans,
            details=(f"{len(orphans)} blobs not referenced by the index"
                     if orphans else "Every blob is referenced")
        )

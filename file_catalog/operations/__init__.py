# Copyright (c) 2024 File-Catalog Contributors
# SPDX-License-Identifier: MIT

"""On-demand maintenance over the relation index and blob store"""
from file_catalog.operations.integrity_checker import IntegrityChecker, IntegrityResult
from file_catalog.operations.orphan_cleaner import OrphanCleaner, OrphanCleanupResult
from file_catalog.operations.orphan_detector import OrphanDetector

__all__ = [
    'IntegrityChecker',
    'IntegrityResult',
    'OrphanCleaner',
    'OrphanCleanupResult',
    'OrphanDetector',
]

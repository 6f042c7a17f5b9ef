# Copyright (c) 2024 File-Catalog Contributors
# SPDX-License-Identifier: MIT

"""
Storage factory for runtime backend selection.

Usage:
    from file_catalog.storage.storage_factory import create_file_catalog

    catalog = create_file_catalog(config)
    catalog = create_file_catalog(config, configure_logs=True)  # also apply config.logging

Backends:
    - filesystem -> FileSystemBlobStore + SQLiteRecordStore
    - memory     -> InMemoryBlobStore + InMemoryRecordStore
"""
import logging
from typing import Literal, Optional

from file_catalog.config import Config, StorageConfig, default_config
from file_catalog.logging_config import configure_logging
from file_catalog.storage.interfaces import BlobStore, RecordStore
from file_catalog.storage.file_blob_store import FileSystemBlobStore
from file_catalog.storage.sqlite_record_store import SQLiteRecordStore
from file_catalog.storage.memory_stores import InMemoryBlobStore, InMemoryRecordStore

logger = logging.getLogger(__name__)

BackendType = Literal['filesystem', 'memory']
SUPPORTED_BACKENDS = ('filesystem', 'memory')


class StorageFactory:
    """Factory for creating store implementations from StorageConfig"""

    @staticmethod
    def detect_backend(config: StorageConfig) -> BackendType:
        """Validate and normalize the configured backend

        Raises:
            ValueError: If the backend is not supported
        """
        backend = (config.backend or "filesystem").strip().lower()
        if backend not in SUPPORTED_BACKENDS:
            raise ValueError(
                f"Unsupported storage backend '{config.backend}', "
                f"expected one of {', '.join(SUPPORTED_BACKENDS)}"
            )
        return backend

    @staticmethod
    def create_blob_store(config: StorageConfig) -> BlobStore:
        backend = StorageFactory.detect_backend(config)
        if backend == 'memory':
            return InMemoryBlobStore()
        return FileSystemBlobStore(config.files_dir, extension=config.file_extension)

    @staticmethod
    def create_record_store(config: StorageConfig) -> RecordStore:
        backend = StorageFactory.detect_backend(config)
        if backend == 'memory':
            return InMemoryRecordStore()
        return SQLiteRecordStore(config.records_path)


def create_file_catalog(config: Optional[Config] = None, configure_logs: bool = False):
    """Build a FileCatalog wired to the configured stores

    Logger levels are left to the host application unless configure_logs
    is set, in which case config.logging is applied to the catalog loggers.
    """
    from file_catalog.catalog import FileCatalog

    config = config or default_config
    if configure_logs:
        configure_logging(config.logging)
    backend = StorageFactory.detect_backend(config.storage)
    logger.info(f"Creating file catalog with {backend} storage")
    return FileCatalog(
        StorageFactory.create_blob_store(config.storage),
        StorageFactory.create_record_store(config.storage),
        relations_config=config.relations
    )

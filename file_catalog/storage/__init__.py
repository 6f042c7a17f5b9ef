# Copyright (c) 2024 File-Catalog Contributors
# SPDX-License-Identifier: MIT

"""Persistence collaborators: blob store and key-value record store"""
from file_catalog.storage.interfaces import BlobStore, RecordStore
from file_catalog.storage.file_blob_store import FileSystemBlobStore
from file_catalog.storage.sqlite_record_store import SQLiteRecordStore
from file_catalog.storage.memory_stores import InMemoryBlobStore, InMemoryRecordStore

__all__ = [
    'BlobStore',
    'RecordStore',
    'FileSystemBlobStore',
    'SQLiteRecordStore',
    'InMemoryBlobStore',
    'InMemoryRecordStore',
]

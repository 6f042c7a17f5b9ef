# Copyright (c) 2024 File-Catalog Contributors
# SPDX-License-Identifier: MIT

"""Filesystem blob store

One file per key, named <uuid>.<extension>, inside a single directory.
Writes land in a temporary sibling first and are renamed into place, so a
reader never sees a half-written blob.
"""
import logging
import os
from pathlib import Path
from typing import List, Optional
from uuid import UUID

from file_catalog.errors import PersistenceError
from file_catalog.storage.interfaces import BlobStore

logger = logging.getLogger(__name__)


class FileSystemBlobStore(BlobStore):
    """Blob store backed by a directory

    Example:
        store = FileSystemBlobStore(Path("/app/data/files"), extension="myfile")
        store.put(file.id, file.to_bytes())
    """

    def __init__(self, directory: Path, extension: str = "myfile"):
        """Initialize store

        Args:
            directory: Folder holding the blobs. Created on first write.
            extension: File extension used for every blob, without the dot
        """
        self.directory = Path(directory)
        self.extension = extension.lstrip(".")

    def path_for(self, key: UUID) -> Path:
        """Location of the blob for key"""
        return self.directory / f"{key}.{self.extension}"

    def get(self, key: UUID) -> Optional[bytes]:
        path = self.path_for(key)
        try:
            return path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as e:
            raise PersistenceError(f"Failed to read blob {path}: {e}", key=str(key)) from e

    def put(self, key: UUID, data: bytes) -> None:
        path = self.path_for(key)
        tmp_path = path.with_name(path.name + ".tmp")
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            tmp_path.write_bytes(data)
            os.replace(tmp_path, path)
        except OSError as e:
            self._discard_temp(tmp_path)
            raise PersistenceError(f"Failed to write blob {path}: {e}", key=str(key)) from e
        logger.debug(f"Wrote blob {path} ({len(data)} bytes)")

    def delete(self, key: UUID) -> None:
        path = self.path_for(key)
        try:
            path.unlink()
        except FileNotFoundError:
            return
        except OSError as e:
            raise PersistenceError(f"Failed to delete blob {path}: {e}", key=str(key)) from e
        logger.debug(f"Deleted blob {path}")

    def keys(self) -> List[UUID]:
        if not self.directory.is_dir():
            return []
        keys = []
        for path in sorted(self.directory.glob(f"*.{self.extension}")):
            try:
                keys.append(UUID(path.stem))
            except ValueError:
                # Not one of ours
                continue
        return keys

    def _discard_temp(self, tmp_path: Path) -> None:
        try:
            tmp_path.unlink()
        except OSError:
            pass

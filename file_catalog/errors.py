# Copyright (c) 2024 File-Catalog Contributors
# SPDX-License-Identifier: MIT

"""
Error taxonomy for the file catalog.

NotFound is never an exception: stores and read paths return None.
"""
from typing import Optional


class CatalogError(Exception):
    """Base class for all catalog errors"""


class PersistenceError(CatalogError):
    """A blob or record could not be read, written or deleted.

    The in-memory relation index is not rolled back when this is raised,
    so callers should treat it as a best-effort cache until the next read.
    """

    def __init__(self, message: str, key: Optional[str] = None):
        super().__init__(message)
        self.key = key


class DecodeError(CatalogError):
    """Stored bytes could not be decoded into the expected structure"""

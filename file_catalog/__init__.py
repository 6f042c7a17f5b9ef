# Copyright (c) 2024 File-Catalog Contributors
# SPDX-License-Identifier: MIT

"""Local file store with a relation index

Files are kept exactly as long as at least one relation references them.
"""
from file_catalog.catalog import FileCatalog
from file_catalog.domain_models import Document, File, Relation, RelationType
from file_catalog.errors import CatalogError, DecodeError, PersistenceError

__all__ = [
    'FileCatalog',
    'Document',
    'File',
    'Relation',
    'RelationType',
    'CatalogError',
    'DecodeError',
    'PersistenceError',
]

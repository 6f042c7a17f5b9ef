"""
Pytest configuration and shared fixtures

Common fixtures used across multiple test files are defined here.
"""
import sys
from pathlib import Path
from uuid import uuid4

import pytest

# Add repository root to path so file_catalog imports without installing
repo_root = Path(__file__).parent.parent
sys.path.insert(0, str(repo_root))


# =============================================================================
# Store Fixtures
# =============================================================================

@pytest.fixture
def blob_store():
    """In-memory blob store, empty."""
    from file_catalog.storage.memory_stores import InMemoryBlobStore
    return InMemoryBlobStore()


@pytest.fixture
def record_store():
    """In-memory record store, empty."""
    from file_catalog.storage.memory_stores import InMemoryRecordStore
    return InMemoryRecordStore()


@pytest.fixture
def files_dir(tmp_path):
    """Temporary directory for filesystem blobs."""
    return tmp_path / "files"


@pytest.fixture
def records_path(tmp_path):
    """Temporary SQLite path for the record store."""
    return tmp_path / "records.db"


# =============================================================================
# Catalog Fixtures
# =============================================================================

@pytest.fixture
def catalog(blob_store, record_store):
    """FileCatalog over in-memory stores.

    Tests can inspect blob_store/record_store directly since the fixtures
    are shared within a test.
    """
    from file_catalog.catalog import FileCatalog
    return FileCatalog(blob_store, record_store)


@pytest.fixture
def index(record_store):
    """Empty RelationIndex over the in-memory record store."""
    from file_catalog.relations.relation_index import RelationIndex
    return RelationIndex(record_store)


# =============================================================================
# Test Data Fixtures
# =============================================================================

@pytest.fixture
def entity_id():
    """Id of an external entity (inspection, remark, project)."""
    return uuid4()


@pytest.fixture
def other_entity_id():
    """Id of a second external entity."""
    return uuid4()

"""Test package for file-catalog

Shared test data builders.
"""
from uuid import UUID, uuid4


def make_document(doc_id: UUID = None, name: str = "Document", extension: str = "pdf"):
    """Build a Document with a fresh id unless one is given."""
    from file_catalog.domain_models import Document
    return Document(id=doc_id or uuid4(), name=name, extension=extension)


def make_file(file_id: UUID = None, doc=None, payload: bytes = b"%PDF-1.4 test"):
    """Build a File with a fresh id and document unless given."""
    from file_catalog.domain_models import File
    return File(id=file_id or uuid4(), doc=doc or make_document(), payload=payload)

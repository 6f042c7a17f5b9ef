# Copyright (c) 2024 File-Catalog Contributors
# SPDX-License-Identifier: MIT

"""Domain models for the file catalog

Documents come from the external system and are only cached here. Files
pair a document with its payload. Relations record why a file is kept.
"""
from enum import Enum
from uuid import UUID

from pydantic import BaseModel, ConfigDict, ValidationError

from file_catalog.errors import DecodeError


class RelationType(str, Enum):
    """Why a file is attached to an external entity"""
    INSPECTION_ATTACHMENT = "inspection_attachment"
    REMARK_ATTACHMENT = "remark_attachment"
    INSPECTION_PHOTO = "inspection_photo"
    REMARK_PHOTO = "remark_photo"
    PROJECT_DOCUMENT = "project_document"
    DRAWING = "drawing"


class Document(BaseModel):
    """Document metadata as received from the external system"""
    model_config = ConfigDict(frozen=True)

    id: UUID
    name: str
    extension: str

    @property
    def filename(self) -> str:
        return f"{self.name}.{self.extension}" if self.extension else self.name


class File(BaseModel):
    """Locally stored unit: a document plus its raw payload

    The blob key is ``id``; ``doc.id`` identifies the same logical document
    across devices and sessions even when it is re-fetched under a new id.
    """
    model_config = ConfigDict(
        frozen=True,
        ser_json_bytes='base64',
        val_json_bytes='base64',
    )

    id: UUID
    doc: Document
    payload: bytes = b""

    def to_bytes(self) -> bytes:
        """Serialize to a self-describing JSON document"""
        return self.model_dump_json().encode("utf-8")

    @classmethod
    def from_bytes(cls, data: bytes) -> 'File':
        """Decode a stored blob

        Raises:
            DecodeError: If the bytes are not a valid serialized File
        """
        try:
            return cls.model_validate_json(data)
        except (ValidationError, ValueError) as e:
            raise DecodeError(f"Stored file is not decodable: {e}") from e


class Relation(BaseModel):
    """Tag stating that document ``doc_id`` is attached to ``entity_id``"""
    model_config = ConfigDict(frozen=True)

    doc_id: UUID
    entity_id: UUID
    type: RelationType

    def matches(self, relation_type: RelationType, entity_id: UUID) -> bool:
        return self.type == relation_type and self.entity_id == entity_id

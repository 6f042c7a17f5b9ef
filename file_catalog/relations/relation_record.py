# Copyright (c) 2024 File-Catalog Contributors
# SPDX-License-Identifier: MIT

"""Serialized form of the relation index

The whole index travels as one JSON document. Dict and list order are
preserved, so a load/store round trip keeps entries in place.
"""
from typing import Dict, List
from uuid import UUID

from pydantic import BaseModel, ValidationError

from file_catalog.domain_models import Relation
from file_catalog.errors import DecodeError


class RelationRecord(BaseModel):
    """File id -> relation sequence, as persisted in the record store"""
    relations: Dict[UUID, List[Relation]] = {}

    def to_bytes(self) -> bytes:
        return self.model_dump_json().encode("utf-8")

    @classmethod
    def from_bytes(cls, data: bytes) -> 'RelationRecord':
        """Decode a stored record

        Raises:
            DecodeError: If the bytes are not a valid relation record
        """
        try:
            return cls.model_validate_json(data)
        except (ValidationError, ValueError) as e:
            raise DecodeError(f"Relation record is not decodable: {e}") from e

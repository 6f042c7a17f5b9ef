# Copyright (c) 2024 File-Catalog Contributors
# SPDX-License-Identifier: MIT

"""Relation index: which external entities each stored file belongs to"""
from file_catalog.relations.relation_index import RelationIndex
from file_catalog.relations.relation_record import RelationRecord

__all__ = ['RelationIndex', 'RelationRecord']

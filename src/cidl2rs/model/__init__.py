# Copyright 2026 cidl2rs Contributors
# SPDX-License-Identifier: Apache-2.0

"""Read-only model of a parsed and resolved CIDL library."""

from cidl2rs.model.entities import (
    Argument,
    Attribute,
    CategoryId,
    Enumeration,
    EnumerationItem,
    Interface,
    Library,
    Method,
)
from cidl2rs.model.types import DataCategory, DataType

__all__ = [
    # Datatypes
    "DataCategory",
    "DataType",
    # Entities
    "Attribute",
    "Argument",
    "Method",
    "Interface",
    "EnumerationItem",
    "Enumeration",
    "CategoryId",
    "Library",
]

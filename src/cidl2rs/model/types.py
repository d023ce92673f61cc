# Copyright 2026 cidl2rs Contributors
# SPDX-License-Identifier: Apache-2.0

"""Datatype nodes of a resolved CIDL library."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel
from pydantic import Field as _Field

# ###############
# Public Interface
# ###############


class DataCategory(Enum):
    """Categories a resolved datatype node can belong to."""

    ENUMERATION = "CapeEnumeration"
    BOOLEAN = "CapeBoolean"
    INTEGER = "CapeInteger"
    RESULT = "CapeResult"
    REAL = "CapeReal"
    UUID = "CapeUUID"
    WINDOW_ID = "CapeWindowId"
    STRING = "CapeString"
    ARRAY_STRING = "CapeArrayString"
    ARRAY_INTEGER = "CapeArrayInteger"
    ARRAY_BOOLEAN = "CapeArrayBoolean"
    ARRAY_REAL = "CapeArrayReal"
    ARRAY_VALUE = "CapeArrayValue"
    ARRAY_BYTE = "CapeArrayByte"
    ARRAY_ENUMERATION = "CapeArrayEnumeration"
    VALUE = "CapeValue"
    INTERFACE = "CapeInterface"
    TEMPLATE_ARGUMENT = "CapeTemplateArgument"
    INVALID = "CapeInvalidType"


class DataType(BaseModel):
    """A datatype reference as produced by the CIDL resolver.

    Attributes:
        category: The category tag of the node.
        name: Type name, optionally namespace-qualified (``CAPEOPEN_1_2::ICapeUnit``).
        template_args: Template arguments, themselves datatype nodes.
        template_index: For template arguments, the index into the enclosing
            interface's template parameter list.
    """

    category: DataCategory
    name: str = ""
    template_args: list[DataType] = _Field(default_factory=list)
    template_index: int | None = None


DataType.model_rebuild()

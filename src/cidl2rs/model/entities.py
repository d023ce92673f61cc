# Copyright 2026 cidl2rs Contributors
# SPDX-License-Identifier: Apache-2.0

"""Libraries, interfaces, methods and enumerations of a resolved CIDL description."""

from __future__ import annotations

from uuid import UUID

from pydantic import BaseModel
from pydantic import Field as _Field

from cidl2rs.model.types import DataCategory, DataType

# ###############
# Public Interface
# ###############


class Attribute(BaseModel):
    """A ``[name]`` or ``[name(value)]`` attribute on a method or argument."""

    name: str
    value: str | None = None


class Argument(BaseModel):
    """A method argument with its direction attributes."""

    name: str
    data_type: DataType
    attributes: list[Attribute] = _Field(default_factory=list)


class Method(BaseModel):
    """An interface method. CIDL methods always return a result code."""

    name: str
    arguments: list[Argument] = _Field(default_factory=list)
    attributes: list[Attribute] = _Field(default_factory=list)
    return_type: DataType = _Field(default_factory=lambda: DataType(category=DataCategory.RESULT, name="CapeResult"))


class Interface(BaseModel):
    """An interface, optionally generic over reference-counted handle types."""

    name: str
    uuid: UUID
    template_params: list[str] = _Field(default_factory=list)
    methods: list[Method] = _Field(default_factory=list)


class EnumerationItem(BaseModel):
    """A named item of an enumeration with its signed 32-bit value."""

    name: str
    value: int = _Field(ge=-(2**31), lt=2**31)


class Enumeration(BaseModel):
    """An enumeration definition."""

    name: str
    items: list[EnumerationItem] = _Field(default_factory=list)


class CategoryId(BaseModel):
    """A named category identifier declared by a library."""

    name: str
    uuid: UUID


class Library(BaseModel):
    """The root unit of a CIDL description."""

    name: str
    uuid: UUID
    category_ids: list[CategoryId] = _Field(default_factory=list)
    enumerations: list[Enumeration] = _Field(default_factory=list)
    interfaces: list[Interface] = _Field(default_factory=list)

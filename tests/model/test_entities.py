# Copyright 2026 cidl2rs Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for the CIDL library model."""

from uuid import UUID

import pytest
from pydantic import ValidationError

from cidl2rs.model import (
    Argument,
    DataCategory,
    DataType,
    EnumerationItem,
    Interface,
    Library,
    Method,
)

# ###############
# Datatypes
# ###############


def test_data_type_defaults() -> None:
    data_type = DataType(category=DataCategory.REAL)
    assert data_type.name == ""
    assert data_type.template_args == []
    assert data_type.template_index is None


def test_nested_data_type_from_dict() -> None:
    """Template arguments are datatype nodes themselves."""
    data_type = DataType.model_validate(
        {
            "category": "CapeInterface",
            "name": "ICollection",
            "template_args": [{"category": "CapeTemplateArgument", "template_index": 0}],
        }
    )
    assert data_type.category is DataCategory.INTERFACE
    assert data_type.template_args[0].category is DataCategory.TEMPLATE_ARGUMENT
    assert data_type.template_args[0].template_index == 0


def test_unknown_category() -> None:
    with pytest.raises(ValidationError):
        DataType.model_validate({"category": "CapeSomething"})


# ###############
# Entities
# ###############


def test_method_returns_result_by_default() -> None:
    method = Method(name="Calculate")
    assert method.return_type.category is DataCategory.RESULT
    assert method.arguments == []
    assert method.attributes == []


def test_argument_without_attributes() -> None:
    argument = Argument(name="Value", data_type=DataType(category=DataCategory.INTEGER))
    assert argument.attributes == []


def test_interface_uuid_from_string() -> None:
    interface = Interface.model_validate({"name": "ICalc", "uuid": "00000000-0000-0000-0000-000000000002"})
    assert interface.uuid == UUID(int=2)
    assert interface.template_params == []


@pytest.mark.parametrize("value", [-(2**31), 0, 2**31 - 1])
def test_enumeration_item_accepts_signed_32_bit(value: int) -> None:
    assert EnumerationItem(name="ITEM", value=value).value == value


@pytest.mark.parametrize("value", [-(2**31) - 1, 2**31])
def test_enumeration_item_rejects_out_of_range(value: int) -> None:
    with pytest.raises(ValidationError):
        EnumerationItem(name="ITEM", value=value)


def test_library_collections_default_empty() -> None:
    library = Library(name="MyLib", uuid=UUID(int=1))
    assert library.category_ids == []
    assert library.enumerations == []
    assert library.interfaces == []

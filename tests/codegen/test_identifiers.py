# Copyright 2026 cidl2rs Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for identifier conversions."""

import pytest

from cidl2rs.codegen.identifiers import (
    RUST_KEYWORDS,
    argument_name,
    constant_name,
    enum_variable_name,
    escape_reserved,
    module_name,
    native_method_name,
    provider_type_parameter,
    smart_pointer_name,
    to_pascal_case,
    to_snake_case,
)

# ###############
# Snake case
# ###############


@pytest.mark.parametrize(
    ("identifier", "expected"),
    [
        ("GetValue", "get_value"),
        ("calculate", "calculate"),
        ("GetUUID", "get_uuid"),
        ("ICapeUnit", "icape_unit"),
        ("inValue", "in_value"),
        ("", ""),
    ],
)
def test_to_snake_case(identifier: str, expected: str) -> None:
    """Uppercase letters after a non-uppercase character start a new word."""
    assert to_snake_case(identifier) == expected


@pytest.mark.parametrize("identifier", ["GetValue", "ICapeUnit", "get_value", "GetUUID"])
def test_to_snake_case_is_idempotent(identifier: str) -> None:
    once = to_snake_case(identifier)
    assert to_snake_case(once) == once


# ###############
# Pascal case
# ###############


@pytest.mark.parametrize(
    ("identifier", "expected"),
    [
        ("SOLID_PHASE", "SolidPhase"),
        ("vapor", "Vapor"),
        ("Liquid", "Liquid"),
        ("two__parts", "TwoParts"),
    ],
)
def test_to_pascal_case(identifier: str, expected: str) -> None:
    assert to_pascal_case(identifier) == expected


# ###############
# Keyword escaping
# ###############


def test_escape_reserved_prefixes_keywords() -> None:
    """Every Rust keyword gets the escape marker, other names are unchanged."""
    for keyword in RUST_KEYWORDS:
        assert escape_reserved(keyword) == "_" + keyword
    assert escape_reserved("value") == "value"


def test_argument_name_escapes_after_snake_case() -> None:
    """An argument named ``Type`` becomes ``type`` and is then escaped."""
    assert argument_name("Type") == "_type"
    assert argument_name("inValue") == "in_value"


def test_argument_name_never_yields_keyword() -> None:
    for keyword in RUST_KEYWORDS:
        assert argument_name(keyword) not in RUST_KEYWORDS


# ###############
# Method and type names
# ###############


@pytest.mark.parametrize(
    ("identifier", "expected"),
    [
        ("GetValue", "raw_get_value"),
        ("calculate", "raw_calculate"),
        ("AddReference", "raw_add_reference"),
        ("GetUUID", "raw_get_u_u_i_d"),
    ],
)
def test_native_method_name(identifier: str, expected: str) -> None:
    assert native_method_name(identifier) == expected


def test_smart_pointer_name() -> None:
    """A leading I is stripped, otherwise T is prepended."""
    assert smart_pointer_name("ICapeUnit") == "CapeUnit"
    assert smart_pointer_name("Thing") == "TThing"


def test_constant_name() -> None:
    assert constant_name("ICapeUnit") == "ICAPEUNIT"


def test_module_name() -> None:
    assert module_name("CAPEOPEN_1_2") == "cape_open_1_2"
    assert module_name("CAPEOPEN") == "cape_open"
    assert module_name("MyLib") == "my_lib"


@pytest.mark.parametrize(
    ("argument", "expected"),
    [
        ("value", "TypeOfValue"),
        ("_type", "TypeOfType"),
        ("unit_name", "TypeOfUnitName"),
    ],
)
def test_provider_type_parameter(argument: str, expected: str) -> None:
    assert provider_type_parameter(argument) == expected


def test_enum_variable_name() -> None:
    assert enum_variable_name("Phase") == "phase"
    assert enum_variable_name("phase") == "_phase"

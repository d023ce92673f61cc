# Copyright 2026 cidl2rs Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for the generation of complete binding modules."""

from uuid import UUID

import pytest

from cidl2rs.codegen.errors import GenerationError
from cidl2rs.codegen.generate import GENERATED_MARKER, GeneratorOptions, generate, uuid_literal
from cidl2rs.loader.resolver import LibraryTypeResolver
from cidl2rs.model import (
    Argument,
    Attribute,
    CategoryId,
    DataCategory,
    DataType,
    Enumeration,
    EnumerationItem,
    Interface,
    Library,
    Method,
)

# ###############
# Helpers
# ###############


def _calc_interface() -> Interface:
    square = Method(
        name="Square",
        arguments=[
            Argument(
                name="Value",
                data_type=DataType(category=DataCategory.INTEGER),
                attributes=[Attribute(name="in")],
            ),
            Argument(
                name="Result",
                data_type=DataType(category=DataCategory.INTEGER),
                attributes=[Attribute(name="out"), Attribute(name="retval")],
            ),
        ],
    )
    return Interface(name="ICalc", uuid=UUID(int=2), methods=[square])


def _library(**kwargs: object) -> Library:
    return Library(name="MyLib", uuid=UUID(int=1), **kwargs)


def _generate(library: Library, *others: Library, options: GeneratorOptions | None = None) -> str:
    resolver = LibraryTypeResolver([library, *others], default_namespace=library.name)
    return generate(library, resolver, options)


# ###############
# Identifiers
# ###############


def test_uuid_literal() -> None:
    uuid = UUID("00112233-4455-6677-8899-aabbccddeeff")
    assert uuid_literal(uuid) == (
        "CapeUUID::from_slice(&[0x00u8,0x11u8,0x22u8,0x33u8,0x44u8,0x55u8,0x66u8,0x77u8,"
        "0x88u8,0x99u8,0xaau8,0xbbu8,0xccu8,0xddu8,0xeeu8,0xffu8])"
    )


def test_empty_library() -> None:
    """A library without interfaces only imports the UUID type."""
    text = _generate(_library())
    assert text.startswith(GENERATED_MARKER + "\n")
    assert "use cobia::CapeUUID;" in text
    assert "pub const LIBRARY_ID: CapeUUID = " in text
    assert "use cobia::*;" not in text
    assert "bitflags" not in text
    assert "use std::fmt;" not in text


def test_identifier_constants() -> None:
    library = _library(
        category_ids=[CategoryId(name="UnitOperation", uuid=UUID(int=3))],
        interfaces=[_calc_interface()],
    )
    text = _generate(library)
    assert "pub const CATEGORYID_UNITOPERATION: CapeUUID = " in text
    assert "pub const ICALC_UUID: CapeUUID = " in text


# ###############
# Layout
# ###############


def test_section_order() -> None:
    library = _library(
        category_ids=[CategoryId(name="UnitOperation", uuid=UUID(int=3))],
        enumerations=[Enumeration(name="Status", items=[EnumerationItem(name="OK", value=0)])],
        interfaces=[_calc_interface()],
    )
    text = _generate(library)
    positions = [
        text.index(GENERATED_MARKER),
        text.index("use cobia::*;"),
        text.index("pub const LIBRARY_ID"),
        text.index("pub const CATEGORYID_UNITOPERATION"),
        text.index("pub const ICALC_UUID"),
        text.index("pub enum Status"),
        text.index("pub trait ICalc"),
    ]
    assert positions == sorted(positions)


def test_imports_follow_content() -> None:
    flags = Enumeration(
        name="Phase",
        items=[EnumerationItem(name="SOLID", value=1), EnumerationItem(name="LIQUID", value=2)],
    )
    text = _generate(_library(enumerations=[flags], interfaces=[_calc_interface()]))
    assert "use cobia::*;" in text
    assert "use cobia::cape_smart_pointer::CapeSmartPointer;" in text
    assert "use bitflags::bitflags;" in text
    assert "use std::fmt;" not in text
    assert "PhantomData" not in text


def test_generic_interface_imports_phantom_data() -> None:
    collection = Interface(name="ICollection", uuid=UUID(int=4), template_params=["T"])
    text = _generate(_library(interfaces=[collection]))
    assert "use std::marker::PhantomData;" in text


def test_runtime_module_option() -> None:
    text = _generate(_library(interfaces=[_calc_interface()]), options=GeneratorOptions(cobia_module="crate"))
    assert "use crate::*;" in text
    assert "use crate::cape_smart_pointer::CapeSmartPointer;" in text


def test_foreign_namespace_is_imported() -> None:
    other = Library(name="OtherLib", uuid=UUID(int=9), interfaces=[Interface(name="IThing", uuid=UUID(int=10))])
    method = Method(
        name="Attach",
        arguments=[
            Argument(
                name="Thing",
                data_type=DataType(category=DataCategory.INTERFACE, name="OtherLib::IThing"),
                attributes=[Attribute(name="in")],
            )
        ],
    )
    library = _library(interfaces=[Interface(name="IHost", uuid=UUID(int=11), methods=[method])])
    text = _generate(library, other)
    assert "use other_lib as OtherLib;" in text
    assert "thing: OtherLib::Thing" in text
    assert "OtherLib::C::OtherLib_IThing" in text


def test_bit_flag_argument_converts_through_bits() -> None:
    flags = Enumeration(
        name="Phase",
        items=[EnumerationItem(name="SOLID", value=1), EnumerationItem(name="LIQUID", value=2)],
    )
    method = Method(
        name="SetPhase",
        arguments=[
            Argument(
                name="Phase",
                data_type=DataType(category=DataCategory.ENUMERATION, name="Phase"),
                attributes=[Attribute(name="in")],
            )
        ],
    )
    library = _library(enumerations=[flags], interfaces=[Interface(name="IMixer", uuid=UUID(int=6), methods=[method])])
    text = _generate(library)
    assert "pub fn from(value: i32) -> Option<Phase> {" in text
    assert "let phase = match Phase::from(phase) {" in text
    assert "phase.bits() as C::MyLib_Phase" in text


# ###############
# Behavior
# ###############


def test_generation_is_deterministic() -> None:
    library = _library(
        enumerations=[Enumeration(name="Status", items=[EnumerationItem(name="OK", value=0)])],
        interfaces=[_calc_interface()],
    )
    assert _generate(library) == _generate(library)


def test_invalid_method_fails_whole_generation() -> None:
    broken = Method(name="Broken", attributes=[Attribute(name="unknown")])
    library = _library(interfaces=[_calc_interface(), Interface(name="IBroken", uuid=UUID(int=5), methods=[broken])])
    with pytest.raises(GenerationError, match="method Broken of interface IBroken"):
        _generate(library)


def test_empty_enumeration_fails_generation() -> None:
    library = _library(enumerations=[Enumeration(name="Empty")], interfaces=[_calc_interface()])
    with pytest.raises(GenerationError, match="enumeration Empty has no items"):
        _generate(library)

# Copyright 2026 cidl2rs Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for namespace resolution."""

from cidl2rs.codegen.namespaces import NamespaceResolver

# ###############
# Splitting
# ###############


def test_split_unqualified_name_is_local() -> None:
    resolver = NamespaceResolver("MyLib")
    assert resolver.split("IFoo") == ("MyLib", "IFoo")


def test_split_qualified_name() -> None:
    resolver = NamespaceResolver("MyLib")
    assert resolver.split("CAPEOPEN_1_2::ICapeCollection") == ("CAPEOPEN_1_2", "ICapeCollection")


# ###############
# Interfaces
# ###############


def test_local_interface() -> None:
    """Local interfaces use the bare smart pointer name and the native module for the raw name."""
    resolver = NamespaceResolver("MyLib")
    assert resolver.resolve_interface("IFoo") == ("C::MyLib_IFoo", "Foo")
    assert resolver.resolve_interface("MyLib::IFoo") == ("C::MyLib_IFoo", "Foo")
    assert resolver.foreign_namespaces == set()


def test_known_interface_routes_through_runtime() -> None:
    resolver = NamespaceResolver("MyLib")
    raw, smart = resolver.resolve_interface("CAPEOPEN_1_2::ICapeIdentification")
    assert raw == "cobia::C::CAPEOPEN_1_2_ICapeIdentification"
    assert smart == "cobia::cape_open_1_2::CapeIdentification"
    assert resolver.foreign_namespaces == set()


def test_foreign_interface_is_recorded() -> None:
    resolver = NamespaceResolver("MyLib")
    assert resolver.resolve_interface("Other::IThing") == ("Other::C::Other_IThing", "Other::Thing")
    assert resolver.foreign_namespaces == {"Other"}


def test_custom_native_module_and_namespace() -> None:
    resolver = NamespaceResolver("MyLib", native_module="ffi", native_namespace="ML")
    assert resolver.resolve_interface("IFoo") == ("ffi::ML_IFoo", "Foo")
    assert resolver.local_raw("Phase") == "ffi::ML_Phase"


def test_custom_runtime_module() -> None:
    resolver = NamespaceResolver("MyLib", cobia_module="crate")
    assert resolver.runtime("CapeObject") == "crate::CapeObject"
    assert resolver.raw_runtime("ICapeInterface") == "crate::C::ICapeInterface"


# ###############
# Enumerations
# ###############


def test_local_enumeration() -> None:
    resolver = NamespaceResolver("MyLib")
    assert resolver.resolve_enumeration("Phase") == ("C::MyLib_Phase", "Phase")


def test_known_enumeration() -> None:
    resolver = NamespaceResolver("MyLib")
    assert resolver.resolve_enumeration("CAPEOPEN_1_2::CapeValidationStatus") == (
        "cobia::C::CAPEOPEN_1_2_CapeValidationStatus",
        "cobia::cape_open_1_2::CapeValidationStatus",
    )


def test_foreign_enumeration_is_recorded() -> None:
    resolver = NamespaceResolver("MyLib")
    assert resolver.resolve_enumeration("Other::Phase") == ("Other::C::Other_Phase", "Other::Phase")
    assert resolver.foreign_namespaces == {"Other"}

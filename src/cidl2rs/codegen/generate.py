# Copyright 2026 cidl2rs Contributors
# SPDX-License-Identifier: Apache-2.0

"""Generation of a complete Rust binding module for one CIDL library.

The module is assembled in a fixed order: generated-file marker, ``use``
declarations, library identifier, category identifiers, interface
identifiers, enumerations, and interfaces. The body is generated before the
``use`` declarations so that only the imports it needs are emitted. Nothing
is returned unless the whole library generates successfully.
"""

from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID

from cidl2rs.codegen.enumerations import EnumerationEmitter, is_bit_flag
from cidl2rs.codegen.identifiers import constant_name, module_name
from cidl2rs.codegen.members import InterfaceEmitter
from cidl2rs.codegen.namespaces import NamespaceResolver
from cidl2rs.codegen.type_mapping import InterfaceResolver, TypeMapper
from cidl2rs.codegen.writer import CodeWriter
from cidl2rs.model.entities import Library

# ###############
# Public Interface
# ###############

GENERATED_MARKER = "// This file was generated by cidl2rs"
DEFAULT_COBIA_MODULE = "cobia"
DEFAULT_NATIVE_MODULE = "C"


@dataclass(frozen=True)
class GeneratorOptions:
    """Module names used in the generated code.

    Attributes:
        cobia_module: Module under which the binding runtime is referenced.
        example_module: Module name used in documentation examples only.
            Defaults to the snake-cased library name.
        native_module: Module holding the raw ABI declarations.
        native_namespace: Prefix of raw ABI declarations of local types.
            Defaults to the library name.
    """

    cobia_module: str = DEFAULT_COBIA_MODULE
    example_module: str | None = None
    native_module: str = DEFAULT_NATIVE_MODULE
    native_namespace: str | None = None


def generate(
    library: Library,
    resolver: InterfaceResolver,
    options: GeneratorOptions | None = None,
) -> str:
    """Generate the Rust binding module for *library*.

    Args:
        library: The resolved library to generate bindings for.
        resolver: Resolution query used for the template arity of referenced interfaces
            and the representation of referenced enumerations.
        options: Module naming options.

    Returns:
        The complete text of the generated module.

    Raises:
        GenerationError: On the first invalid method, argument or datatype.
    """
    options = options or GeneratorOptions()
    namespaces = NamespaceResolver(
        library.name,
        cobia_module=options.cobia_module,
        native_module=options.native_module,
        native_namespace=options.native_namespace,
    )
    body = CodeWriter()
    _write_identifiers(library, body)

    if library.enumerations:
        enum_emitter = EnumerationEmitter(options.cobia_module, options.example_module or module_name(library.name))
        body.line()
        body.line("// Enumerations")
        body.line()
        for enumeration in library.enumerations:
            enum_emitter.emit(enumeration, body)

    if library.interfaces:
        interface_emitter = InterfaceEmitter(TypeMapper(namespaces, resolver), namespaces)
        body.line()
        body.line("// Interfaces")
        body.line()
        for interface in library.interfaces:
            interface_emitter.emit(interface, body)

    code = CodeWriter()
    code.line(GENERATED_MARKER)
    code.lines(*_use_declarations(library, namespaces))
    code.extend(body)
    return code.output()


def uuid_literal(uuid: UUID) -> str:
    """Return the Rust expression constructing *uuid* as a ``CapeUUID``."""
    return "CapeUUID::from_slice(&[" + ",".join(f"0x{byte:02x}u8" for byte in uuid.bytes) + "])"


# ################
# Implementation
# ################


def _use_declarations(library: Library, namespaces: NamespaceResolver) -> list[str]:
    """Return the ``use`` declarations needed by the generated body."""
    cobia = namespaces.cobia_module
    uses: list[str] = []
    if library.interfaces:
        uses.append(f"use {cobia}::*;")
        uses.append(f"use {cobia}::cape_smart_pointer::CapeSmartPointer;")
        if any(interface.template_params for interface in library.interfaces):
            uses.append("use std::marker::PhantomData;")
    else:
        uses.append(f"use {cobia}::CapeUUID;")
    if any(not is_bit_flag(enumeration) for enumeration in library.enumerations):
        uses.append("use std::fmt;")
    if any(is_bit_flag(enumeration) for enumeration in library.enumerations):
        uses.append("use bitflags::bitflags;")
    for namespace in sorted(namespaces.foreign_namespaces):
        uses.append(f"use {module_name(namespace)} as {namespace};")
    return uses


def _write_identifiers(library: Library, code: CodeWriter) -> None:
    code.line()
    code.line("// Library ID")
    code.line(f"pub const LIBRARY_ID: CapeUUID = {uuid_literal(library.uuid)};")
    if library.category_ids:
        code.line()
        code.line("// Category IDs")
        for category in library.category_ids:
            code.line(f"pub const CATEGORYID_{constant_name(category.name)}: CapeUUID = {uuid_literal(category.uuid)};")
    if library.interfaces:
        code.line()
        code.line("// Interface IDs")
        for interface in library.interfaces:
            code.line(f"pub const {constant_name(interface.name)}_UUID: CapeUUID = {uuid_literal(interface.uuid)};")

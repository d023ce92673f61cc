# Copyright 2026 cidl2rs Contributors
# SPDX-License-Identifier: Apache-2.0

"""Binding generation engine: type mapping and Rust code emission."""

from cidl2rs.codegen.enumerations import EnumerationEmitter, is_bit_flag
from cidl2rs.codegen.errors import (
    ArityMismatchError,
    GenerationError,
    InvalidDirectionError,
    UnresolvedAttributeError,
    UnresolvedInterfaceError,
    UnsupportedTypeError,
)
from cidl2rs.codegen.generate import GENERATED_MARKER, GeneratorOptions, generate, uuid_literal
from cidl2rs.codegen.members import InterfaceEmitter, MethodNames, MethodPlan, method_names
from cidl2rs.codegen.namespaces import KNOWN_NAMESPACES, NamespaceResolver
from cidl2rs.codegen.type_mapping import (
    InterfaceResolver,
    MappedArgument,
    Ownership,
    TypeCategory,
    TypeMapper,
    parse_direction,
)
from cidl2rs.codegen.writer import CodeWriter

__all__ = [
    "generate",
    "GeneratorOptions",
    "GENERATED_MARKER",
    "uuid_literal",
    "NamespaceResolver",
    "KNOWN_NAMESPACES",
    "TypeMapper",
    "TypeCategory",
    "Ownership",
    "MappedArgument",
    "InterfaceResolver",
    "parse_direction",
    "InterfaceEmitter",
    "MethodNames",
    "MethodPlan",
    "method_names",
    "EnumerationEmitter",
    "is_bit_flag",
    "CodeWriter",
    "GenerationError",
    "UnresolvedAttributeError",
    "InvalidDirectionError",
    "ArityMismatchError",
    "UnsupportedTypeError",
    "UnresolvedInterfaceError",
]

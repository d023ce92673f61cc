# Copyright 2026 cidl2rs Contributors
# SPDX-License-Identifier: Apache-2.0

"""Interface lookup across all loaded libraries."""

from __future__ import annotations

from cidl2rs.codegen.enumerations import is_bit_flag
from cidl2rs.codegen.namespaces import NAMESPACE_SEPARATOR
from cidl2rs.model.entities import Enumeration, Interface, Library

# ###############
# Public Interface
# ###############


class LibraryTypeResolver:
    """Answers template arity and enumeration queries for the loaded libraries.

    Args:
        libraries: All libraries of the parse result.
        default_namespace: Namespace assumed for unqualified type names,
            normally the library being generated.
    """

    def __init__(self, libraries: list[Library], default_namespace: str) -> None:
        self._default_namespace = default_namespace
        self._interfaces: dict[str, Interface] = {}
        self._enumerations: dict[str, Enumeration] = {}
        for library in libraries:
            for interface in library.interfaces:
                self._interfaces[f"{library.name}{NAMESPACE_SEPARATOR}{interface.name}"] = interface
            for enumeration in library.enumerations:
                self._enumerations[f"{library.name}{NAMESPACE_SEPARATOR}{enumeration.name}"] = enumeration

    def interface(self, type_name: str) -> Interface:
        """Return the interface named *type_name*.

        Raises:
            LookupError: If no loaded library defines the interface.
        """
        key = self._qualified(type_name)
        try:
            return self._interfaces[key]
        except KeyError:
            raise LookupError(f"no interface named '{key}' in the loaded libraries") from None

    def interface_arity(self, type_name: str) -> int:
        """Return the number of template parameters of the interface *type_name*."""
        return len(self.interface(type_name).template_params)

    def is_bit_flag_enumeration(self, type_name: str) -> bool:
        """Return True if *type_name* names a loaded enumeration generated as bit flags."""
        enumeration = self._enumerations.get(self._qualified(type_name))
        return enumeration is not None and is_bit_flag(enumeration)

    def _qualified(self, type_name: str) -> str:
        if NAMESPACE_SEPARATOR in type_name:
            return type_name
        return f"{self._default_namespace}{NAMESPACE_SEPARATOR}{type_name}"

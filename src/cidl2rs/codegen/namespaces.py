# Copyright 2026 cidl2rs Contributors
# SPDX-License-Identifier: Apache-2.0

"""Resolution of CIDL namespaces to Rust module paths.

A qualified CIDL type name ``Namespace::Type`` falls in one of three groups:

* **Local** -- the namespace is the library being generated. The safe name
  is used unqualified, the raw name routes through the native module
  (``C::Library_IType``).
* **Known** -- the namespace is one of the CAPE-OPEN libraries that ship with
  the binding runtime. Both names route through the runtime module
  (``cobia::cape_open_1_2::Type`` and ``cobia::C::CAPEOPEN_1_2_IType``).
* **Foreign** -- any other namespace. The namespace is recorded in
  :attr:`NamespaceResolver.foreign_namespaces` so that the driver can import
  the corresponding module under the namespace name.
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType

from cidl2rs.codegen.identifiers import smart_pointer_name

# ###############
# Public Interface
# ###############

KNOWN_NAMESPACES: Mapping[str, str] = MappingProxyType(
    {
        "CAPEOPEN": "cape_open",
        "CAPEOPEN_1_2": "cape_open_1_2",
    }
)

NAMESPACE_SEPARATOR = "::"


class NamespaceResolver:
    """Qualifies type names relative to the library being generated.

    Args:
        library_name: Name of the library being generated.
        cobia_module: Module under which the binding runtime is referenced.
        native_module: Module holding the raw ABI declarations of this library.
        native_namespace: Prefix of the raw ABI declarations of this library
            (defaults to *library_name*).
    """

    def __init__(
        self,
        library_name: str,
        *,
        cobia_module: str = "cobia",
        native_module: str = "C",
        native_namespace: str | None = None,
    ) -> None:
        self.library_name = library_name
        self.cobia_module = cobia_module
        self.native_module = native_module
        self.native_namespace = native_namespace or library_name
        self.foreign_namespaces: set[str] = set()

    def split(self, qualified_name: str) -> tuple[str, str]:
        """Split a type name into namespace and bare name; unqualified names are local."""
        namespace, sep, name = qualified_name.partition(NAMESPACE_SEPARATOR)
        if not sep:
            return self.library_name, qualified_name
        return namespace, name

    def runtime(self, path: str) -> str:
        """Qualify *path* with the safe runtime module (``cobia::CapeObject``)."""
        return f"{self.cobia_module}{NAMESPACE_SEPARATOR}{path}"

    def raw_runtime(self, path: str) -> str:
        """Qualify *path* with the raw runtime module (``cobia::C::ICapeInterface``)."""
        return f"{self.cobia_module}{NAMESPACE_SEPARATOR}C{NAMESPACE_SEPARATOR}{path}"

    def local_raw(self, type_name: str) -> str:
        """Return the raw ABI name of a type declared in this library."""
        return f"{self.native_module}{NAMESPACE_SEPARATOR}{self.native_namespace}_{type_name}"

    def resolve_enumeration(self, qualified_name: str) -> tuple[str, str]:
        """Return the ``(raw, safe)`` names of an enumeration type."""
        namespace, name = self.split(qualified_name)
        if namespace == self.library_name:
            return self.local_raw(name), name
        converted = KNOWN_NAMESPACES.get(namespace)
        if converted is not None:
            return self.raw_runtime(f"{namespace}_{name}"), self.runtime(f"{converted}{NAMESPACE_SEPARATOR}{name}")
        self.foreign_namespaces.add(namespace)
        return self._foreign_raw(namespace, name), f"{namespace}{NAMESPACE_SEPARATOR}{name}"

    def resolve_interface(self, qualified_name: str) -> tuple[str, str]:
        """Return the ``(raw, smart pointer)`` names of an interface type, without template arguments."""
        namespace, name = self.split(qualified_name)
        smart = smart_pointer_name(name)
        if namespace == self.library_name:
            return self.local_raw(name), smart
        converted = KNOWN_NAMESPACES.get(namespace)
        if converted is not None:
            return self.raw_runtime(f"{namespace}_{name}"), self.runtime(f"{converted}{NAMESPACE_SEPARATOR}{smart}")
        self.foreign_namespaces.add(namespace)
        return self._foreign_raw(namespace, name), f"{namespace}{NAMESPACE_SEPARATOR}{smart}"

    def _foreign_raw(self, namespace: str, name: str) -> str:
        return f"{namespace}{NAMESPACE_SEPARATOR}{self.native_module}{NAMESPACE_SEPARATOR}{namespace}_{name}"

# Copyright 2026 cidl2rs Contributors
# SPDX-License-Identifier: Apache-2.0

"""Mapping of CIDL datatypes to raw ABI and safe Rust representations.

For every method argument the mapper decides:

* the raw type used in ``extern "C"`` signatures and dispatch tables,
* the safe type exposed to Rust callers and implementers,
* the expressions converting between the two,
* whether a reference count changes hands (interface handles only).

Arguments fall into three groups that drive the member emitter: basic data
types (scalars, enumerations, window handles) passed by value, data
interfaces (strings, arrays, values) always passed by reference through
direction-specific wrappers, and interfaces (including template parameters)
passed as reference-counted smart pointers.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Protocol

from cidl2rs.codegen.errors import (
    ArityMismatchError,
    GenerationError,
    InvalidDirectionError,
    UnresolvedAttributeError,
    UnresolvedInterfaceError,
    UnsupportedTypeError,
)
from cidl2rs.codegen.identifiers import argument_name, to_snake_case
from cidl2rs.codegen.namespaces import NamespaceResolver
from cidl2rs.model.entities import Argument, Interface
from cidl2rs.model.types import DataCategory, DataType

# ###############
# Public Interface
# ###############

GENERIC_ENUMERATION = "CapeEnumeration"
GENERIC_OBJECT = "CapeObject"


class TypeCategory(enum.Enum):
    """Mapping categories of a method argument."""

    SCALAR = "scalar"
    ENUMERATION = "enumeration"
    WINDOW_HANDLE = "window-handle"
    DATA_INTERFACE = "data-interface"
    INTERFACE = "interface"
    TEMPLATE_PARAMETER = "template-parameter"


class Ownership(enum.Enum):
    """What happens to the reference count of a handle crossing the ABI."""

    NONE = "none"
    BORROWED = "borrowed"
    TRANSFERRED = "transferred"


class InterfaceResolver(Protocol):
    """Resolution query provided by the CIDL resolver."""

    def interface_arity(self, type_name: str) -> int:
        """Return the number of template parameters of the interface *type_name*.

        Raises:
            LookupError: If the interface cannot be resolved.
        """
        ...

    def is_bit_flag_enumeration(self, type_name: str) -> bool:
        """Return True if the enumeration *type_name* is generated as a set of bit flags.

        Enumerations the resolver does not know are closed enumerations.
        """
        ...


@dataclass
class MappedArgument:
    """Raw and safe representations of one method argument.

    Attributes:
        name: Rust variable name of the argument.
        category: Mapping category.
        is_in: Argument is declared ``[in]``.
        is_out: Argument is declared ``[out]``.
        is_retval: Argument is declared ``[retval]``.
        safe_type: Type exposed to Rust code. For interfaces this is the smart
            pointer type including template arguments.
        raw_type: Type used at the ABI boundary (pointee type for pointers).
        provider_type: Provider trait for data interfaces.
        to_raw: Suffix or function converting a safe value to its raw form.
        from_raw: Constructor converting a raw value to its safe form.
        raw_returned: Suffix converting a safe result to the raw value written
            through an output pointer.
        init_value: Initial value of raw output storage.
        needs_raw_conversion: Conversion goes through a runtime function.
        needs_unpack: Conversion from raw can fail.
        ownership: Reference count semantics for handles.
    """

    name: str
    category: TypeCategory
    is_in: bool
    is_out: bool
    is_retval: bool
    safe_type: str
    raw_type: str
    provider_type: str = ""
    to_raw: str = ""
    from_raw: str = ""
    raw_returned: str = ""
    init_value: str = ""
    needs_raw_conversion: bool = False
    needs_unpack: bool = False
    ownership: Ownership = Ownership.NONE

    @property
    def is_basic(self) -> bool:
        """True for arguments passed by value across the ABI."""
        return self.category in (TypeCategory.SCALAR, TypeCategory.ENUMERATION, TypeCategory.WINDOW_HANDLE)

    @property
    def is_data_interface(self) -> bool:
        return self.category is TypeCategory.DATA_INTERFACE

    @property
    def is_interface(self) -> bool:
        """True for reference-counted handles, including template parameters."""
        return self.category in (TypeCategory.INTERFACE, TypeCategory.TEMPLATE_PARAMETER)

    @property
    def is_result(self) -> bool:
        """True if the argument is delivered through the method's result rather than a parameter."""
        return (self.is_retval and self.is_basic) or (self.is_interface and self.is_out)

    def constructor(self) -> str:
        """Return the path of the function building the safe value from a raw pointer.

        Template arguments in the safe type get turbofish syntax
        (``Collection::<CapeObject>::attach``).
        """
        if not self.from_raw:
            return self.safe_type
        return turbofish(self.safe_type) + "::" + self.from_raw

    def wrapper(self) -> str:
        """Return the safe type in expression position."""
        return turbofish(self.safe_type)

    def data_interface_to_raw(self) -> str:
        """Return the expression passing a data provider across the ABI."""
        return f"(&{self.name}{self.to_raw}).cast_mut()"

    def convert_to_raw(self) -> str:
        """Return the expression converting a window handle to its raw form."""
        return f"{self.to_raw}({self.name})"

    def convert_from_raw(self) -> str:
        """Return the expression converting a raw window handle to its safe form."""
        return f"{self.from_raw}({self.name})"


def turbofish(type_name: str) -> str:
    """Insert ``::`` before every template argument list of *type_name*."""
    return type_name.replace("<", "::<")


def parse_direction(argument: Argument) -> tuple[bool, bool, bool]:
    """Return the ``(in, out, retval)`` flags of an argument.

    Raises:
        UnresolvedAttributeError: For an attribute other than in, out, retval or orphan.
        InvalidDirectionError: If the argument is not exactly one of in or out,
            or is retval without out.
    """
    is_in = is_out = is_retval = False
    for attribute in argument.attributes:
        if attribute.name == "in":
            is_in = True
        elif attribute.name == "out":
            is_out = True
        elif attribute.name == "retval":
            is_retval = True
        elif attribute.name == "orphan":
            # marshaling hint only
            continue
        else:
            raise UnresolvedAttributeError(f"invalid attribute '{attribute.name}'")
    if is_in == is_out:
        raise InvalidDirectionError("argument must be [in] or [out]")
    if is_retval and not is_out:
        raise InvalidDirectionError("argument is [retval] but not [out]")
    return is_in, is_out, is_retval


class TypeMapper:
    """Maps method arguments of one library to their Rust representations.

    Args:
        namespaces: Namespace resolver of the library being generated.
        resolver: Resolution query used to look up the template arity of
            referenced interfaces.
    """

    def __init__(self, namespaces: NamespaceResolver, resolver: InterfaceResolver) -> None:
        self._ns = namespaces
        self._resolver = resolver

    def map_argument(self, argument: Argument, interface: Interface) -> MappedArgument:
        """Map *argument* of a method of *interface*.

        Raises:
            GenerationError: On any invalid attribute, direction, datatype or
                template argument. The error carries the argument name.
        """
        try:
            is_in, is_out, is_retval = parse_direction(argument)
            return self._map(argument_name(argument.name), argument.data_type, interface, is_in, is_out, is_retval)
        except GenerationError as exc:
            raise exc.with_context(argument=argument.name) from None

    def _map(
        self,
        name: str,
        data_type: DataType,
        interface: Interface,
        is_in: bool,
        is_out: bool,
        is_retval: bool,
    ) -> MappedArgument:
        category = data_type.category
        if category in _SCALARS:
            type_name, init_value = _SCALARS[category]
            if data_type.template_args:
                raise ArityMismatchError("unexpected number of template arguments")
            return MappedArgument(
                name=name,
                category=TypeCategory.SCALAR,
                is_in=is_in,
                is_out=is_out,
                is_retval=is_retval,
                safe_type=type_name,
                raw_type=type_name,
                init_value=init_value,
            )
        if category is DataCategory.ENUMERATION:
            return self._map_enumeration(name, data_type, is_in, is_out, is_retval)
        if category is DataCategory.WINDOW_ID:
            if is_out:
                raise UnsupportedTypeError("CapeWindowId must be [in]")
            return MappedArgument(
                name=name,
                category=TypeCategory.WINDOW_HANDLE,
                is_in=is_in,
                is_out=is_out,
                is_retval=is_retval,
                safe_type=DataCategory.WINDOW_ID.value,
                raw_type=self._ns.raw_runtime(DataCategory.WINDOW_ID.value),
                to_raw=self._ns.runtime("CapeWindowIdToRaw"),
                from_raw=self._ns.runtime("CapeWindowIdFromRaw"),
                needs_raw_conversion=True,
            )
        if category is DataCategory.ARRAY_ENUMERATION:
            return self._map_array_enumeration(name, data_type, is_in, is_out, is_retval)
        if category in _DATA_INTERFACES:
            if data_type.template_args:
                raise ArityMismatchError("unexpected number of template arguments")
            return self._map_data_interface(name, category.value, "", is_in, is_out, is_retval)
        if category is DataCategory.INTERFACE:
            return self._map_interface(name, data_type, interface, is_in, is_out, is_retval)
        if category is DataCategory.TEMPLATE_ARGUMENT:
            return self._map_template_parameter(name, data_type, interface, is_in, is_out, is_retval)
        if category is DataCategory.INVALID:
            raise UnsupportedTypeError("invalid data type")
        raise UnsupportedTypeError(f"unsupported data type category '{category.value}'")

    def _map_enumeration(
        self, name: str, data_type: DataType, is_in: bool, is_out: bool, is_retval: bool
    ) -> MappedArgument:
        if data_type.template_args:
            raise ArityMismatchError("unexpected number of template arguments")
        mapped = MappedArgument(
            name=name,
            category=TypeCategory.ENUMERATION,
            is_in=is_in,
            is_out=is_out,
            is_retval=is_retval,
            safe_type=self._ns.runtime(GENERIC_ENUMERATION),
            raw_type=self._ns.raw_runtime(GENERIC_ENUMERATION),
            init_value="0",
        )
        if data_type.name in ("", GENERIC_ENUMERATION):
            return mapped
        mapped.raw_type, mapped.safe_type = self._ns.resolve_enumeration(data_type.name)
        mapped.from_raw = "from"
        if self._resolver.is_bit_flag_enumeration(data_type.name):
            mapped.to_raw = f".bits() as {mapped.raw_type}"
        else:
            mapped.to_raw = f" as {mapped.raw_type}"
        mapped.raw_returned = mapped.to_raw
        mapped.needs_unpack = True
        return mapped

    def _map_data_interface(
        self,
        name: str,
        type_name: str,
        template_suffix: str,
        is_in: bool,
        is_out: bool,
        is_retval: bool,
    ) -> MappedArgument:
        direction = "Out" if is_out else "In"
        raw_type = self._ns.raw_runtime("I" + type_name)
        return MappedArgument(
            name=name,
            category=TypeCategory.DATA_INTERFACE,
            is_in=is_in,
            is_out=is_out,
            is_retval=is_retval,
            safe_type=f"{type_name}{direction}{template_suffix}",
            raw_type=raw_type,
            provider_type=f"{type_name}Provider{direction}",
            to_raw=f".as_{to_snake_case(type_name)}_{direction.lower()}() as *const {raw_type}",
        )

    def _map_array_enumeration(
        self, name: str, data_type: DataType, is_in: bool, is_out: bool, is_retval: bool
    ) -> MappedArgument:
        if len(data_type.template_args) != 1:
            raise ArityMismatchError("CapeArrayEnumeration must have one template argument")
        element = data_type.template_args[0]
        if element.category is not DataCategory.ENUMERATION:
            raise UnsupportedTypeError("CapeArrayEnumeration template argument must be an enumeration")
        if element.name in ("", GENERIC_ENUMERATION):
            element_type = self._ns.runtime(GENERIC_ENUMERATION)
        else:
            _, element_type = self._ns.resolve_enumeration(element.name)
        return self._map_data_interface(
            name, DataCategory.ARRAY_ENUMERATION.value, f"<{element_type}>", is_in, is_out, is_retval
        )

    def _map_interface(
        self,
        name: str,
        data_type: DataType,
        interface: Interface,
        is_in: bool,
        is_out: bool,
        is_retval: bool,
    ) -> MappedArgument:
        mapped = MappedArgument(
            name=name,
            category=TypeCategory.INTERFACE,
            is_in=is_in,
            is_out=is_out,
            is_retval=is_retval,
            safe_type="",
            raw_type="",
            from_raw="attach" if is_out else "from_interface_pointer",
            raw_returned=".detach()",
            ownership=Ownership.TRANSFERRED if is_out else Ownership.BORROWED,
        )
        if data_type.name == GENERIC_OBJECT:
            mapped.raw_type = self._ns.raw_runtime("ICapeInterface")
            mapped.safe_type = self._ns.runtime(GENERIC_OBJECT)
            mapped.to_raw = ".as_cape_interface_pointer()"
            mapped.safe_type += self._template_suffix(data_type.name, data_type, 0, interface)
            return mapped
        mapped.raw_type, mapped.safe_type = self._ns.resolve_interface(data_type.name)
        mapped.to_raw = ".as_interface_pointer()"
        mapped.safe_type += self._template_suffix(data_type.name, data_type, None, interface)
        return mapped

    def _map_template_parameter(
        self,
        name: str,
        data_type: DataType,
        interface: Interface,
        is_in: bool,
        is_out: bool,
        is_retval: bool,
    ) -> MappedArgument:
        object_pointer = self._ns.raw_runtime("ICapeInterface")
        return MappedArgument(
            name=name,
            category=TypeCategory.TEMPLATE_PARAMETER,
            is_in=is_in,
            is_out=is_out,
            is_retval=is_retval,
            safe_type=_template_parameter_name(data_type, interface),
            raw_type=object_pointer,
            to_raw=".as_cape_interface_pointer()",
            from_raw="from_object",
            raw_returned=f".detach() as *mut {object_pointer}",
            needs_unpack=True,
            ownership=Ownership.TRANSFERRED if is_out else Ownership.BORROWED,
        )

    def _template_suffix(self, type_name: str, data_type: DataType, arity: int | None, interface: Interface) -> str:
        """Return the ``<...>`` template argument list of an interface reference.

        When *arity* is None, the declared arity of *type_name* is looked up
        through the resolver. Nested interface references recurse with an
        unknown arity.

        Raises:
            UnresolvedInterfaceError: If the resolver cannot find *type_name*.
            ArityMismatchError: If the number of template arguments differs from the arity.
            UnsupportedTypeError: If a template argument is neither a template
                parameter nor an interface.
        """
        if arity is None:
            try:
                arity = self._resolver.interface_arity(type_name)
            except LookupError as exc:
                raise UnresolvedInterfaceError(f"unable to resolve interface '{type_name}': {exc}") from exc
        if arity != len(data_type.template_args):
            raise ArityMismatchError(
                f"unexpected number of template arguments for '{type_name}': "
                f"expected {arity}, got {len(data_type.template_args)}"
            )
        if arity == 0:
            return ""
        parts: list[str] = []
        for template_arg in data_type.template_args:
            if template_arg.category is DataCategory.TEMPLATE_ARGUMENT:
                parts.append(_template_parameter_name(template_arg, interface))
            elif template_arg.category is DataCategory.INTERFACE:
                if template_arg.name == GENERIC_OBJECT:
                    parts.append(self._ns.runtime(GENERIC_OBJECT))
                    continue
                _, smart = self._ns.resolve_interface(template_arg.name)
                parts.append(smart + self._template_suffix(template_arg.name, template_arg, None, interface))
            else:
                raise UnsupportedTypeError(f"invalid template argument type '{template_arg.name}'")
        return "<" + ",".join(parts) + ">"


# ################
# Implementation
# ################

# Basic data types with identical raw and safe representation, and the
# initial value of raw output storage.
_SCALARS: dict[DataCategory, tuple[str, str]] = {
    DataCategory.BOOLEAN: ("CapeBoolean", "false as CapeBoolean"),
    DataCategory.INTEGER: ("CapeInteger", "0"),
    DataCategory.RESULT: ("CapeResult", "COBIAERR_NOERROR"),
    DataCategory.REAL: ("CapeReal", "0.0"),
    DataCategory.UUID: ("CapeUUID", "CapeUUID::null()"),
}

_DATA_INTERFACES: frozenset[DataCategory] = frozenset(
    {
        DataCategory.STRING,
        DataCategory.ARRAY_STRING,
        DataCategory.ARRAY_INTEGER,
        DataCategory.ARRAY_BOOLEAN,
        DataCategory.ARRAY_REAL,
        DataCategory.ARRAY_VALUE,
        DataCategory.ARRAY_BYTE,
        DataCategory.VALUE,
    }
)


def _template_parameter_name(data_type: DataType, interface: Interface) -> str:
    """Return the name of the template parameter of *interface* bound by *data_type*."""
    index = data_type.template_index
    if index is None or not 0 <= index < len(interface.template_params):
        raise UnsupportedTypeError(f"invalid template argument: no template parameter at index {index}")
    if data_type.template_args:
        raise UnsupportedTypeError("template argument cannot have template arguments")
    return interface.template_params[index]

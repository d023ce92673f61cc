# Copyright 2026 cidl2rs Contributors
# SPDX-License-Identifier: Apache-2.0

"""Emission of Rust bindings for CIDL interfaces.

Each interface produces four coupled items:

1. the capability trait (``pub trait ICapeUnit``) that implementers provide,
2. the implementation-support trait (``ICapeUnitImpl``) holding the
   ``extern "C"`` shims that adapt raw dispatch-table calls to the capability
   trait, and the dispatch table constant itself,
3. the proxy smart pointer (``CapeUnit``) wrapping a raw interface pointer,
4. the proxy's methods marshaling arguments into raw dispatch-table calls.

Methods route their results through ``Result``: every ``[out]`` interface and
every ``[out, retval]`` basic value becomes part of the returned value, in
declaration order. One result is returned as is, any other count as a tuple.
"""

from __future__ import annotations

from dataclasses import dataclass

from cidl2rs.codegen.errors import GenerationError, UnresolvedAttributeError, UnsupportedTypeError
from cidl2rs.codegen.identifiers import (
    constant_name,
    native_method_name,
    provider_type_parameter,
    smart_pointer_name,
    to_snake_case,
)
from cidl2rs.codegen.namespaces import NamespaceResolver
from cidl2rs.codegen.type_mapping import MappedArgument, Ownership, TypeMapper
from cidl2rs.codegen.writer import CodeWriter
from cidl2rs.model.entities import Interface, Method
from cidl2rs.model.types import DataCategory

# ###############
# Public Interface
# ###############

GETTER_PREFIX = "Get"
SETTER_PREFIX = "Set"
GETTER_SLOT_PREFIX = "get"
SETTER_SLOT_PREFIX = "put"


@dataclass(frozen=True)
class MethodNames:
    """Names under which a method appears in the generated code.

    Attributes:
        name: Method name after attribute rewriting (``GetValue``).
        slot: Dispatch table slot name (``getValue``).
        native: ``extern "C"`` shim name (``raw_get_value``).
    """

    name: str
    slot: str
    native: str

    @property
    def snake(self) -> str:
        """Rust method name of the capability trait and the proxy."""
        return to_snake_case(self.name)


def method_names(interface: Interface, method: Method) -> MethodNames:
    """Apply the ``property_get``, ``property_set`` and ``long_name`` attributes of *method*.

    A ``long_name`` replaces the name regardless of any accessor attribute.

    Raises:
        UnresolvedAttributeError: For any other method attribute, or for a
            method that is both a property getter and setter.
    """
    name = method.name
    slot = method.name
    long_name: str | None = None
    accessor: str | None = None
    for attribute in method.attributes:
        if attribute.name in ("property_get", "property_set"):
            if accessor is not None and accessor != attribute.name:
                raise UnresolvedAttributeError(
                    f"conflicting attributes '{accessor}' and '{attribute.name}'",
                    interface=interface.name,
                    method=method.name,
                )
            accessor = attribute.name
        elif attribute.name == "long_name":
            long_name = attribute.value or method.name
        else:
            raise UnresolvedAttributeError(
                f"invalid attribute '{attribute.name}'", interface=interface.name, method=method.name
            )
    if long_name is not None:
        name = slot = long_name
    elif accessor == "property_get":
        name = GETTER_PREFIX + name
        slot = GETTER_SLOT_PREFIX + slot
    elif accessor == "property_set":
        name = SETTER_PREFIX + name
        slot = SETTER_SLOT_PREFIX + slot
    return MethodNames(name=name, slot=slot, native=native_method_name(name))


@dataclass
class MethodPlan:
    """A method with its rewritten names and mapped arguments."""

    method: Method
    names: MethodNames
    arguments: list[MappedArgument]

    @property
    def results(self) -> list[MappedArgument]:
        """Arguments delivered through the method result, in declaration order."""
        return [arg for arg in self.arguments if arg.is_result]

    @property
    def parameters(self) -> list[MappedArgument]:
        """Arguments passed as parameters of the capability trait and proxy methods."""
        return [arg for arg in self.arguments if not arg.is_result]


def result_type(types: list[str]) -> str:
    """Return the ``Ok`` type for the given result types: a single type, or a tuple."""
    if len(types) == 1:
        return types[0]
    return "(" + ", ".join(types) + ")"


class InterfaceEmitter:
    """Emits the Rust items of the interfaces of one library.

    Args:
        mapper: Type mapper of the library being generated.
        namespaces: Namespace resolver of the library being generated.
    """

    def __init__(self, mapper: TypeMapper, namespaces: NamespaceResolver) -> None:
        self._mapper = mapper
        self._ns = namespaces

    def plan(self, interface: Interface, method: Method) -> MethodPlan:
        """Validate *method* and map its arguments.

        Raises:
            GenerationError: On an invalid method or argument, carrying the
                interface and method names.
        """
        names = method_names(interface, method)
        if method.return_type.category is not DataCategory.RESULT:
            raise UnsupportedTypeError("does not return a CAPERESULT", interface=interface.name, method=names.name)
        arguments: list[MappedArgument] = []
        for argument in method.arguments:
            try:
                arguments.append(self._mapper.map_argument(argument, interface))
            except GenerationError as exc:
                raise exc.with_context(interface=interface.name, method=names.name) from None
        return MethodPlan(method=method, names=names, arguments=arguments)

    def emit(self, interface: Interface, code: CodeWriter) -> None:
        """Write all items of *interface* to *code*."""
        plans = [self.plan(interface, method) for method in interface.methods]
        _InterfaceWriter(interface, plans, self._ns, code).write()


# ################
# Implementation
# ################


class _InterfaceWriter:
    """Writes the items of a single interface."""

    def __init__(
        self,
        interface: Interface,
        plans: list[MethodPlan],
        namespaces: NamespaceResolver,
        code: CodeWriter,
    ) -> None:
        self._iface = interface
        self._plans = plans
        self._ns = namespaces
        self._code = code
        self._raw = namespaces.local_raw(interface.name)
        self._smart = smart_pointer_name(interface.name)
        params = interface.template_params
        self._generics_long = "<" + ", ".join(f"{p}: CapeSmartPointer" for p in params) + ">" if params else ""
        self._generics_short = "<" + ", ".join(params) + ">" if params else ""

    def write(self) -> None:
        self._write_capability_trait()
        self._code.line()
        self._write_impl_trait()
        self._code.line()
        self._write_proxy()
        self._code.line()

    def _diagnostic(self, plan: MethodPlan) -> str:
        return f"{self._iface.name}::{plan.names.name}"

    # ------------------------------------------------------------------
    # Capability trait
    # ------------------------------------------------------------------

    def _write_capability_trait(self) -> None:
        code = self._code
        name = self._iface.name
        code.doc(name, "", f"{name} interface", "")
        with code.block(f"pub trait {name}{self._generics_long} {{"):
            for plan in self._plans:
                params = "".join(f", {arg.name}: {_capability_parameter_type(arg)}" for arg in plan.parameters)
                returns = result_type([arg.safe_type for arg in plan.results])
                code.line(f"fn {plan.names.snake}(&mut self{params}) -> Result<{returns}, COBIAError>;")

    # ------------------------------------------------------------------
    # Implementation support trait
    # ------------------------------------------------------------------

    def _write_impl_trait(self) -> None:
        code = self._code
        name = self._iface.name
        impl_name = f"{name}Impl{self._generics_short}"
        object_pointer = self._ns.raw_runtime("ICapeInterface")
        with code.block(f"pub trait {name}Impl{self._generics_long}: {name}{self._generics_short} {{"):
            code.lines(
                f"type T: ICapeInterfaceImpl + {impl_name};",
                "",
                f"fn as_interface_pointer(&mut self) -> *mut {object_pointer};",
                "",
            )
            native_name = f"{self._ns.native_namespace}_{name}"
            code.doc(f"prepare {native_name} interface and return as generic ICapeInterface pointer")
            with code.block(f"fn init_interface() -> {object_pointer} {{"):
                with code.block(f"{object_pointer} {{"):
                    code.lines(
                        "me: std::ptr::null_mut(),",
                        f"vTbl: (&Self::T::VTABLE as *const {self._raw}_VTable).cast_mut()",
                        f"\tas *mut {self._ns.raw_runtime('ICapeInterface_VTable')},",
                    )
            code.line()
            with code.block(f"fn init<Timpl: {impl_name} + ICapeInterfaceImpl>(u: &mut Timpl) {{"):
                code.lines(
                    f"let iface: *mut {self._raw} = u.as_interface_pointer() as *mut {self._raw};",
                    "unsafe { (*iface).me = u.get_self() as *const Timpl as *mut std::ffi::c_void };",
                )
                with code.block("u.add_interface(", ");"):
                    code.lines(
                        f"std::ptr::addr_of!({self._raw}_UUID),",
                        f"iface as *mut {object_pointer},",
                    )
            code.line()
            for plan in self._plans:
                self._write_shim(plan)
                code.line()
            self._write_vtable()

    def _write_shim(self, plan: MethodPlan) -> None:
        code = self._code
        diagnostic = self._diagnostic(plan)
        params = "".join(f", {arg.name}: {_raw_parameter_type(arg)}" for arg in plan.arguments)
        result_code = self._ns.raw_runtime("CapeResult")
        with code.block(f'extern "C" fn {plan.names.native}(me: *mut std::ffi::c_void{params}) -> {result_code} {{'):
            pointers = [arg.name for arg in plan.arguments if _is_pointer(arg)]
            if pointers:
                with code.block("if " + " || ".join(f"{p}.is_null()" for p in pointers) + " {"):
                    code.line("return COBIAERR_NULLPOINTER;")
            code.lines("let p = me as *mut Self::T;", "let myself = unsafe { &mut *p };")
            outputs: list[MappedArgument] = []
            for arg in plan.arguments:
                if arg.is_data_interface:
                    if arg.is_out:
                        code.lines(
                            f"let mut {arg.name} = unsafe {{ *((&{arg.name} as *const *mut {arg.raw_type}) "
                            f"as *mut *mut {arg.raw_type}) }};",
                            f"let mut {arg.name} = {arg.wrapper()}::new(&mut {arg.name});",
                        )
                    else:
                        code.line(f"let {arg.name} = {arg.wrapper()}::new(&{arg.name});")
                elif arg.is_result:
                    continue
                elif arg.is_interface:
                    if arg.needs_unpack:
                        # borrowed generic handles arrive as ICapeInterface
                        borrowed = f"{self._ns.runtime('CapeObject')}::from_interface_pointer({arg.name})"
                        with code.block(f"let {arg.name} = match {arg.constructor()}(&{borrowed}) {{", "};"):
                            code.lines(
                                f"Ok(_{arg.name}) => _{arg.name},",
                                f'Err(e) => {{ return myself.set_last_error(e, "{diagnostic}"); }}',
                            )
                    else:
                        code.line(f"let {arg.name} = {arg.constructor()}({arg.name});")
                elif arg.is_out:
                    outputs.append(arg)
                    code.line(f"let mut _{arg.name}: {arg.raw_type} = {arg.init_value};")
                elif arg.needs_unpack:
                    with code.block(f"let {arg.name} = match {arg.safe_type}::{arg.from_raw}({arg.name}) {{", "};"):
                        code.lines(
                            f"Some(_{arg.name}) => _{arg.name},",
                            "None => { return myself.set_last_error("
                            f'COBIAError::Message("Invalid enumeration value".to_string()), "{diagnostic}"); }}',
                        )
            call_args = ", ".join(_shim_call_argument(arg) for arg in plan.parameters)
            results = plan.results
            if not results:
                pattern = "_"
            elif len(results) == 1:
                pattern = f"_{results[0].name}"
            else:
                pattern = "(" + ", ".join(f"_{arg.name}" for arg in results) + ")"
            with code.block(f"match myself.{plan.names.snake}({call_args}) {{"):
                if not results and not outputs:
                    code.line(f"Ok({pattern}) => COBIAERR_NOERROR,")
                else:
                    with code.block(f"Ok({pattern}) => {{", "},"):
                        for arg in outputs:
                            code.line(f"unsafe {{ *{arg.name} = _{arg.name}; }}")
                        for arg in results:
                            code.line(f"unsafe {{ *{arg.name} = _{arg.name}{arg.raw_returned}; }}")
                        code.line("COBIAERR_NOERROR")
                code.line(f'Err(e) => myself.set_last_error(e, "{diagnostic}"),')

    def _write_vtable(self) -> None:
        code = self._code
        vtable = f"{self._raw}_VTable"
        code.line(f"const VTABLE: {vtable} =")
        code.indent()
        with code.block(f"{vtable} {{", "};"):
            with code.block(f"base: {self._ns.raw_runtime('ICapeInterface_VTable')} {{", "},"):
                code.lines(
                    "addReference: Some(Self::T::raw_add_reference),",
                    "release: Some(Self::T::raw_release),",
                    "queryInterface: Some(Self::T::raw_query_interface),",
                    "getLastError: Some(Self::T::raw_get_last_error),",
                )
            for plan in self._plans:
                code.line(f"{plan.names.slot}: Some(Self::T::{plan.names.native}),")
        code.dedent()

    # ------------------------------------------------------------------
    # Proxy
    # ------------------------------------------------------------------

    def _write_proxy(self) -> None:
        code = self._code
        visibility = "pub(crate)" if self._ns.cobia_module == "crate" else "pub"
        code.line(f"#[cape_smart_pointer({constant_name(self._iface.name)}_UUID)]")
        with code.block(f"pub struct {self._smart}{self._generics_long} {{"):
            code.line(f"{visibility} interface: *mut {self._raw},")
            for param in self._iface.template_params:
                code.line(f"phantom_{to_snake_case(param)}: PhantomData<{param}>,")
        code.line()
        with code.block(f"impl{self._generics_long} {self._smart}{self._generics_short} {{"):
            for index, plan in enumerate(self._plans):
                if index:
                    code.line()
                self._write_proxy_method(plan)

    def _write_proxy_method(self, plan: MethodPlan) -> None:
        code = self._code
        generics: list[str] = []
        params: list[str] = []
        for arg in plan.parameters:
            if arg.is_data_interface:
                type_param = provider_type_parameter(arg.name)
                generics.append(f"{type_param}: {arg.provider_type}")
                arg_type = type_param
            else:
                arg_type = arg.safe_type
            if arg.is_out:
                params.append(f", {arg.name}: &mut {arg_type}")
            elif arg.is_basic:
                params.append(f", {arg.name}: {arg_type}")
            else:
                params.append(f", {arg.name}: &{arg_type}")
        generic_list = "<" + ", ".join(generics) + ">" if generics else ""
        results = plan.results
        returns = result_type([arg.safe_type for arg in results])
        signature = f"pub fn {plan.names.snake}{generic_list}(&self{''.join(params)})"
        with code.block(f"{signature} -> Result<{returns}, COBIAError> {{"):
            for arg in results:
                if arg.is_basic:
                    code.line(f"let mut {arg.name}: {arg.raw_type} = {arg.init_value};")
                else:
                    code.line(f"let mut {arg.name}: *mut {arg.raw_type} = std::ptr::null_mut();")
            with code.block("let result_code = unsafe {", "};"):
                call_args = "".join(", " + _proxy_call_argument(arg) for arg in plan.arguments)
                code.line(f"((*(*self.interface).vTbl).{plan.names.slot}.unwrap())((*self.interface).me{call_args})")
            with code.block("if result_code != COBIAERR_NOERROR {"):
                with code.block("return Err(match COBIAError::from_object(result_code, self) {", "});"):
                    diagnostic = self._diagnostic(plan)
                    # COBIAError::Code passes through without context
                    code.lines(
                        f'COBIAError::CAPEOPEN(e) => COBIAError::MessageWithCause("{diagnostic}".to_string(), e),',
                        "e => e,",
                    )
            for arg in results:
                if arg.ownership is Ownership.TRANSFERRED and arg.needs_unpack:
                    # generic results arrive as ICapeInterface carrying a reference
                    code.line(f"let {arg.name} = {self._ns.runtime('CapeObject')}::attach({arg.name});")
            for arg in results:
                if not arg.needs_unpack:
                    continue
                if arg.is_basic:
                    with code.block(f"let {arg.name} = match {arg.safe_type}::{arg.from_raw}({arg.name}) {{", "};"):
                        code.lines(
                            f"Some(_{arg.name}) => _{arg.name},",
                            'None => { return Err(COBIAError::Message("Invalid enumeration value".to_string())); }',
                        )
                else:
                    with code.block(f"let {arg.name} = match {arg.constructor()}(&{arg.name}) {{", "};"):
                        code.lines(f"Ok(_{arg.name}) => _{arg.name},", "Err(e) => { return Err(e); }")
            values = [
                arg.name if arg.is_basic or arg.needs_unpack else f"{arg.constructor()}({arg.name})" for arg in results
            ]
            code.line(f"Ok({result_type(values)})")


def _capability_parameter_type(arg: MappedArgument) -> str:
    if arg.is_interface:
        return arg.safe_type
    if arg.is_data_interface:
        return f"&mut {arg.safe_type}" if arg.is_out else f"&{arg.safe_type}"
    return f"&mut {arg.safe_type}" if arg.is_out else arg.safe_type


def _raw_parameter_type(arg: MappedArgument) -> str:
    if arg.is_interface and arg.is_out:
        return f"*mut *mut {arg.raw_type}"
    if arg.is_interface or arg.is_data_interface or arg.is_out:
        return f"*mut {arg.raw_type}"
    return arg.raw_type


def _is_pointer(arg: MappedArgument) -> bool:
    """True for raw arguments that are dereferenced by the shim."""
    return arg.is_interface or arg.is_data_interface or arg.is_out


def _shim_call_argument(arg: MappedArgument) -> str:
    if arg.is_basic and arg.is_out:
        return f"&mut _{arg.name}"
    if arg.is_data_interface:
        return f"&mut {arg.name}" if arg.is_out else f"&{arg.name}"
    if arg.needs_raw_conversion:
        return arg.convert_from_raw()
    return arg.name


def _proxy_call_argument(arg: MappedArgument) -> str:
    if arg.is_data_interface:
        return arg.data_interface_to_raw()
    if arg.is_interface:
        if arg.is_out:
            return f"&mut {arg.name} as *mut *mut {arg.raw_type}"
        return f"{arg.name}{arg.to_raw} as *mut {arg.raw_type}"
    if arg.is_retval:
        return f"&mut {arg.name} as *mut {arg.raw_type}"
    if arg.is_out:
        return f"{arg.name} as *mut {arg.raw_type}"
    if arg.needs_raw_conversion:
        return arg.convert_to_raw()
    return f"{arg.name}{arg.to_raw}"

# Copyright 2026 cidl2rs Contributors
# SPDX-License-Identifier: Apache-2.0

"""Emission of Rust types for CIDL enumerations.

An enumeration whose items are all distinct powers of two becomes a
``bitflags!`` type; any other enumeration becomes a closed ``#[repr(i32)]``
enum with integer conversion, name lookup and an iterator over its items.
"""

from __future__ import annotations

from cidl2rs.codegen.errors import UnsupportedTypeError
from cidl2rs.codegen.identifiers import enum_variable_name, to_pascal_case
from cidl2rs.codegen.writer import CodeWriter
from cidl2rs.model.entities import Enumeration

# ###############
# Public Interface
# ###############


def is_bit_flag(enumeration: Enumeration) -> bool:
    """Return True if *enumeration* is a set of bit flags.

    That is the case when it has at least two items and every value is a
    nonzero power of two. Negative values never qualify.
    """
    if len(enumeration.items) < 2:
        return False
    return all(item.value > 0 and item.value & (item.value - 1) == 0 for item in enumeration.items)


class EnumerationEmitter:
    """Writes the Rust definition of enumerations.

    Args:
        runtime_module: Module name of the binding runtime, used in examples.
        example_module: Module name under which the generated code is
            published, used in documentation examples only.
    """

    def __init__(self, runtime_module: str, example_module: str) -> None:
        self._runtime = runtime_module
        self._example = example_module

    def emit(self, enumeration: Enumeration, code: CodeWriter) -> None:
        """Write the Rust type of *enumeration*.

        Raises:
            UnsupportedTypeError: If the enumeration has no items.
        """
        if not enumeration.items:
            raise UnsupportedTypeError(f"enumeration {enumeration.name} has no items")
        if is_bit_flag(enumeration):
            self._emit_bit_flags(enumeration, code)
        else:
            self._emit_closed_enum(enumeration, code)

    def _emit_bit_flags(self, enumeration: Enumeration, code: CodeWriter) -> None:
        with code.block("bitflags! {"):
            code.line("#[derive(Clone, Copy, Debug, PartialEq, Eq, Hash)]")
            with code.block(f"pub struct {enumeration.name}: u32 {{"):
                for item in enumeration.items:
                    code.line(f"const {to_pascal_case(item.name)} = {item.value};")
        code.line()
        with code.block(f"impl {enumeration.name} {{"):
            code.doc(f"Convert from i32 to {enumeration.name}, rejecting undefined bits")
            with code.block(f"pub fn from(value: i32) -> Option<{enumeration.name}> {{"):
                code.line(f"{enumeration.name}::from_bits(value as u32)")
        code.line()

    def _emit_closed_enum(self, enumeration: Enumeration, code: CodeWriter) -> None:
        name = enumeration.name
        items = [(to_pascal_case(item.name), item.value) for item in enumeration.items]
        variable = enum_variable_name(name)
        iterator_example = [
            "```",
            f"use {self._runtime}::*;",
            f"use {self._example}::{name};",
            f"for {variable} in {name}::iter() {{",
            f'    println!("{{}}={{}}", {variable}, {variable} as i32);',
            "}",
            "```",
        ]

        code.doc(name, "", f"{name} enumeration", "")
        code.lines("#[repr(i32)]", "#[derive(Debug, PartialEq, Eq, Clone, Copy)]")
        with code.block(f"pub enum {name} {{"):
            for item_name, value in items:
                code.line(f"{item_name} = {value},")
        code.line()
        with code.block(f"impl {name} {{"):
            code.doc(
                f"Convert from i32 to {name}",
                "",
                "# Arguments",
                "",
                f"* `value` - i32 value to be converted to {name}",
                "",
                "# Examples",
                "",
                "```",
                f"use {self._runtime}::*;",
                f"use {self._example}::{name};",
            )
            for index, (item_name, value) in enumerate(items):
                code.doc(
                    f"let v{index} = {name}::from({value});",
                    f"assert_eq!(v{index}.unwrap(), {name}::{item_name});",
                )
            code.doc("```")
            with code.block(f"pub fn from(value: i32) -> Option<{name}> {{"):
                with code.block("match value {"):
                    for item_name, value in items:
                        code.line(f"{value} => Some({name}::{item_name}),")
                    code.line("_ => None,")
            code.doc("Convert to string")
            with code.block("pub fn as_string(&self) -> &str {"):
                with code.block("match self {"):
                    for item_name, _ in items:
                        code.line(f'Self::{item_name} => "{item_name}",')
            code.doc("get an iterator", "", "# Examples", "", *iterator_example)
            with code.block(f"pub fn iter() -> {name}Iterator {{"):
                code.line(f"{name}Iterator {{ current: 0 }}")
        code.line()
        code.doc(f"{name} iterator", "", f"Iterates over all {name} values", "", "# Examples", "", *iterator_example)
        with code.block(f"pub struct {name}Iterator {{"):
            code.line("current: usize,")
        code.line()
        with code.block(f"impl Iterator for {name}Iterator {{"):
            code.line(f"type Item = {name};")
            with code.block("fn next(&mut self) -> Option<Self::Item> {"):
                with code.block("let result = match self.current {", "};"):
                    for index, (item_name, _) in enumerate(items):
                        code.line(f"{index} => {name}::{item_name},")
                    code.line("_ => return None,")
                code.lines("self.current += 1;", "Some(result)")
        code.line()
        with code.block(f"impl fmt::Display for {name} {{"):
            with code.block("fn fmt(&self, f: &mut fmt::Formatter) -> fmt::Result {"):
                code.line('write!(f, "{}", self.as_string())')
        code.line()

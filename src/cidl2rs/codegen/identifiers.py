# Copyright 2026 cidl2rs Contributors
# SPDX-License-Identifier: Apache-2.0

"""Identifier conversions between CIDL names and Rust names."""

from __future__ import annotations

# ###############
# Public Interface
# ###############

RUST_KEYWORDS: frozenset[str] = frozenset(
    {
        # Strict keywords
        "as",
        "break",
        "const",
        "continue",
        "crate",
        "else",
        "enum",
        "extern",
        "false",
        "fn",
        "for",
        "if",
        "impl",
        "in",
        "let",
        "loop",
        "match",
        "mod",
        "move",
        "mut",
        "pub",
        "ref",
        "return",
        "self",
        "Self",
        "static",
        "struct",
        "super",
        "trait",
        "true",
        "type",
        "unsafe",
        "use",
        "where",
        "while",
        "async",
        "await",
        "dyn",
        # Reserved keywords
        "abstract",
        "become",
        "box",
        "do",
        "final",
        "macro",
        "override",
        "priv",
        "typeof",
        "unsized",
        "virtual",
        "yield",
        "try",
    }
)

ESCAPE_MARKER = "_"
RAW_METHOD_PREFIX = "raw"


def to_snake_case(identifier: str) -> str:
    """Convert a CamelCase identifier to snake_case.

    An underscore is inserted before an uppercase letter that follows a
    non-uppercase character, so runs of capitals stay together
    (``GetUUID`` -> ``get_uuid``). Already snake-cased input is returned unchanged.
    """
    result: list[str] = []
    allow_separator = False
    for char in identifier:
        if char.isupper():
            if allow_separator:
                result.append("_")
            result.append(char.lower())
            allow_separator = False
        else:
            result.append(char)
            allow_separator = True
    return "".join(result)


def to_pascal_case(identifier: str) -> str:
    """Convert an underscore-separated identifier to PascalCase (``SOLID_PHASE`` -> ``SolidPhase``)."""
    result: list[str] = []
    upper = True
    for char in identifier:
        if char == "_":
            upper = True
        elif upper:
            result.append(char.upper())
            upper = False
        else:
            result.append(char.lower())
    return "".join(result)


def escape_reserved(identifier: str) -> str:
    """Prefix *identifier* with the escape marker if it collides with a Rust keyword."""
    if identifier in RUST_KEYWORDS:
        return ESCAPE_MARKER + identifier
    return identifier


def argument_name(identifier: str) -> str:
    """Return the Rust variable name for a CIDL argument name."""
    return escape_reserved(to_snake_case(identifier))


def native_method_name(identifier: str) -> str:
    """Return the name of the raw ``extern "C"`` entry point for a method.

    Every uppercase letter is preceded by an underscore and lower-cased, and
    the result is prefixed with ``raw`` (``GetValue`` -> ``raw_get_value``).
    """
    result: list[str] = []
    for char in identifier:
        if "A" <= char <= "Z":
            result.append("_")
            result.append(char.lower())
        else:
            result.append(char)
    name = "".join(result)
    if not name.startswith("_"):
        name = "_" + name
    return RAW_METHOD_PREFIX + name


def smart_pointer_name(interface_name: str) -> str:
    """Return the proxy type name for an interface (``ICapeUnit`` -> ``CapeUnit``, ``Thing`` -> ``TThing``)."""
    if interface_name.startswith("I"):
        return interface_name[1:]
    return "T" + interface_name


def constant_name(identifier: str) -> str:
    """Return *identifier* upper-cased for use in a constant name."""
    return identifier.upper()


def module_name(library_name: str) -> str:
    """Return the Rust module name under which a library's bindings are published."""
    return to_snake_case(library_name).replace("capeopen", "cape_open", 1)


def provider_type_parameter(argument: str) -> str:
    """Return the generic parameter name bound to a data provider argument.

    The escape marker is dropped and the remaining snake_case name is
    converted to PascalCase behind a ``TypeOf`` prefix (``_type`` -> ``TypeOfType``).
    """
    name = argument[1:] if argument.startswith(ESCAPE_MARKER) else argument
    if not name:
        return "TypeOf"
    result = ["TypeOf", name[0].upper()]
    next_upper = False
    for char in name[1:]:
        if char == "_":
            next_upper = True
        elif next_upper:
            result.append(char.upper())
            next_upper = False
        else:
            result.append(char)
    return "".join(result)


def enum_variable_name(enumeration: str) -> str:
    """Return a loop variable name for documentation examples iterating an enumeration."""
    if enumeration[:1].isupper():
        return enumeration[0].lower() + enumeration[1:]
    return ESCAPE_MARKER + enumeration

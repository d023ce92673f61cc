# Copyright 2026 cidl2rs Contributors
# SPDX-License-Identifier: Apache-2.0

"""Loading of resolved CIDL descriptions produced by the CIDL parser.

The parser writes each parse result as a JSON (or YAML) document::

    {"version": "1", "libraries": [{"name": "...", "uuid": "...", ...}]}

Documents are validated against the :mod:`cidl2rs.model` schema. Input
descriptors that do not name an existing file are library references: they
select the library to generate among all loaded libraries.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from cidl2rs.model.entities import Library

# ###############
# Public Interface
# ###############

ARTIFACT_FORMAT_VERSION = "1"
YAML_SUFFIXES: frozenset[str] = frozenset({".yaml", ".yml"})


class CollaboratorParseError(Exception):
    """Raised when a resolved CIDL description cannot be loaded."""


@dataclass
class ParseResult:
    """All libraries loaded from the input descriptors.

    Attributes:
        libraries: Loaded libraries, in input order.
        references: Library references given instead of file paths.
    """

    libraries: list[Library] = field(default_factory=list)
    references: list[str] = field(default_factory=list)

    def target(self) -> Library:
        """Return the library to generate bindings for.

        This is the referenced library if a reference was given, otherwise
        the first loaded library.

        Raises:
            CollaboratorParseError: If no library was loaded or the reference
                does not name a loaded library.
        """
        if not self.libraries:
            raise CollaboratorParseError("No libraries found")
        if not self.references:
            return self.libraries[0]
        by_name = {library.name: library for library in self.libraries}
        for reference in self.references:
            if reference not in by_name:
                raise CollaboratorParseError(f"Library '{reference}' not found in the loaded descriptions")
        return by_name[self.references[0]]


def load_libraries(descriptors: list[str]) -> ParseResult:
    """Load all libraries named by *descriptors*.

    Args:
        descriptors: File paths of resolved descriptions, or library references.

    Returns:
        A :class:`ParseResult` with the libraries of all files.

    Raises:
        CollaboratorParseError: If a file cannot be read or is invalid, or a
            library name is defined twice.
    """
    result = ParseResult()
    seen: set[str] = set()
    for descriptor in descriptors:
        path = Path(descriptor)
        if not path.is_file():
            result.references.append(descriptor)
            continue
        for library in read_description(path):
            if library.name in seen:
                raise CollaboratorParseError(f"{path}: library '{library.name}' is defined more than once")
            seen.add(library.name)
            result.libraries.append(library)
    return result


def read_description(path: Path) -> list[Library]:
    """Read and validate the libraries of one description file."""
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise CollaboratorParseError(f"Cannot read CIDL description '{path}': {exc}") from exc
    return parse_description(text, source_label=str(path), use_yaml=path.suffix.lower() in YAML_SUFFIXES)


def parse_description(text: str, source_label: str = "<string>", *, use_yaml: bool = False) -> list[Library]:
    """Parse description text into libraries.

    Raises:
        CollaboratorParseError: On a syntax error, an unsupported format
            version, or a document not matching the model schema.
    """
    try:
        data = yaml.safe_load(text) if use_yaml else json.loads(text)
    except (yaml.YAMLError, json.JSONDecodeError) as exc:
        raise CollaboratorParseError(f"Invalid CIDL description in {source_label}: {exc}") from exc

    if not isinstance(data, dict):
        raise CollaboratorParseError(f"{source_label}: CIDL description must be a mapping")
    version = str(data.get("version", ARTIFACT_FORMAT_VERSION))
    if version != ARTIFACT_FORMAT_VERSION:
        raise CollaboratorParseError(f"{source_label}: unsupported description format version {version!r}")
    raw_libraries = data.get("libraries", [])
    if not isinstance(raw_libraries, list):
        raise CollaboratorParseError(f"{source_label}: 'libraries' must be a list")
    return [_library_from_dict(entry, index, source_label) for index, entry in enumerate(raw_libraries)]


# ################
# Implementation
# ################


def _library_from_dict(entry: Any, index: int, source_label: str) -> Library:
    try:
        return Library.model_validate(entry)
    except ValidationError as exc:
        raise CollaboratorParseError(f"{source_label}: libraries[{index}] is invalid:\n{exc}") from exc

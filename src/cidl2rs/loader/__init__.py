# Copyright 2026 cidl2rs Contributors
# SPDX-License-Identifier: Apache-2.0

"""Boundary to the CIDL parser: resolved descriptions and interface lookup."""

from cidl2rs.loader.artifact import (
    ARTIFACT_FORMAT_VERSION,
    CollaboratorParseError,
    ParseResult,
    load_libraries,
    parse_description,
    read_description,
)
from cidl2rs.loader.resolver import LibraryTypeResolver

__all__ = [
    "ARTIFACT_FORMAT_VERSION",
    "CollaboratorParseError",
    "LibraryTypeResolver",
    "ParseResult",
    "load_libraries",
    "parse_description",
    "read_description",
]

# Copyright 2026 cidl2rs Contributors
# SPDX-License-Identifier: Apache-2.0

"""Errors raised while generating bindings.

Every error is fatal to the run. Errors are raised at the point of detection
and enriched with the enclosing interface, method and argument names by the
callers that know them, via :meth:`GenerationError.with_context`.
"""

from __future__ import annotations

# ###############
# Public Interface
# ###############


class GenerationError(Exception):
    """Base class for all binding generation errors.

    Attributes:
        detail: Description of the problem, without location.
        interface: Name of the interface being generated, if known.
        method: Name of the method being generated, if known.
        argument: Name of the argument being mapped, if known.
    """

    def __init__(
        self,
        detail: str,
        *,
        interface: str | None = None,
        method: str | None = None,
        argument: str | None = None,
    ) -> None:
        self.detail = detail
        self.interface = interface
        self.method = method
        self.argument = argument
        super().__init__(self._render())

    def with_context(
        self,
        *,
        interface: str | None = None,
        method: str | None = None,
        argument: str | None = None,
    ) -> GenerationError:
        """Fill in location fields that are not set yet and return ``self``."""
        if self.interface is None:
            self.interface = interface
        if self.method is None:
            self.method = method
        if self.argument is None:
            self.argument = argument
        self.args = (self._render(),)
        return self

    def __str__(self) -> str:
        return self._render()

    def _render(self) -> str:
        location: list[str] = []
        if self.argument is not None:
            location.append(f"argument {self.argument}")
        if self.method is not None:
            location.append(f"method {self.method}")
        if self.interface is not None:
            location.append(f"interface {self.interface}")
        if not location:
            return self.detail
        return " of ".join(location) + ": " + self.detail


class UnresolvedAttributeError(GenerationError):
    """Raised for an attribute that is not recognized on a method or argument."""


class InvalidDirectionError(GenerationError):
    """Raised when an argument is not exactly one of [in] or [out], or [retval] lacks [out]."""


class ArityMismatchError(GenerationError):
    """Raised when the number of template arguments does not match the declared arity."""


class UnsupportedTypeError(GenerationError):
    """Raised for an invalid datatype or a direction the datatype does not allow."""


class UnresolvedInterfaceError(GenerationError):
    """Raised when the resolver cannot find a referenced interface."""

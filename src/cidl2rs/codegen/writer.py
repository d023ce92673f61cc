# Copyright 2026 cidl2rs Contributors
# SPDX-License-Identifier: Apache-2.0

"""Line-oriented text buffer with indentation support for generated Rust code."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

# ###############
# Public Interface
# ###############

INDENT = "\t"


class CodeWriter:
    """Accumulates generated lines, indenting them by the current block depth."""

    def __init__(self) -> None:
        self._lines: list[str] = []
        self._depth = 0

    def line(self, text: str = "") -> None:
        """Add one line at the current indentation; an empty line is never indented."""
        if text:
            self._lines.append(INDENT * self._depth + text)
        else:
            self._lines.append("")

    def lines(self, *texts: str) -> None:
        """Add several lines at the current indentation."""
        for text in texts:
            self.line(text)

    def doc(self, *texts: str) -> None:
        """Add ``///`` documentation comment lines."""
        for text in texts:
            self.line(f"/// {text}" if text else "///")

    def extend(self, other: CodeWriter) -> None:
        """Append the lines of *other*, indented by the current depth."""
        for text in other._lines:
            self.line(text)

    def indent(self) -> None:
        self._depth += 1

    def dedent(self) -> None:
        if self._depth > 0:
            self._depth -= 1

    @contextmanager
    def block(self, header: str, footer: str = "}") -> Iterator[None]:
        """Write *header*, indent the body written inside the ``with`` block, then write *footer*."""
        self.line(header)
        self.indent()
        try:
            yield
        finally:
            self.dedent()
            self.line(footer)

    def is_empty(self) -> bool:
        return not self._lines

    def output(self) -> str:
        """Return the accumulated text, terminated by a newline."""
        if not self._lines:
            return ""
        return "\n".join(self._lines) + "\n"

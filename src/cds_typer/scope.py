"""Indentation aware line buffers and the nested namespace scopes built on top of them."""

from __future__ import annotations

import enum
import logging
from typing import override

logger = logging.getLogger(__name__)

DEFAULT_INDENTATION = "  "


class StructuralError(Exception):
    """Raised when an internal structural invariant of the generated output is violated."""

    pass


class Buffer:
    """String buffer to conveniently append lines to.

    The current indentation is applied when a line is added, so changing the
    indentation later does not affect lines that are already in the buffer.
    """

    def __init__(self, indentation: str = DEFAULT_INDENTATION):
        """Initialize an empty buffer.

        Args:
            indentation (str, optional): The unit that is added per indentation level.
                Defaults to two spaces.
        """
        self.parts: list[str] = []
        self.indentation = indentation
        self.current_indent = ""

    def __len__(self) -> int:
        return len(self.parts)

    def __bool__(self) -> bool:
        return bool(self.parts)

    def indent(self):
        """Indent by one level."""
        self.current_indent += self.indentation

    def outdent(self):
        """Remove one level of indentation.

        Raises:
            StructuralError: If the buffer is not indented at all.
        """
        if not self.current_indent:
            raise StructuralError("Can not outdent buffer further. Probably mismatched indent.")
        self.current_indent = self.current_indent[: -len(self.indentation)]

    def add(self, part: str):
        """Add a line with the current indentation.

        Args:
            part (str): The line to add.
        """
        self.parts.append(self.current_indent + part)

    def join(self, glue: str = "\n") -> str:
        """Concatenate all lines of the buffer.

        Args:
            glue (str, optional): The separator between lines. Defaults to a newline.

        Returns:
            str: The buffer contents.
        """
        return glue.join(self.parts)

    def clear(self):
        """Drop all lines from the buffer."""
        self.parts = []


class ScopeState(enum.Enum):
    """Lifecycle states of a nested scope."""

    OPEN = "open"
    CLOSED = "closed"


class NamespaceBuffer(Buffer):
    """A buffer holding the body of an `export namespace` block.

    The block heading is written on creation. The closing brace is written by
    `close`, after which the buffer rejects any further content.
    """

    def __init__(self, name: str, indentation: str = DEFAULT_INDENTATION):
        """Open a new namespace block.

        Args:
            name (str): The name of the namespace.
            indentation (str, optional): The indentation unit. Defaults to two spaces.
        """
        super().__init__(indentation)
        self.name = name
        self.state = ScopeState.OPEN
        super().add(f"export namespace {name} {{")
        super().indent()
        logger.debug("Opened namespace scope '%s'.", name)

    @property
    def closed(self) -> bool:
        """Whether the namespace block was already closed."""
        return self.state is ScopeState.CLOSED

    def _ensure_open(self):
        if self.closed:
            raise StructuralError(f"Tried to add content to namespace buffer '{self.name}' that was already closed.")

    @override
    def indent(self):
        self._ensure_open()
        super().indent()

    @override
    def outdent(self):
        self._ensure_open()
        super().outdent()

    @override
    def add(self, part: str):
        self._ensure_open()
        super().add(part)

    def close(self):
        """Write the closing brace and mark the namespace as closed.

        Raises:
            StructuralError: If the namespace is already closed, or its body has unbalanced indentation.
        """
        self._ensure_open()
        if self.current_indent != self.indentation:
            raise StructuralError(f"Namespace buffer '{self.name}' is closed with unbalanced indentation.")
        super().outdent()
        super().add("}")
        self.state = ScopeState.CLOSED

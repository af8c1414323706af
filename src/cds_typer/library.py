"""Predefined libraries that hold hand written type definitions for a fixed namespace."""

from __future__ import annotations

import logging
import os
import re
from typing import Protocol, override

from cds_typer.path import Path
from cds_typer.writer import File

logger = logging.getLogger(__name__)

# One declaration header per line, e.g. `export declare abstract class TINYINT extends Number {`.
CLASS_HEADER = re.compile(r"^export\s+(?:declare\s+)?(?:abstract\s+)?class\s+([A-Za-z_$][\w$]*)\b")

# Block comments may span lines or end unterminated; line comments run to the end of the line.
COMMENT = re.compile(r"/\*.*?(?:\*/|\Z)|//[^\n]*", re.DOTALL)


class TextSource(Protocol):
    """An open text file."""

    name: str

    def read(self) -> str: ...


def parse_class_names(contents: str) -> tuple[str, ...]:
    """Collect the names of all exported classes declared in a library.

    Only headers at the start of a line count, after all comments are removed.
    All other kinds of declarations are skipped.

    Args:
        contents (str): The library source.

    Returns:
        tuple[str, ...]: The class names, in order of declaration.
    """
    # Comments are replaced by the line breaks they span, so code around them keeps its line.
    code = COMMENT.sub(lambda m: "\n" * m.group().count("\n"), contents)

    names: list[str] = []
    for line in code.splitlines():
        match = CLASS_HEADER.match(line.strip())
        if match:
            names.append(match.group(1))

    return tuple(names)


class Library(File):
    """A file with predefined types that is copied verbatim into the output, if referenced.

    The namespace of a library is derived from its file name only, e.g. `path/to/cap.hana.ts`
    holds the definitions for namespace `cap.hana`.

    Attributes:
        file: The file the library was read from
        contents: The library source
        namespace: The dotted namespace of the library
        entities: The names of the classes the library offers, without namespace
        referenced: Whether a compiled model references the library at least once
        path: The Path built from the namespace
    """

    def __init__(self, file: str | os.PathLike[str] | TextSource):
        """Read a library.

        Args:
            file (str | os.PathLike[str] | TextSource): The path of the library file, or an open text file.
        """
        if isinstance(file, (str, os.PathLike)):
            self.file = os.fspath(file)
            with open(self.file, encoding="utf8") as f:
                self.contents = f.read()
        else:
            self.file = file.name
            self.contents = file.read()

        self.entities = parse_class_names(self.contents)
        self.namespace, _ = os.path.splitext(os.path.basename(self.file))
        self.referenced = False
        self.path = Path.from_namespace(self.namespace)

        logger.debug("Library '%s' offers %d class(es).", self.namespace, len(self.entities))

    def offers(self, entity: str) -> bool:
        """Whether this library offers an entity.

        Args:
            entity (str): The fully qualified entity name, e.g. `cap.hana.TINYINT`.

        Returns:
            bool: True, iff the namespace of the entity is the namespace of this library
                and the library declares a class of that name.
        """
        namespace, _, name = entity.rpartition(".")
        return namespace == self.namespace and name in self.entities

    @override
    def to_type_defs(self) -> str:
        """The library source, unchanged."""
        return self.contents

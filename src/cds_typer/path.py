"""Namespace qualifiers and their conversion into directories, identifiers and import paths."""

from __future__ import annotations

import os.path
import posixpath
from dataclasses import dataclass
from typing import override

CURRENT_DIRECTORY = "./"


@dataclass(frozen=True)
class Path:
    """An immutable namespace qualifier, e.g. `a.b.c` is stored as `("a", "b", "c")`.

    All conversions are derived from the parts on demand.
    """

    parts: tuple[str, ...] = ()

    def __post_init__(self):
        """Normalise the parts and reject parts that would break out of the directory structure."""
        object.__setattr__(self, "parts", tuple(self.parts))

        for part in self.parts:
            if "/" in part or os.sep in part or (os.altsep and os.altsep in part):
                raise ValueError(f"Path part '{part}' must not contain a path separator.")

    @classmethod
    def from_namespace(cls, namespace: str) -> Path:
        """Create a path from a dotted namespace.

        Args:
            namespace (str): The namespace, e.g. `a.b.c`. An empty string yields the empty path.

        Returns:
            Path: The new path.
        """
        return cls(tuple(namespace.split("."))) if namespace else cls()

    @override
    def __str__(self) -> str:
        return self.as_namespace()

    def get_parent(self) -> Path:
        """The path to the parent directory, e.g. `a.b.c` -> `a.b`."""
        return Path(self.parts[:-1])

    def as_directory(self, relative: str | None = None, local: bool = True, posix: bool = True) -> str:
        """Transform the path into a directory.

        Args:
            relative (str | None, optional): If given, the directory is made relative to this directory.
                Defaults to None.
            local (bool, optional): Whether to prefix the result with the current directory marker `./`.
                Defaults to True.
            posix (bool, optional): Whether to use forward slashes on every OS, as needed for import statements.
                Defaults to True.

        Returns:
            str: The directory, e.g. `a/b/c` for `a.b.c` (`a\\b\\c` on Windows, if posix is False).

        Examples:
            >>> Path(("a", "b")).as_directory()
            './a/b'
            >>> Path(("a", "c")).as_directory(relative="./a/b")
            './../c'
            >>> Path(("a", "b")).as_directory(relative="./a/b")
            './'
        """
        sep = posixpath.sep if posix else os.sep
        prefix = f".{sep}" if local else ""

        absolute = os.path.join(*self.parts) if self.parts else os.curdir
        directory = os.path.relpath(absolute, relative) if relative else os.path.normpath(absolute)

        # Both relpath and normpath denote the directory itself by a single dot.
        if directory == os.curdir:
            directory = ""

        if posix:
            directory = directory.replace(os.sep, posixpath.sep)

        return prefix + directory

    def as_namespace(self) -> str:
        """The dotted namespace qualifier, e.g. `a.b.c`."""
        return ".".join(self.parts)

    def as_identifier(self) -> str:
        """An identifier that can be used as a variable name, e.g. `_a_b_c` for `a.b.c` and `_` for the empty path."""
        return f"_{'_'.join(self.parts)}"

    def is_cwd(self, relative: str | None = None) -> bool:
        """Whether the path refers to the current directory.

        Args:
            relative (str | None, optional): The directory to compare against. Defaults to None.

        Returns:
            bool: Without a reference directory, True iff the path is empty. Otherwise, True iff the path
                resolves to `./` relative to the reference directory.
        """
        if not relative:
            return not self.parts
        return self.as_directory(relative=relative) == CURRENT_DIRECTORY

"""Assemble the type definitions and the runtime stub of a module from incremental contributions.

The contributions arrive in any order. Each declaration category is collected in
a buffer of its own, and the buffers are concatenated in a fixed order on
serialization, so that forward references and declaration merging work out in
the generated TypeScript.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import override

from cds_typer import helper
from cds_typer.helper import ANY_TYPE, EnumPairs, Parameters
from cds_typer.path import Path
from cds_typer.scope import Buffer, NamespaceBuffer, StructuralError
from cds_typer.writer_dto import ActionsSection, EnumData, EnumsSection, EventData, EventsSection, ServicesSection

logger = logging.getLogger(__name__)

AUTO_GEN_NOTE = "// This is an automatically generated file. Please do not change its contents manually!"

FRAMEWORK_MODULE = "@sap/cds"

# Services come first, as everything else may refer to them. Inline enums and aspects
# are referenced by classes. Namespaces follow classes to allow declaration merging.
TYPE_DEF_SECTION_ORDER = (
    "services",
    "types",
    "enums",
    "inline_enums",
    "aspects",
    "classes",
    "events",
    "actions",
    "namespaces",
)

BASE_DEFINITIONS_NAMESPACE = "_"

BASE_DEFINITIONS_PREAMBLE = """
export namespace Association {
    export type to <T> = T;
    export namespace to {
        export type many <T extends readonly any[]> = T;
    }
}

export namespace Composition {
    export type of <T> = T;
    export namespace of {
        export type many <T extends readonly any[]> = T;
    }
}

export class Entity {
    static data<T extends Entity> (this:T, _input:Object) : T {
        return {} as T // mock
    }
}

export type EntitySet<T> = T[] & {
    data (input:object[]) : T[]
    data (input:object) : T
};

export type DeepRequired<T> = {
    [K in keyof T]: DeepRequired<T[K]>
} & Required<T>;
"""


class DuplicateServiceError(Exception):
    """Raised when a second service is added to a file that already holds one."""

    pass


class File:
    """A module that produces a type definition file and a runtime stub file.

    Attributes:
        path: The namespace of the module, which also determines its output directory.
    """

    path: Path

    def to_type_defs(self) -> str:
        """Create the contents of the type definition file.

        Returns:
            str: The complete file contents.
        """
        return ""

    def to_js_exports(self) -> str:
        """Create the contents of the runtime stub that accompanies the type definitions.

        Returns:
            str: The complete file contents.
        """
        return ""


class SourceFile(File):
    """A module that is assembled from buffers, one per declaration category.

    Callers may write to the `preamble`, `types`, `aspects` and `classes` buffers, as well as to the buffers
    of the `events` and `services` sections directly. Everything that needs bookkeeping for the runtime stub
    goes through the `add_*` methods.
    """

    def __init__(self, path: str | Path):
        """Initialize an empty source file.

        Args:
            path (str | Path): The namespace of the module, either dotted (`a.b.c`) or as a Path.
        """
        self.path = path if isinstance(path, Path) else Path.from_namespace(path)

        # Keyed by the import's directory relative to this file, in order of discovery.
        self.imports: dict[str, Path] = {}

        self.preamble = Buffer()
        self.services = ServicesSection()
        self.types = Buffer()
        self.enums = EnumsSection()
        self.inline_enums = Buffer()
        self.aspects = Buffer()
        self.classes = Buffer()
        self.events = EventsSection()
        self.actions = ActionsSection()
        self.namespaces: dict[str, NamespaceBuffer] = {}

        self.class_names: dict[str, str] = {}
        self.type_names: dict[str, str] = {}
        self.inflections: list[tuple[str, str, str]] = []

    @staticmethod
    def stringify_lambda(
        name: str | None = None,
        parameters: Parameters | None = None,
        returns: str = ANY_TYPE,
        initialiser: str | None = None,
        is_static: bool = False,
    ) -> str:
        """Stringify a callable, see `helper.new_lambda`."""
        return helper.new_lambda(name, parameters, returns, initialiser, is_static)

    def add_inflection(self, singular: str, plural: str, original: str):
        """Add a singular and plural inflection of an entity.

        These are used to generate the aliases in the runtime stub.

        Args:
            singular (str): Singular name without namespace.
            plural (str): Plural name without namespace.
            original (str): The original entity name without namespace. Often the same as plural.
        """
        self.inflections.append((singular, plural, original))

    def _add_callable(self, kind: str, name: str, parameters: Parameters, returns: str):
        self.actions.buffer.add(f"// {kind}")
        self.actions.buffer.add(f"export declare const {self.stringify_lambda(name, parameters, returns)};")
        self.actions.add(name)

    def add_function(self, name: str, parameters: Parameters, returns: str = ANY_TYPE):
        """Add a function declaration.

        Args:
            name (str): The name of the function.
            parameters (Parameters): The parameters as (name, type) pairs.
            returns (str, optional): The return type. Defaults to 'any'.
        """
        self._add_callable("function", name, parameters, returns)

    def add_action(self, name: str, parameters: Parameters, returns: str = ANY_TYPE):
        """Add an action declaration.

        Args:
            name (str): The name of the action.
            parameters (Parameters): The parameters as (name, type) pairs.
            returns (str, optional): The return type. Defaults to 'any'.
        """
        self._add_callable("action", name, parameters, returns)

    def get_sub_namespace(self, name: str) -> NamespaceBuffer:
        """Retrieve a sub namespace, creating it on first request.

        Args:
            name (str): The name of the sub namespace.

        Raises:
            StructuralError: If the namespace was already closed by serializing this file.

        Returns:
            NamespaceBuffer: The buffer of the sub namespace.
        """
        if name not in self.namespaces:
            self.namespaces[name] = NamespaceBuffer(name)

        namespace = self.namespaces[name]
        if namespace.closed:
            raise StructuralError(f"Tried to add content to namespace buffer '{name}' that was already closed.")
        return namespace

    def add_enum(self, fq: str, name: str, kvs: EnumPairs):
        """Add a named enum.

        Args:
            fq (str): The fully qualified name of the enum.
            name (str): The local name of the enum.
            kvs (EnumPairs): The (key, value) pairs of the enum.
        """
        self.enums.add(EnumData(name=name, fq=fq, kvs=tuple(kvs)))
        helper.print_enum(self.enums.buffer, name, kvs)

    def add_inline_enum(self, entity_clean_name: str, entity_fq_name: str, property_name: str, kvs: EnumPairs):
        """Add an enum that is defined inline on a property of an entity.

        The declaration is not exported. It has no static counterpart in the runtime stub either,
        as the runtime resolves it against the live model.

        Args:
            entity_clean_name (str): The entity name without namespace.
            entity_fq_name (str): The entity name with namespace.
            property_name (str): The property the enum is attached to.
            kvs (EnumPairs): The (key, value) pairs of the enum.

        Example:
            `add_inline_enum("Books", "bookshop.Books", "genre", [("horror", "horror")])` declares
            `const Books_genre` and `type Books_genre` for use in the class `Books`.
        """
        logger.debug("Adding inline enum for property '%s' of '%s'.", property_name, entity_fq_name)
        self.enums.add(EnumData.create_inline(entity_clean_name, property_name, kvs))
        helper.print_enum(
            self.inline_enums,
            helper.property_to_inline_enum_name(entity_clean_name, property_name),
            kvs,
            export=False,
        )

    def add_class(self, clean: str, fq: str):
        """Register a class that is present in this file.

        This does not write to the classes buffer.

        Args:
            clean (str): The class name without namespace.
            fq (str): The fully qualified class name.
        """
        self.class_names[clean] = fq

    def add_event(self, name: str, fq: str):
        """Register an event for export.

        Args:
            name (str): The event name without namespace.
            fq (str): The fully qualified event name.
        """
        self.events.add(EventData(name=name, fq=fq))

    def add_import(self, imp: Path):
        """Add an import if it does not exist yet.

        Args:
            imp (Path): The namespace to import.
        """
        directory = imp.as_directory(relative=self.path.as_directory())
        if directory not in self.imports:
            self.imports[directory] = imp

    def add_preamble(self, code: str):
        """Add code that is placed right after the imports.

        Args:
            code (str): The preamble code.
        """
        self.preamble.add(code)

    def add_type(self, fq: str, clean: str, rhs: str):
        """Add a type alias.

        Args:
            fq (str): The fully qualified name of the type.
            clean (str): The local name of the type.
            rhs (str): The right hand side of the alias.
        """
        self.type_names[clean] = fq
        self.types.add(f"export type {clean} = {rhs};")

    def add_service(self, fq: str):
        """Add the service of this file.

        Each service is considered a namespace of its own, so a file holds at most one service.

        Args:
            fq (str): The fully qualified name of the service.

        Raises:
            DuplicateServiceError: If the file already holds a service.
        """
        existing = self.services.registered
        if existing is not None:
            raise DuplicateServiceError(
                f"trying to add more than one service to file {self.path.as_directory()}. "
                f"Existing service is {existing}, trying to add {fq}"
            )
        self.services.add(fq)

    def get_imports(self) -> Buffer:
        """Write all imports to a new buffer, skipping imports of this file itself.

        Returns:
            Buffer: The import statements.
        """
        own_directory = self.path.as_directory()
        buffer = Buffer()
        for imp in self.imports.values():
            if imp.is_cwd(own_directory):
                logger.debug("Skipping self-import of '%s'.", imp.as_namespace())
                continue
            buffer.add(f"import * as {imp.as_identifier()} from '{imp.as_directory(relative=own_directory)}';")
        return buffer

    def _close_namespaces(self) -> Buffer:
        namespaces = Buffer()
        for namespace in self.namespaces.values():
            if not namespace.closed:
                namespace.close()
            namespaces.add(namespace.join())
        return namespaces

    @override
    def to_type_defs(self) -> str:
        """Create the type definitions, closing all open sub namespaces.

        Returns:
            str: The complete file contents, with sections separated by a blank line.
        """
        sections: dict[str, Callable[[], str]] = {
            "services": self.services.buffer.join,
            "types": self.types.join,
            "enums": self.enums.buffer.join,
            "inline_enums": self.inline_enums.join,
            "aspects": self.aspects.join,
            "classes": self.classes.join,
            "events": self.events.buffer.join,
            "actions": self.actions.buffer.join,
            "namespaces": lambda: self._close_namespaces().join(),
        }

        out = [AUTO_GEN_NOTE, self.get_imports().join(), self.preamble.join()]
        out.extend(sections[name]() for name in TYPE_DEF_SECTION_ORDER)
        return "\n\n".join(section for section in out if section)

    def _inflection_aliases(self) -> list[str]:
        # Parents have fewer dots, e.g. `Books` has to be exported before `Books.text`.
        ordered = sorted(self.inflections, key=lambda inflection: inflection[0].count("."))

        lines: list[str] = []
        for singular, plural, original in ordered:
            # Collapses plural == original, the default, as well as other coinciding names.
            aliases = dict.fromkeys(
                [
                    f"module.exports.{singular} = csn.{original}",
                    f"module.exports.{plural} = csn.{original}",
                    f"module.exports.{original} = csn.{original}",
                ]
            )
            lines.extend(aliases)
        return lines

    @override
    def to_js_exports(self) -> str:
        """Create the runtime stub that accompanies the type definitions.

        Returns:
            str: The module exports, ending with a newline.
        """
        out: list[str] = [
            AUTO_GEN_NOTE,
            f"const cds = require('{FRAMEWORK_MODULE}')",
            f"const csn = cds.entities('{self.path.as_namespace()}')",
        ]
        out.extend(f"module.exports = {{ name: '{name}' }}" for name in self.services.names)
        out.extend(self._inflection_aliases())

        out.append("// events")
        out.extend(f"module.exports.{event.name} = '{event.fq}'" for event in self.events.fqs)

        out.append("// actions")
        out.extend(f"module.exports.{name} = '{name}'" for name in self.actions.names)

        out.append("// enums")
        out.extend(helper.stringify_enum_implementation(e.name, e.kvs) for e in self.enums.named)

        return "\n".join(out) + "\n"


def create_base_definitions() -> SourceFile:
    """Create the module holding the definitions that every generated module builds on.

    Returns:
        SourceFile: The module for namespace `_`, declaring associations, compositions, entities and helpers.
    """
    base_definitions = SourceFile(BASE_DEFINITIONS_NAMESPACE)
    base_definitions.add_preamble(BASE_DEFINITIONS_PREAMBLE)
    return base_definitions

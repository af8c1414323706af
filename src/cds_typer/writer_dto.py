"""Data Transfer Objects for the sections of a source file.

Each section pairs the buffer that holds its type definitions with the
metadata that is needed later on to generate the runtime stub module.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import override

from cds_typer.helper import EnumPairs, EnumValue
from cds_typer.scope import Buffer


@dataclass(frozen=True)
class EnumData:
    """Metadata of an enum, kept for the runtime stub.

    Attributes:
        name: The name under which the enum is exported (e.g., "Genre", or "Books.genre" for inline enums)
        fq: The fully qualified name of the enum
        kvs: The (key, value) pairs of the enum
        property_name: The property an inline enum is attached to, None for named enums
    """

    name: str
    fq: str
    kvs: tuple[tuple[str, EnumValue], ...]
    property_name: str | None = None

    @classmethod
    def create_inline(cls, entity_clean_name: str, property_name: str, kvs: EnumPairs) -> EnumData:
        """Factory method for enums that are defined inline on a property.

        Inline enums are addressed through their entity, so both name and fq are `<entity>.<property>`.

        Args:
            entity_clean_name: The entity name without namespace
            property_name: The property the enum is attached to
            kvs: The (key, value) pairs of the enum

        Returns:
            The metadata, tagged with the owning property
        """
        name = f"{entity_clean_name}.{property_name}"
        return cls(name=name, fq=name, kvs=tuple(kvs), property_name=property_name)

    @property
    def is_inline(self) -> bool:
        """Whether the enum is defined inline on a property."""
        return self.property_name is not None


@dataclass(frozen=True)
class EventData:
    """An event exported by name, pointing to its fully qualified name."""

    name: str
    fq: str


@dataclass
class EnumsSection:
    """Enum declarations and the metadata of every enum in the file, including inline ones."""

    buffer: Buffer = field(default_factory=Buffer)
    data: list[EnumData] = field(default_factory=list)

    def add(self, enum_data: EnumData) -> None:
        self.data.append(enum_data)

    @property
    def named(self) -> list[EnumData]:
        """The enums that have a static runtime representation, in insertion order."""
        return [e for e in self.data if not e.is_inline]


@dataclass
class ActionsSection:
    """Action and function declarations and the names to export for them."""

    buffer: Buffer = field(default_factory=Buffer)
    names: list[str] = field(default_factory=list)

    def add(self, name: str) -> None:
        self.names.append(name)


@dataclass
class EventsSection:
    """Event declarations, which are written by collaborators, and the events to export."""

    buffer: Buffer = field(default_factory=Buffer)
    fqs: list[EventData] = field(default_factory=list)

    def add(self, event: EventData) -> None:
        self.fqs.append(event)


class ServicesSection:
    """The service declaration of a file. A file holds at most one service.

    Attributes:
        buffer: The buffer holding the service declaration
        names: The fully qualified names of registered services
    """

    def __init__(self) -> None:
        """Initialize an empty section."""
        self.buffer = Buffer()
        self.names: list[str] = []

    @property
    def registered(self) -> str | None:
        """The fully qualified name of the registered service, if any."""
        return self.names[0] if self.names else None

    def add(self, fq: str) -> None:
        """Register a service and write its declaration.

        Uniqueness is checked by the owning file, which knows how to report the conflict.

        Args:
            fq: The fully qualified name of the service
        """
        self.names.append(fq)
        self.buffer.add(f"export default {{ name: '{fq}' }}")

    @override
    def __repr__(self) -> str:
        return f"ServicesSection(names={self.names!r})"

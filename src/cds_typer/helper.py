"""Helper functionality that is used in other modules of this package."""

from __future__ import annotations

import json
import re
from collections.abc import Sequence

from cds_typer.scope import Buffer

ANY_TYPE = "any"
NEVER_TYPE = "never"

EnumValue = str | int | float | bool | None
EnumPairs = Sequence[tuple[str, EnumValue]]
Parameters = Sequence[tuple[str, str]]

_VALID_IDENTIFIER = re.compile(r"^[A-Za-z_$][\w$]*$", re.ASCII)


def normalise(name: str) -> str:
    """Quote a name that is not a valid JavaScript identifier.

    E.g. 'title' stays 'title', while 'sap-id' becomes '"sap-id"'.

    Args:
        name (str): The original name.

    Returns:
        str: The name, usable as an object member or parameter name.
    """
    if name and not _VALID_IDENTIFIER.match(name):
        return f'"{name}"'
    return name


def join_parameters(parameters: Parameters | None) -> str:
    """Joins (name, type) pairs to a typed parameter list by means of ', '.

    Args:
        parameters (Parameters | None): The parameters to join.

    Returns:
        str: The joined parameters, e.g. 'a: string, b: number'.
    """
    if parameters:
        return ", ".join(f"{normalise(name)}: {type_}" for name, type_ in parameters)

    else:
        return ""


def new_lambda(
    name: str | None = None,
    parameters: Parameters | None = None,
    returns: str = ANY_TYPE,
    initialiser: str | None = None,
    is_static: bool = False,
) -> str:
    """Create a string for a callable member.

    The result is not a bare signature, but an object type that offers the callable signature and additionally
    exposes `__parameters`, an object reflecting the parameters, and `__returns`, the return type. The runtime
    passes call arguments as a named object, which can not be expressed on type level from the signature alone.

    Args:
        name (str | None, optional): The member name. Defaults to None.
        parameters (Parameters | None, optional): The (name, type) pairs of the parameters. Defaults to None.
        returns (str, optional): The return type. Defaults to 'any'.
        initialiser (str | None, optional): An expression to assign. Defaults to None.
        is_static (bool, optional): Whether to mark the member as static. Only applies if a name is given.
            Defaults to False.

    Returns:
        str: The lambda string.

    Examples:
        >>> new_lambda("f", [("p", "T")], "number")
        'f: { (p: T): number, __parameters: {p: T}, __returns: number }'
        >>> new_lambda(parameters=[("p", "T")])
        '{ (p: T): any, __parameters: {p: T}, __returns: any }'
    """
    parameter_types = join_parameters(parameters)
    callable_signature = f"({parameter_types}): {returns}"

    prefix = f"{normalise(name)}: " if name else ""
    if prefix and is_static:
        prefix = f"static {prefix}"

    suffix = f" = {initialiser}" if initialiser else ""
    return f"{prefix}{{ {callable_signature}, __parameters: {{{parameter_types}}}, __returns: {returns} }}{suffix}"


def enum_literal(value: EnumValue) -> str:
    """Render an enum value as a literal, e.g. 'a' becomes '"a"' and 1 stays '1'."""
    return json.dumps(value)


def property_to_inline_enum_name(entity: str, property_name: str) -> str:
    """The name of the declaration that holds an enum defined inline on a property, e.g. 'Books_genre'."""
    return f"{entity}_{property_name}"


def print_enum(buffer: Buffer, name: str, kvs: EnumPairs, export: bool = True):
    """Write an enum as a constant object, accompanied by a type of the same name.

    Args:
        buffer (Buffer): The buffer to write to.
        name (str): The name of the enum.
        kvs (EnumPairs): The (key, value) pairs of the enum.
        export (bool, optional): Whether to export both declarations. Defaults to True.
    """
    modifier = "export " if export else ""
    literals: dict[str, None] = {}

    # Enums of the same section are separated by a blank line, never followed by one.
    if buffer:
        buffer.add("")
    buffer.add("// enum")
    buffer.add(f"{modifier}const {name} = {{")
    buffer.indent()
    for key, value in kvs:
        literal = enum_literal(value)
        literals[literal] = None
        buffer.add(f"{normalise(key)}: {literal},")
    buffer.outdent()
    buffer.add("} as const;")
    buffer.add(f"{modifier}type {name} = {' | '.join(literals) or NEVER_TYPE};")


def stringify_enum_implementation(name: str, kvs: EnumPairs) -> str:
    """Create the runtime counterpart of an enum for the stub module.

    Args:
        name (str): The name of the enum.
        kvs (EnumPairs): The (key, value) pairs of the enum.

    Returns:
        str: The export statement, e.g. `module.exports.Genre = { horror: "horror" }`.
    """
    members = ", ".join(f"{normalise(key)}: {enum_literal(value)}" for key, value in kvs)
    return f"module.exports.{name} = {{ {members} }}" if members else f"module.exports.{name} = {{}}"

"""Pytest configuration and fixtures for cds_typer tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from cds_typer.path import Path as NamespacePath
from cds_typer.writer import SourceFile

HANA_LIBRARY = """\
/* Types of the SAP HANA database. */
export class SMALLINT extends Number {}
export class TINYINT extends Number {}
export declare class REAL extends Number {}
export abstract class CHAR extends String {}
// export class COMMENTED {}
/*
export class BLOCK_COMMENTED {}
*/
export type ALIAS = string;
class INTERNAL {}
export interface SHAPE {}
"""


@pytest.fixture
def temp_output_dir(tmp_path: Path) -> Path:
    """Create a temporary output directory for tests."""
    output_dir = tmp_path / "output"
    output_dir.mkdir()
    return output_dir


@pytest.fixture
def hana_library_file(tmp_path: Path) -> Path:
    """Write a predefined library for namespace `cap.hana`."""
    library_dir = tmp_path / "libraries"
    library_dir.mkdir()
    library_file = library_dir / "cap.hana.ts"
    library_file.write_text(HANA_LIBRARY, encoding="utf8")
    return library_file


@pytest.fixture
def bookshop() -> SourceFile:
    """A module with one entity `Book`, as the model driver would contribute it."""
    source = SourceFile("bookshop")
    source.add_import(NamespacePath(("_",)))
    source.add_class("Book", "bookshop.Books")
    source.aspects.add("export function _BookAspect<TBase extends new (...args: any[]) => object>(Base: TBase) {")
    source.aspects.indent()
    source.aspects.add("return class Book extends Base {")
    source.aspects.indent()
    source.aspects.add("declare ID?: number | null;")
    source.aspects.add("declare title?: string | null;")
    source.aspects.outdent()
    source.aspects.add("};")
    source.aspects.outdent()
    source.aspects.add("}")
    source.classes.add("export class Book extends _BookAspect(__.Entity) {}")
    source.classes.add("export class Books extends Array<Book> {}")
    source.add_inflection("Book", "Books", "Books")
    return source

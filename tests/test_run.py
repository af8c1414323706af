"""Tests for writing generated modules to disk."""

from __future__ import annotations

import asyncio
import logging
import os
from pathlib import Path

import pytest

from cds_typer.library import Library
from cds_typer.run import collect_library_paths, output_directory, writeout
from cds_typer.scope import StructuralError
from cds_typer.writer import AUTO_GEN_NOTE, SourceFile, create_base_definitions


def _read(path: Path) -> str:
    return path.read_text(encoding="utf8")


class TestOutputDirectory:
    """Tests for the directory of a module below the output root."""

    def test_nested_namespace(self, temp_output_dir: Path):
        directory = output_directory(str(temp_output_dir), SourceFile("a.b.c"))

        assert directory == str(temp_output_dir / "a" / "b" / "c")

    def test_is_absolute(self):
        assert os.path.isabs(output_directory("out", SourceFile("a")))


class TestWriteout:
    """Tests for writeout."""

    def test_writes_both_artifacts(self, temp_output_dir: Path, bookshop: SourceFile):
        directories = asyncio.run(writeout(str(temp_output_dir), [bookshop]))

        module_dir = temp_output_dir / "bookshop"
        assert directories == [str(module_dir)]
        assert _read(module_dir / "index.ts").startswith(AUTO_GEN_NOTE)
        assert "export class Book extends _BookAspect(__.Entity) {}" in _read(module_dir / "index.ts")
        assert "module.exports.Book = csn.Books" in _read(module_dir / "index.js")

    def test_contents_match_serialization(self, temp_output_dir: Path, bookshop: SourceFile):
        expected_type_defs = bookshop.to_type_defs()
        expected_js_exports = bookshop.to_js_exports()

        asyncio.run(writeout(str(temp_output_dir), [bookshop]))

        assert _read(temp_output_dir / "bookshop" / "index.ts") == expected_type_defs
        assert _read(temp_output_dir / "bookshop" / "index.js") == expected_js_exports

    def test_creates_missing_directories(self, tmp_path: Path):
        root = tmp_path / "does" / "not" / "exist"

        asyncio.run(writeout(str(root), [SourceFile("x.y.z")]))

        assert (root / "x" / "y" / "z" / "index.ts").is_file()
        assert (root / "x" / "y" / "z" / "index.js").is_file()

    def test_existing_directory_is_fine(self, temp_output_dir: Path):
        (temp_output_dir / "bookshop").mkdir()
        (temp_output_dir / "bookshop" / "index.ts").write_text("stale", encoding="utf8")

        asyncio.run(writeout(str(temp_output_dir), [SourceFile("bookshop")]))

        assert _read(temp_output_dir / "bookshop" / "index.ts") == AUTO_GEN_NOTE

    def test_directories_in_input_order(self, temp_output_dir: Path):
        sources = [SourceFile("z"), create_base_definitions(), SourceFile("a.b")]

        directories = asyncio.run(writeout(str(temp_output_dir), sources))

        assert directories == [
            str(temp_output_dir / "z"),
            str(temp_output_dir / "_"),
            str(temp_output_dir / "a" / "b"),
        ]

    def test_no_sources(self, temp_output_dir: Path):
        assert asyncio.run(writeout(str(temp_output_dir), [])) == []

    def test_library_is_written_verbatim(self, temp_output_dir: Path, hana_library_file: Path):
        asyncio.run(writeout(str(temp_output_dir), [Library(hana_library_file)]))

        module_dir = temp_output_dir / "cap" / "hana"
        assert _read(module_dir / "index.ts") == _read(hana_library_file)
        assert _read(module_dir / "index.js") == ""

    def test_failing_directory_does_not_stop_other_modules(
        self, temp_output_dir: Path, monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
    ):
        failing = str(temp_output_dir / "second")
        makedirs = os.makedirs

        def _makedirs(name, *args, **kwargs):
            if os.fspath(name) == failing:
                raise PermissionError(13, "Permission denied", name)
            return makedirs(name, *args, **kwargs)

        monkeypatch.setattr(os, "makedirs", _makedirs)
        sources = [SourceFile("first"), SourceFile("second"), SourceFile("third")]

        with caplog.at_level(logging.ERROR, logger="cds_typer.run"):
            directories = asyncio.run(writeout(str(temp_output_dir), sources))

        assert directories == [str(temp_output_dir / name) for name in ["first", "second", "third"]]
        assert (temp_output_dir / "first" / "index.ts").is_file()
        assert (temp_output_dir / "third" / "index.js").is_file()
        assert not (temp_output_dir / "second").exists()
        assert f"Could not create parent directory {failing}" in caplog.text

    def test_failing_file_does_not_stop_other_writes(
        self, temp_output_dir: Path, caplog: pytest.LogCaptureFixture
    ):
        # A directory in place of the type definitions file makes opening it fail.
        (temp_output_dir / "broken" / "index.ts").mkdir(parents=True)
        sources = [SourceFile("broken"), SourceFile("fine")]

        with caplog.at_level(logging.ERROR, logger="cds_typer.run"):
            asyncio.run(writeout(str(temp_output_dir), sources))

        assert (temp_output_dir / "broken" / "index.js").is_file()
        assert (temp_output_dir / "fine" / "index.ts").is_file()
        assert "Could not write index.ts" in caplog.text

    def test_summary_is_logged(self, temp_output_dir: Path, caplog: pytest.LogCaptureFixture):
        with caplog.at_level(logging.INFO, logger="cds_typer.run"):
            asyncio.run(writeout(str(temp_output_dir), [SourceFile("a"), SourceFile("b")]))

        assert "Wrote 2 of 2 module(s)" in caplog.text

    def test_structural_errors_propagate(self, temp_output_dir: Path):
        source = SourceFile("bookshop")
        source.get_sub_namespace("Books").indent()

        with pytest.raises(StructuralError):
            asyncio.run(writeout(str(temp_output_dir), [source]))


class TestCollectLibraryPaths:
    """Tests for resolving library files."""

    @pytest.fixture
    def library_dir(self, tmp_path: Path) -> Path:
        library_dir = tmp_path / "libraries"
        (library_dir / "nested").mkdir(parents=True)
        for name in ["cap.hana.ts", "cap.db.ts", "README.md", "nested/cap.extra.ts"]:
            (library_dir / name).write_text("export class X {}\n", encoding="utf8")
        return library_dir

    def test_directory(self, library_dir: Path, tmp_path: Path):
        paths = collect_library_paths(["libraries"], [], False, str(tmp_path))

        assert paths == [str(library_dir / "cap.db.ts"), str(library_dir / "cap.hana.ts")]

    def test_directory_recursive(self, library_dir: Path, tmp_path: Path):
        paths = collect_library_paths(["libraries"], [], True, str(tmp_path))

        assert str(library_dir / "nested" / "cap.extra.ts") in paths
        assert len(paths) == 3

    def test_glob(self, library_dir: Path, tmp_path: Path):
        paths = collect_library_paths(["libraries/*.hana.ts"], [], False, str(tmp_path))

        assert paths == [str(library_dir / "cap.hana.ts")]

    def test_excludes(self, library_dir: Path, tmp_path: Path):
        paths = collect_library_paths(["libraries"], ["libraries/cap.db.ts"], False, str(tmp_path))

        assert paths == [str(library_dir / "cap.hana.ts")]

    def test_absolute_pattern(self, library_dir: Path):
        paths = collect_library_paths([str(library_dir / "cap.hana.ts")], [], False, "/elsewhere")

        assert paths == [str(library_dir / "cap.hana.ts")]

    def test_no_match(self, tmp_path: Path):
        assert collect_library_paths(["missing/*.ts"], [], False, str(tmp_path)) == []

"""Tests for namespace paths."""

from __future__ import annotations

import os

import pytest

from cds_typer.path import Path


class TestPathConstruction:
    """Tests for creating paths."""

    def test_from_namespace(self):
        assert Path.from_namespace("a.b.c").parts == ("a", "b", "c")

    def test_from_empty_namespace(self):
        assert Path.from_namespace("").parts == ()

    def test_list_parts_are_stored_as_tuple(self):
        path = Path(["a", "b"])

        assert path.parts == ("a", "b")
        assert path == Path(("a", "b"))
        assert hash(path) == hash(Path(("a", "b")))

    @pytest.mark.parametrize("part", ["a/b", f"a{os.sep}b"])
    def test_separator_in_part_raises(self, part: str):
        with pytest.raises(ValueError, match="separator"):
            Path(("x", part))

    def test_str(self):
        assert str(Path.from_namespace("a.b")) == "a.b"


class TestPathViews:
    """Tests for the derived views of a path."""

    def test_get_parent(self):
        assert Path.from_namespace("a.b.c").get_parent() == Path.from_namespace("a.b")

    def test_as_namespace(self):
        assert Path.from_namespace("a.b.c").as_namespace() == "a.b.c"

    def test_as_identifier(self):
        assert Path.from_namespace("a.b.c").as_identifier() == "_a_b_c"

    def test_as_identifier_single_part(self):
        assert Path.from_namespace("_").as_identifier() == "__"

    def test_as_identifier_empty(self):
        assert Path().as_identifier() == "_"

    def test_as_directory(self):
        assert Path.from_namespace("a.b.c").as_directory() == "./a/b/c"

    def test_as_directory_not_local(self):
        assert Path.from_namespace("a.b.c").as_directory(local=False) == "a/b/c"

    def test_as_directory_native(self):
        expected = os.path.join("a", "b", "c")

        assert Path.from_namespace("a.b.c").as_directory(local=False, posix=False) == expected

    def test_as_directory_empty(self):
        assert Path().as_directory() == "./"
        assert Path().as_directory(local=False, posix=False) == ""

    def test_as_directory_relative_to_itself(self):
        path = Path.from_namespace("a.b")

        assert path.as_directory(relative=path.as_directory()) == "./"

    def test_as_directory_relative_to_sibling(self):
        own = Path.from_namespace("a.b").as_directory()

        assert Path.from_namespace("a.c").as_directory(relative=own) == "./../c"

    def test_as_directory_relative_to_parent(self):
        own = Path.from_namespace("a").as_directory()

        assert Path.from_namespace("a.b.c").as_directory(relative=own) == "./b/c"

    def test_as_directory_relative_to_deeper_directory(self):
        own = Path.from_namespace("x.y.z").as_directory()

        assert Path.from_namespace("_").as_directory(relative=own) == "./../../../_"

    def test_as_directory_relative_to_root_module(self):
        own = Path().as_directory()

        assert Path.from_namespace("a.b").as_directory(relative=own) == "./a/b"


class TestIsCwd:
    """Tests for Path.is_cwd."""

    def test_empty_path_without_reference(self):
        assert Path().is_cwd()

    def test_non_empty_path_without_reference(self):
        assert not Path.from_namespace("a").is_cwd()

    def test_same_directory(self):
        path = Path.from_namespace("a.b")

        assert path.is_cwd(path.as_directory())

    def test_other_directory(self):
        assert not Path.from_namespace("a.c").is_cwd(Path.from_namespace("a.b").as_directory())

    def test_parent_directory(self):
        assert not Path.from_namespace("a").is_cwd(Path.from_namespace("a.b").as_directory())

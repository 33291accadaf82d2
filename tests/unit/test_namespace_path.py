"""
Unit tests for NamespacePath and relative reference resolution
"""

import pytest

from pmodules.shared.errors import InvalidRelativeReference
from pmodules.shared.namespace_path import NamespacePath, resolve


class TestNamespacePath:
    """Construction, surface syntax and prefix helpers"""

    def test_parse_absolute(self):
        path = NamespacePath.parse("App.Sub.Helper")
        assert path.segments == ("App", "Sub", "Helper")
        assert path.is_absolute
        assert path.root == "App"
        assert path.name == "Helper"
        assert path.depth == 3

    def test_parse_relative_counts_leading_dots(self):
        path = NamespacePath.parse("..Other.Thing")
        assert path.up_count == 2
        assert path.segments == ("Other", "Thing")
        assert str(path) == "..Other.Thing"

    def test_empty_path_rejected(self):
        with pytest.raises(ValueError):
            NamespacePath(())
        with pytest.raises(ValueError):
            NamespacePath.parse("..")

    def test_invalid_segment_rejected(self):
        with pytest.raises(ValueError):
            NamespacePath.parse("App..Sub")
        with pytest.raises(ValueError):
            NamespacePath.of("App", "not-an-identifier")

    def test_segments_are_case_sensitive(self):
        assert NamespacePath.of("App", "Sub") != NamespacePath.of("App", "sub")

    def test_equality_and_hash_are_structural(self):
        a = NamespacePath.parse("App.Sub")
        b = NamespacePath.of("App", "Sub")
        assert a == b
        assert len({a, b}) == 1

    def test_relative_and_absolute_differ(self):
        assert NamespacePath.parse(".Sub") != NamespacePath.parse("Sub")

    def test_prefixes_outer_to_inner(self):
        path = NamespacePath.parse("A.B.C")
        assert [str(p) for p in path.prefixes()] == ["A", "A.B", "A.B.C"]

    def test_parent_and_child(self):
        path = NamespacePath.parse("A.B")
        assert path.parent == NamespacePath.of("A")
        assert path.child("C") == NamespacePath.parse("A.B.C")
        with pytest.raises(ValueError):
            NamespacePath.of("A").parent

    def test_is_prefix_of(self):
        outer = NamespacePath.parse("A.B")
        assert outer.is_prefix_of(NamespacePath.parse("A.B.C"))
        assert outer.is_prefix_of(outer)
        assert not outer.is_prefix_of(NamespacePath.parse("A.C"))
        assert not NamespacePath.parse("A.B.C").is_prefix_of(outer)

    def test_join_rejects_relative(self):
        with pytest.raises(ValueError):
            NamespacePath.of("A").join(NamespacePath.parse(".B"))
        assert NamespacePath.of("A").join(["B", "C"]) == NamespacePath.parse("A.B.C")


class TestResolve:
    """Relative reference resolver"""

    def test_absolute_unchanged(self):
        ref = NamespacePath.parse("Other.X")
        assert resolve(ref, NamespacePath.parse("App.Sub")) is ref

    def test_up_two_from_three_deep(self):
        caller = NamespacePath.parse("A.B.C")
        ref = NamespacePath(("D",), up_count=2)
        assert resolve(ref, caller) == NamespacePath.parse("A.D")

    def test_sibling_reference(self):
        caller = NamespacePath.parse("App.Sub.Helper")
        assert resolve(NamespacePath.parse(".Tools"), caller) == NamespacePath.parse("App.Sub.Tools")

    def test_up_count_equal_to_depth(self):
        caller = NamespacePath.parse("A.B.C")
        assert resolve(NamespacePath(("D",), up_count=3), caller) == NamespacePath.of("D")

    def test_up_count_exceeding_depth_fails(self):
        caller = NamespacePath.parse("A.B.C")
        with pytest.raises(InvalidRelativeReference) as excinfo:
            resolve(NamespacePath(("D",), up_count=4), caller)
        assert excinfo.value.error_code == "P0001"

    def test_relative_caller_rejected(self):
        with pytest.raises(InvalidRelativeReference):
            resolve(NamespacePath.parse(".D"), NamespacePath.parse(".A"))

"""
Unit tests for ModuleExpansionPass
"""

import pytest

from pmodules.frontend.parser import parse_directive
from pmodules.passes.module_expansion import ModuleExpansionPass
from pmodules.shared.errors import (
    ModuleNameMismatch,
    NotAFileContext,
    NotAParentModule,
    UnsupportedDeclaration,
)
from pmodules.shared.namespace_path import NamespacePath
from pmodules.shared.source_location import SourceLocation


def _p(text: str) -> NamespacePath:
    return NamespacePath.parse(text)


def _declare(text: str, file, line: int = 1):
    return parse_directive(text, SourceLocation(str(file), line))


@pytest.fixture
def expander(path_resolver):
    return ModuleExpansionPass("App", path_resolver)


class TestParentExpansion:

    def test_root_expands_to_sorted_children(self, expander, layout):
        src = layout({
            "App.py": "", "Zeta.py": "", "Alpha.py": "",
            "Sub/Sub.py": "", "Sub/Helper.py": "",
            "notes.txt": "", "Empty/readme.md": "",
        })
        expanded = expander.expand(_declare("module App", src / "App.py"), _p("App"))
        assert expanded.is_parent
        assert [str(c.path) for c in expanded.ensure] == ["App.Alpha", "App.Sub", "App.Zeta"]
        assert all(c.caller == _p("App") for c in expanded.ensure)

    def test_nested_parent_expands_its_directory(self, expander, app_layout):
        expanded = expander.expand(_declare("module Sub", app_layout / "Sub" / "Sub.py"), _p("App.Sub"))
        assert expanded.is_parent
        assert [str(c.path) for c in expanded.ensure] == ["App.Sub.Helper"]

    def test_parent_without_children(self, expander, layout):
        src = layout({"App.py": ""})
        expanded = expander.expand(_declare("module App", src / "App.py"), _p("App"))
        assert expanded.is_parent
        assert expanded.ensure == []


class TestLeafDeclarations:

    def test_leaf_passes_through(self, expander, app_layout):
        declaration = _declare("module Helper", app_layout / "Sub" / "Helper.py")
        expanded = expander.expand(declaration, _p("App.Sub.Helper"))
        assert not expanded.is_parent
        assert expanded.ensure == []
        assert expanded.declaration is declaration

    def test_leaf_inside_src_is_never_parent(self, expander, layout):
        src = layout({"App.py": "", "src.py": ""})
        expanded = expander.expand(_declare("module src", src / "src.py"), _p("App.src"))
        assert not expanded.is_parent

    def test_expand_parent_on_leaf_rejected(self, expander, app_layout):
        declaration = _declare("module Helper", app_layout / "Sub" / "Helper.py")
        with pytest.raises(NotAParentModule):
            expander.expand_parent(declaration, _p("App.Sub.Helper"))


class TestInvalidDeclarations:

    def test_baremodule_unsupported(self, expander, app_layout):
        with pytest.raises(UnsupportedDeclaration):
            expander.expand(_declare("baremodule App", app_layout / "App.py"), _p("App"))

    def test_declaration_without_file(self, expander):
        with pytest.raises(NotAFileContext):
            expander.expand(parse_directive("module App"), _p("App"))

    def test_declaration_from_pseudo_file(self, expander):
        declaration = parse_directive("module App", SourceLocation("<string>", 1))
        with pytest.raises(NotAFileContext) as excinfo:
            expander.expand(declaration, _p("App"))
        assert excinfo.value.location.file == "<string>"

    def test_name_differs_from_file(self, expander, app_layout):
        with pytest.raises(ModuleNameMismatch) as excinfo:
            expander.expand(_declare("module Other", app_layout / "App.py", 3), _p("App"))
        assert excinfo.value.location.line == 3

    def test_name_differs_from_load_path(self, expander, app_layout):
        with pytest.raises(ModuleNameMismatch):
            expander.expand(_declare("module Helper", app_layout / "Sub" / "Helper.py"), _p("App.Sub.Other"))

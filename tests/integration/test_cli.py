"""
Tests for the command line entry point (python -m pmodules).
"""

import pytest

from pmodules.__main__ import main

pytestmark = pytest.mark.integration


def test_tree_output(app_layout, capsys):
    assert main([str(app_layout / "App.py"), "--tree"]) == 0
    out = capsys.readouterr().out.splitlines()
    assert out == [
        "App (root) App.py",
        "  Sub (parent) Sub/Sub.py",
        "    Helper (leaf) Sub/Helper.py",
    ]


def test_quiet_success(app_layout, capsys):
    assert main([str(app_layout / "App.py")]) == 0
    assert capsys.readouterr().out == ""


def test_missing_file(tmp_path, capsys):
    assert main([str(tmp_path / "src" / "App.py")]) == 1
    assert "file not found" in capsys.readouterr().err


def test_directory_argument(tmp_path, capsys):
    assert main([str(tmp_path)]) == 1
    assert "not a file" in capsys.readouterr().err


def test_layout_error_rendered(layout, capsys):
    src = layout({"App.py": 'P("module App")\n', "x.py": "", "x/x.py": ""})
    assert main([str(src / "App.py"), "--no-color"]) == 1
    err = capsys.readouterr().err
    assert "error[P0003]" in err
    assert "aborting due to 1 previous error" in err


def test_python_error_reported(layout, capsys):
    src = layout({"App.py": "raise ValueError('bad value')\n"})
    assert main([str(src / "App.py")]) == 1
    assert "bad value" in capsys.readouterr().err

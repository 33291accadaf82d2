"""
Tests for error reporting: exception classes and rustc-style rendering.
"""

import re
import pytest

from pmodules.shared.errors import (
    AmbiguousDefinition,
    DefinitionNotFound,
    DirectiveSyntaxError,
    Error,
    ErrorReporter,
    ForeignRootReference,
    InvalidImportForm,
    InvalidRelativeReference,
    ModuleNameMismatch,
    NotAFileContext,
    NotAParentModule,
    PmoduleError,
    PmoduleImplementationError,
    ReservedName,
    SessionAborted,
    UnsupportedDeclaration,
)
from pmodules.shared.source_location import SourceLocation

_ANSI_ESCAPE = re.compile(r"\x1b\[[0-9;]*m")


def _strip_ansi(text: str) -> str:
    return _ANSI_ESCAPE.sub("", text)


class TestErrorCodes:

    @pytest.mark.parametrize("cls, code", [
        (InvalidRelativeReference, "P0001"),
        (ForeignRootReference, "P0002"),
        (AmbiguousDefinition, "P0003"),
        (DefinitionNotFound, "P0004"),
        (NotAFileContext, "P0005"),
        (NotAParentModule, "P0006"),
        (InvalidImportForm, "P0007"),
        (ModuleNameMismatch, "P0008"),
        (UnsupportedDeclaration, "P0009"),
        (DirectiveSyntaxError, "P0010"),
        (ReservedName, "P0011"),
        (SessionAborted, "P0012"),
    ])
    def test_codes_are_stable(self, cls, code):
        assert cls.error_code == code
        assert issubclass(cls, PmoduleError)

    def test_implementation_error_is_not_a_layout_error(self):
        err = PmoduleImplementationError("registry corrupted")
        assert not isinstance(err, PmoduleError)
        assert str(err) == "[P9999] registry corrupted"

    def test_candidates_and_searched(self):
        assert AmbiguousDefinition("x", candidates=["a", "b"]).candidates == ("a", "b")
        assert DefinitionNotFound("x", searched=["a"]).searched == ("a",)

    def test_aborted_carries_cause(self):
        cause = DefinitionNotFound("gone")
        err = SessionAborted("aborted", cause=cause)
        assert err.cause is cause


class TestWithLocation:

    def test_sets_missing_location(self):
        location = SourceLocation("/src/App.py", 2)
        err = DefinitionNotFound("missing").with_location(location)
        assert err.location == location
        assert "error[P0004]" in str(err)

    def test_innermost_location_wins(self):
        inner = SourceLocation("/src/Sub/Sub.py", 1)
        outer = SourceLocation("/src/App.py", 5)
        err = DefinitionNotFound("missing", location=inner).with_location(outer)
        assert err.location == inner

    def test_none_leaves_error_unchanged(self):
        err = DefinitionNotFound("missing")
        assert err.with_location(None) is err
        assert err.location is None
        assert str(err) == "missing"


class TestErrorReporter:

    def test_location_none(self):
        err = Error(message="something failed", location=None, code="P0004")
        out = ErrorReporter({}).format_error(err, color=False)
        assert "error[P0004]" in out
        assert "unknown location" in out

    def test_file_not_in_source_files(self):
        loc = SourceLocation(file="missing.py", line=1, column=1)
        out = ErrorReporter({}).format_error(Error("oops", loc, code="P0003"), color=False)
        assert "missing.py:1:1" in out

    def test_snippet_and_carets(self):
        loc = SourceLocation(file="App.py", line=2, column=1)
        reporter = ErrorReporter({"App.py": 'P("module App")\nP("import App.Missing")\n'})
        out = reporter.format_error(Error("no definition", loc, code="P0004", label="here"), color=False)
        assert '2 | P("import App.Missing")' in out
        assert "^^^" in out
        assert "here" in out

    def test_help_and_note(self):
        err = Error("bad", None, help="do this", note="because")
        out = ErrorReporter({}).format_error(err, color=False)
        assert "= help: do this" in out
        assert "= note: because" in out

    def test_report_exception_reads_source(self, tmp_path):
        source = tmp_path / "App.py"
        source.write_text('P("module Other")\n', encoding="utf-8")
        loc = SourceLocation(str(source), 1)
        reporter = ErrorReporter()
        reporter.report_exception(ModuleNameMismatch("name mismatch", location=loc, help="rename it"))
        assert reporter.has_errors()
        assert str(source) in reporter.source_files
        out = reporter.format_all_errors(color=False)
        assert 'P("module Other")' in out
        assert "help: rename it" in out
        assert "aborting due to 1 previous error" in out

    def test_report_exception_unreadable_file(self):
        reporter = ErrorReporter()
        reporter.report_exception(DefinitionNotFound("gone", location=SourceLocation("<string>", 1)))
        assert "<string>" not in reporter.source_files
        assert "<string>:1:1" in reporter.format_all_errors(color=False)

    def test_color_output(self):
        reporter = ErrorReporter()
        reporter.report_error("boom", None, code="P0001")
        colored = reporter.format_all_errors(color=True)
        assert "\x1b[" in colored
        assert "error[P0001]: boom" in _strip_ansi(colored)

    def test_plural_summary(self):
        reporter = ErrorReporter()
        reporter.report_error("a", None)
        reporter.report_error("b", None)
        assert "aborting due to 2 previous errors" in reporter.format_all_errors(color=False)

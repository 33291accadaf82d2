"""
Error Reporting

Load-time contract violations and their rustc-style rendering.
Every error here is fatal for the load session that raised it.
"""

import os
import sys
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from .source_location import SourceLocation
from ..utils.config import COLOR_ENV_VAR
from ..utils.io_utils import try_read_source_file


_ANSI = {
    "bold": "\033[1m",
    "red": "\033[31m",
    "blue": "\033[34m",
    "cyan": "\033[36m",
}
_ANSI_RESET = "\033[0m"

# PMODULES_COLOR values that switch color off
_COLOR_OFF = frozenset({"0", "false", "no", "never"})


def _use_color() -> bool:
    """Color only on a terminal, unless NO_COLOR or PMODULES_COLOR says otherwise."""
    if os.environ.get("NO_COLOR"):
        return False
    if os.environ.get(COLOR_ENV_VAR, "").lower() in _COLOR_OFF:
        return False
    return sys.stderr.isatty()


def _paint(text: str, *styles: str, color: bool) -> str:
    if not color or not styles:
        return text
    return "".join(_ANSI[s] for s in styles) + text + _ANSI_RESET


@dataclass
class Error:
    """A single rendered diagnostic."""
    message: str
    location: Optional[SourceLocation]
    code: Optional[str] = None
    help: Optional[str] = None
    note: Optional[str] = None
    label: Optional[str] = None


def _format_diagnostic(
    error: Error,
    source_files: Dict[str, str],
    color: bool = False,
) -> str:
    """
    Render one diagnostic: header, location arrow, the offending source line
    with a caret underline when the source is known, then help/note lines.

        error[P0004]: no definition found for 'App.Sub.Missing'
         --> src/Sub/Sub.py:3:1
          |
        3 | P("import App.Sub.Missing")
          | ^^^^^^^^^^^^^^^^^^^^^^^^^^^
          |
          = note: searched src/Sub/Missing.py, src/Sub/Missing/Missing.py
    """
    tag = f"error[{error.code}]" if error.code else "error"
    lines = [_paint(tag, "bold", "red", color=color) + _paint(f": {error.message}", "bold", color=color)]

    loc = error.location
    source = source_files.get(loc.file) if loc is not None else None
    if source is None:
        where = str(loc) if loc is not None else "<unknown location>"
        lines.append(_paint(" --> ", "bold", "blue", color=color) + where)
        lines.extend(_annotation_lines(error, 1, color))
        return "\n".join(lines)

    gutter = len(str(loc.line))
    margin = " " * (gutter + 1)
    source_lines = source.split("\n")
    text = source_lines[loc.line - 1] if 0 < loc.line <= len(source_lines) else ""

    start = max(loc.column, 1) - 1
    single_line = not loc.end_line or loc.end_line == loc.line
    if single_line and loc.end_column > loc.column:
        width = loc.end_column - loc.column
    else:
        width = len(text.rstrip()) - start
    underline = " " * start + "^" * max(1, width)
    if error.label:
        underline += f" {error.label}"

    lines.append(_paint(" " * gutter + "--> ", "bold", "blue", color=color) + str(loc))
    lines.append(_paint(margin + "|", "bold", "blue", color=color))
    lines.append(_paint(f"{loc.line} | ", "bold", "blue", color=color) + text)
    lines.append(_paint(margin + "| ", "bold", "blue", color=color) + _paint(underline, "bold", "red", color=color))
    lines.extend(_annotation_lines(error, gutter, color))
    return "\n".join(lines)


def _annotation_lines(error: Error, gutter: int, color: bool) -> List[str]:
    """'= help: ...' and '= note: ...' lines below the snippet, if any."""
    annotations = [(kind, text) for kind, text in (("help", error.help), ("note", error.note)) if text]
    if not annotations:
        return []
    margin = " " * (gutter + 1)
    lines = [_paint(margin + "|", "bold", "blue", color=color)]
    for kind, text in annotations:
        lines.append(
            _paint(margin + "= ", "bold", "cyan", color=color)
            + _paint(f"{kind}: ", "bold", color=color)
            + text
        )
    return lines


class ErrorReporter:
    """
    Collects diagnostics and renders them with source snippets.
    """

    def __init__(self, source_files: Optional[Dict[str, str]] = None):
        self.source_files = source_files if source_files is not None else {}
        self.errors: List[Error] = []

    def report_error(
        self,
        message: str,
        location: Optional[SourceLocation],
        code: Optional[str] = None,
        help: Optional[str] = None,
        note: Optional[str] = None,
        label: Optional[str] = None,
    ) -> None:
        self.errors.append(Error(
            message=message,
            location=location,
            code=code,
            help=help,
            note=note,
            label=label,
        ))

    def report_exception(self, exc: "PmoduleError") -> None:
        """Record a raised PmoduleError, pulling in its source file when readable."""
        loc = exc.location
        if loc is not None and loc.file not in self.source_files:
            source = try_read_source_file(loc.file)
            if source is not None:
                self.source_files[loc.file] = source
        self.report_error(exc.message, loc, code=exc.error_code, help=exc.help_text, note=exc.note_text)

    def format_error(self, error: Error, color: Optional[bool] = None) -> str:
        use_color = color if color is not None else _use_color()
        return _format_diagnostic(error, self.source_files, color=use_color)

    def format_all_errors(self, color: Optional[bool] = None) -> str:
        use_color = color if color is not None else _use_color()
        parts = [self.format_error(e, color=use_color) for e in self.errors]
        count = len(self.errors)
        summary = f"aborting due to {count} previous error{'s' if count != 1 else ''}"
        parts.append(
            _paint("error", "bold", "red", color=use_color)
            + _paint(f": {summary}", "bold", color=use_color)
        )
        return "\n\n".join(parts)

    def has_errors(self) -> bool:
        return len(self.errors) > 0


class PmoduleError(Exception):
    """
    Base exception for all load-time contract violations.

    Carries an optional source location (the directive that triggered the
    failing load) plus help/note text for the rendered diagnostic.
    """
    error_code = "P0000"

    def __init__(self,
                 message: str,
                 location: Optional[SourceLocation] = None,
                 help: Optional[str] = None,
                 note: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.location = location
        self.help_text = help
        self.note_text = note

    def with_location(self, location: Optional[SourceLocation]) -> "PmoduleError":
        """Attach a location if none is set yet (innermost location wins)."""
        if self.location is None and location is not None:
            self.location = location
        return self

    def __str__(self):
        if self.location:
            return f"error[{self.error_code}]: {self.message}\n --> {self.location}"
        return self.message


class InvalidRelativeReference(PmoduleError):
    """Relative up-count exceeds the depth of the caller's path"""
    error_code = "P0001"


class ForeignRootReference(PmoduleError):
    """Reference outside the package root; the engine skips these"""
    error_code = "P0002"


class AmbiguousDefinition(PmoduleError):
    """Both the leaf and the parent file convention match the same segment"""
    error_code = "P0003"

    def __init__(self, message: str, candidates: Sequence[object] = (), **kwargs):
        super().__init__(message, **kwargs)
        self.candidates = tuple(candidates)


class DefinitionNotFound(PmoduleError):
    """Neither file convention matches, or there is no module to search in"""
    error_code = "P0004"

    def __init__(self, message: str, searched: Sequence[object] = (), **kwargs):
        super().__init__(message, **kwargs)
        self.searched = tuple(searched)


class NotAFileContext(PmoduleError):
    """A module declaration did not originate from a backing file"""
    error_code = "P0005"


class NotAParentModule(PmoduleError):
    """Parent expansion requested for a leaf module"""
    error_code = "P0006"


class InvalidImportForm(PmoduleError):
    """Colon sub-identifier form where disallowed, or a malformed statement"""
    error_code = "P0007"


class ModuleNameMismatch(PmoduleError):
    """Declared module name differs from its file name"""
    error_code = "P0008"


class UnsupportedDeclaration(PmoduleError):
    """Declaration kind the loader cannot expand (baremodule)"""
    error_code = "P0009"


class DirectiveSyntaxError(PmoduleError):
    """Directive text could not be parsed"""
    error_code = "P0010"


class ReservedName(PmoduleError):
    """A namespace segment collides with a name the host injects into every module"""
    error_code = "P0011"


class SessionAborted(PmoduleError):
    """The load session was used after an earlier error aborted it"""
    error_code = "P0012"

    def __init__(self, message: str, cause: Optional[BaseException] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.cause = cause


class PmoduleImplementationError(Exception):
    """
    Error in the loader itself (not in the user's layout or directives).

    Use this for internal invariant violations such as a registry that lets
    the same prefix recurse forever. Never use it for layout mistakes; those
    are PmoduleError subclasses.
    """
    def __init__(self, message: str, error_code: str = "P9999"):
        super().__init__(message)
        self.message = message
        self.error_code = error_code

    def __str__(self):
        return f"[{self.error_code}] {self.message}"

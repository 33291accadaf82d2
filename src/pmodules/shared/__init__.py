"""
Shared foundational types: namespace paths, declaration records, errors.
"""

from .source_location import SourceLocation
from .namespace_path import NamespacePath, resolve
from .errors import (
    Error, ErrorReporter,
    PmoduleError, PmoduleImplementationError,
    InvalidRelativeReference, ForeignRootReference,
    AmbiguousDefinition, DefinitionNotFound,
    NotAFileContext, NotAParentModule,
    InvalidImportForm, ModuleNameMismatch,
    UnsupportedDeclaration, DirectiveSyntaxError,
    ReservedName, SessionAborted,
)
from .nodes import (
    ImportKind, ModuleDeclaration, ImportSpec, ImportStatement,
    EnsureLoaded, ExpandedStatement, ExpandedDeclaration,
)

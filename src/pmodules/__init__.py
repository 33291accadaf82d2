"""
pmodules: lazy hierarchical module loading by layout convention.

    from pmodules import LoadSession

    session = LoadSession("src/App.py")
    session.load()
    session.ensure_loaded("App.Sub.Helper")
"""

from .shared import (
    NamespacePath,
    SourceLocation,
    PmoduleError,
    InvalidRelativeReference,
    ForeignRootReference,
    AmbiguousDefinition,
    DefinitionNotFound,
    NotAFileContext,
    NotAParentModule,
    InvalidImportForm,
    ModuleNameMismatch,
    UnsupportedDeclaration,
    DirectiveSyntaxError,
    ReservedName,
    SessionAborted,
)
from .analysis.module_system import ModuleLoader, PathResolver, LoadRegistry, NodeKind
from .compiler.driver import LoadSession, LoadResult, StatementRewriter
from .runtime.host import PythonHost

__version__ = "0.1.0"


def load_package(root_file) -> LoadSession:
    """Load the package rooted at ``root_file`` with the Python host and return its session."""
    session = LoadSession(root_file)
    session.load()
    return session

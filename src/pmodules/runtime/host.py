"""
Python Host

Implements the external collaborators of the loader for plain Python source
units:

- load(file, target): execute ``file`` into a fresh module object bound as an
  attribute of the module for ``target``
- is_bound(path): the host baseline (attribute walk from the root module)
- perform_import(...): the original import semantics, binding names into the
  caller's globals

Every loaded module gets a ``P`` directive function in its globals:

    P("module App")
    P("using App.Sub: Helper")
"""

import importlib
import logging
import sys
import types
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Sequence

from ..shared.errors import DefinitionNotFound, PmoduleImplementationError, ReservedName
from ..shared.namespace_path import NamespacePath, resolve
from ..shared.nodes import ImportStatement
from ..shared.source_location import SourceLocation
from ..utils.config import DIRECTIVE_FUNCTION_NAME, MODULE_PATH_ATTRIBUTE, MODULE_SEPARATOR
from ..utils.io_utils import read_source_file

logger = logging.getLogger(__name__)

_MISSING = object()

# Names the host sets on every module it loads; never children, never baseline
RESERVED_NAMES = frozenset({DIRECTIVE_FUNCTION_NAME, MODULE_PATH_ATTRIBUTE})


class PythonHost:
    """
    Loads source units as module objects that live only inside the session.

    Modules are not inserted into ``sys.modules``; they are reachable from
    ``root_module`` by attribute access along their namespace path.
    """

    def __init__(self):
        self.session = None
        self.root_module: Optional[types.ModuleType] = None
        self.modules: Dict[NamespacePath, types.ModuleType] = {}

    def attach(self, session) -> None:
        """Connect the session whose directive hook the injected P calls."""
        self.session = session

    # --- LoadHost ---

    def load(self, file: Path, target: Optional[NamespacePath]) -> types.ModuleType:
        file = Path(file)
        if target is None:
            path = NamespacePath.of(file.stem)
        else:
            path = target.child(file.stem)
            if path.name in RESERVED_NAMES:
                raise ReservedName(
                    f"'{path}' ({file}) collides with the name '{path.name}' bound in every loaded module",
                    help=f"rename {file.name}",
                )
            if target not in self.modules:
                raise PmoduleImplementationError(f"Load target '{target}' has no module object")

        module = types.ModuleType(str(path))
        module.__file__ = str(file)
        setattr(module, MODULE_PATH_ATTRIBUTE, path)
        setattr(module, DIRECTIVE_FUNCTION_NAME, self._directive_function(path))

        # Bound before the body runs: start-of-load availability
        self.modules[path] = module
        if target is None:
            self.root_module = module
        else:
            setattr(self.modules[target], path.name, module)

        code = compile(read_source_file(file), str(file), "exec")
        exec(code, module.__dict__)
        logger.debug(f"Executed {file} as '{path}'")
        return module

    def is_bound(self, path: NamespacePath) -> bool:
        if path.is_relative or self.root_module is None:
            return False
        return self._walk_internal(path) is not _MISSING

    # --- import semantics ---

    def perform_import(
        self,
        statement: ImportStatement,
        caller: NamespacePath,
        scope: Optional[Dict[str, Any]],
    ) -> Dict[str, Any]:
        """
        Bind what the statement names into ``scope``:

        - ``import A.B.C``       binds C
        - ``using A.B: x, y.z``  binds x and z
        """
        bindings: Dict[str, Any] = {}
        for spec in statement.specs:
            base = resolve(spec.base, caller)
            if spec.members is None:
                bindings[base.name] = self.lookup(base)
            else:
                for member in spec.members:
                    bindings[member.name] = self.lookup(base.join(member))
        if scope is not None:
            scope.update(bindings)
        return bindings

    def lookup(self, path: NamespacePath) -> Any:
        """Object bound at an absolute ``path``; foreign roots go through importlib."""
        if self.root_module is not None and path.root == self.root_module.__name__:
            obj = self._walk_internal(path)
            if obj is _MISSING:
                raise DefinitionNotFound(f"'{path}' is not defined")
            return obj
        return self._lookup_foreign(path)

    def module_for(self, path: NamespacePath) -> types.ModuleType:
        return self.modules[path]

    # --- Internal helpers ---

    def _walk_internal(self, path: NamespacePath) -> Any:
        if path.root != self.root_module.__name__:
            return _MISSING
        obj: Any = self.root_module
        for segment in path.segments[1:]:
            if segment in RESERVED_NAMES:
                return _MISSING
            obj = getattr(obj, segment, _MISSING)
            if obj is _MISSING:
                break
        return obj

    def _lookup_foreign(self, path: NamespacePath) -> Any:
        segments = path.segments
        for i in range(len(segments), 0, -1):
            name = MODULE_SEPARATOR.join(segments[:i])
            try:
                module = importlib.import_module(name)
            except ModuleNotFoundError as e:
                # Only swallow "this prefix is not a module", not failures inside it
                if e.name is None or not (name == e.name or name.startswith(f"{e.name}.")):
                    raise
                continue
            return self._walk_foreign(module, path, segments[i:])
        raise DefinitionNotFound(f"No module named '{segments[0]}'")

    def _walk_foreign(self, obj: Any, path: NamespacePath, rest: Sequence[str]) -> Any:
        for segment in rest:
            nxt = getattr(obj, segment, _MISSING)
            if nxt is _MISSING:
                raise DefinitionNotFound(f"'{path}' is not defined: no attribute '{segment}'")
            obj = nxt
        return obj

    def _directive_function(self, path: NamespacePath) -> Callable[[str], Any]:
        host = self

        def P(text: str) -> Any:
            if host.session is None:
                raise PmoduleImplementationError("PythonHost used without an attached session")
            frame = sys._getframe(1)
            location = SourceLocation(frame.f_code.co_filename, frame.f_lineno)
            return host.session.directive(text, location, path, scope=frame.f_globals)

        P.__qualname__ = f"{path}.{DIRECTIVE_FUNCTION_NAME}"
        return P

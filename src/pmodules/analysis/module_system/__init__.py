"""Module system: layout conventions, load registry, ensure-loaded engine."""

from .module_info import NodeKind, Location, LoadRecord
from .path_resolver import PathResolver
from .load_registry import LoadRegistry
from .module_loader import ModuleLoader, LoadHost

__all__ = [
    'NodeKind',
    'Location',
    'LoadRecord',
    'PathResolver',
    'LoadRegistry',
    'ModuleLoader',
    'LoadHost',
]

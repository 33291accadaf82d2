"""
Base Expansion Pass

An expansion pass rewrites one declaration record into "ensure these paths
are loaded" plus "then do the original thing". Passes only produce records;
running them is the driver's job.
"""

from abc import ABC, abstractmethod
from typing import Any

from ..analysis.module_system.path_resolver import PathResolver
from ..shared.namespace_path import NamespacePath


class ExpansionPass(ABC):
    """
    Base class for declaration expanders.

    Stateless apart from the package root name and the layout oracle, so a
    pass instance can be reused for every directive of a session.
    """

    def __init__(self, root_name: str, path_resolver: PathResolver):
        self.root_name = root_name
        self.path_resolver = path_resolver

    def is_internal(self, path: NamespacePath) -> bool:
        """Relative paths are inferred internal; absolute ones must start at the package root."""
        return path.is_relative or path.root == self.root_name

    @abstractmethod
    def expand(self, node: Any, enclosing: NamespacePath) -> Any:
        """Rewrite ``node`` declared inside ``enclosing``."""
        ...

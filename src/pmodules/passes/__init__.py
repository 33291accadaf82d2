"""Declaration expansion passes."""

from .base import ExpansionPass
from .import_expansion import ImportExpansionPass
from .module_expansion import ModuleExpansionPass

__all__ = ["ExpansionPass", "ImportExpansionPass", "ModuleExpansionPass"]

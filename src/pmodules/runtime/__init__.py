"""Python host for the loader."""

from .host import PythonHost

__all__ = ["PythonHost"]

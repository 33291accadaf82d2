"""
pmodules utilities package
"""

from .io_utils import read_source_file, try_read_source_file, is_pseudo_file

__all__ = ["read_source_file", "try_read_source_file", "is_pseudo_file"]

"""
Configuration constants for the pmodules layout conventions
"""

import os
import tempfile

# Filesystem layout conventions (fixed, not user-configurable)
SOURCE_FILE_EXTENSION = ".py"
ROOT_DIRECTORY_NAME = "src"

# Namespace path surface syntax
MODULE_SEPARATOR = "."
RELATIVE_MARKER = "."

# Name of the directive function injected into every loaded source unit
DIRECTIVE_FUNCTION_NAME = "P"

# Attribute set on loaded modules to record their namespace path
MODULE_PATH_ATTRIBUTE = "__pmodule_path__"

# Guard against runaway recursion (registry invariant violations)
MAX_LOAD_DEPTH = 64

# Pseudo-files that never back a declaration (exec/REPL input)
PSEUDO_FILE_PREFIX = "<"

# Parser configuration constants (cache under temp dir to avoid cluttering project root)
DEFAULT_PARSER_CACHE_FILE = os.path.join(tempfile.gettempdir(), "pmodules_directive_parser.cache")

# File encoding constants
DEFAULT_FILE_ENCODING = "utf-8"

# Error reporting constants
COLOR_ENV_VAR = "PMODULES_COLOR"

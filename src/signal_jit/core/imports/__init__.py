"""
Import handling for the JIT preparation pass.

- ``ImportTable``: what local names in a module are bound to.
- ``ImportManager``: per-file generated namespace imports.
"""

from signal_jit.core.imports.manager import ImportManager
from signal_jit.core.imports.table import Import, ImportTable

__all__ = ["Import", "ImportManager", "ImportTable"]

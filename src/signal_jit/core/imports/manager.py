"""
Namespace Import Manager.

Hands out namespace import aliases (``i0``, ``i1``, ...) for modules that
synthesized code needs to reference, and injects the matching
``import <module> as <alias>`` statements into the module once rewriting is
done.

One manager serves exactly one file. Requesting the same module any number of
times yields the same alias, so a file gains at most one import per module.
"""

import logging
from typing import Dict, Iterable, List, Optional, Set

import libcst as cst

from signal_jit.core.imports.utils import create_dotted_name, find_insertion_index, get_signature

logger = logging.getLogger(__name__)


class ImportManager:
  """
  Per-file registry of generated namespace imports.
  """

  def __init__(self, prefix: str = "i", reserved_names: Optional[Iterable[str]] = None) -> None:
    """
    Initializes the manager.

    Args:
        prefix: Alias prefix for generated imports.
        reserved_names: Names already bound in the file that aliases must not shadow.
    """
    self.prefix = prefix
    self._reserved: Set[str] = set(reserved_names or ())
    self._aliases: Dict[str, str] = {}
    self._counter = 0

  @property
  def namespace_imports(self) -> Dict[str, str]:
    """Module -> alias for every import requested so far, in request order."""
    return dict(self._aliases)

  def generate_namespace_import(self, module_name: str) -> cst.Name:
    """
    Returns an identifier referencing ``module_name`` through a namespace import.

    The first request for a module allocates a fresh alias; later requests
    reuse it. Each call returns a new ``cst.Name`` node.

    Args:
        module_name: Dotted module path (e.g. "angular.core").

    Returns:
        cst.Name: Identifier bound to the module.
    """
    alias = self._aliases.get(module_name)
    if alias is None:
      alias = self._next_alias()
      self._aliases[module_name] = alias
      logger.debug("Registered namespace import %s as %s", module_name, alias)
    return cst.Name(alias)

  def _next_alias(self) -> str:
    while True:
      candidate = f"{self.prefix}{self._counter}"
      self._counter += 1
      if candidate not in self._reserved:
        self._reserved.add(candidate)
        return candidate

  def get_import_statements(self) -> List[cst.SimpleStatementLine]:
    """
    Builds ``import <module> as <alias>`` statements for all registered modules.

    Returns:
        List[cst.SimpleStatementLine]: One statement per module.
    """
    return [
      cst.SimpleStatementLine(
        body=[
          cst.Import(
            names=[
              cst.ImportAlias(
                name=create_dotted_name(module),
                asname=cst.AsName(name=cst.Name(alias)),
              )
            ]
          )
        ]
      )
      for module, alias in self._aliases.items()
    ]

  def transform_module(self, module: cst.Module) -> cst.Module:
    """
    Injects the generated imports after the docstring and ``__future__`` imports.

    Statements already present in the module (same normalized source) are not
    injected twice.

    Args:
        module: The module to update.

    Returns:
        cst.Module: The module with imports injected, or the same module if none are needed.
    """
    body = list(module.body)
    existing = {get_signature(stmt) for stmt in body if _is_import_line(stmt)}
    injections = [stmt for stmt in self.get_import_statements() if get_signature(stmt) not in existing]
    if not injections:
      return module

    insert_idx = find_insertion_index(body)
    return module.with_changes(body=body[:insert_idx] + injections + body[insert_idx:])


def _is_import_line(stmt: cst.CSTNode) -> bool:
  return (
    isinstance(stmt, cst.SimpleStatementLine)
    and bool(stmt.body)
    and all(isinstance(small, (cst.Import, cst.ImportFrom)) for small in stmt.body)
  )

"""
Module Import Table.

Records what each local name in a module is bound to by its import
statements, so references in decorators and initializers can be traced back
to the module that exports them.

- ``from angular.core import Input`` binds ``Input`` to ``Import("Input", "angular.core")``.
- ``from angular.core import input as signal_input`` binds ``signal_input``.
- ``import angular.core as core`` binds the namespace ``core`` to ``angular.core``.
- ``import angular.core`` binds the namespace ``angular`` to ``angular``.
"""

from dataclasses import dataclass, field
from typing import Dict, Optional

import libcst as cst

from signal_jit.core.imports.utils import get_full_name, get_module_name


@dataclass(frozen=True)
class Import:
  """
  Origin of an imported symbol.

  Attributes:
      name: The exported name in the source module.
      from_: The module the symbol is imported from.
  """

  name: str
  from_: str


@dataclass
class ImportTable:
  """
  Local name bindings created by import statements.

  Attributes:
      named: Local name -> origin of a ``from x import y`` binding.
      namespaces: Local name -> module bound by ``import x [as y]``.
  """

  named: Dict[str, Import] = field(default_factory=dict)
  namespaces: Dict[str, str] = field(default_factory=dict)

  @classmethod
  def from_module(cls, module: cst.Module) -> "ImportTable":
    """
    Collects import bindings from a parsed module.

    Args:
        module: The LibCST module.

    Returns:
        ImportTable: Populated table.
    """
    collector = _ImportCollector()
    module.visit(collector)
    return collector.table

  def resolve_namespace(self, dotted: str) -> Optional[str]:
    """
    Maps a dotted namespace reference to the module it denotes.

    ``core`` -> ``angular.core`` (``import angular.core as core``) and
    ``angular.core`` -> ``angular.core`` (``import angular.core``).

    Args:
        dotted: The dotted prefix of an attribute reference.

    Returns:
        Optional[str]: The module path, or None if the root is not a namespace import.
    """
    if not dotted:
      return None
    root, _, rest = dotted.partition(".")
    module = self.namespaces.get(root)
    if module is None:
      return None
    return f"{module}.{rest}" if rest else module


class _ImportCollector(cst.CSTVisitor):
  """Visitor filling an ``ImportTable`` from Import/ImportFrom statements."""

  def __init__(self) -> None:
    self.table = ImportTable()

  def visit_Import(self, node: cst.Import) -> None:
    for alias in node.names:
      module = get_full_name(alias.name)
      if not module:
        continue
      if alias.asname and isinstance(alias.asname.name, cst.Name):
        self.table.namespaces[alias.asname.name.value] = module
      else:
        root = module.split(".")[0]
        self.table.namespaces[root] = root

  def visit_ImportFrom(self, node: cst.ImportFrom) -> None:
    if isinstance(node.names, cst.ImportStar):
      return
    module = get_module_name(node.module, node.relative)
    for alias in node.names:
      name = get_full_name(alias.name)
      if not name:
        continue
      local = name
      if alias.asname and isinstance(alias.asname.name, cst.Name):
        local = alias.asname.name.value
      self.table.named[local] = Import(name=name, from_=module)

"""
Utilities for import handling.

Static helpers for flattening dotted names, creating dotted CST nodes,
computing deduplication signatures and locating the import insertion point.
"""

from typing import Optional, Sequence, Union

import libcst as cst
from signal_jit.utils.node_source import capture_node_source


def get_full_name(node: cst.BaseExpression) -> str:
  """
  Recursively resolves a CST Name or Attribute chain to a dot-separated string.

  Args:
    node: The CST node representing the identifier.

  Returns:
    str: The dotted representation (e.g., "angular.core.Input").
    Returns an empty string if the node is not a pure Name/Attribute chain.

  Example:
    >>> get_full_name(cst.Attribute(value=cst.Name("core"), attr=cst.Name("Input")))
    'core.Input'
  """
  if isinstance(node, cst.Name):
    return node.value
  elif isinstance(node, cst.Attribute):
    base = get_full_name(node.value)
    return f"{base}.{node.attr.value}" if base else ""
  return ""


def get_module_name(node: Optional[Union[cst.Name, cst.Attribute]], relative: Sequence[cst.Dot] = ()) -> str:
  """
  Computes the module path of an ``ImportFrom`` including leading dots.

  Args:
      node: The module node (None for ``from . import x``).
      relative: The relative import dots.

  Returns:
      str: e.g. "angular.core", ".sibling" or "..".
  """
  prefix = "." * len(relative)
  if node is None:
    return prefix
  return prefix + get_full_name(node)


def create_dotted_name(name_str: str) -> Union[cst.Name, cst.Attribute]:
  """
  Creates a CST node structure for a dotted path string.

  Args:
      name_str (str): Dot-separated path (e.g. "angular.core").

  Returns:
      Union[cst.Name, cst.Attribute]: The constructed AST node.
  """
  parts = name_str.split(".")
  node = cst.Name(parts[0])
  for part in parts[1:]:
    node = cst.Attribute(value=node, attr=cst.Name(part))
  return node


def get_signature(node: cst.CSTNode) -> str:
  """
  Computes a deduplication signature for an import statement.

  Args:
      node: The CST node to sign.

  Returns:
      str: Whitespace-normalized source code string.
  """
  target = node
  while isinstance(target, cst.SimpleStatementLine) and len(target.body) > 0:
    target = target.body[0]

  src = capture_node_source(target)
  return " ".join(src.split())


def is_docstring(node: cst.CSTNode, idx: int) -> bool:
  """
  Determines if a statement node represents a module docstring.

  Args:
      node: The statement node from the module body.
      idx: The index of this statement in the body list.

  Returns:
      bool: True if it is a docstring (string expression at index 0).
  """
  if idx != 0:
    return False
  if isinstance(node, cst.SimpleStatementLine):
    if len(node.body) == 1 and isinstance(node.body[0], cst.Expr):
      expr = node.body[0].value
      if isinstance(expr, (cst.SimpleString, cst.ConcatenatedString)):
        return True
  return False


def is_future_import(node: cst.CSTNode) -> bool:
  """
  Determines if a statement is a `from __future__ import ...` directive.

  Args:
      node: The statement node.

  Returns:
      bool: True if it is a future import.
  """
  if isinstance(node, cst.SimpleStatementLine):
    for small_stmt in node.body:
      if isinstance(small_stmt, cst.ImportFrom):
        if small_stmt.module and isinstance(small_stmt.module, cst.Name):
          if small_stmt.module.value == "__future__":
            return True
  return False


def find_insertion_index(body: Sequence[cst.BaseStatement]) -> int:
  """
  Finds the index after the module docstring and ``__future__`` imports.

  Args:
      body: Module body statements.

  Returns:
      int: Position where new imports may be inserted.
  """
  insert_idx = 0
  for i, stmt in enumerate(body):
    if is_docstring(stmt, i) or is_future_import(stmt):
      insert_idx = i + 1
      continue
    break
  return insert_idx

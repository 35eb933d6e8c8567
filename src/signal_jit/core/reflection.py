"""
Reflection Host.

Answers two questions about a module without executing it:

1.  Which decorators does a declaration carry, and where was each imported from?
2.  Which import does an identifier or ``ns.name`` reference resolve to?

Synthesized nodes registered with ``NodeFactory.with_provenance`` resolve
through their original node: the synthesized ``Input`` identifier linked to
the ``Component`` identifier of ``from angular.core import Component`` resolves
to ``Import("Input", "angular.core")``.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence, Union

import libcst as cst

from signal_jit.config import DEFAULT_CORE_MODULE
from signal_jit.core.declarations import ClassDeclaration, MemberDeclaration
from signal_jit.core.factory import NodeFactory
from signal_jit.core.imports.table import Import, ImportTable
from signal_jit.core.imports.utils import get_full_name


@dataclass(frozen=True, eq=False)
class Decorator:
  """
  A reflected decorator.

  Attributes:
      name: The referenced name (``Input`` for both ``@Input`` and ``@core.Input``).
      identifier: The Name or Attribute naming the decorator.
      import_: Where the name was imported from, if known.
      node: The decorator node itself.
      args: Call arguments, or None for a bare reference.
  """

  name: str
  identifier: Union[cst.Name, cst.Attribute]
  import_: Optional[Import]
  node: cst.Decorator
  args: Optional[Sequence[cst.Arg]] = None


class ReflectionHost:
  """
  Import-aware reflection over one module.
  """

  def __init__(
    self,
    imports: ImportTable,
    factory: Optional[NodeFactory] = None,
    core_module: str = DEFAULT_CORE_MODULE,
  ) -> None:
    """
    Args:
        imports: Import bindings of the module.
        factory: Factory whose provenance links are honoured.
        core_module: Dotted path of the core library.
    """
    self.imports = imports
    self.factory = factory
    self.core_module = core_module

  @classmethod
  def from_module(
    cls,
    module: cst.Module,
    factory: Optional[NodeFactory] = None,
    core_module: str = DEFAULT_CORE_MODULE,
  ) -> "ReflectionHost":
    return cls(ImportTable.from_module(module), factory=factory, core_module=core_module)

  def get_decorators_of_declaration(
    self, declaration: Union[MemberDeclaration, ClassDeclaration]
  ) -> Optional[List[Decorator]]:
    """
    Reflects the decorators of a member or class.

    Args:
        declaration: The declaration to inspect.

    Returns:
        Optional[List[Decorator]]: Reflected decorators in order, or None if the
        declaration has none. Decorators that are not a Name/Attribute reference
        or a call of one are skipped.
    """
    if not declaration.decorators:
      return None

    reflected = []
    for node in declaration.decorators:
      decorator = self.reflect_decorator(node)
      if decorator is not None:
        reflected.append(decorator)
    return reflected

  def reflect_decorator(self, node: cst.Decorator) -> Optional[Decorator]:
    expr = node.decorator
    args = None
    if isinstance(expr, cst.Call):
      args = expr.args
      expr = expr.func

    if isinstance(expr, cst.Name):
      name = expr.value
    elif isinstance(expr, cst.Attribute):
      name = expr.attr.value
    else:
      return None

    return Decorator(
      name=name,
      identifier=expr,
      import_=self.get_import_of_expression(expr),
      node=node,
      args=args,
    )

  def get_import_of_expression(self, expr: cst.BaseExpression) -> Optional[Import]:
    """
    Resolves ``name`` or ``ns.name`` to the import it refers to.

    Args:
        expr: A Name or Attribute.

    Returns:
        Optional[Import]: The origin, or None for local or unknown references.
    """
    if isinstance(expr, cst.Name):
      return self.get_import_of_identifier(expr)

    if isinstance(expr, cst.Attribute):
      original = self._original(expr.attr)
      if original is not expr.attr:
        module = self._source_module(original)
      else:
        module = self._namespace_module(expr.value)
      return Import(name=expr.attr.value, from_=module) if module else None

    return None

  def get_import_of_identifier(self, node: cst.Name) -> Optional[Import]:
    """
    Resolves a bare identifier through the module's ``from x import y`` bindings.

    A synthesized identifier keeps its own name but takes the module of its
    original node.

    Args:
        node: The identifier.

    Returns:
        Optional[Import]: The origin, or None if not imported.
    """
    original = self._original(node)
    if original is not node:
      module = self._source_module(original)
      return Import(name=node.value, from_=module) if module else None
    return self.imports.named.get(node.value)

  def _original(self, node: cst.CSTNode) -> cst.CSTNode:
    if self.factory is None:
      return node
    return self.factory.get_original_node(node)

  def _source_module(self, expr: cst.CSTNode) -> Optional[str]:
    """
    Module an original decorator identifier was imported from: the source
    module of a ``from x import Name`` binding, or the module the namespace of
    an ``ns.Name`` reference denotes.
    """
    if isinstance(expr, cst.Attribute):
      return self._namespace_module(expr.value)
    if isinstance(expr, cst.Name):
      imported = self.imports.named.get(expr.value)
      if imported is not None:
        return imported.from_
    return None

  def _namespace_module(self, expr: cst.CSTNode) -> Optional[str]:
    """
    Module denoted by a namespace reference: ``core`` after
    ``import angular.core as core``, ``angular.core`` after ``import angular.core``,
    or ``core`` after ``from angular import core``.
    """
    if not isinstance(expr, (cst.Name, cst.Attribute)):
      return None
    dotted = get_full_name(expr)
    module = self.imports.resolve_namespace(dotted)
    if module is not None:
      return module

    root, _, rest = dotted.partition(".")
    imported = self.imports.named.get(root)
    if imported is None:
      return None
    sep = "" if imported.from_.endswith(".") else "."
    path = f"{imported.from_}{sep}{imported.name}"
    return f"{path}.{rest}" if rest else path

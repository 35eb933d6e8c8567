"""
Node Factory with Provenance Tracking.

Thin constructors over LibCST for the node shapes the JIT transforms
synthesize, plus an explicit provenance registry.

LibCST nodes carry no back-reference to the node they were derived from. A
synthesized identifier that must resolve like an existing one (e.g. to the
module its original was imported from) is registered with
``with_provenance(new, original)``; reflection code asks
``get_original_node(new)`` before resolving imports.
"""

import json
from dataclasses import replace
from typing import Dict, Optional, Sequence, Tuple, Union

import libcst as cst

from signal_jit.core.declarations import MemberDeclaration


class NodeFactory:
  """
  Builds LibCST nodes for synthesized code. One factory per file.
  """

  def __init__(self) -> None:
    # id(new) -> (new, original). Holding `new` keeps its id from being reused.
    self._provenance: Dict[int, Tuple[cst.CSTNode, cst.CSTNode]] = {}

  # -- Provenance --

  def with_provenance(self, node: cst.CSTNode, original: cst.CSTNode) -> cst.CSTNode:
    """
    Marks ``node`` as originating from ``original``.

    Args:
        node: The synthesized node.
        original: The pre-existing node it should behave like.

    Returns:
        The same ``node``, for inline use.
    """
    self._provenance[id(node)] = (node, original)
    return node

  def get_original_node(self, node: cst.CSTNode) -> cst.CSTNode:
    """
    Follows provenance links to the earliest original node.

    Args:
        node: Any node.

    Returns:
        The root original, or ``node`` itself if it has no provenance.
    """
    current = node
    seen = set()
    while id(current) in self._provenance and id(current) not in seen:
      seen.add(id(current))
      current = self._provenance[id(current)][1]
    return current

  def is_synthesized(self, node: cst.CSTNode) -> bool:
    return id(node) in self._provenance

  # -- Literals --

  def create_true(self) -> cst.Name:
    return cst.Name("True")

  def create_false(self) -> cst.Name:
    return cst.Name("False")

  def create_undefined(self) -> cst.Name:
    """The absent-value sentinel (``None``)."""
    return cst.Name("None")

  def create_string_literal(self, text: str) -> cst.SimpleString:
    """
    Creates a double-quoted string literal.

    Args:
        text: The string value.

    Returns:
        cst.SimpleString: Literal evaluating to ``text``.
    """
    return cst.SimpleString(json.dumps(text, ensure_ascii=False))

  def create_identifier(self, name: str) -> cst.Name:
    return cst.Name(name)

  # -- Expressions --

  def create_property_access(self, expression: cst.BaseExpression, name: Union[str, cst.Name]) -> cst.Attribute:
    """
    Creates ``expression.name``.

    Args:
        expression: The object expression.
        name: Attribute name, or a prebuilt Name node (kept by identity).

    Returns:
        cst.Attribute: The access expression.
    """
    attr = name if isinstance(name, cst.Name) else cst.Name(name)
    return cst.Attribute(value=expression, attr=attr)

  def create_call(self, func: cst.BaseExpression, args: Sequence[cst.BaseExpression] = ()) -> cst.Call:
    return cst.Call(func=func, args=[cst.Arg(value=arg) for arg in args])

  def create_object_literal(self, properties: Sequence[Tuple[str, cst.BaseExpression]]) -> cst.Dict:
    """
    Creates a dict display with string keys, preserving the given order.

    Args:
        properties: (key, value) pairs.

    Returns:
        cst.Dict: ``{"key": value, ...}``.
    """
    return cst.Dict(
      elements=[cst.DictElement(key=self.create_string_literal(key), value=value) for key, value in properties]
    )

  def create_any_keyword(self, typing_module: cst.BaseExpression) -> cst.Attribute:
    """The unconstrained type, ``<typing>.Any``."""
    return self.create_property_access(typing_module, "Any")

  def create_as_expression(
    self,
    expression: cst.BaseExpression,
    type_node: cst.BaseExpression,
    typing_module: cst.BaseExpression,
  ) -> cst.Call:
    """
    Creates a type-erasing cast, ``<typing>.cast(<type_node>, <expression>)``.

    Args:
        expression: The value being cast.
        type_node: The target type expression.
        typing_module: Reference to the ``typing`` module.

    Returns:
        cst.Call: The cast expression.
    """
    return self.create_call(self.create_property_access(typing_module, "cast"), [type_node, expression])

  def create_decorator(self, expression: cst.BaseExpression) -> cst.Decorator:
    return cst.Decorator(decorator=expression)

  # -- Declarations --

  def update_member_declaration(
    self,
    member: MemberDeclaration,
    decorators: Sequence[cst.Decorator],
    name: cst.Name,
    question_token: bool,
    type: Optional[cst.Annotation],
    initializer: Optional[cst.BaseExpression],
  ) -> MemberDeclaration:
    """
    Returns ``member`` with the given parts, or ``member`` itself if every part
    is already identical.

    Args:
        member: The declaration to update.
        decorators: New decorator list.
        name: Field name node.
        question_token: Optional-member marker.
        type: Type annotation node.
        initializer: Initializer expression node.

    Returns:
        MemberDeclaration: The updated declaration.
    """
    decorators = tuple(decorators)
    unchanged = (
      len(decorators) == len(member.decorators)
      and all(a is b for a, b in zip(decorators, member.decorators))
      and name is member.name
      and question_token == member.question_token
      and type is member.type
      and initializer is member.initializer
    )
    if unchanged:
      return member
    return replace(
      member,
      decorators=decorators,
      name=name,
      question_token=question_token,
      type=type,
      initializer=initializer,
    )

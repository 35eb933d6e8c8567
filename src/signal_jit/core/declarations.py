"""
Class and Member Declaration Models.

Python has no syntax for decorating a class field, so members are modelled as
immutable records whose parts are LibCST nodes. Rewrites never mutate a
declaration; they return a new one (see ``NodeFactory.update_member_declaration``).

Reflection from source:

    @Component(selector="app-card")
    class Card:
        name = input("Name")            # MemberDeclaration(name, initializer)
        id: InputSignal[str] = input.required()
        title: str                      # no initializer
"""

from dataclasses import dataclass, field, replace
from typing import List, Optional, Sequence, Tuple

import libcst as cst

from signal_jit.utils.node_source import capture_node_source


@dataclass(frozen=True, eq=False)
class MemberDeclaration:
  """
  A class field declaration.

  Attributes:
      name: Field identifier.
      type: Optional type annotation.
      initializer: Optional initializer expression.
      decorators: Ordered decorators attached to the field.
      question_token: Optional-member marker.
  """

  name: cst.Name
  type: Optional[cst.Annotation] = None
  initializer: Optional[cst.BaseExpression] = None
  decorators: Tuple[cst.Decorator, ...] = ()
  question_token: bool = False

  @classmethod
  def from_statement(cls, stmt: cst.CSTNode) -> Optional["MemberDeclaration"]:
    """
    Reflects a class-body statement into a member declaration.

    Only single-target field statements qualify (``x: T``, ``x: T = v``, ``x = v``).

    Args:
        stmt: A statement from a class body.

    Returns:
        Optional[MemberDeclaration]: The member, or None for other statements.
    """
    if not isinstance(stmt, cst.SimpleStatementLine) or len(stmt.body) != 1:
      return None

    small = stmt.body[0]
    if isinstance(small, cst.AnnAssign) and isinstance(small.target, cst.Name):
      return cls(name=small.target, type=small.annotation, initializer=small.value)

    if isinstance(small, cst.Assign) and len(small.targets) == 1:
      target = small.targets[0].target
      if isinstance(target, cst.Name):
        return cls(name=target, initializer=small.value)

    return None

  @property
  def code(self) -> str:
    """
    Renders the declaration, one decorator per line, then ``name[?][: T][ = value]``.
    """
    lines = [f"@{capture_node_source(d.decorator)}" for d in self.decorators]
    decl = self.name.value
    if self.question_token:
      decl += "?"
    if self.type is not None:
      decl += f": {capture_node_source(self.type.annotation)}"
    if self.initializer is not None:
      decl += f" = {capture_node_source(self.initializer)}"
    lines.append(decl)
    return "\n".join(lines)


@dataclass(frozen=True, eq=False)
class ClassDeclaration:
  """
  A class with its decorators and reflected field members.

  Attributes:
      name: Class identifier.
      decorators: Class decorators in source order.
      members: Field members in source order.
      node: The originating ClassDef, if reflected from source.
  """

  name: cst.Name
  decorators: Tuple[cst.Decorator, ...] = ()
  members: Tuple[MemberDeclaration, ...] = field(default_factory=tuple)
  node: Optional[cst.ClassDef] = None

  @classmethod
  def from_cst(cls, node: cst.ClassDef) -> "ClassDeclaration":
    """
    Reflects a ClassDef. Statements that are not fields (methods, nested
    classes, docstrings) are not members.

    Args:
        node: The LibCST class definition.

    Returns:
        ClassDeclaration: The reflected class.
    """
    members: List[MemberDeclaration] = []
    if isinstance(node.body, cst.IndentedBlock):
      for stmt in node.body.body:
        member = MemberDeclaration.from_statement(stmt)
        if member is not None:
          members.append(member)
    return cls(name=node.name, decorators=tuple(node.decorators), members=tuple(members), node=node)

  def with_members(self, members: Sequence[MemberDeclaration]) -> "ClassDeclaration":
    return replace(self, members=tuple(members))

  def member(self, name: str) -> Optional[MemberDeclaration]:
    """Looks up a member by field name."""
    for m in self.members:
      if m.name.value == name:
        return m
    return None

"""
Pytest Configuration and Fixtures.

Includes:
- Syspath patching for local imports.
- Per-file collaborator fixtures (factory, import manager, reflection host).
- Helpers for building members and classes from source snippets.
"""

import sys
import textwrap
from pathlib import Path
from typing import Callable

import libcst as cst
import pytest

# Add src to path so we can import 'signal_jit' without installing it
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from signal_jit.core.declarations import ClassDeclaration, MemberDeclaration  # noqa: E402
from signal_jit.core.factory import NodeFactory  # noqa: E402
from signal_jit.core.imports.manager import ImportManager  # noqa: E402
from signal_jit.core.reflection import ReflectionHost  # noqa: E402
from signal_jit.utils.node_source import capture_node_source  # noqa: E402

CORE_IMPORTS = "from angular.core import Component, Directive, Input, input\n"


class FileContext:
  """
  Collaborators for one parsed module, as the engine creates them.
  """

  def __init__(self, code: str, core_module: str = "angular.core") -> None:
    self.module = cst.parse_module(textwrap.dedent(code))
    self.factory = NodeFactory()
    self.host = ReflectionHost.from_module(self.module, factory=self.factory, core_module=core_module)
    self.import_manager = ImportManager()

  def classes(self):
    return [ClassDeclaration.from_cst(stmt) for stmt in self.module.body if isinstance(stmt, cst.ClassDef)]

  def get_class(self, name: str) -> ClassDeclaration:
    for cls in self.classes():
      if cls.name.value == name:
        return cls
    raise KeyError(name)

  def class_decorator(self, class_name: str):
    """Reflected first decorator of a class (the trigger for member transforms)."""
    return self.host.get_decorators_of_declaration(self.get_class(class_name))[0]


@pytest.fixture
def file_context() -> Callable[..., FileContext]:
  """Factory fixture: ``file_context(code)`` parses a module and wires its collaborators."""
  return FileContext


def render(node: cst.CSTNode) -> str:
  """Source of a detached node."""
  return capture_node_source(node)


def member_from(code: str) -> MemberDeclaration:
  """Builds a member from a single field statement, e.g. ``name = input("Name")``."""
  stmt = cst.parse_statement(code)
  member = MemberDeclaration.from_statement(stmt)
  assert member is not None
  return member

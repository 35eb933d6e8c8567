"""
Interface definition for property transforms.

A property transform rewrites one class member during JIT preparation. It
receives the member, the collaborators it may use, and the core class
decorator that made the enclosing class eligible. Returning the very same
member object signals "not applicable".
"""

from typing import Protocol

from signal_jit.core.declarations import MemberDeclaration
from signal_jit.core.factory import NodeFactory
from signal_jit.core.imports.manager import ImportManager
from signal_jit.core.reflection import Decorator, ReflectionHost


class PropertyTransform(Protocol):
  """
  Contract for a member-level rewrite used by ``InitializerApiJitTransform``.
  """

  def __call__(
    self,
    member: MemberDeclaration,
    host: ReflectionHost,
    factory: NodeFactory,
    import_manager: ImportManager,
    decorator: Decorator,
    is_core: bool,
  ) -> MemberDeclaration:
    """
    Rewrites a single member.

    Args:
        member: The member declaration.
        host: Reflection host of the file.
        factory: Node factory of the file.
        import_manager: Import manager of the file.
        decorator: The core class decorator of the enclosing class.
        is_core: True when compiling the core library itself.

    Returns:
        The rewritten member, or ``member`` itself when not applicable.
    """
    ...

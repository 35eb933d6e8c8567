"""
Initializer API JIT Transform.

Applies property transforms to the members of classes decorated with a core
class decorator (``@Component`` / ``@Directive`` by default). Classes without
such a decorator, and members no transform applies to, are left untouched.
"""

import logging
from typing import Sequence

from signal_jit.config import DEFAULT_CLASS_DECORATORS
from signal_jit.core.declarations import ClassDeclaration
from signal_jit.core.decorators import find_core_decorator
from signal_jit.core.factory import NodeFactory
from signal_jit.core.imports.manager import ImportManager
from signal_jit.core.reflection import ReflectionHost
from signal_jit.core.transforms.api import PropertyTransform
from signal_jit.core.transforms.input_function import signal_inputs_transform

logger = logging.getLogger(__name__)

DEFAULT_PROPERTY_TRANSFORMS: Sequence[PropertyTransform] = (signal_inputs_transform,)


class InitializerApiJitTransform:
  """
  Class-level pass running property transforms over eligible classes.

  All collaborators belong to a single file.
  """

  def __init__(
    self,
    host: ReflectionHost,
    factory: NodeFactory,
    import_manager: ImportManager,
    is_core: bool = False,
    transforms: Sequence[PropertyTransform] = DEFAULT_PROPERTY_TRANSFORMS,
    class_decorators: Sequence[str] = DEFAULT_CLASS_DECORATORS,
  ) -> None:
    self.host = host
    self.factory = factory
    self.import_manager = import_manager
    self.is_core = is_core
    self.transforms = tuple(transforms)
    self.class_decorators = tuple(class_decorators)

  def transform_class(self, cls: ClassDeclaration) -> ClassDeclaration:
    """
    Rewrites the members of one class.

    For each member the transforms run in order; the first one returning a
    different member wins.

    Args:
        cls: The class declaration.

    Returns:
        ClassDeclaration: The updated class, or ``cls`` itself if nothing changed.
    """
    class_decorator = find_core_decorator(
      self.host.get_decorators_of_declaration(cls),
      self.class_decorators,
      self.is_core,
      self.host.core_module,
    )
    if class_decorator is None:
      return cls

    has_changed = False
    members = []
    for member in cls.members:
      new_member = member
      for transform in self.transforms:
        candidate = transform(member, self.host, self.factory, self.import_manager, class_decorator, self.is_core)
        if candidate is not member:
          new_member = candidate
          has_changed = True
          break
      members.append(new_member)

    if not has_changed:
      return cls

    logger.debug("Rewrote members of class '%s'", cls.name.value)
    return cls.with_members(members)

"""
Core Decorator Identity.

Decides whether a reflected decorator "is" a given decorator of the core
library. Outside the core library the decorator must resolve to an import of
that name from the core module. When compiling the core library itself, its
decorators are referenced locally, so the bare name is enough.
"""

from typing import Iterable, Optional, Sequence

from signal_jit.config import DEFAULT_CORE_MODULE
from signal_jit.core.reflection import Decorator


def is_core_decorator(
  decorator: Decorator,
  name: str,
  is_core: bool,
  core_module: str = DEFAULT_CORE_MODULE,
) -> bool:
  """
  Checks a decorator against a core decorator name.

  Args:
      decorator: The reflected decorator.
      name: Expected exported name (e.g. "Input").
      is_core: True when compiling the core library itself.
      core_module: Dotted path of the core library.

  Returns:
      bool: True if the decorator refers to ``core_module.name``.
  """
  if is_core:
    return decorator.name == name
  imported = decorator.import_
  return imported is not None and imported.from_ == core_module and imported.name == name


def find_core_decorator(
  decorators: Optional[Iterable[Decorator]],
  names: Sequence[str],
  is_core: bool,
  core_module: str = DEFAULT_CORE_MODULE,
) -> Optional[Decorator]:
  """
  Returns the first decorator matching any of ``names``, or None.
  """
  for decorator in decorators or ():
    if any(is_core_decorator(decorator, name, is_core, core_module) for name in names):
      return decorator
  return None

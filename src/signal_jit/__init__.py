"""
signal-jit Package.

Prepares class declarations for JIT compilation by making signal inputs
statically discoverable: every field declared through the core library's
``input()`` / ``input.required()`` factory gains an ``Input`` decorator that
carries its metadata.

Usage
-----

.. code-block:: python

    import signal_jit

    code = '''
    from angular.core import Component, input

    @Component(selector="app-card")
    class Card:
        name = input("Name")
    '''
    result = signal_jit.prepare(code)
    print(result.get_class("Card").member("name").code)
    # @i0.Input(i1.cast(i1.Any, {"isSignal": True, "alias": "Name", "required": False, "transform": None}))
    # name = input("Name")
"""

from typing import Optional

from signal_jit.config import TransformConfig
from signal_jit.core.engine import JitPreparationEngine, PreparationResult
from signal_jit.core.transforms import InitializerApiJitTransform, signal_inputs_transform

__version__ = "0.0.1"


def prepare(
  code: str,
  core_module: Optional[str] = None,
  is_core: Optional[bool] = None,
  config: Optional[TransformConfig] = None,
) -> PreparationResult:
  """
  Adds ``Input`` metadata decorators to the signal inputs of a module.

  Settings come from ``[tool.signal_jit]`` in the nearest ``pyproject.toml``
  unless a full ``config`` is given.

  Args:
      code (str): Python module source.
      core_module (str, optional): Override for the core library module path.
      is_core (bool, optional): True when the module belongs to the core library itself.
      config (TransformConfig, optional): Full configuration; overrides the other options.

  Returns:
      PreparationResult: The prepared classes and the module source with imports injected.

  Raises:
      ValueError: If the module cannot be parsed or the configuration is invalid.
  """
  result = JitPreparationEngine(config, core_module=core_module, is_core=is_core).run(code)
  if not result.success:
    error_msg = "\n".join(result.errors)
    raise ValueError(f"JIT preparation failed:\n{error_msg}")
  return result


__all__ = [
  "InitializerApiJitTransform",
  "JitPreparationEngine",
  "PreparationResult",
  "TransformConfig",
  "prepare",
  "signal_inputs_transform",
  "__version__",
]

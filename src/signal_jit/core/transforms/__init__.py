"""
JIT Property Transforms.

- ``signal_inputs_transform``: adds ``Input`` metadata decorators to signal inputs.
- ``InitializerApiJitTransform``: runs property transforms over eligible classes.
"""

from signal_jit.core.transforms.api import PropertyTransform
from signal_jit.core.transforms.initializer_api import InitializerApiJitTransform
from signal_jit.core.transforms.input_function import signal_inputs_transform

__all__ = ["InitializerApiJitTransform", "PropertyTransform", "signal_inputs_transform"]

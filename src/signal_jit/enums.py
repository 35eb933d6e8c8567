"""
Enumerations for signal-jit.
"""

from enum import Enum


class InputCallKind(str, Enum):
  """
  Shape of a field initializer with respect to the signal input factory.
  """

  OPTIONAL = "optional"  # input(...)
  REQUIRED = "required"  # input.required(...)
  NOT_A_MATCH = "not_a_match"

"""
Signal Input Initializer Parser.

Recognises field initializers that call the core library's signal input
factory, purely from their syntax:

    name = input()                      # optional, alias = field name
    name = input("Name")                # optional, alias "Name"
    name = input(initial=0, transform=int)
    id = input.required()               # required
    id = core.input.required(alias="userId")

Anything else, including calls that are ambiguous (alias given twice, star
arguments, unknown options, non-literal aliases), is not a match. Parsing never
raises.
"""

from dataclasses import dataclass
from typing import Dict, Optional, Sequence

import libcst as cst

from signal_jit.core.reflection import ReflectionHost
from signal_jit.enums import InputCallKind

INPUT_FUNCTION = "input"
REQUIRED_VARIANT = "required"

_OPTIONAL_KEYWORDS = frozenset({"alias", "transform", "initial"})
_REQUIRED_KEYWORDS = frozenset({"alias", "transform"})


@dataclass(frozen=True, eq=False)
class InputCall:
  """
  Tagged result of matching an expression against the input factory.

  Attributes:
      kind: Which factory variant matched, or NOT_A_MATCH.
      alias: Explicit alias, if given.
      transform: The transform option expression, if given.
  """

  kind: InputCallKind
  alias: Optional[str] = None
  transform: Optional[cst.BaseExpression] = None


NOT_A_MATCH = InputCall(kind=InputCallKind.NOT_A_MATCH)


@dataclass(frozen=True, eq=False)
class InputMapping:
  """
  Input metadata of a signal input field.

  Attributes:
      class_property_name: The field name.
      binding_property_name: Externally visible input name (alias or field name).
      required: Whether the input was declared with ``input.required``.
      transform: The transform option expression reported by the call, if any.
      is_signal: Always True for fields declared through the factory.
  """

  class_property_name: str
  binding_property_name: str
  required: bool
  transform: Optional[cst.BaseExpression] = None
  is_signal: bool = True


def try_parse_signal_input_mapping(
  class_property_name: str,
  value: Optional[cst.BaseExpression],
  host: ReflectionHost,
  is_core: bool,
) -> Optional[InputMapping]:
  """
  Parses a field initializer into input metadata.

  Args:
      class_property_name: The field name.
      value: The initializer expression, or None if the field has none.
      host: Reflection host resolving the factory reference.
      is_core: True when compiling the core library itself.

  Returns:
      Optional[InputMapping]: The metadata, or None if the initializer is not
      a signal input factory call.
  """
  if value is None:
    return None

  call = parse_input_call(value, host, is_core)
  if call.kind is InputCallKind.NOT_A_MATCH:
    return None

  return InputMapping(
    class_property_name=class_property_name,
    binding_property_name=call.alias if call.alias is not None else class_property_name,
    required=call.kind is InputCallKind.REQUIRED,
    transform=call.transform,
  )


def parse_input_call(expr: cst.BaseExpression, host: ReflectionHost, is_core: bool) -> InputCall:
  """
  Matches an expression against ``input(...)`` and ``input.required(...)``.

  Args:
      expr: The expression to inspect.
      host: Reflection host resolving the factory reference.
      is_core: True when compiling the core library itself.

  Returns:
      InputCall: The matched variant and its options, or ``NOT_A_MATCH``.
  """
  if not isinstance(expr, cst.Call):
    return NOT_A_MATCH

  kind = _callee_kind(expr.func, host, is_core)
  if kind is InputCallKind.NOT_A_MATCH:
    return NOT_A_MATCH

  allowed = _REQUIRED_KEYWORDS if kind is InputCallKind.REQUIRED else _OPTIONAL_KEYWORDS
  options = _parse_arguments(expr.args, allowed)
  if options is None:
    return NOT_A_MATCH

  alias = None
  if "alias" in options:
    alias = _string_value(options["alias"])
    if alias is None:
      return NOT_A_MATCH

  return InputCall(kind=kind, alias=alias, transform=options.get("transform"))


def _callee_kind(func: cst.BaseExpression, host: ReflectionHost, is_core: bool) -> InputCallKind:
  if _is_input_function(func, host, is_core):
    return InputCallKind.OPTIONAL
  if (
    isinstance(func, cst.Attribute)
    and func.attr.value == REQUIRED_VARIANT
    and _is_input_function(func.value, host, is_core)
  ):
    return InputCallKind.REQUIRED
  return InputCallKind.NOT_A_MATCH


def _is_input_function(expr: cst.BaseExpression, host: ReflectionHost, is_core: bool) -> bool:
  """True if ``expr`` references the core ``input`` factory."""
  if not isinstance(expr, (cst.Name, cst.Attribute)):
    return False

  imported = host.get_import_of_expression(expr)
  if imported is not None:
    return imported.from_ == host.core_module and imported.name == INPUT_FUNCTION

  # Inside the core library the factory is a local definition.
  return is_core and isinstance(expr, cst.Name) and expr.value == INPUT_FUNCTION


def _parse_arguments(args: Sequence[cst.Arg], allowed: frozenset) -> Optional[Dict[str, cst.BaseExpression]]:
  """
  Normalizes call arguments into options; the single positional argument is the alias.

  Returns None for any shape that cannot be read unambiguously.
  """
  options: Dict[str, cst.BaseExpression] = {}
  positional = []

  for arg in args:
    if arg.star:
      return None
    if arg.keyword is None:
      positional.append(arg.value)
      continue
    key = arg.keyword.value
    if key not in allowed or key in options:
      return None
    options[key] = arg.value

  if len(positional) > 1:
    return None
  if positional:
    if "alias" in options:
      return None
    options["alias"] = positional[0]

  return options


def _string_value(expr: cst.BaseExpression) -> Optional[str]:
  """Value of a plain (non-f, non-bytes) string literal, else None."""
  if isinstance(expr, (cst.SimpleString, cst.ConcatenatedString)):
    try:
      value = expr.evaluated_value
    except (SyntaxError, ValueError):
      # Escapes LibCST accepts but the literal evaluator rejects.
      return None
    if isinstance(value, str):
      return value
  return None

"""
Signal Input Decorator Transform.

Adds an ``Input`` decorator to every signal input field so its metadata can
be read without instantiating the class. The metadata is derived from the
``input()`` / ``input.required()`` initializer.

Transformation:
    Input:
        @Component(selector="app-card")
        class Card:
            name = input("Name")

    Output (member):
        @i0.Input(i1.cast(i1.Any, {"isSignal": True, "alias": "Name", "required": False, "transform": None}))
        name = input("Name")

JIT environments need to know all inputs of a directive before creating it,
and signal inputs are otherwise only visible by running the field initializers.
"""

import logging
from typing import Dict

import libcst as cst

from signal_jit.core.declarations import MemberDeclaration
from signal_jit.core.decorators import is_core_decorator
from signal_jit.core.factory import NodeFactory
from signal_jit.core.imports.manager import ImportManager
from signal_jit.core.input_parser import InputMapping, try_parse_signal_input_mapping
from signal_jit.core.reflection import Decorator, ReflectionHost

logger = logging.getLogger(__name__)

INPUT_DECORATOR = "Input"
TYPING_MODULE = "typing"

# Key order is part of the emitted metadata.
METADATA_FIELDS = ("isSignal", "alias", "required", "transform")


def signal_inputs_transform(
  member: MemberDeclaration,
  host: ReflectionHost,
  factory: NodeFactory,
  import_manager: ImportManager,
  decorator: Decorator,
  is_core: bool,
) -> MemberDeclaration:
  """
  Prepends an ``Input`` decorator to a signal input member.

  Args:
      member: The member declaration.
      host: Reflection host of the file.
      factory: Node factory of the file.
      import_manager: Import manager of the file.
      decorator: The core class decorator of the enclosing class.
      is_core: True when compiling the core library itself.

  Returns:
      MemberDeclaration: The decorated member, or ``member`` unchanged if it
      already has an ``Input`` decorator or is not a signal input.
  """
  if has_input_decorator(member, host, is_core):
    return member

  mapping = try_parse_signal_input_mapping(member.name.value, member.initializer, host, is_core)
  if mapping is None:
    return member

  fields = build_metadata_fields(mapping, factory)
  new_decorator = create_input_decorator(fields, factory, import_manager, decorator, host.core_module)
  logger.debug("Adding Input decorator to signal input '%s'", member.name.value)

  return factory.update_member_declaration(
    member,
    [new_decorator, *member.decorators],
    member.name,
    member.question_token,
    member.type,
    member.initializer,
  )


def has_input_decorator(member: MemberDeclaration, host: ReflectionHost, is_core: bool) -> bool:
  decorators = host.get_decorators_of_declaration(member)
  if not decorators:
    return False
  return any(is_core_decorator(d, INPUT_DECORATOR, is_core, host.core_module) for d in decorators)


def build_metadata_fields(mapping: InputMapping, factory: NodeFactory) -> Dict[str, cst.BaseExpression]:
  """
  Builds the decorator metadata in ``METADATA_FIELDS`` order.

  ``transform`` is always ``None``: the input signal applies its transform when
  the value is set, so the decorator must not carry it a second time.

  Args:
      mapping: Parsed input metadata.
      factory: Node factory.

  Returns:
      Dict[str, cst.BaseExpression]: Field name -> literal expression.
  """
  return {
    "isSignal": factory.create_true(),
    "alias": factory.create_string_literal(mapping.binding_property_name),
    "required": factory.create_true() if mapping.required else factory.create_false(),
    "transform": factory.create_undefined(),
  }


def create_input_decorator(
  fields: Dict[str, cst.BaseExpression],
  factory: NodeFactory,
  import_manager: ImportManager,
  decorator: Decorator,
  core_module: str,
) -> cst.Decorator:
  """
  Builds ``@<core>.Input(<typing>.cast(<typing>.Any, {...}))``.

  The metadata is cast to ``Any`` because ``isSignal`` is not part of the
  decorator's public parameter type.

  Args:
      fields: Metadata from ``build_metadata_fields``.
      factory: Node factory.
      import_manager: Import manager of the file.
      decorator: The core class decorator that triggered the transform.
      core_module: Dotted path of the core library.

  Returns:
      cst.Decorator: The new decorator.
  """
  # Later reflection passes must resolve this identifier to the core module.
  input_identifier = factory.with_provenance(factory.create_identifier(INPUT_DECORATOR), decorator.identifier)

  core_namespace = import_manager.generate_namespace_import(core_module)
  typing_module = import_manager.generate_namespace_import(TYPING_MODULE)
  metadata = factory.create_object_literal([(name, fields[name]) for name in METADATA_FIELDS])

  return factory.create_decorator(
    factory.create_call(
      factory.create_property_access(core_namespace, input_identifier),
      [
        factory.create_as_expression(
          metadata,
          factory.create_any_keyword(typing_module),
          typing_module,
        )
      ],
    )
  )

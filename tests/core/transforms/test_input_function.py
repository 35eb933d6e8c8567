"""
Tests for the Signal Input Decorator Transform.

Verifies:
1. Signal input fields gain a leading ``Input`` decorator with ordered metadata.
2. Non-input fields and already-decorated fields are returned unchanged (same object).
3. Provenance of the synthesized ``Input`` identifier resolves to the core module.
"""

from dataclasses import replace

import libcst as cst
import pytest

from conftest import render
from signal_jit.core.decorators import is_core_decorator
from signal_jit.core.factory import NodeFactory
from signal_jit.core.input_parser import InputMapping
from signal_jit.core.reflection import ReflectionHost
from signal_jit.core.transforms.input_function import (
  METADATA_FIELDS,
  build_metadata_fields,
  has_input_decorator,
  signal_inputs_transform,
)

SOURCE = """
from angular.core import Component, Input, input

def compute_foo():
    return 1

@Component(selector="app-card")
class Card:
    name = input("Name")
    id = input.required()
    foo = compute_foo()
    title: str
    label: str = input(alias="x")
    count = input(initial=0, transform=int)
"""


def squash(text: str) -> str:
  return "".join(text.split())


def apply(ctx, member, is_core=False):
  decorator = ctx.class_decorator("Card")
  return signal_inputs_transform(member, ctx.host, ctx.factory, ctx.import_manager, decorator, is_core)


def test_optional_input_with_positional_alias(file_context):
  """
  Scenario: `name = input("Name")` outside the core library.
  Expectation: `{isSignal: True, alias: "Name", required: False, transform: None}` decorator.
  """
  ctx = file_context(SOURCE)
  member = ctx.get_class("Card").member("name")

  result = apply(ctx, member)

  assert result is not member
  assert len(result.decorators) == 1
  expected = 'i0.Input(i1.cast(i1.Any, {"isSignal": True, "alias": "Name", "required": False, "transform": None}))'
  assert squash(render(result.decorators[0].decorator)) == squash(expected)


def test_required_input_defaults_alias_to_field_name(file_context):
  """
  Scenario: `id = input.required()`.
  Expectation: alias "id", required True.
  """
  ctx = file_context(SOURCE)
  result = apply(ctx, ctx.get_class("Card").member("id"))

  src = squash(render(result.decorators[0].decorator))
  assert '"alias":"id"' in src
  assert '"required":True' in src
  assert '"isSignal":True' in src
  assert '"transform":None' in src


def test_keyword_alias(file_context):
  ctx = file_context(SOURCE)
  result = apply(ctx, ctx.get_class("Card").member("label"))

  src = squash(render(result.decorators[0].decorator))
  assert '"alias":"x"' in src
  assert '"required":False' in src


def test_transform_option_is_not_carried(file_context):
  """
  Scenario: `count = input(initial=0, transform=int)`.
  Expectation: the decorator's transform is None and `int` is not referenced.
  """
  ctx = file_context(SOURCE)
  result = apply(ctx, ctx.get_class("Card").member("count"))

  src = squash(render(result.decorators[0].decorator))
  assert '"transform":None' in src
  assert "int" not in src


def test_unrelated_call_is_unchanged(file_context):
  """
  Scenario: `foo = compute_foo()`.
  Expectation: the very same declaration object.
  """
  ctx = file_context(SOURCE)
  member = ctx.get_class("Card").member("foo")

  assert apply(ctx, member) is member
  assert ctx.import_manager.namespace_imports == {}


def test_missing_initializer_is_unchanged(file_context):
  ctx = file_context(SOURCE)
  member = ctx.get_class("Card").member("title")

  assert apply(ctx, member) is member


def test_already_decorated_member_is_unchanged(file_context):
  """
  Scenario: member already carries `@Input` imported from the core.
  Expectation: unchanged even though the initializer is a signal input.
  """
  ctx = file_context(SOURCE)
  member = ctx.get_class("Card").member("name")
  decorated = replace(member, decorators=(cst.Decorator(decorator=cst.Name("Input")),))

  assert apply(ctx, decorated) is decorated


def test_foreign_input_decorator_does_not_count(file_context):
  """
  Scenario: `@Input` imported from another module.
  Expectation: the member is still rewritten.
  """
  code = """
from angular.core import Component, input
from forms import Input

@Component()
class Card:
    name = input()
"""
  ctx = file_context(code)
  member = ctx.get_class("Card").member("name")
  decorated = replace(member, decorators=(cst.Decorator(decorator=cst.Name("Input")),))

  result = apply(ctx, decorated)

  assert result is not decorated
  assert len(result.decorators) == 2


def test_existing_decorators_preserved_after_new_one(file_context):
  ctx = file_context(SOURCE)
  member = ctx.get_class("Card").member("name")
  first = cst.Decorator(decorator=cst.Name("tracked"))
  second = cst.Decorator(decorator=cst.Call(func=cst.Name("doc"), args=[cst.Arg(cst.SimpleString('"x"'))]))
  decorated = replace(member, decorators=(first, second))

  result = apply(ctx, decorated)

  assert len(result.decorators) == 3
  assert result.decorators[1] is first
  assert result.decorators[2] is second
  assert squash(render(result.decorators[0].decorator)).startswith("i0.Input(")


def test_other_parts_kept_by_reference(file_context):
  ctx = file_context(SOURCE)
  member = ctx.get_class("Card").member("label")

  result = apply(ctx, member)

  assert result.name is member.name
  assert result.type is member.type
  assert result.initializer is member.initializer
  assert result.question_token == member.question_token
  assert member.decorators == ()


def test_idempotent(file_context):
  """
  Scenario: applying the transform to its own output.
  Expectation: the second application returns its input unchanged.
  """
  ctx = file_context(SOURCE)
  once = apply(ctx, ctx.get_class("Card").member("name"))
  twice = apply(ctx, once)

  assert twice is once
  assert len(twice.decorators) == 1


def test_one_namespace_import_per_module(file_context):
  ctx = file_context(SOURCE)
  card = ctx.get_class("Card")
  for name in ("name", "id", "label", "count"):
    apply(ctx, card.member(name))

  assert ctx.import_manager.namespace_imports == {"angular.core": "i0", "typing": "i1"}
  assert len(ctx.import_manager.get_import_statements()) == 2


def test_synthesized_decorator_resolves_through_provenance(file_context):
  """
  Scenario: a later pass reflects the new decorator with the file's factory.
  Expectation: it resolves to `angular.core.Input`; without provenance it does not.
  """
  ctx = file_context(SOURCE)
  result = apply(ctx, ctx.get_class("Card").member("name"))

  reflected = ctx.host.get_decorators_of_declaration(result)[0]
  assert reflected.import_ is not None
  assert reflected.import_.name == "Input"
  assert reflected.import_.from_ == "angular.core"
  assert is_core_decorator(reflected, "Input", False)

  blind_host = ReflectionHost(ctx.host.imports, factory=NodeFactory())
  blind = blind_host.get_decorators_of_declaration(result)[0]
  assert blind.import_ is None
  assert not is_core_decorator(blind, "Input", False)


def test_namespace_imported_core(file_context):
  """
  Scenario: core used through `import angular.core as ng`.
  Expectation: `ng.input.required(alias="nm")` is recognised and the new
  decorator resolves through the `ng` namespace.
  """
  code = """
import angular.core as ng

@ng.Directive()
class Card:
    value = ng.input.required(alias="nm")
"""
  ctx = file_context(code)
  result = apply(ctx, ctx.get_class("Card").member("value"))

  src = squash(render(result.decorators[0].decorator))
  assert '"alias":"nm"' in src
  assert '"required":True' in src
  reflected = ctx.host.get_decorators_of_declaration(result)[0]
  assert is_core_decorator(reflected, "Input", False)


def test_submodule_imported_core_is_idempotent(file_context):
  """
  Scenario: core used through `from angular import core` with `@core.Component`.
  Expectation: the new decorator resolves to `angular.core.Input`, so a second
  application returns the same member.
  """
  code = """
from angular import core

@core.Component()
class Card:
    name = core.input("Name")
"""
  ctx = file_context(code)
  once = apply(ctx, ctx.get_class("Card").member("name"))
  assert len(once.decorators) == 1

  reflected = ctx.host.get_decorators_of_declaration(once)[0]
  assert reflected.import_ is not None
  assert reflected.import_.from_ == "angular.core"
  assert is_core_decorator(reflected, "Input", False)

  twice = apply(ctx, once)
  assert twice is once
  assert len(twice.decorators) == 1


def test_core_library_uses_local_names(file_context):
  """
  Scenario: compiling the core library itself, `input` is a local definition.
  Expectation: rewritten with is_core=True, left alone with is_core=False.
  """
  code = """
@Component()
class Card:
    name = input()
"""
  ctx = file_context(code)
  member = ctx.get_class("Card").member("name")

  assert apply(ctx, member, is_core=False) is member

  result = apply(ctx, member, is_core=True)
  assert result is not member
  assert has_input_decorator(result, ctx.host, is_core=True)
  assert apply(ctx, result, is_core=True) is result


@pytest.mark.parametrize(
  "initializer",
  [
    "lambda: input()",
    "input",
    "input.required",
    "inputs[0]()",
    "input(*args)",
    "input(**opts)",
    "input('a', alias='b')",
    "input(alias=name)",
    "input('a', 'b')",
    "input.optional()",
    "input.required(initial=1)",
    r'input("\N{NOT A REAL NAME}")',
    "input(debug=True)",
    "compute_foo().required()",
  ],
)
def test_unrecognised_shapes_are_unchanged(file_context, initializer):
  ctx = file_context(SOURCE)
  member = replace(ctx.get_class("Card").member("name"), initializer=cst.parse_expression(initializer))

  assert apply(ctx, member) is member


def test_metadata_field_order():
  factory = NodeFactory()
  mapping = InputMapping(class_property_name="a", binding_property_name="b", required=True)

  fields = build_metadata_fields(mapping, factory)

  assert tuple(fields) == METADATA_FIELDS == ("isSignal", "alias", "required", "transform")
  assert render(fields["alias"]) == '"b"'
  assert render(fields["required"]) == "True"
  assert render(fields["transform"]) == "None"


def test_metadata_ignores_reported_transform():
  factory = NodeFactory()
  mapping = InputMapping(
    class_property_name="a",
    binding_property_name="a",
    required=False,
    transform=cst.Name("int"),
  )

  fields = build_metadata_fields(mapping, factory)

  assert render(fields["transform"]) == "None"
  assert render(fields["required"]) == "False"

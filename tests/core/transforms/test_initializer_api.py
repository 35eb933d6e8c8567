"""
Tests for the class-level Initializer API JIT Transform.
"""

from conftest import render
from signal_jit.core.transforms.initializer_api import InitializerApiJitTransform
from signal_jit.core.transforms.input_function import signal_inputs_transform

SOURCE = """
from angular.core import Component, Directive, Injectable, input

@Component(selector="a")
class Card:
    name = input("Name")
    plain = 1

@Directive()
class Tooltip:
    text = input.required()

@Injectable()
class Service:
    token = input()

class Plain:
    value = input()

@Component()
class Empty:
    count = 0
"""


def make(ctx, **kwargs):
  return InitializerApiJitTransform(ctx.host, ctx.factory, ctx.import_manager, **kwargs)


def test_component_members_rewritten(file_context):
  ctx = file_context(SOURCE)
  card = ctx.get_class("Card")

  result = make(ctx).transform_class(card)

  assert result is not card
  assert len(result.member("name").decorators) == 1
  assert result.member("plain") is card.member("plain")


def test_directive_members_rewritten(file_context):
  ctx = file_context(SOURCE)
  result = make(ctx).transform_class(ctx.get_class("Tooltip"))

  assert '"required":True' in "".join(render(result.member("text").decorators[0].decorator).split())


def test_ineligible_classes_pass_through(file_context):
  ctx = file_context(SOURCE)
  transform = make(ctx)

  for name in ("Service", "Plain", "Empty"):
    cls = ctx.get_class(name)
    assert transform.transform_class(cls) is cls
  assert ctx.import_manager.namespace_imports == {}


def test_custom_class_decorators(file_context):
  ctx = file_context(SOURCE)
  service = ctx.get_class("Service")

  result = make(ctx, class_decorators=("Injectable",)).transform_class(service)

  assert result is not service
  assert len(result.member("token").decorators) == 1


def test_first_applicable_transform_wins(file_context):
  ctx = file_context(SOURCE)
  calls = []

  def noop(member, host, factory, import_manager, decorator, is_core):
    calls.append(("noop", member.name.value))
    return member

  def never(member, host, factory, import_manager, decorator, is_core):
    calls.append(("never", member.name.value))
    return member

  transform = make(ctx, transforms=(noop, signal_inputs_transform, never))
  result = transform.transform_class(ctx.get_class("Card"))

  assert len(result.member("name").decorators) == 1
  assert ("never", "name") not in calls
  assert ("never", "plain") in calls


def test_class_decorator_passed_to_transforms(file_context):
  ctx = file_context(SOURCE)
  seen = []

  def capture(member, host, factory, import_manager, decorator, is_core):
    seen.append((decorator.name, is_core))
    return member

  card = ctx.get_class("Card")
  assert make(ctx, transforms=(capture,), is_core=False).transform_class(card) is card
  assert seen == [("Component", False), ("Component", False)]

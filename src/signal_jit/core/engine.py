"""
JIT Preparation Engine.

Drives the signal input transform over one Python module:

1.  **Parsing**: LibCST parse of the source. Syntax errors are reported in the
    result, not raised.
2.  **Reflection**: Import table, reflection host, node factory and import
    manager are created fresh for the file.
3.  **Class Pass**: ``InitializerApiJitTransform`` over every top-level class.
4.  **Import Injection**: Generated namespace imports are added to the module.
    Python fields cannot carry decorators, so the decorated members are
    returned on ``PreparationResult.classes`` and render through
    ``MemberDeclaration.code``.
"""

import logging
from typing import Any, List, Optional, Set

import libcst as cst
from pydantic import BaseModel, Field

from signal_jit.config import TransformConfig
from signal_jit.core.declarations import ClassDeclaration
from signal_jit.core.factory import NodeFactory
from signal_jit.core.imports.manager import ImportManager
from signal_jit.core.reflection import ReflectionHost
from signal_jit.core.transforms.initializer_api import InitializerApiJitTransform
from signal_jit.utils.console import log_error, log_success

logger = logging.getLogger(__name__)


class PreparationResult(BaseModel):
  """
  Structured result of preparing a single file.
  """

  # The injected imports back the decorators of the rewritten members in
  # `classes`; `code` itself carries no member decorators.
  code: str = Field(
    default="",
    description="Module source with the namespace imports the generated Input decorators reference.",
  )
  # Holds ClassDeclaration values.
  classes: List[Any] = Field(default_factory=list, description="Reflected classes after rewriting.")
  rewritten: List[str] = Field(default_factory=list, description="Rewritten members as 'Class.member'.")
  errors: List[str] = Field(default_factory=list, description="List of error messages encountered.")
  success: bool = Field(default=True, description="True if the file was parsed and processed.")

  @property
  def has_errors(self) -> bool:
    return len(self.errors) > 0

  def get_class(self, name: str) -> Optional[ClassDeclaration]:
    """Looks up a prepared class by name."""
    for cls in self.classes:
      if cls.name.value == name:
        return cls
    return None


class JitPreparationEngine:
  """
  Prepares class declarations of one file at a time for JIT compilation.
  """

  def __init__(
    self,
    config: Optional[TransformConfig] = None,
    core_module: Optional[str] = None,
    is_core: Optional[bool] = None,
  ) -> None:
    """
    Args:
        config: Transform configuration. When omitted it is loaded from the
            nearest ``pyproject.toml`` with the overrides below applied.
        core_module: Override for the core module path.
        is_core: Override for the core compilation flag.
    """
    if config is not None:
      self.config = config
    else:
      self.config = TransformConfig.load(core_module=core_module, is_core=is_core)

  def run(self, code: str) -> PreparationResult:
    """
    Rewrites the signal inputs of every eligible top-level class.

    Args:
        code: Python module source.

    Returns:
        PreparationResult: Prepared classes and the updated module source.
    """
    try:
      module = cst.parse_module(code)
    except cst.ParserSyntaxError as e:
      log_error(f"Failed to parse module: {e.message}")
      return PreparationResult(code=code, errors=[str(e)], success=False)

    factory = NodeFactory()
    host = ReflectionHost.from_module(module, factory=factory, core_module=self.config.core_module)
    import_manager = ImportManager(
      prefix=self.config.namespace_prefix,
      reserved_names=_module_level_names(module),
    )
    jit_transform = InitializerApiJitTransform(
      host,
      factory,
      import_manager,
      is_core=self.config.is_core,
      class_decorators=self.config.class_decorators,
    )

    classes: List[ClassDeclaration] = []
    rewritten: List[str] = []
    for stmt in module.body:
      if not isinstance(stmt, cst.ClassDef):
        continue
      original = ClassDeclaration.from_cst(stmt)
      prepared = jit_transform.transform_class(original)
      classes.append(prepared)
      for before, after in zip(original.members, prepared.members):
        if after is not before:
          rewritten.append(f"{original.name.value}.{before.name.value}")

    updated_module = import_manager.transform_module(module)
    if rewritten:
      log_success(f"Added Input metadata to {len(rewritten)} signal input(s)")
    else:
      logger.debug("No signal inputs found")

    return PreparationResult(code=updated_module.code, classes=classes, rewritten=rewritten)


def _module_level_names(module: cst.Module) -> Set[str]:
  """Names bound at module level by definitions, assignments and imports."""
  names: Set[str] = set()
  for stmt in module.body:
    if isinstance(stmt, (cst.ClassDef, cst.FunctionDef)):
      names.add(stmt.name.value)
    elif isinstance(stmt, cst.SimpleStatementLine):
      for small in stmt.body:
        names.update(_bound_names(small))
  return names


def _bound_names(small: cst.BaseSmallStatement) -> Set[str]:
  names: Set[str] = set()
  if isinstance(small, cst.Assign):
    for target in small.targets:
      if isinstance(target.target, cst.Name):
        names.add(target.target.value)
  elif isinstance(small, cst.AnnAssign) and isinstance(small.target, cst.Name):
    names.add(small.target.value)
  elif isinstance(small, (cst.Import, cst.ImportFrom)) and not isinstance(small.names, cst.ImportStar):
    for alias in small.names:
      if alias.asname and isinstance(alias.asname.name, cst.Name):
        names.add(alias.asname.name.value)
      elif isinstance(alias.name, cst.Name):
        names.add(alias.name.value)
      elif isinstance(alias.name, cst.Attribute):
        root = alias.name
        while isinstance(root, cst.Attribute):
          root = root.value
        if isinstance(root, cst.Name):
          names.add(root.value)
  return names

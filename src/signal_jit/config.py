"""
Transform Configuration Store.

Holds the names the JIT preparation pass keys off: the core library module
and the class decorators that mark classes whose members may declare inputs.
"""

import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple
from pydantic import BaseModel, Field, ValidationError, field_validator

if sys.version_info >= (3, 11):
  import tomllib
else:
  import tomli as tomllib

DEFAULT_CORE_MODULE = "angular.core"
DEFAULT_CLASS_DECORATORS = ("Directive", "Component")


class TransformConfig(BaseModel):
  """
  Configuration container for the signal input JIT transform.
  """

  core_module: str = Field(DEFAULT_CORE_MODULE, description="Dotted path of the core library (e.g. 'angular.core').")
  class_decorators: List[str] = Field(
    default_factory=lambda: list(DEFAULT_CLASS_DECORATORS),
    description="Core class decorators whose classes are scanned for signal inputs.",
  )
  is_core: bool = Field(False, description="True when compiling the core library itself.")
  namespace_prefix: str = Field("i", description="Prefix for generated namespace import aliases (i0, i1, ...).")

  @field_validator("core_module")
  @classmethod
  def validate_module(cls, v: str) -> str:
    """
    Ensures the core module is a dotted path of identifiers.

    Args:
        v (str): The module path to validate.

    Returns:
        str: The stripped module path.

    Raises:
        ValueError: If any segment is not a valid identifier.
    """
    v_clean = v.strip()
    if not v_clean or not all(part.isidentifier() for part in v_clean.split(".")):
      raise ValueError(f"Invalid core module path: '{v}'")
    return v_clean

  @field_validator("namespace_prefix")
  @classmethod
  def validate_identifier(cls, v: str) -> str:
    """
    Ensures the alias prefix is a valid Python identifier.

    Args:
        v (str): The name to validate.

    Returns:
        str: The stripped name.

    Raises:
        ValueError: If the name is not an identifier.
    """
    v_clean = v.strip()
    if not v_clean.isidentifier():
      raise ValueError(f"Invalid identifier: '{v}'")
    return v_clean

  @field_validator("class_decorators")
  @classmethod
  def validate_class_decorators(cls, v: List[str]) -> List[str]:
    """Rejects empty or non-identifier class decorator names."""
    cleaned = [name.strip() for name in v]
    bad = [name for name in cleaned if not name.isidentifier()]
    if bad:
      raise ValueError(f"Invalid class decorator names: {bad}")
    return cleaned

  @classmethod
  def load(
    cls,
    core_module: Optional[str] = None,
    is_core: Optional[bool] = None,
    overrides: Optional[Dict[str, Any]] = None,
    search_path: Optional[Path] = None,
  ) -> "TransformConfig":
    """
    Loads configuration from pyproject.toml and applies explicit overrides.

    Args:
        core_module (Optional[str]): Override for the core module path.
        is_core (Optional[bool]): Override for the core compilation flag.
        overrides (Optional[Dict]): Any other field overrides.
        search_path (Optional[Path]): Directory to start searching for TOML config.

    Returns:
        TransformConfig: The fully resolved configuration object.

    Raises:
        ValueError: If the merged settings fail validation.
    """
    start_dir = search_path or Path.cwd()
    toml_config, _ = _load_toml_settings(start_dir)

    merged: Dict[str, Any] = {**toml_config, **(overrides or {})}
    if core_module is not None:
      merged["core_module"] = core_module
    if is_core is not None:
      merged["is_core"] = is_core

    try:
      return cls.model_validate(merged)
    except ValidationError as e:
      raise ValueError(f"Transform configuration validation failed: {e}")


def _load_toml_settings(start_path: Path) -> Tuple[Dict[str, Any], Optional[Path]]:
  """
  Recursively searches parents for 'pyproject.toml' and extracts config.

  Args:
      start_path (Path): Directory to start search from.

  Returns:
      Tuple[Dict, Optional[Path]]: The config dict and the directory definition was found in.
  """
  current = start_path.resolve()

  for parent in [current, *current.parents]:
    toml_path = parent / "pyproject.toml"
    if toml_path.exists() and toml_path.is_file():
      try:
        with open(toml_path, "rb") as f:
          data = tomllib.load(f)
      except (OSError, tomllib.TOMLDecodeError):
        return {}, None

      tool_section = data.get("tool", {})
      return tool_section.get("signal_jit", {}), parent

  return {}, None

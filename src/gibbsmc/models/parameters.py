"""Parameter keys, parameterized states and data collections.

A model names its parameters with a `ParameterEnum` subclass. A
`ParameterizedState` maps every member of that enumeration to a value and is
never mutated after construction: updates return a new state, so snapshots
appended to a sample history are unaffected by later sweeps.
"""

from __future__ import annotations

import copy
from collections.abc import Iterator, Mapping
from enum import Enum
from typing import Any, TypeVar

import jax
import numpy as np
from flax import struct

from gibbsmc.errors import IncompleteStateError, TypeMismatchError, UnknownKeyError

__all__ = ["DataCollection", "ParameterEnum", "ParameterizedState", "matches_type"]

U = TypeVar("U")


class ParameterEnum(Enum):
  """Base class for the closed set of parameter names of a model.

  Subclass it with one member per parameter::

    class NormalParameter(ParameterEnum):
      MEAN = "mean"
      VARIANCE = "variance"

  Members are used only as lookup keys; they never hold sampled values.
  """

  @classmethod
  def members(cls) -> tuple[ParameterEnum, ...]:
    """Return all members in definition order."""
    return tuple(cls)


class DataCollection(struct.PyTreeNode):
  """Base class for the observed data a model conditions on.

  Subclasses declare their fields as dataclass fields; instances are frozen
  and can be passed through JAX transformations as pytrees. The sampler
  shares one instance by reference across the whole run and never writes to
  it.
  """


_IMMUTABLE_TYPES = (type(None), bool, int, float, complex, str, bytes, Enum, np.generic, jax.Array)


def _is_immutable(value: Any) -> bool:  # noqa: ANN401
  if isinstance(value, _IMMUTABLE_TYPES):
    return True
  return isinstance(value, np.ndarray) and not value.flags.writeable and value.base is None


def _freeze_value(value: Any) -> Any:  # noqa: ANN401
  """Copy a value so the state cannot be changed from outside.

  Numpy arrays become read-only copies. Other mutable values, such as lists,
  dicts and sets, are deep-copied on the way in and again on every read.
  """
  if _is_immutable(value):
    return value
  if isinstance(value, np.ndarray):
    frozen = np.array(value, copy=True)
    frozen.flags.writeable = False
    return frozen
  return copy.deepcopy(value)


def _read_value(value: Any) -> Any:  # noqa: ANN401
  if _is_immutable(value):
    return value
  return copy.deepcopy(value)


def matches_type(value: Any, expected_type: type) -> bool:  # noqa: ANN401
  """Return whether `value` is an `expected_type`, treating `bool` as distinct from `int`."""
  if isinstance(value, bool) and expected_type is int:
    return False
  return isinstance(value, expected_type)


class ParameterizedState(Mapping):
  """Immutable mapping from every key of a `ParameterEnum` to a value.

  Args:
    values: Mapping with one entry for each member of the enumeration.
    parameter_enum: Enumeration the keys belong to. Inferred from the first
      key when omitted.

  Raises:
    IncompleteStateError: If a member of the enumeration has no value, or no
      enumeration can be inferred from an empty mapping.
    UnknownKeyError: If a key is not a member of the enumeration.

  """

  __slots__ = ("_parameter_enum", "_values")

  def __init__(
    self,
    values: Mapping[ParameterEnum, Any],
    parameter_enum: type[ParameterEnum] | None = None,
  ) -> None:
    if parameter_enum is None:
      if not values:
        msg = "Cannot infer the parameter enumeration of an empty state."
        raise IncompleteStateError(msg)
      parameter_enum = type(next(iter(values)))
    if not (isinstance(parameter_enum, type) and issubclass(parameter_enum, ParameterEnum)):
      msg = f"parameter_enum must be a ParameterEnum subclass, got {parameter_enum!r}."
      raise TypeError(msg)

    for key in values:
      if not isinstance(key, parameter_enum):
        msg = f"Parameter {key!r} is not a member of {parameter_enum.__name__}."
        raise UnknownKeyError(msg)

    missing = [member.name for member in parameter_enum if member not in values]
    if missing:
      msg = f"State is missing values for parameters: {missing}."
      raise IncompleteStateError(msg)

    self._parameter_enum = parameter_enum
    self._values = {member: _freeze_value(values[member]) for member in parameter_enum}

  @property
  def parameter_enum(self) -> type[ParameterEnum]:
    """Enumeration whose members key this state."""
    return self._parameter_enum

  def _check_key(self, key: object) -> None:
    if not isinstance(key, self._parameter_enum):
      msg = f"Parameter {key!r} is not a member of {self._parameter_enum.__name__}."
      raise UnknownKeyError(msg)

  def __getitem__(self, key: ParameterEnum) -> Any:  # noqa: ANN401
    self._check_key(key)
    return _read_value(self._values[key])

  def __iter__(self) -> Iterator[ParameterEnum]:
    return iter(self._values)

  def __len__(self) -> int:
    return len(self._values)

  def __contains__(self, key: object) -> bool:
    return isinstance(key, self._parameter_enum)

  def __eq__(self, other: object) -> bool:
    if not isinstance(other, ParameterizedState):
      return NotImplemented
    if self._parameter_enum is not other._parameter_enum:
      return False
    return all(
      _values_equal(self._values[key], other._values[key]) for key in self._parameter_enum
    )

  __hash__ = None  # type: ignore[assignment]

  def __repr__(self) -> str:
    items = ", ".join(f"{key.name}={value!r}" for key, value in self._values.items())
    return f"{type(self).__name__}({items})"

  def __setattr__(self, name: str, value: Any) -> None:  # noqa: ANN401
    if hasattr(self, "_values"):
      msg = f"{type(self).__name__} is immutable."
      raise AttributeError(msg)
    object.__setattr__(self, name, value)

  def get(self, key: ParameterEnum, expected_type: type[U]) -> U:  # type: ignore[override]
    """Return the value of `key`, checked against `expected_type`.

    Args:
      key: Parameter to look up.
      expected_type: Type the stored value must be an instance of.

    Returns:
      The stored value.

    Raises:
      UnknownKeyError: If `key` is not part of this state's enumeration.
      TypeMismatchError: If the stored value is not an `expected_type`.

    """
    value = self[key]
    if not matches_type(value, expected_type):
      msg = (
        f"Value of parameter {key.name} has type {type(value).__name__}, "
        f"expected {expected_type.__name__}."
      )
      raise TypeMismatchError(msg)
    return value

  def update(self, key: ParameterEnum, value: Any) -> ParameterizedState:  # noqa: ANN401
    """Return a new state with `key` set to `value`; this state is unchanged."""
    self._check_key(key)
    values = dict(self._values)
    values[key] = value
    return ParameterizedState(values, self._parameter_enum)

  def replace(self, **changes: Any) -> ParameterizedState:  # noqa: ANN401
    """Return a new state with the members named in `changes` replaced."""
    values = dict(self._values)
    for name, value in changes.items():
      try:
        member = self._parameter_enum[name]
      except KeyError:
        msg = f"{name!r} is not a member of {self._parameter_enum.__name__}."
        raise UnknownKeyError(msg) from None
      values[member] = value
    return ParameterizedState(values, self._parameter_enum)

  def to_dict(self) -> dict[str, Any]:
    """Return a plain dictionary keyed by parameter name."""
    return {key.name: _read_value(value) for key, value in self._values.items()}


def _values_equal(a: Any, b: Any) -> bool:  # noqa: ANN401
  if a is b:
    return True
  if isinstance(a, (int, float, str, bool)) and isinstance(b, (int, float, str, bool)):
    return a == b
  try:
    return bool(np.array_equal(np.asarray(a), np.asarray(b)))
  except (TypeError, ValueError):
    return a == b

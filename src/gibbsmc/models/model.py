"""Parameterized models: a current state, fixed data and an update rule."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from gibbsmc.errors import ConfigurationError, TypeMismatchError, UnknownKeyError
from gibbsmc.models.parameters import (
  DataCollection,
  ParameterEnum,
  ParameterizedState,
  matches_type,
)
from gibbsmc.models.types import ParameterSampler, StateTransition, UpdateMethod

if TYPE_CHECKING:
  from gibbsmc.utils.random_source import RandomSource

__all__ = ["GibbsModelBuilder", "ParameterizedModel"]

logger = logging.getLogger(__name__)

D = TypeVar("D", bound=DataCollection)


class ParameterizedModel(Generic[D]):
  """Holds the current state of a chain together with its data.

  A Gibbs model owns one conditional sampler per parameter and updates the
  parameters one at a time in `sweep_order`, each draw conditioned on the
  values already produced earlier in the same sweep. Models with
  `UpdateMethod.OTHER` delegate the whole step to `transition`.

  Most callers build Gibbs models with `GibbsModelBuilder` rather than calling
  this constructor directly.

  Args:
    initial_state: State the chain starts from.
    data: Observed data the model conditions on.
    update_method: Update strategy of the model.
    samplers: Conditional sampler per parameter (Gibbs models only).
    value_types: Declared value type per parameter (Gibbs models only).
    sweep_order: Order in which parameters are resampled. Defaults to the
      enumeration's definition order.
    transition: Whole-state update (non-Gibbs models only).

  Raises:
    ConfigurationError: If the samplers, value types, sweep order or
      transition do not fit the update method.

  """

  def __init__(
    self,
    initial_state: ParameterizedState,
    data: D,
    update_method: UpdateMethod = UpdateMethod.GIBBS,
    *,
    samplers: Mapping[ParameterEnum, ParameterSampler] | None = None,
    value_types: Mapping[ParameterEnum, type] | None = None,
    sweep_order: Sequence[ParameterEnum] | None = None,
    transition: StateTransition | None = None,
  ) -> None:
    if not isinstance(initial_state, ParameterizedState):
      msg = f"initial_state must be a ParameterizedState, got {type(initial_state)}."
      raise TypeError(msg)
    if not isinstance(data, DataCollection):
      msg = f"data must be a DataCollection, got {type(data)}."
      raise TypeError(msg)
    if not isinstance(update_method, UpdateMethod):
      msg = f"update_method must be an UpdateMethod, got {update_method!r}."
      raise TypeError(msg)

    self._state = initial_state
    self._data = data
    self._update_method = update_method
    self._samplers: dict[ParameterEnum, ParameterSampler] = dict(samplers or {})
    self._value_types: dict[ParameterEnum, type] = dict(value_types or {})
    self._transition = transition

    parameter_enum = initial_state.parameter_enum
    if update_method is UpdateMethod.GIBBS:
      self._sweep_order = _validate_sweep_order(
        parameter_enum,
        tuple(parameter_enum) if sweep_order is None else tuple(sweep_order),
      )
      missing = [key.name for key in parameter_enum if key not in self._samplers]
      if missing:
        msg = f"A sampler must be specified for each parameter; missing: {missing}."
        raise ConfigurationError(msg)
      for key in self._samplers:
        if not isinstance(key, parameter_enum):
          msg = f"Sampler given for {key!r}, which is not a member of {parameter_enum.__name__}."
          raise UnknownKeyError(msg)
      for key, value_type in self._value_types.items():
        initial_state.get(key, value_type)
    else:
      if transition is None:
        msg = f"Models updated with {update_method.name} require a transition function."
        raise ConfigurationError(msg)
      self._sweep_order = tuple(parameter_enum)

    logger.debug(
      "Constructed %s model over %s with sweep order %s.",
      update_method.name,
      parameter_enum.__name__,
      [key.name for key in self._sweep_order],
    )

  @property
  def state(self) -> ParameterizedState:
    """Current state of the chain; safe to retain, it is never mutated."""
    return self._state

  @property
  def data(self) -> D:
    """Data the model conditions on."""
    return self._data

  @property
  def update_method(self) -> UpdateMethod:
    """Update strategy fixed at construction."""
    return self._update_method

  @property
  def sweep_order(self) -> tuple[ParameterEnum, ...]:
    """Order in which a Gibbs sweep resamples the parameters."""
    return self._sweep_order

  def update(self, random_source: RandomSource) -> None:
    """Advance the chain by one step, replacing the current state.

    For Gibbs models this is one systematic-scan sweep: each parameter is
    drawn from its conditional given the current values of all others,
    including values already redrawn earlier in the sweep.

    Args:
      random_source: The only source of randomness the model may use.

    Raises:
      TypeMismatchError: If a conditional sampler returns a value whose type
        differs from the declared type of its parameter.

    """
    if self._update_method is not UpdateMethod.GIBBS:
      new_state = self._transition(random_source, self._state, self._data)  # type: ignore[misc]
      if not isinstance(new_state, ParameterizedState):
        msg = f"Transition must return a ParameterizedState, got {type(new_state)}."
        raise TypeError(msg)
      self._state = new_state
      return

    state = self._state
    for key in self._sweep_order:
      value = self._samplers[key](random_source, state, self._data)
      value_type = self._value_types.get(key)
      if value_type is not None and not matches_type(value, value_type):
        msg = (
          f"Sampler for {key.name} returned {type(value).__name__}, "
          f"expected {value_type.__name__}."
        )
        raise TypeMismatchError(msg)
      state = state.update(key, value)
    self._state = state


def _validate_sweep_order(
  parameter_enum: type[ParameterEnum],
  order: tuple[Any, ...],
) -> tuple[ParameterEnum, ...]:
  if len(order) != len(parameter_enum) or set(order) != set(parameter_enum):
    msg = (
      f"Sweep order {order} must list each member of {parameter_enum.__name__} exactly once."
    )
    raise ConfigurationError(msg)
  return order


class GibbsModelBuilder(Generic[D]):
  """Assembles a Gibbs `ParameterizedModel` one parameter at a time.

  Example:
    >>> model = (
    ...   GibbsModelBuilder(initial_state, data)
    ...   .add_parameter_sampler(NormalParameter.MEAN, sample_mean, float)
    ...   .add_parameter_sampler(NormalParameter.VARIANCE, sample_variance, float)
    ...   .build()
    ... )

  """

  def __init__(self, initial_state: ParameterizedState, data: D) -> None:
    if not isinstance(initial_state, ParameterizedState):
      msg = f"initial_state must be a ParameterizedState, got {type(initial_state)}."
      raise TypeError(msg)
    self._initial_state = initial_state
    self._data = data
    self._samplers: dict[ParameterEnum, ParameterSampler] = {}
    self._value_types: dict[ParameterEnum, type] = {}
    self._sweep_order: tuple[ParameterEnum, ...] | None = None

  def add_parameter_sampler(
    self,
    key: ParameterEnum,
    sampler: ParameterSampler,
    value_type: type,
  ) -> GibbsModelBuilder[D]:
    """Register the conditional sampler and value type of one parameter.

    Raises:
      UnknownKeyError: If `key` is not part of the state's enumeration.
      ConfigurationError: If `key` already has a sampler.
      TypeMismatchError: If the initial value of `key` is not a `value_type`.

    """
    parameter_enum = self._initial_state.parameter_enum
    if not isinstance(key, parameter_enum):
      msg = f"Parameter {key!r} is not a member of {parameter_enum.__name__}."
      raise UnknownKeyError(msg)
    if key in self._samplers:
      msg = f"A sampler for {key.name} has already been added."
      raise ConfigurationError(msg)
    if not callable(sampler):
      msg = f"Sampler for {key.name} is not callable."
      raise TypeError(msg)
    self._initial_state.get(key, value_type)
    self._samplers[key] = sampler
    self._value_types[key] = value_type
    return self

  def sweep_order(self, keys: Sequence[ParameterEnum]) -> GibbsModelBuilder[D]:
    """Set the order in which a sweep resamples the parameters."""
    self._sweep_order = _validate_sweep_order(self._initial_state.parameter_enum, tuple(keys))
    return self

  def build(self) -> ParameterizedModel[D]:
    """Return the assembled model.

    Raises:
      ConfigurationError: If some parameter has no sampler.

    """
    return ParameterizedModel(
      self._initial_state,
      self._data,
      UpdateMethod.GIBBS,
      samplers=self._samplers,
      value_types=self._value_types,
      sweep_order=self._sweep_order,
    )

"""Core types shared by models and samplers.

JAX arrays are annotated with jaxtyping so that shapes stay visible in the
signatures of conditional samplers and summaries.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from jaxtyping import Array, Float

if TYPE_CHECKING:
  from gibbsmc.models.parameters import DataCollection, ParameterizedState
  from gibbsmc.utils.random_source import RandomSource

ScalarSamples = Float[Array, "num_samples"]
"""Samples of a scalar parameter stacked along the chain axis."""

Observations = Float[Array, "num_observations"]
"""A one-dimensional block of observed values."""


class UpdateMethod(Enum):
  """Strategy a model uses to advance its state by one step."""

  GIBBS = "gibbs"
  OTHER = "other"


class ParameterSampler(Protocol):
  """Draws one parameter from its conditional distribution.

  The sampler sees the full current state (already updated for parameters
  earlier in the sweep) and the model's data. It must draw randomness only
  from `random_source`.
  """

  def __call__(  # noqa: D102
    self,
    random_source: RandomSource,
    state: ParameterizedState,
    data: Any,  # noqa: ANN401
  ) -> Any: ...  # noqa: ANN401


class StateTransition(Protocol):
  """Whole-state update used by models that are not Gibbs-updated."""

  def __call__(  # noqa: D102
    self,
    random_source: RandomSource,
    state: ParameterizedState,
    data: DataCollection,
  ) -> ParameterizedState: ...


class ProgressCallback(Protocol):
  """Receives `(num_generated, num_samples)` progress events from a sampler."""

  def __call__(self, num_generated: int, num_samples: int) -> None: ...  # noqa: D102


@runtime_checkable
class ParameterizedModelProtocol(Protocol):
  """What `GibbsSampler` needs from a model.

  `ParameterizedModel` implements it, but any object exposing these members
  can be sampled.
  """

  @property
  def state(self) -> ParameterizedState: ...  # noqa: D102

  @property
  def update_method(self) -> UpdateMethod: ...  # noqa: D102

  def update(self, random_source: RandomSource) -> None: ...  # noqa: D102

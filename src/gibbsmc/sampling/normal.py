"""Semi-conjugate Normal model with unknown mean and variance.

Observations are modelled as ``y_i ~ N(mean, variance)`` with independent
priors ``mean ~ N(prior_mean, prior_mean_variance)`` and
``variance ~ InvGamma(prior_shape, prior_scale)``. Both full conditionals are
available in closed form, so the model is a convenient reference for
checking a Gibbs chain against known posteriors.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

import jax
import jax.numpy as jnp

from gibbsmc.errors import InvalidArgumentError
from gibbsmc.models.model import GibbsModelBuilder, ParameterizedModel
from gibbsmc.models.parameters import DataCollection, ParameterEnum, ParameterizedState

if TYPE_CHECKING:
  from collections.abc import Sequence

  from gibbsmc.models.types import Observations, ParameterSampler
  from gibbsmc.utils.random_source import RandomSource

__all__ = [
  "NormalData",
  "NormalParameter",
  "NormalPrior",
  "build_normal_model",
  "sample_mean",
  "sample_variance",
]

logger = logging.getLogger(__name__)


class NormalParameter(ParameterEnum):
  """Parameters of the Normal model."""

  MEAN = "mean"
  VARIANCE = "variance"


class NormalData(DataCollection):
  """Observed values of a Normal model."""

  observations: Observations

  @classmethod
  def from_observations(cls, observations: Sequence[float] | jax.Array) -> NormalData:
    """Build the data collection from any one-dimensional array-like."""
    values = jnp.asarray(observations, dtype=jnp.float32)
    if values.ndim != 1 or values.shape[0] == 0:
      msg = "observations must be a non-empty one-dimensional array."
      raise InvalidArgumentError(msg)
    return cls(observations=values)

  @property
  def num_observations(self) -> int:
    return int(self.observations.shape[0])


@dataclass(frozen=True)
class NormalPrior:
  """Hyperparameters of the Normal and inverse-gamma priors.

  Attributes:
      mean: Prior mean of the mean.
      mean_variance: Prior variance of the mean.
      shape: Shape of the inverse-gamma prior on the variance.
      scale: Scale of the inverse-gamma prior on the variance.

  """

  mean: float = 0.0
  mean_variance: float = 1e6
  shape: float = 1e-3
  scale: float = 1e-3

  def __post_init__(self) -> None:
    """Validate the prior hyperparameters."""
    for name in ("mean_variance", "shape", "scale"):
      if getattr(self, name) <= 0:
        msg = f"{name} must be positive."
        raise InvalidArgumentError(msg)


def sample_mean(
  prior: NormalPrior,
) -> ParameterSampler:
  """Return the conditional sampler of the mean given the variance."""

  def sampler(random_source: RandomSource, state: ParameterizedState, data: NormalData) -> float:
    variance = state.get(NormalParameter.VARIANCE, float)
    n = data.num_observations
    posterior_variance = 1.0 / (1.0 / prior.mean_variance + n / variance)
    posterior_mean = posterior_variance * (
      prior.mean / prior.mean_variance + jnp.sum(data.observations) / variance
    )
    draw = jax.random.normal(random_source.next_key())
    return float(posterior_mean + jnp.sqrt(posterior_variance) * draw)

  return sampler


def sample_variance(
  prior: NormalPrior,
) -> ParameterSampler:
  """Return the conditional sampler of the variance given the mean."""

  def sampler(random_source: RandomSource, state: ParameterizedState, data: NormalData) -> float:
    mean = state.get(NormalParameter.MEAN, float)
    shape = prior.shape + 0.5 * data.num_observations
    scale = prior.scale + 0.5 * jnp.sum((data.observations - mean) ** 2)
    # If G ~ Gamma(shape, 1) then scale / G ~ InvGamma(shape, scale).
    gamma_draw = jax.random.gamma(random_source.next_key(), shape)
    return float(scale / gamma_draw)

  return sampler


def build_normal_model(
  data: NormalData,
  prior: NormalPrior | None = None,
  initial_mean: float = 0.0,
  initial_variance: float = 1.0,
) -> ParameterizedModel[NormalData]:
  """Build a Gibbs model of the mean and variance of `data`.

  Args:
    data: Observations to condition on.
    prior: Prior hyperparameters. Defaults to a weakly informative prior.
    initial_mean: Starting value of the mean.
    initial_variance: Starting value of the variance; must be positive.

  Returns:
    A Gibbs-updated model that resamples the mean, then the variance.

  Raises:
    InvalidArgumentError: If `initial_variance` is not positive.

  """
  if initial_variance <= 0:
    msg = "initial_variance must be positive."
    raise InvalidArgumentError(msg)
  prior = NormalPrior() if prior is None else prior
  initial_state = ParameterizedState(
    {
      NormalParameter.MEAN: float(initial_mean),
      NormalParameter.VARIANCE: float(initial_variance),
    },
  )
  logger.debug(
    "Building Normal model over %d observations with prior %s.",
    data.num_observations,
    prior,
  )
  return (
    GibbsModelBuilder(initial_state, data)
    .add_parameter_sampler(NormalParameter.MEAN, sample_mean(prior), float)
    .add_parameter_sampler(NormalParameter.VARIANCE, sample_variance(prior), float)
    .build()
  )

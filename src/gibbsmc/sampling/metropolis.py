"""Metropolis-within-Gibbs updates for parameters without a closed-form conditional."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import blackjax
import jax
import jax.numpy as jnp
from blackjax.mcmc.random_walk import RWState

from gibbsmc.errors import InvalidArgumentError

if TYPE_CHECKING:
  from collections.abc import Callable

  from jaxtyping import Array, PRNGKeyArray

  from gibbsmc.models.parameters import DataCollection, ParameterEnum, ParameterizedState
  from gibbsmc.utils.random_source import RandomSource

__all__ = ["RandomWalkParameterSampler"]

logger = logging.getLogger(__name__)


class RandomWalkParameterSampler:
  """Draws one parameter with Gaussian random-walk Metropolis-Hastings steps.

  The conditional density only has to be known up to a constant:
  `log_density_fn(value, state, data)` returns the unnormalized log density
  of `value` for this parameter given the other values in `state`. Each call
  performs `num_steps` BlackJAX RMH steps starting from the current value, so
  the parameter's conditional is left invariant.

  Args:
    parameter: Parameter this sampler updates.
    log_density_fn: Unnormalized log conditional density.
    step_size: Standard deviation of the Gaussian proposal.
    num_steps: Number of Metropolis-Hastings steps per sweep.

  Raises:
    InvalidArgumentError: If `step_size` or `num_steps` is not positive.

  """

  def __init__(
    self,
    parameter: ParameterEnum,
    log_density_fn: Callable[[Array, ParameterizedState, DataCollection], Array],
    step_size: float = 0.1,
    num_steps: int = 1,
  ) -> None:
    if step_size <= 0:
      msg = "step_size must be positive."
      raise InvalidArgumentError(msg)
    if num_steps <= 0:
      msg = "num_steps must be positive."
      raise InvalidArgumentError(msg)
    self.parameter = parameter
    self.log_density_fn = log_density_fn
    self.step_size = step_size
    self.num_steps = num_steps
    self._kernel = blackjax.mcmc.random_walk.build_rmh()
    self._num_accepted = 0
    self._num_proposed = 0

  @property
  def acceptance_rate(self) -> float:
    """Fraction of proposals accepted so far, NaN before the first step."""
    if self._num_proposed == 0:
      return float("nan")
    return self._num_accepted / self._num_proposed

  def __call__(
    self,
    random_source: RandomSource,
    state: ParameterizedState,
    data: DataCollection,
  ) -> Any:  # noqa: ANN401
    """Return a new value of the parameter given the rest of `state`."""
    current = state[self.parameter]
    position = jnp.asarray(current, dtype=jnp.float32)

    def logdensity_fn(x: Array) -> Array:
      """Conditional log density with the other parameters held fixed."""
      return jnp.asarray(self.log_density_fn(x, state, data), dtype=jnp.float32)

    def transition_generator(key: PRNGKeyArray, x: Array) -> Array:
      """Gaussian proposal that preserves the shape and dtype of the input."""
      return (x + self.step_size * jax.random.normal(key, jnp.shape(x))).astype(x.dtype)

    rw_state = RWState(position=position, logdensity=logdensity_fn(position))
    for _ in range(self.num_steps):
      rw_state, info = self._kernel(
        rng_key=random_source.next_key(),
        state=rw_state,
        logdensity_fn=logdensity_fn,
        transition_generator=transition_generator,
      )
      self._num_proposed += 1
      self._num_accepted += int(info.is_accepted)

    logger.debug(
      "%s random-walk update, acceptance rate %.3f.",
      self.parameter.name,
      self.acceptance_rate,
    )
    if isinstance(current, float):
      return float(rw_state.position)
    return rw_state.position

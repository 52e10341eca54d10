"""Implements Gibbs sampling of a multivariate probability density."""

from __future__ import annotations

import logging
import numbers
from typing import TYPE_CHECKING, TypeVar

import jax.numpy as jnp

from gibbsmc.errors import ChainAbortedError, ConfigurationError, InvalidArgumentError
from gibbsmc.models.gibbs import DEFAULT_SAMPLES_PER_LOG_ENTRY, GibbsConfig
from gibbsmc.models.types import ParameterizedModelProtocol, UpdateMethod
from gibbsmc.utils.random_source import DEFAULT_PRNG_SEED, RandomSource

if TYPE_CHECKING:
  from jaxtyping import Array

  from gibbsmc.models.parameters import ParameterEnum, ParameterizedState
  from gibbsmc.models.types import ProgressCallback

__all__ = ["GibbsSampler"]

logger = logging.getLogger(__name__)

U = TypeVar("U")


def _as_int(value: int) -> int:
  if isinstance(value, bool) or not isinstance(value, numbers.Integral):
    msg = f"Expected an integer, got {type(value).__name__}."
    raise TypeError(msg)
  return int(value)


def _check_positive(value: int, msg: str) -> int:
  value = _as_int(value)
  if value <= 0:
    raise InvalidArgumentError(msg)
  return value


class GibbsSampler:
  """Runs a Gibbs chain over a parameterized model and stores its samples.

  The model's state at construction is taken as the first sample. The chain
  is computed lazily: the first call to `get_samples` runs it if `run` has
  not been called yet, and later calls reuse the stored history.

  The sampler owns its random source and resets it to `seed` immediately
  before the first sweep of a run, so two samplers built from identical
  models produce identical chains.

  Args:
    num_samples: Total number of samples, including the initial state and
      burn-in; must be positive.
    model: Model to sample; must be updated with Gibbs sampling.
    seed: Seed the random source is reset to before each run.
    progress_callback: Optional receiver of `(num_generated, num_samples)`
      progress events, emitted at the same cadence as the progress log.

  Raises:
    TypeError: If `num_samples` is not an integer or `model` lacks the
      members of `ParameterizedModelProtocol`.
    InvalidArgumentError: If `num_samples` is not positive.
    ConfigurationError: If the model is not updated with Gibbs sampling.

  """

  def __init__(
    self,
    num_samples: int,
    model: ParameterizedModelProtocol,
    *,
    seed: int = DEFAULT_PRNG_SEED,
    progress_callback: ProgressCallback | None = None,
  ) -> None:
    num_samples = _check_positive(num_samples, "Number of samples must be positive.")
    if not isinstance(model, ParameterizedModelProtocol):
      msg = f"model must provide state, update_method and update, got {type(model)}."
      raise TypeError(msg)
    if model.update_method is not UpdateMethod.GIBBS:
      msg = "ParameterizedModel must be constructed to update using Gibbs sampling."
      raise ConfigurationError(msg)

    self._num_samples = num_samples
    self._model = model
    self._random_source = RandomSource(seed)
    self._progress_callback = progress_callback
    self._samples_per_log_entry = DEFAULT_SAMPLES_PER_LOG_ENTRY
    self._samples: list[ParameterizedState] = [model.state]
    self._is_run_started = False
    self._is_run_complete = False

  @classmethod
  def from_config(
    cls,
    config: GibbsConfig,
    model: ParameterizedModelProtocol,
    progress_callback: ProgressCallback | None = None,
  ) -> GibbsSampler:
    """Construct a sampler from a `GibbsConfig`."""
    sampler = cls(
      config.num_samples,
      model,
      seed=config.prng_seed,
      progress_callback=progress_callback,
    )
    sampler.set_samples_per_log_entry(config.samples_per_log_entry)
    return sampler

  @property
  def num_samples(self) -> int:
    """Total number of samples in a complete chain."""
    return self._num_samples

  @property
  def model(self) -> ParameterizedModelProtocol:
    return self._model

  @property
  def samples_per_log_entry(self) -> int:
    return self._samples_per_log_entry

  @property
  def is_complete(self) -> bool:
    """Whether the chain has been run to completion."""
    return self._is_run_complete

  @property
  def history(self) -> tuple[ParameterizedState, ...]:
    """States generated so far, index 0 being the initial state."""
    return tuple(self._samples)

  def set_samples_per_log_entry(self, samples_per_log_entry: int) -> None:
    """Change the number of samples between progress messages.

    Raises:
      InvalidArgumentError: If `samples_per_log_entry` is not positive.

    """
    self._samples_per_log_entry = _check_positive(
      samples_per_log_entry,
      "Number of samples per log entry must be positive.",
    )

  def _report_progress(self, num_generated: int) -> None:
    logger.info("%d of %d samples generated.", num_generated, self._num_samples)
    if self._progress_callback is not None:
      self._progress_callback(num_generated, self._num_samples)

  def run(self) -> None:
    """Run the chain, starting from the model's state at construction.

    Does nothing if the chain is already complete.

    Raises:
      ChainAbortedError: If an earlier run raised before finishing. The
        partial history stays available through `history`.

    """
    if self._is_run_complete:
      return
    if self._is_run_started:
      msg = (
        f"An earlier run stopped after {len(self._samples)} of {self._num_samples} samples; "
        "the partial history cannot be extended."
      )
      raise ChainAbortedError(msg)

    self._is_run_started = True
    self._random_source.reseed()
    logger.info("Starting MCMC sampling.")
    for sample in range(1, self._num_samples):
      if sample % self._samples_per_log_entry == 0:
        self._report_progress(sample)
      self._model.update(self._random_source)
      self._samples.append(self._model.state)
    self._report_progress(self._num_samples)
    logger.info("MCMC sampling complete.")
    self._is_run_complete = True

  def _check_burn_in(self, num_burn_in: int) -> int:
    num_burn_in = _as_int(num_burn_in)
    if num_burn_in < 0:
      msg = "Number of burn-in samples must be non-negative."
      raise InvalidArgumentError(msg)
    if num_burn_in >= self._num_samples:
      msg = "Number of samples must be greater than number of burn-in samples."
      raise InvalidArgumentError(msg)
    return num_burn_in

  def get_samples(
    self,
    parameter: ParameterEnum,
    value_type: type[U],
    num_burn_in: int = 0,
  ) -> list[U]:
    """Return the samples of one parameter, discarding the first `num_burn_in`.

    Runs the chain first if it has not been run.

    Args:
      parameter: Parameter whose values are returned.
      value_type: Type every stored value must be an instance of.
      num_burn_in: Number of samples to drop from the start of the chain.

    Returns:
      Values of `parameter` for samples `num_burn_in` to `num_samples - 1`,
      in chain order.

    Raises:
      InvalidArgumentError: If `num_burn_in` is negative or not less than
        `num_samples`.
      TypeMismatchError: If a stored value is not a `value_type`.
      UnknownKeyError: If `parameter` is not part of the model.

    """
    num_burn_in = self._check_burn_in(num_burn_in)
    if not self._is_run_complete:
      self.run()
    return [state.get(parameter, value_type) for state in self._samples[num_burn_in:]]

  def get_samples_array(
    self,
    parameter: ParameterEnum,
    value_type: type = object,
    num_burn_in: int = 0,
  ) -> Array:
    """Return the samples of one parameter stacked along a leading chain axis."""
    return jnp.stack(
      [jnp.asarray(value) for value in self.get_samples(parameter, value_type, num_burn_in)],
    )

"""Configuration for the Gibbs sampler."""

from __future__ import annotations

import numbers
from dataclasses import dataclass, field

from gibbsmc.errors import InvalidArgumentError
from gibbsmc.utils.random_source import DEFAULT_PRNG_SEED

DEFAULT_SAMPLES_PER_LOG_ENTRY = 25


def _is_int(value: object) -> bool:
  return isinstance(value, numbers.Integral) and not isinstance(value, bool)


@dataclass(frozen=True)
class GibbsConfig:
  """Configuration for a Gibbs sampling run.

  Attributes:
      num_samples: Total number of samples, including the initial state and
                   any burn-in.
      samples_per_log_entry: Number of samples between progress messages.
      prng_seed: Seed the random source is reset to before every run.

  """

  num_samples: int
  samples_per_log_entry: int = field(default=DEFAULT_SAMPLES_PER_LOG_ENTRY)
  prng_seed: int = field(default=DEFAULT_PRNG_SEED)

  def _validate_types(self) -> None:
    """Check types of the fields."""
    if not _is_int(self.num_samples):
      msg = "num_samples must be an integer."
      raise TypeError(msg)
    if not _is_int(self.samples_per_log_entry):
      msg = "samples_per_log_entry must be an integer."
      raise TypeError(msg)
    if not _is_int(self.prng_seed):
      msg = "prng_seed must be an integer."
      raise TypeError(msg)

  def _check_values(self) -> None:
    """Check values of the fields."""
    if self.num_samples <= 0:
      msg = "Number of samples must be positive."
      raise InvalidArgumentError(msg)
    if self.samples_per_log_entry <= 0:
      msg = "Number of samples per log entry must be positive."
      raise InvalidArgumentError(msg)

  def __post_init__(self) -> None:
    """Validate the sampler configuration and store integer fields as `int`."""
    self._validate_types()
    for name in ("num_samples", "samples_per_log_entry", "prng_seed"):
      object.__setattr__(self, name, int(getattr(self, name)))
    self._check_values()

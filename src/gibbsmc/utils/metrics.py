"""Summary statistics for Markov chain samples.

Includes autocorrelation, effective sample size and posterior summaries of
scalar parameters.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

import jax.numpy as jnp
import numpy as np

from gibbsmc.errors import InvalidArgumentError

if TYPE_CHECKING:
  from collections.abc import Sequence

  from jaxtyping import Array, Float

  from gibbsmc.models.types import ScalarSamples

logger = getLogger(__name__)

__all__ = ["PosteriorSummary", "autocorrelation", "effective_sample_size", "summarize_samples"]


def _as_chain(samples: Sequence[float] | Array) -> ScalarSamples:
  chain = jnp.asarray(samples, dtype=jnp.float32)
  if chain.ndim != 1:
    msg = f"Expected a one-dimensional chain, got shape {chain.shape}."
    raise InvalidArgumentError(msg)
  if chain.shape[0] == 0:
    msg = "Cannot summarize an empty chain."
    raise InvalidArgumentError(msg)
  return chain


def autocorrelation(
  samples: Sequence[float] | Array,
  max_lag: int | None = None,
) -> Float[Array, "num_lags"]:
  """Compute the normalized autocorrelation of a scalar chain.

  Args:
    samples: One-dimensional chain.
    max_lag: Largest lag returned. Defaults to `len(samples) - 1`.

  Returns:
    Autocorrelations for lags `0..max_lag`; lag 0 is always 1. A constant
    chain has zero autocorrelation at every positive lag.

  Raises:
    InvalidArgumentError: If the chain is empty or `max_lag` is negative.

  """
  chain = _as_chain(samples)
  n = chain.shape[0]
  max_lag = n - 1 if max_lag is None else min(max_lag, n - 1)
  if max_lag < 0:
    msg = "max_lag must be non-negative."
    raise InvalidArgumentError(msg)

  centered = chain - jnp.mean(chain)
  # Zero-pad to avoid circular correlation.
  spectrum = jnp.fft.rfft(centered, n=2 * n)
  autocovariance = jnp.fft.irfft(spectrum * jnp.conj(spectrum), n=2 * n)[:n] / n
  variance = autocovariance[0]
  if float(variance) <= 0.0:
    return jnp.zeros(max_lag + 1).at[0].set(1.0)
  return (autocovariance / variance)[: max_lag + 1]


def effective_sample_size(samples: Sequence[float] | Array) -> float:
  """Estimate the effective sample size using Geyer's initial positive sequence.

  Autocorrelations are summed in adjacent pairs until the first pair whose
  sum is not positive.
  """
  chain = _as_chain(samples)
  n = int(chain.shape[0])
  if n < 3:
    return float(n)
  rho = np.asarray(autocorrelation(chain))

  tau = -1.0
  for k in range(0, n - 1, 2):
    pair = rho[k] + rho[k + 1]
    if pair <= 0.0:
      break
    tau += 2.0 * pair
  tau = max(tau, 1.0 / n)
  return float(min(n / tau, n * np.log10(n)))


@dataclass(frozen=True)
class PosteriorSummary:
  """Posterior summary of a scalar parameter.

  Attributes:
      mean: Sample mean.
      std: Sample standard deviation.
      quantiles: Requested quantile levels mapped to their values.
      ess: Effective sample size.
      num_samples: Number of samples summarized.

  """

  mean: float
  std: float
  ess: float
  num_samples: int
  quantiles: dict[float, float] = field(default_factory=dict)


def summarize_samples(
  samples: Sequence[float] | Array,
  quantiles: Sequence[float] = (0.025, 0.5, 0.975),
) -> PosteriorSummary:
  """Summarize the samples of a scalar parameter.

  Raises:
    InvalidArgumentError: If the chain is empty or a quantile level lies
      outside [0, 1].

  """
  chain = _as_chain(samples)
  if any(not 0.0 <= q <= 1.0 for q in quantiles):
    msg = f"Quantile levels must lie in [0, 1], got {tuple(quantiles)}."
    raise InvalidArgumentError(msg)
  levels = jnp.asarray(quantiles, dtype=jnp.float32)
  values = jnp.quantile(chain, levels)
  summary = PosteriorSummary(
    mean=float(jnp.mean(chain)),
    std=float(jnp.std(chain, ddof=1)) if chain.shape[0] > 1 else 0.0,
    ess=effective_sample_size(chain),
    num_samples=int(chain.shape[0]),
    quantiles={float(q): float(v) for q, v in zip(quantiles, values, strict=True)},
  )
  logger.debug(
    "Summarized %d samples: mean=%.4g std=%.4g",
    summary.num_samples,
    summary.mean,
    summary.std,
  )
  return summary

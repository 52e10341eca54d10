"""A seeded, stateful source of JAX PRNG keys.

JAX random functions are pure: they take a key and never advance it. A Gibbs
chain instead needs one generator that every conditional draw consumes in
turn, so `RandomSource` holds a key and splits it on each request. Two
sources reseeded to the same value hand out identical key sequences.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import jax

from gibbsmc.errors import InvalidArgumentError

if TYPE_CHECKING:
  from jaxtyping import PRNGKeyArray

__all__ = ["DEFAULT_PRNG_SEED", "RandomSource", "split_key_for_sampler"]

logger = logging.getLogger(__name__)

DEFAULT_PRNG_SEED = 42


def split_key_for_sampler(
  key: PRNGKeyArray,
  n_splits: int,
) -> tuple[PRNGKeyArray, ...]:
  """Split a PRNG key into child keys plus the key to carry forward.

  Args:
    key: Parent PRNG key to split.
    n_splits: Number of child keys needed (excluding the "next" key).

  Returns:
    Tuple of (child_key_1, ..., child_key_n, next_key).

  Raises:
    InvalidArgumentError: If n_splits < 1.

  Example:
    >>> import jax
    >>> key = jax.random.PRNGKey(42)
    >>> key_proposal, next_key = split_key_for_sampler(key, 1)

  """
  if n_splits < 1:
    msg = f"n_splits must be >= 1, got {n_splits}"
    raise InvalidArgumentError(msg)

  return tuple(jax.random.split(key, n_splits + 1))


class RandomSource:
  """Mutable wrapper around a JAX PRNG key.

  Args:
    seed: Initial seed.

  Example:
    >>> source = RandomSource(seed=0)
    >>> x = jax.random.normal(source.next_key())

  """

  def __init__(self, seed: int = DEFAULT_PRNG_SEED) -> None:
    self._seed = seed
    self._key = jax.random.PRNGKey(seed)
    self._num_draws = 0

  @property
  def seed(self) -> int:
    """Seed the source was last (re)seeded with."""
    return self._seed

  @property
  def num_draws(self) -> int:
    """Number of keys handed out since the last reseed."""
    return self._num_draws

  @property
  def key(self) -> PRNGKeyArray:
    """The key that the next split will consume."""
    return self._key

  def reseed(self, seed: int | None = None) -> None:
    """Reset the generator to `seed`, or to its current seed when omitted."""
    if seed is not None:
      self._seed = seed
    self._key = jax.random.PRNGKey(self._seed)
    self._num_draws = 0
    logger.debug("Random source reseeded with %d.", self._seed)

  def next_key(self) -> PRNGKeyArray:
    """Return a fresh key and advance the generator."""
    sub_key, self._key = split_key_for_sampler(self._key, 1)
    self._num_draws += 1
    return sub_key

  def split(self, num: int) -> tuple[PRNGKeyArray, ...]:
    """Return `num` fresh keys and advance the generator once."""
    *keys, self._key = split_key_for_sampler(self._key, num)
    self._num_draws += num
    return tuple(keys)

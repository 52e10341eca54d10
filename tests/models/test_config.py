"""Unit tests for the GibbsConfig data model."""

import dataclasses

import numpy as np
import pytest

from gibbsmc.errors import InvalidArgumentError
from gibbsmc.models import DEFAULT_SAMPLES_PER_LOG_ENTRY, GibbsConfig
from gibbsmc.utils.random_source import DEFAULT_PRNG_SEED


def test_gibbs_config_defaults():
  """Test GibbsConfig initialization with only the required argument.
  Args:
    None
  Returns:
    None
  Raises:
    AssertionError: If the defaults do not match.
  Example:
    >>> test_gibbs_config_defaults()
  """
  config = GibbsConfig(num_samples=100)
  assert config.num_samples == 100
  assert config.samples_per_log_entry == DEFAULT_SAMPLES_PER_LOG_ENTRY == 25
  assert config.prng_seed == DEFAULT_PRNG_SEED == 42


def test_gibbs_config_is_frozen():
  """Test that GibbsConfig cannot be modified after construction."""
  config = GibbsConfig(num_samples=10)
  with pytest.raises(dataclasses.FrozenInstanceError):
    config.num_samples = 20  # type: ignore[misc]


@pytest.mark.parametrize("num_samples", [0, -5])
def test_gibbs_config_non_positive_samples(num_samples):
  """Test that num_samples must be positive."""
  with pytest.raises(InvalidArgumentError, match="Number of samples must be positive"):
    GibbsConfig(num_samples=num_samples)


def test_gibbs_config_non_positive_log_entry():
  with pytest.raises(InvalidArgumentError, match="per log entry"):
    GibbsConfig(num_samples=10, samples_per_log_entry=0)


@pytest.mark.parametrize(
  "kwargs",
  [
    {"num_samples": 10.0},
    {"num_samples": True},
    {"num_samples": 10, "samples_per_log_entry": "5"},
    {"num_samples": 10, "prng_seed": None},
  ],
)
def test_gibbs_config_invalid_types(kwargs):
  """Test that non-integer fields raise TypeError."""
  with pytest.raises(TypeError):
    GibbsConfig(**kwargs)


def test_invalid_argument_is_value_error():
  """Test that configuration value errors are catchable as ValueError."""
  with pytest.raises(ValueError):
    GibbsConfig(num_samples=0)


def test_gibbs_config_numpy_integers():
  """Test that numpy integers are accepted and stored as int."""
  config = GibbsConfig(
    num_samples=np.int64(50),
    samples_per_log_entry=np.int32(5),
    prng_seed=np.int64(3),
  )
  assert config.num_samples == 50
  assert type(config.num_samples) is int
  assert type(config.samples_per_log_entry) is int
  assert type(config.prng_seed) is int

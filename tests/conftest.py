"""Common fixtures and utilities for testing."""

from __future__ import annotations

from typing import TYPE_CHECKING

import jax
import jax.numpy as jnp
import pytest

from gibbsmc.models import (
  DataCollection,
  GibbsModelBuilder,
  ParameterEnum,
  ParameterizedModel,
  ParameterizedState,
)
from gibbsmc.sampling.normal import NormalData, NormalPrior, build_normal_model

if TYPE_CHECKING:
  from jaxtyping import PRNGKeyArray

  from gibbsmc.utils.random_source import RandomSource


class CounterParameter(ParameterEnum):
  """Parameters of the counting test model."""

  STEP = "step"
  NOISE = "noise"


class EmptyData(DataCollection):
  """Data collection with no fields."""


class CountingModel(ParameterizedModel):
  """Gibbs model that records how many sweeps it has performed."""

  def __init__(self, *args, **kwargs) -> None:  # noqa: ANN002, ANN003
    super().__init__(*args, **kwargs)
    self.num_updates = 0

  def update(self, random_source: RandomSource) -> None:
    self.num_updates += 1
    super().update(random_source)


def _increment_step(random_source: RandomSource, state: ParameterizedState, data: EmptyData) -> int:
  return state.get(CounterParameter.STEP, int) + 1


def _draw_noise(random_source: RandomSource, state: ParameterizedState, data: EmptyData) -> float:
  return float(jax.random.uniform(random_source.next_key()))


def make_counting_model() -> CountingModel:
  """Build a fresh counting model starting at step 0."""
  initial_state = ParameterizedState({CounterParameter.STEP: 0, CounterParameter.NOISE: 0.0})
  return CountingModel(
    initial_state,
    EmptyData(),
    samplers={
      CounterParameter.STEP: _increment_step,
      CounterParameter.NOISE: _draw_noise,
    },
    value_types={CounterParameter.STEP: int, CounterParameter.NOISE: float},
  )


@pytest.fixture
def rng_key() -> PRNGKeyArray:
  """Provide a consistent PRNG key for testing."""
  return jax.random.PRNGKey(42)


@pytest.fixture
def counting_model() -> CountingModel:
  """Provide a model that counts its update calls."""
  return make_counting_model()


@pytest.fixture(scope="session")
def normal_observations() -> jnp.ndarray:
  """Provide 200 draws from N(3, 2^2) generated with a fixed key."""
  key = jax.random.PRNGKey(0)
  return 3.0 + 2.0 * jax.random.normal(key, (200,))


@pytest.fixture(scope="session")
def normal_data(normal_observations: jnp.ndarray) -> NormalData:
  """Provide the Normal data collection for the fixed observations."""
  return NormalData.from_observations(normal_observations)


@pytest.fixture
def normal_model(normal_data: NormalData) -> ParameterizedModel:
  """Provide a fresh Normal model with a weakly informative prior."""
  return build_normal_model(normal_data, NormalPrior(), initial_mean=0.0, initial_variance=1.0)


@pytest.fixture
def simple_builder() -> GibbsModelBuilder:
  """Provide a builder over the counting parameters with no samplers added."""
  initial_state = ParameterizedState({CounterParameter.STEP: 0, CounterParameter.NOISE: 0.0})
  return GibbsModelBuilder(initial_state, EmptyData())

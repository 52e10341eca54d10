"""Parameter states, data collections and models sampled by gibbsmc."""

from .gibbs import DEFAULT_SAMPLES_PER_LOG_ENTRY, GibbsConfig
from .model import GibbsModelBuilder, ParameterizedModel
from .parameters import DataCollection, ParameterEnum, ParameterizedState
from .types import (
  ParameterizedModelProtocol,
  ParameterSampler,
  ProgressCallback,
  StateTransition,
  UpdateMethod,
)

__all__ = [
  "DEFAULT_SAMPLES_PER_LOG_ENTRY",
  "DataCollection",
  "GibbsConfig",
  "GibbsModelBuilder",
  "ParameterEnum",
  "ParameterSampler",
  "ParameterizedModel",
  "ParameterizedModelProtocol",
  "ParameterizedState",
  "ProgressCallback",
  "StateTransition",
  "UpdateMethod",
]

"""Samplers and conditional updates."""

from . import normal
from .gibbs import GibbsSampler
from .metropolis import RandomWalkParameterSampler

__all__ = [
  "GibbsSampler",
  "RandomWalkParameterSampler",
  "normal",
]

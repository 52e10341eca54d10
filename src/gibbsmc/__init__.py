"""Package for gibbsmc: Gibbs sampling of parameterized models."""

from . import errors, models, sampling, utils

__all__ = [
  "errors",
  "models",
  "sampling",
  "utils",
]

"""Exception types raised by the sampling engine.

Every error subclasses the builtin exception a caller would already expect
(`ValueError`, `TypeError`, `KeyError`, `RuntimeError`) so existing handlers
keep working.
"""

from __future__ import annotations

__all__ = [
  "ChainAbortedError",
  "ConfigurationError",
  "GibbsError",
  "IncompleteStateError",
  "InvalidArgumentError",
  "TypeMismatchError",
  "UnknownKeyError",
]


class GibbsError(Exception):
  """Base class for all errors raised by gibbsmc."""


class InvalidArgumentError(GibbsError, ValueError):
  """A numeric argument is out of range (sample counts, log cadence, burn-in)."""


class ConfigurationError(GibbsError, ValueError):
  """A model or sampler is wired up in a way that cannot be sampled."""


class TypeMismatchError(GibbsError, TypeError):
  """A parameter value does not have the type requested or declared for it."""


class UnknownKeyError(GibbsError, KeyError):
  """A parameter key is not part of the state's enumeration."""

  def __str__(self) -> str:
    # KeyError quotes its argument by default.
    return str(self.args[0]) if self.args else ""


class IncompleteStateError(GibbsError, ValueError):
  """A state is missing one or more keys of its enumeration."""


class ChainAbortedError(GibbsError, RuntimeError):
  """A previous run raised before finishing, leaving a partial history."""

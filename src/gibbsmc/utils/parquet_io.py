"""Export Gibbs sample histories to columnar Parquet files.

The sampling engine never writes files itself. These helpers let a calling
layer persist the scalar parameters of a finished chain, one row per kept
sample, for analysis with polars or any other Parquet reader.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

import numpy as np
import polars as pl

from gibbsmc.errors import InvalidArgumentError

if TYPE_CHECKING:
  from collections.abc import Mapping

  from gibbsmc.models.parameters import ParameterEnum
  from gibbsmc.sampling.gibbs import GibbsSampler

logger = logging.getLogger(__name__)

SAMPLE_INDEX_COLUMN = "sample"

__all__ = [
  "SAMPLE_INDEX_COLUMN",
  "read_samples_parquet",
  "samples_to_dataframe",
  "write_samples_parquet",
]


def samples_to_dataframe(
  sampler: GibbsSampler,
  parameter_types: Mapping[ParameterEnum, type],
  num_burn_in: int = 0,
) -> pl.DataFrame:
  """Collect scalar parameter samples into a DataFrame.

  Args:
    sampler: Sampler to read from; it is run first if needed.
    parameter_types: Parameters to export mapped to their value types.
    num_burn_in: Number of samples to drop from the start of the chain.

  Returns:
    DataFrame with a `sample` column holding the chain index and one column
    per parameter, named after the parameter's value.

  Raises:
    InvalidArgumentError: If no parameters are requested, a parameter is not
      scalar, or two columns would share a name.

  """
  if not parameter_types:
    msg = "At least one parameter must be exported."
    raise InvalidArgumentError(msg)

  columns: dict[str, np.ndarray] = {
    SAMPLE_INDEX_COLUMN: np.arange(num_burn_in, sampler.num_samples, dtype=np.int64),
  }
  for parameter, value_type in parameter_types.items():
    values = np.asarray(sampler.get_samples(parameter, value_type, num_burn_in))
    if values.ndim != 1:
      msg = f"Parameter {parameter.name} is not scalar; got samples of shape {values.shape}."
      raise InvalidArgumentError(msg)
    column = str(parameter.value)
    if column in columns:
      msg = f"Parameter {parameter.name} maps to column {column!r}, which is already in use."
      raise InvalidArgumentError(msg)
    columns[column] = values
  return pl.DataFrame(columns)


def write_samples_parquet(
  sampler: GibbsSampler,
  parameter_types: Mapping[ParameterEnum, type],
  path: str | Path,
  num_burn_in: int = 0,
) -> Path:
  """Write scalar parameter samples to a Parquet file and return its path."""
  output_path = Path(path)
  output_path.parent.mkdir(parents=True, exist_ok=True)
  frame = samples_to_dataframe(sampler, parameter_types, num_burn_in)
  frame.write_parquet(output_path)
  logger.info("Wrote %d samples of %d parameters to %s", frame.height, frame.width - 1, output_path)
  return output_path


def read_samples_parquet(path: str | Path) -> pl.DataFrame:
  """Read samples written by `write_samples_parquet`."""
  input_path = Path(path)
  if not input_path.exists():
    msg = f"No sample file found at {input_path}."
    raise FileNotFoundError(msg)
  return pl.read_parquet(input_path)

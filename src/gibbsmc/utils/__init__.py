"""Utility functions for random keys, chain summaries and sample export."""

from .metrics import PosteriorSummary, autocorrelation, effective_sample_size, summarize_samples
from .parquet_io import read_samples_parquet, samples_to_dataframe, write_samples_parquet
from .random_source import DEFAULT_PRNG_SEED, RandomSource, split_key_for_sampler

__all__ = [
  "DEFAULT_PRNG_SEED",
  "PosteriorSummary",
  "RandomSource",
  "autocorrelation",
  "effective_sample_size",
  "read_samples_parquet",
  "samples_to_dataframe",
  "split_key_for_sampler",
  "summarize_samples",
  "write_samples_parquet",
]

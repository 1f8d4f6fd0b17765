from __future__ import annotations

from pathlib import Path

import polars as pl

from ..synthgen.generate import (
    Observations,
    observations_from_frame,
    observations_to_frame,
)

__all__ = ["read_observations", "write_observations"]


def read_observations(path: str | Path) -> Observations:
    """Load observations from a Parquet or CSV file with ``x`` and ``y`` columns.

    ``x_centered`` is always recomputed from ``x``.
    """
    file_path = Path(path)
    if not file_path.exists():
        raise FileNotFoundError(f"Observation file not found: {file_path}")
    if file_path.suffix.lower() == ".csv":
        lf = pl.scan_csv(file_path)
    else:
        lf = pl.scan_parquet(file_path)
    return observations_from_frame(lf)


def write_observations(obs: Observations, path: str | Path) -> Path:
    """Persist observations as Parquet (or CSV for ``.csv`` paths), creating parent dirs."""
    file_path = Path(path)
    file_path.parent.mkdir(parents=True, exist_ok=True)
    df = observations_to_frame(obs)
    if file_path.suffix.lower() == ".csv":
        df.write_csv(file_path)
    else:
        df.write_parquet(file_path)
    return file_path

"""
Reader — symbol series from CSV and parquet.

All file reads go through here. Columns must hold integer symbols;
float columns are accepted only when every value is integral.
"""

import logging
from pathlib import Path
from typing import List, Optional, Sequence, Union

import numpy as np
import polars as pl


logger = logging.getLogger(__name__)

SUPPORTED_SUFFIXES = ('.csv', '.parquet')


def load_table(path: Union[str, Path]) -> pl.DataFrame:
    """Read a .csv or .parquet file into a DataFrame."""
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"No such file: {path}")
    if p.suffix not in SUPPORTED_SUFFIXES:
        raise ValueError(
            f"Unsupported file type '{p.suffix}', expected one of {', '.join(SUPPORTED_SUFFIXES)}"
        )
    try:
        if p.suffix == '.parquet':
            return pl.read_parquet(str(p))
        return pl.read_csv(str(p))
    except pl.exceptions.PolarsError as e:
        raise ValueError(f"Could not read {path}: {e}") from e


def _symbols(s: pl.Series) -> pl.Series:
    if s.dtype.is_integer():
        return s.cast(pl.Int64)
    if s.dtype.is_float() and (s == s.floor()).all():
        return s.cast(pl.Int64)
    raise ValueError(f"Column '{s.name}' must hold integer symbols, got {s.dtype}")


def _require(df: pl.DataFrame, names: Sequence[str], path: Union[str, Path]):
    for name in names:
        if name not in df.columns:
            raise ValueError(f"Column '{name}' not in {path} (have: {', '.join(df.columns)})")


def read_series(path: Union[str, Path], column: Optional[str] = None) -> np.ndarray:
    """
    Load one column of symbols.

    Args:
        path: .csv or .parquet file
        column: Column name (first column if None)

    Returns:
        int64 array with null rows dropped
    """
    df = load_table(path)
    if column is None:
        if not df.columns:
            raise ValueError(f"{path} has no columns")
        column = df.columns[0]
    _require(df, [column], path)

    s = df.get_column(column).drop_nulls()
    dropped = df.height - s.len()
    if dropped:
        logger.warning(f"Dropped {dropped} null value(s) from column '{column}'")
    return _symbols(s).to_numpy()


def read_aligned(
    path: Union[str, Path],
    columns: Sequence[str],
    group: Optional[str] = None,
) -> List[np.ndarray]:
    """
    Load several columns whose rows stay aligned.

    A row with a null in any requested column is dropped from every
    column, so row t of one result always pairs with row t of the others.

    Args:
        path: .csv or .parquet file
        columns: Symbol columns
        group: Realization id column; None loads a single realization

    Returns:
        One (num_realizations, steps) int64 array per column

    Raises:
        ValueError: missing columns or realizations of unequal length
    """
    df = load_table(path)
    names = list(dict.fromkeys(([group] if group else []) + list(columns)))
    _require(df, names, path)

    aligned = df.select(names).drop_nulls()
    dropped = df.height - aligned.height
    if dropped:
        logger.warning(f"Dropped {dropped} row(s) with nulls in {', '.join(columns)}")

    if not group:
        return [_symbols(aligned.get_column(c)).to_numpy().reshape(1, -1) for c in columns]

    grouped = aligned.group_by(group, maintain_order=True).agg(
        [pl.col(c) for c in dict.fromkeys(columns)]
    )
    matrices = []
    for c in columns:
        realizations = [_symbols(pl.Series(c, values)).to_numpy()
                        for values in grouped.get_column(c).to_list()]
        lengths = {len(r) for r in realizations}
        if len(lengths) > 1:
            raise ValueError(
                f"Realizations in {path} have unequal lengths: {sorted(lengths)}"
            )
        if realizations:
            matrices.append(np.vstack(realizations))
        else:
            matrices.append(np.zeros((0, 0), dtype=np.int64))
    return matrices


def read_ensemble(path: Union[str, Path], column: str, group: str) -> np.ndarray:
    """
    Load an ensemble of realizations.

    Rows are grouped by the realization id in `group`, in order of first
    appearance; the order of rows within a group is preserved.

    Returns:
        (num_realizations, steps) int64 array

    Raises:
        ValueError: missing columns or realizations of unequal length
    """
    return read_aligned(path, [column], group)[0]

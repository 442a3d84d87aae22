"""
infodyn I/O — loading symbol series from CSV and parquet.
"""

from infodyn.io.reader import load_table, read_aligned, read_ensemble, read_series

__all__ = ['load_table', 'read_series', 'read_ensemble', 'read_aligned']

"""
infodyn — information dynamics of discrete time series.

Public API:
    from infodyn import active_information, transfer_entropy

    active_information([0, 1, 0, 1, 0, 1], base=2, history_length=1)
    transfer_entropy(source, target, base=2, history_length=1)

Layers:
    infodyn.core        Distributions, encoding, Shannon measures, estimators
    infodyn.result      Defined / Undefined measurement results
    infodyn.errors      ErrorCode status classification
    infodyn.validation  Estimator input checks
    infodyn.config      YAML + pydantic configuration
    infodyn.io          Loading symbol series from CSV / parquet
    infodyn.run         Command line (python -m infodyn)
"""

from infodyn.core import (
    Distribution,
    accumulate_active_information,
    accumulate_transfer_entropy,
    active_information,
    active_information_ensemble,
    conditional_entropy,
    conditional_mutual_information,
    decode,
    encode,
    mutual_information,
    pointwise_conditional_entropy,
    pointwise_conditional_mutual_information,
    pointwise_mutual_information,
    self_information,
    shannon_entropy,
    transfer_entropy,
    transfer_entropy_ensemble,
)
from infodyn.errors import EncodingError, ErrorCode, InformError
from infodyn.result import Defined, Measurement, Undefined

__version__ = "0.1.0"

__all__ = [
    '__version__',
    # Results
    'Measurement',
    'Defined',
    'Undefined',
    # Errors
    'ErrorCode',
    'InformError',
    'EncodingError',
    # Distribution
    'Distribution',
    # Encoding
    'encode',
    'decode',
    # Shannon measures
    'self_information',
    'shannon_entropy',
    'pointwise_mutual_information',
    'mutual_information',
    'pointwise_conditional_entropy',
    'conditional_entropy',
    'pointwise_conditional_mutual_information',
    'conditional_mutual_information',
    # Time series
    'accumulate_active_information',
    'active_information',
    'active_information_ensemble',
    'accumulate_transfer_entropy',
    'transfer_entropy',
    'transfer_entropy_ensemble',
]

"""
infodyn core
============

    distribution.py   Empirical histogram (Distribution) and scoped accumulators
    encoding.py       Window <-> integer state encoding
    shannon.py        Entropy, mutual information, conditional measures
    time_series.py    Active information and transfer entropy estimators
"""

from infodyn.core.distribution import Distribution, acquire, copy, dump, dup, resize
from infodyn.core.encoding import decode, encode, infer_base
from infodyn.core.shannon import (
    conditional_entropy,
    conditional_mutual_information,
    mutual_information,
    pointwise_conditional_entropy,
    pointwise_conditional_mutual_information,
    pointwise_mutual_information,
    self_information,
    shannon_entropy,
)
from infodyn.core.time_series import (
    accumulate_active_information,
    accumulate_transfer_entropy,
    active_information,
    active_information_ensemble,
    transfer_entropy,
    transfer_entropy_ensemble,
)

__all__ = [
    # Distribution
    'Distribution',
    'acquire',
    'copy',
    'dump',
    'dup',
    'resize',
    # Encoding
    'encode',
    'decode',
    'infer_base',
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

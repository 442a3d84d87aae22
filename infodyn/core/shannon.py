"""
Shannon Information Measures
============================

Pure functions over Distributions. Every function takes a logarithm base
(2 = bits, e = nats) and returns a Measurement.

    self_information                     -log_b p(e)
    shannon_entropy                      H(X)
    pointwise_mutual_information         log_b p(x,y) / p(x)p(y)
    mutual_information                   H(X) + H(Y) - H(X,Y)
    pointwise_conditional_entropy        -log_b p(x,y) / p(y)
    conditional_entropy                  H(X,Y) - H(Y)
    pointwise_conditional_mutual_information
                                         log_b p(x,y,z)p(z) / p(x,z)p(y,z)
    conditional_mutual_information       H(X,Z) + H(Y,Z) - H(X,Y,Z) - H(Z)

Any Undefined sub-result poisons the combination. An invalid
distribution (no observations) gives Undefined with no error code; a
missing distribution or a bad base gives Undefined with an ErrorCode.
"""

import math
from typing import Optional

import numpy as np
from scipy.stats import entropy as _scipy_entropy

from infodyn.core.distribution import Distribution
from infodyn.errors import ErrorCode
from infodyn.result import Defined, Measurement, Undefined, undefined_from


def _check_base(base: float) -> Optional[Undefined]:
    if not (base > 0) or base == 1 or not math.isfinite(base):
        return undefined_from(ErrorCode.INVALID_BASE, f"logarithm base {base}")
    return None


def _check(*dists: Optional[Distribution]) -> Optional[Undefined]:
    for dist in dists:
        if dist is None:
            return undefined_from(ErrorCode.INVALID_POINTER, "distribution is None")
        if not dist.is_valid():
            return Undefined("distribution has no observations")
    return None


def _log(x: float, base: float) -> Measurement:
    # log(0) is -inf; 0/0 ratios arrive here as nan
    with np.errstate(divide="ignore", invalid="ignore"):
        value = np.log(np.float64(x)) / np.log(base)
    if np.isnan(value):
        return Undefined("ratio of zero probabilities")
    return Defined(float(value))


def _ratio(numerator: float, denominator: float) -> float:
    with np.errstate(divide="ignore", invalid="ignore"):
        return float(np.float64(numerator) / np.float64(denominator))


def self_information(dist: Distribution, event: int, base: float = 2.0) -> Measurement:
    """
    Self-information (surprisal) of a single event.

    Unobserved events have infinite self-information.
    """
    bad = _check_base(base) or _check(dist)
    if bad is not None:
        return bad
    return -_log(dist.probability(event), base)


def shannon_entropy(dist: Distribution, base: float = 2.0) -> Measurement:
    """
    Shannon entropy of a distribution.

    Zero-probability events contribute nothing (0 log 0 = 0), so a
    distribution with all mass on one event has entropy exactly 0.

    Args:
        dist: Distribution with at least one observation
        base: Logarithm base

    Returns:
        Defined(H), or Undefined if dist is invalid or base is bad
    """
    bad = _check_base(base) or _check(dist)
    if bad is not None:
        return bad
    h = float(_scipy_entropy(dist.histogram.astype(np.float64), base=base))
    # scipy returns -0.0 for a point mass in some bases
    return Defined(h + 0.0)


def pointwise_mutual_information(
    joint: Distribution,
    marginal_x: Distribution,
    marginal_y: Distribution,
    event_joint: int,
    event_x: int,
    event_y: int,
    base: float = 2.0,
) -> Measurement:
    """Mutual information of one joint event and its marginal projections."""
    bad = _check_base(base) or _check(joint, marginal_x, marginal_y)
    if bad is not None:
        return bad
    p_joint = joint.probability(event_joint)
    p_x = marginal_x.probability(event_x)
    p_y = marginal_y.probability(event_y)
    return _log(_ratio(p_joint, p_x * p_y), base)


def mutual_information(
    joint: Distribution,
    marginal_x: Distribution,
    marginal_y: Distribution,
    base: float = 2.0,
) -> Measurement:
    """
    Mutual information I(X;Y) = H(X) + H(Y) - H(X,Y).

    Args:
        joint: Distribution over joint events (x, y)
        marginal_x: Distribution over x
        marginal_y: Distribution over y
        base: Logarithm base, shared by all three entropies

    Returns:
        Defined(I), or the first Undefined entropy
    """
    return (shannon_entropy(marginal_x, base)
            + shannon_entropy(marginal_y, base)
            - shannon_entropy(joint, base))


def pointwise_conditional_entropy(
    joint: Distribution,
    marginal: Distribution,
    event_joint: int,
    event_marginal: int,
    base: float = 2.0,
) -> Measurement:
    """Conditional self-information -log p(x,y)/p(y) of one joint event."""
    bad = _check_base(base) or _check(joint, marginal)
    if bad is not None:
        return bad
    ratio = _ratio(joint.probability(event_joint), marginal.probability(event_marginal))
    return -_log(ratio, base)


def conditional_entropy(joint: Distribution, marginal: Distribution,
                        base: float = 2.0) -> Measurement:
    """H(X|Y) = H(X,Y) - H(Y)."""
    return shannon_entropy(joint, base) - shannon_entropy(marginal, base)


def pointwise_conditional_mutual_information(
    joint: Distribution,
    marginal_xz: Distribution,
    marginal_yz: Distribution,
    marginal_z: Distribution,
    event_joint: int,
    event_xz: int,
    event_yz: int,
    event_z: int,
    base: float = 2.0,
) -> Measurement:
    """Conditional mutual information of one joint event (x, y, z)."""
    bad = _check_base(base) or _check(joint, marginal_xz, marginal_yz, marginal_z)
    if bad is not None:
        return bad
    numerator = joint.probability(event_joint) * marginal_z.probability(event_z)
    denominator = marginal_xz.probability(event_xz) * marginal_yz.probability(event_yz)
    return _log(_ratio(numerator, denominator), base)


def conditional_mutual_information(
    joint: Distribution,
    marginal_xz: Distribution,
    marginal_yz: Distribution,
    marginal_z: Distribution,
    base: float = 2.0,
) -> Measurement:
    """I(X;Y|Z) = H(X,Z) + H(Y,Z) - H(X,Y,Z) - H(Z)."""
    return (shannon_entropy(marginal_xz, base)
            + shannon_entropy(marginal_yz, base)
            - shannon_entropy(joint, base)
            - shannon_entropy(marginal_z, base))

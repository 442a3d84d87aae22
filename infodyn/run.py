"""
infodyn Command Line
====================

Estimate information measures of symbol series stored in CSV or parquet.

Usage:
    python -m infodyn active data.csv --column x -k 2
    python -m infodyn active runs.parquet --column x --group run -k 2
    python -m infodyn transfer data.csv --source y --target x -k 1
    python -m infodyn entropy data.csv --column x --log-base 2

Exit status:
    0   a defined estimate was printed
    1   the estimate is undefined (reason printed to stderr)
    2   bad arguments or unreadable input
"""

import argparse
import logging
import sys
from typing import List, Optional

import numpy as np

from infodyn.config import InfodynConfig, load_config
from infodyn.core.distribution import Distribution
from infodyn.core.encoding import infer_base
from infodyn.core.shannon import shannon_entropy
from infodyn.core.time_series import active_information_ensemble, transfer_entropy_ensemble
from infodyn.errors import ErrorCode
from infodyn.io.reader import read_aligned, read_ensemble, read_series
from infodyn.result import Measurement, Undefined, undefined_from


logger = logging.getLogger(__name__)


def _pick(*values):
    """First value that is not None (command line beats config)."""
    for v in values:
        if v is not None:
            return v
    return None


def _load_matrix(path: str, column: Optional[str], group: Optional[str]) -> np.ndarray:
    if group:
        return read_ensemble(path, column, group)
    return read_series(path, column).reshape(1, -1)


def _report(result: Measurement) -> int:
    if isinstance(result, Undefined):
        print(f"undefined: {result.reason}", file=sys.stderr)
        return 1
    print(f"{float(result):.10g}")
    return 0


def cmd_active(args: argparse.Namespace, config: InfodynConfig) -> int:
    data = _load_matrix(args.path, args.column, args.group)
    base = infer_base(data, _pick(args.base, config.estimator.base))
    k = _pick(args.history_length, config.estimator.history_length)
    n, m = data.shape

    logger.info(f"Active information: {n} realization(s) x {m} step(s), base={base}, k={k}")
    return _report(active_information_ensemble(
        data, n, m, base, k,
        log_base=_pick(args.log_base, config.estimator.log_base),
    ))


def cmd_transfer(args: argparse.Namespace, config: InfodynConfig) -> int:
    # one read so that a null in either column drops the whole row
    source, target = read_aligned(args.path, [args.source, args.target], args.group)
    base = infer_base(np.concatenate([source.ravel(), target.ravel()]),
                      _pick(args.base, config.estimator.base))
    k = _pick(args.history_length, config.estimator.history_length)
    n, m = target.shape

    logger.info(f"Transfer entropy {args.source} -> {args.target}: "
                f"{n} realization(s) x {m} step(s), base={base}, k={k}")
    return _report(transfer_entropy_ensemble(
        source, target, n, m, base, k,
        log_base=_pick(args.log_base, config.estimator.log_base),
    ))


def cmd_entropy(args: argparse.Namespace, config: InfodynConfig) -> int:
    series = read_series(args.path, args.column)
    if series.size and series.min() < 0:
        return _report(undefined_from(ErrorCode.NEGATIVE_STATE, f"symbol {series.min()}"))
    base = infer_base(series, _pick(args.base, config.estimator.base))
    if series.size and series.max() >= base:
        return _report(undefined_from(ErrorCode.BAD_STATE, f"symbol {series.max()} >= base {base}"))
    counts = np.bincount(series, minlength=base) if series.size else np.zeros(base, dtype=np.int64)

    dist = Distribution.from_counts(counts)
    return _report(shannon_entropy(dist, _pick(args.log_base, config.estimator.log_base, base)))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='infodyn',
        description='Information measures of discrete time series',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument('--config', help='YAML configuration file (default: ./infodyn.yaml)')
    parser.add_argument('-v', '--verbose', action='store_true', help='Log progress (DEBUG level)')

    sub = parser.add_subparsers(dest='command', required=True)

    def add_common(p: argparse.ArgumentParser):
        p.add_argument('path', help='Input .csv or .parquet file')
        p.add_argument('--base', type=int, help='Alphabet size (default: inferred)')
        p.add_argument('--log-base', type=float, dest='log_base',
                       help='Logarithm base of the result (default: alphabet size)')

    p = sub.add_parser('active', help='Active information of one series or ensemble')
    add_common(p)
    p.add_argument('--column', help='Symbol column (default: first column)')
    p.add_argument('--group', help='Realization id column for ensembles')
    p.add_argument('-k', '--history-length', type=int, dest='history_length')
    p.set_defaults(func=cmd_active)

    p = sub.add_parser('transfer', help='Transfer entropy from --source to --target')
    add_common(p)
    p.add_argument('--source', required=True, help='Source column')
    p.add_argument('--target', required=True, help='Target column')
    p.add_argument('--group', help='Realization id column for ensembles')
    p.add_argument('-k', '--history-length', type=int, dest='history_length')
    p.set_defaults(func=cmd_transfer)

    p = sub.add_parser('entropy', help='Shannon entropy of a column')
    add_common(p)
    p.add_argument('--column', help='Symbol column (default: first column)')
    p.set_defaults(func=cmd_entropy)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = load_config(args.config)
    except (FileNotFoundError, ValueError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    level = 'DEBUG' if args.verbose else config.logging.level
    logging.basicConfig(
        level=getattr(logging, level),
        format='%(asctime)s - %(levelname)s - %(message)s',
    )

    try:
        return args.func(args, config)
    except (FileNotFoundError, ValueError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

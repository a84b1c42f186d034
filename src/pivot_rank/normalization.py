"""
Pivoted TF normalization primitives.

Notation:
    l_d   document length          nT_d  unique terms in the document
    l_t   collection frequency     nD_t  document frequency of the term
    l_c   collection length        nD    number of (non-zero-length) documents
    nT    unique terms in the collection

A pivoted ratio divides a quantity by its collection-wide mean so that an
average document (or term) scores 1.0. Two ratios are blended into one
normalization factor K by ``combine``; ``quantify`` turns a raw term
frequency into a contribution damped by K.

Zero denominators raise DomainError instead of producing inf/NaN.
"""

from __future__ import annotations

import math

from pivot_rank.config import Combination, Pivotization, Quantification, resolve
from pivot_rank.errors import DomainError

COMBINATION_OPTION = "tf.normalization.combination"
PIVOTIZATION_OPTION = "tf.normalization.pivotization"
QUANTIFICATION_OPTION = "tf.quantification"
LAMBDAQ_COMBINATION_OPTION = "lambdaq.normalization.combination"
LAMBDAQ_PIVOTIZATION_OPTION = "lambdaq.normalization.pivotization"


def _divide(numerator: float, denominator: float, what: str) -> float:
    if denominator == 0:
        raise DomainError(f"{what} is undefined: zero denominator")
    return numerator / denominator


def _mean(total: float, count: float, what: str) -> float:
    mean = _divide(total, count, what)
    if mean == 0:
        raise DomainError(f"{what} is zero")
    return mean


# -----------------------------------------------------------------------------
# Pivoted ratios
# -----------------------------------------------------------------------------

def pivoted_length(l_d: float, l_c: float, nD: float) -> float:
    """Document length over mean document length: l_d / (l_c / nD)."""
    return l_d / _mean(l_c, nD, "mean document length")


def pivoted_verboseness(
    l_d: float,
    nT_d: float,
    l_c: float,
    nT: float,
    pivotization: str | Pivotization,
    average_verboseness: float | None = None,
) -> float:
    """
    Document verboseness (l_d / nT_d) over a collection baseline.

    non_elite: the baseline is l_c / nT.
    elite: the baseline is ``average_verboseness``, the per-document mean
    kept by CorpusStatisticsCache.
    """
    mode = resolve(Pivotization, pivotization, PIVOTIZATION_OPTION)
    verboseness = _divide(l_d, nT_d, "document verboseness")
    if mode is Pivotization.NON_ELITE:
        return verboseness / _mean(l_c, nT, "collection verboseness")
    if average_verboseness is None:
        raise ValueError("elite pivotization requires average_verboseness")
    return _divide(verboseness, average_verboseness, "elite verboseness pivot")


def pivoted_term_length(l_t: float, l_c: float, nD: float) -> float:
    """Term collection frequency over mean document length: l_t / (l_c / nD)."""
    return l_t / _mean(l_c, nD, "mean document length")


def pivoted_term_burstiness(
    l_t: float,
    nD_t: float,
    l_c: float,
    nD: float,
    pivotization: str | Pivotization,
    average_burstiness: float | None = None,
    option: str = LAMBDAQ_PIVOTIZATION_OPTION,
) -> float:
    """
    Term burstiness (l_t / nD_t) over a collection baseline.

    non_elite: the baseline is the mean document length l_c / nD.
    elite: the baseline is ``average_burstiness`` over the lexicon.
    """
    mode = resolve(Pivotization, pivotization, option)
    burstiness = _divide(l_t, nD_t, "term burstiness")
    if mode is Pivotization.NON_ELITE:
        return burstiness / _mean(l_c, nD, "mean document length")
    if average_burstiness is None:
        raise ValueError("elite pivotization requires average_burstiness")
    return _divide(burstiness, average_burstiness, "elite burstiness pivot")


# -----------------------------------------------------------------------------
# Combination
# -----------------------------------------------------------------------------

def combine(
    pivot1: float,
    pivot2: float,
    b: float,
    a: float,
    combination: str | Combination,
    option: str = COMBINATION_OPTION,
) -> float:
    """
    Blend two pivoted ratios into the normalization factor K.

    linear:  K = (1 - b) + b(1 - a) pivot1 + b a pivot2
    product: K = pivot1^(b(1 - a)) * pivot2^(b a)

    ``b`` = 0 disables normalization (K = 1); ``a`` moves the weight from
    pivot1 (a = 0) to pivot2 (a = 1). ``option`` names the setting in errors.
    """
    mode = resolve(Combination, combination, option)
    if mode is Combination.LINEAR:
        return 1.0 - b + b * (1.0 - a) * pivot1 + b * a * pivot2
    try:
        return math.pow(pivot1, b * (1.0 - a)) * math.pow(pivot2, b * a)
    except (ValueError, ZeroDivisionError, OverflowError) as exc:
        raise DomainError(
            f"product combination undefined for pivots ({pivot1}, {pivot2})"
        ) from exc


# -----------------------------------------------------------------------------
# Quantification
# -----------------------------------------------------------------------------

def quantify(tfd: float, K: float, quantification: str | Quantification) -> float:
    """
    Term frequency contribution given normalization factor K.

    total:    tfd / K
    log:      ln(tfd / K + 1)
    bm25:     2 tfd / (tfd + K)   (bounded above by 2)
    constant: 1 / K
    """
    mode = resolve(Quantification, quantification, QUANTIFICATION_OPTION)
    if mode is Quantification.TOTAL:
        return _divide(tfd, K, "total quantification")
    if mode is Quantification.LOG:
        return log_or_raise(_divide(tfd, K, "log quantification") + 1.0, "log quantification")
    if mode is Quantification.BM25:
        return _divide(2.0 * tfd, tfd + K, "bm25 quantification")
    return _divide(1.0, K, "constant quantification")


def smoothing_weight(K: float) -> float:
    """Map K onto an interpolation weight K / (K + 1)."""
    return _divide(K, K + 1.0, "smoothing weight")


def log_or_raise(x: float, what: str) -> float:
    """Natural log that raises DomainError instead of returning -inf or failing on x <= 0."""
    if x <= 0:
        raise DomainError(f"{what} is undefined: log of {x}")
    return math.log(x)

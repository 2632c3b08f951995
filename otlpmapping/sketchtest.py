"""Quantile functions and CDFs of common distributions, for generating points."""

from __future__ import annotations

import math
from statistics import NormalDist
from typing import Callable

__all__ = [
    "QuantileFunction",
    "CDF",
    "uniform_q",
    "u_quadratic_q",
    "truncate_q",
    "truncate_cdf",
    "exponential_cdf",
    "exponential_q",
    "normal_cdf",
    "normal_q",
]

# Quantile function: defined on (0, 1), may return the extrema at 0 and 1.
QuantileFunction = Callable[[float], float]
# Cumulative distribution function: inverse of a quantile function.
CDF = Callable[[float], float]

_STANDARD_NORMAL = NormalDist()


def _log(x: float) -> float:
    if x == 0:
        return -math.inf
    if x < 0:
        return math.nan
    return math.log(x)


def _standard_normal_quantile(q: float) -> float:
    if q == 0:
        return -math.inf
    if q == 1:
        return math.inf
    if not 0 < q < 1:
        return math.nan
    return _STANDARD_NORMAL.inv_cdf(q)


def uniform_q(a: float, b: float) -> QuantileFunction:
    """Quantile function of the uniform distribution on [a, b]."""

    def quantile(q: float) -> float:
        return (b - a) * q + a

    return quantile


def u_quadratic_q(a: float, b: float) -> QuantileFunction:
    """Quantile function of the U-quadratic distribution on [a, b]."""
    alpha = 12.0 / math.pow(b - a, 3)
    beta = (b + a) / 2.0

    def quantile(q: float) -> float:
        inner = 3 / alpha * q - math.pow(beta - a, 3)
        # cube root of a negative number through its absolute value
        sign = -1.0 if inner < 0 else 1.0
        return beta + sign * math.pow(sign * inner, 1.0 / 3.0)

    return quantile


def truncate_q(a: float, b: float, quantile: QuantileFunction, cdf: CDF) -> QuantileFunction:
    """Truncate a quantile function to [a, b], given its CDF."""

    def h(cdfx: float) -> float:
        return (cdf(b) - cdf(a)) * cdfx + cdf(a)

    def truncated(q: float) -> float:
        # extrema handled apart, for CDFs not defined there
        if q == 0:
            return a
        if q == 1:
            return b
        return quantile(h(q))

    return truncated


def truncate_cdf(a: float, b: float, cdf: CDF) -> CDF:
    """Truncate a CDF to (a, b)."""

    def truncated(x: float) -> float:
        return (cdf(x) - cdf(a)) / (cdf(b) - cdf(a))

    return truncated


def exponential_cdf(lam: float) -> CDF:
    """CDF of the exponential distribution with rate lam."""

    def cdf(x: float) -> float:
        if x < 0:
            return 0.0
        return 1 - math.exp(-lam * x)

    return cdf


def exponential_q(lam: float) -> QuantileFunction:
    """Quantile function of the exponential distribution with rate lam."""

    def quantile(q: float) -> float:
        return -_log(1 - q) / lam

    return quantile


def normal_cdf(mu: float, sigma: float) -> CDF:
    """CDF of the normal distribution N(mu, sigma)."""

    def cdf(x: float) -> float:
        return 0.5 * (1 + math.erf((x - mu) / (sigma * math.sqrt(2))))

    return cdf


def normal_q(mu: float, sigma: float) -> QuantileFunction:
    """Quantile function of the normal distribution N(mu, sigma)."""

    def quantile(q: float) -> float:
        return mu + sigma * _standard_normal_quantile(q)

    return quantile
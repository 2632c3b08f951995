import math

import pytest

from otlpmapping.sketchtest import (
    exponential_cdf,
    exponential_q,
    normal_cdf,
    normal_q,
    truncate_cdf,
    truncate_q,
    u_quadratic_q,
    uniform_q,
)


def _assert_inverse(cdf, qf):
    for i in range(101):
        q = i / 100.0
        assert cdf(qf(q)) == pytest.approx(q, abs=1e-15)


@pytest.mark.parametrize("lam", [1 / 100.0, 1 / 200.0])
def test_exponential_quantile_cdf_inverses(lam):
    cdf = exponential_cdf(lam)
    qf = exponential_q(lam)
    _assert_inverse(cdf, qf)


@pytest.mark.parametrize("mu, sigma", [(0, 1), (-3, 10)])
def test_normal_quantile_cdf_inverses(mu, sigma):
    cdf = normal_cdf(mu, sigma)
    qf = normal_q(mu, sigma)
    _assert_inverse(cdf, qf)


def test_truncated_normal_quantile_cdf_inverses():
    cdf = truncate_cdf(-8, 8, normal_cdf(0, 1e-3))
    qf = truncate_q(-8, 8, normal_q(0, 1e-3), normal_cdf(0, 1e-3))
    _assert_inverse(cdf, qf)


def test_uniform_q():
    qf = uniform_q(2.0, 6.0)
    assert qf(0) == 2.0
    assert qf(0.5) == 4.0
    assert qf(1) == 6.0


def test_u_quadratic_q_endpoints_and_median():
    qf = u_quadratic_q(0.0, 1.0)
    assert qf(0) == pytest.approx(0.0, abs=1e-12)
    assert qf(0.5) == 0.5
    assert qf(1) == pytest.approx(1.0, abs=1e-12)


def test_truncate_q_extrema():
    qf = truncate_q(-8, 8, normal_q(0, 1), normal_cdf(0, 1))
    assert qf(0) == -8
    assert qf(1) == 8


def test_extreme_quantiles():
    assert exponential_q(1.0)(1) == math.inf
    assert normal_q(0, 1)(0) == -math.inf
    assert normal_q(0, 1)(1) == math.inf
    assert exponential_cdf(1.0)(-5) == 0.0
"""
Tests for the statistics of daily series.
"""

import numpy
import pytest
from scipy import stats as scipy_stats

from pymetgen.stats import lag1_autocorrelation, partition_rain, prob_ww_wd, rain_counts, skewness, std


class TestLag1Autocorrelation:

    def test_matches_pearson(self, rng):
        x = rng.normal(size=200)
        assert lag1_autocorrelation(x) == pytest.approx(numpy.corrcoef(x[1:], x[:-1])[0, 1])

    def test_constant_series_is_zero(self):
        assert lag1_autocorrelation(numpy.full(31, 4.2)) == 0.0

    @pytest.mark.parametrize("value", [0.1, 20.3, -3.7])
    def test_inexact_constant_is_zero(self, value):
        assert lag1_autocorrelation(numpy.full(30, value)) == 0.0

    def test_constant_lagged_copy_is_zero(self):
        assert lag1_autocorrelation([0.1] * 30 + [0.5]) == 0.0

    def test_short_series_is_zero(self):
        assert lag1_autocorrelation([1.0, 2.0]) == 0.0

    def test_trend(self):
        assert lag1_autocorrelation(numpy.arange(10.0)) == pytest.approx(1.0)

    def test_alternating(self):
        assert lag1_autocorrelation([1.0, -1.0] * 10) == pytest.approx(-1.0)


class TestSkewness:

    def test_matches_scipy(self, rng):
        x = rng.gamma(2.0, size=500)
        assert skewness(x) == pytest.approx(scipy_stats.skew(x, bias=True))

    def test_symmetric(self):
        assert skewness([1.0, 2.0, 3.0]) == pytest.approx(0.0)

    def test_constant_series_is_zero(self):
        assert skewness(numpy.ones(10)) == 0.0

    @pytest.mark.parametrize("value", [0.1, 20.3])
    def test_inexact_constant_is_zero(self, value):
        assert skewness(numpy.full(31, value)) == 0.0
        assert std(numpy.full(31, value)) == 0.0


def test_std_is_sample_std():
    assert std([1.0, 2.0, 3.0, 4.0]) == pytest.approx(numpy.std([1.0, 2.0, 3.0, 4.0], ddof=1))


class TestRainCounts:

    def test_counts(self):
        assert rain_counts([0.0, 1.0, 1.0, 0.0, 2.0]) == (3, 2, 1, 2)

    def test_probabilities(self):
        pww, pwd, pw = prob_ww_wd([0.0, 1.0, 1.0, 0.0, 2.0])
        assert pww == pytest.approx(1 / 3)
        assert pwd == pytest.approx(1.0)
        assert pw == pytest.approx(0.6)

    def test_dry_series(self):
        assert prob_ww_wd(numpy.zeros(30)) == (0.0, 0.0, 0.0)

    def test_partition_rain(self):
        year = 2021
        rain = numpy.zeros(365)
        first_days = numpy.cumsum([0, 31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30])
        rain[first_days] = 1.0

        totrain, pww, pwd = partition_rain(year, rain)
        assert totrain[0] == pytest.approx(12.0)
        assert totrain[1:] == pytest.approx(numpy.ones(12))
        assert pww == pytest.approx(numpy.zeros(13))
        # every month starts wet after a dry day, except the first day of the year
        assert pwd[0] == pytest.approx(11 / 353)
        assert pwd[1:] == pytest.approx(numpy.zeros(12))

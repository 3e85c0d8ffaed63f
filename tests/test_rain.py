"""
Tests for the rainfall generator.
"""

import numpy
import pytest

from conftest import rain_targets
from pymetgen import rain
from pymetgen.config import CalibrationConfig
from pymetgen.met import Met
from pymetgen.stats import partition_rain, prob_ww_wd


class TestWetDayFraction:

    def test_fraction(self):
        assert rain.wet_day_fraction(0.55, 0.20, bias=0.0) == pytest.approx(0.2 / 0.65)
        assert rain.wet_day_fraction(0.55, 0.20) == pytest.approx(0.2 / 0.65 + 0.033)

    def test_always_wet_chain(self):
        assert rain.wet_day_fraction(1.0, 0.0, bias=0.0) == 1.0


class TestWetDays:

    def test_amounts(self, rng):
        amounts, err, converged = rain.gen_wetdays(10, 250.0, 25.0, rng, CalibrationConfig(rain_max_attempts=200))
        assert amounts.shape == (10,)
        assert (amounts > 0).all()
        assert err == pytest.approx(100 * abs(amounts.sum() - 250.0) / 250.0)
        assert converged == (err <= 2.5)

    def test_no_wet_days(self, rng):
        amounts, err, converged = rain.gen_wetdays(0, 0.0, 0.0, rng)
        assert amounts.size == 0
        assert err == 0.0
        assert converged


class TestPlaceAmounts:

    def test_all_amounts_placed(self, rng):
        amounts = numpy.array([5.0, 4.0, 3.0, 2.0, 1.0])
        x = rain.place_amounts(30, amounts, 0.55, 0.20, 0.3, None, rng)
        assert x.size == 30
        assert numpy.count_nonzero(x) == 5
        assert sorted(x[x > 0]) == sorted(amounts)

    def test_wet_carry_keeps_order(self, rng):
        amounts = numpy.array([7.0, 3.0, 9.0])
        x = rain.place_amounts(31, amounts, 1.0, 0.0, 0.5, 2.5, rng)
        assert list(x[:3]) == [7.0, 3.0, 9.0]
        assert not x[3:].any()

    def test_dry_chain_gets_leftovers(self, rng):
        amounts = numpy.array([1.0, 8.0, 4.0])
        x = rain.place_amounts(28, amounts, 0.0, 0.0, 0.0, 0.0, rng)
        assert numpy.count_nonzero(x) == 3
        assert x.sum() == pytest.approx(13.0)


class TestRainMonth:

    def test_scenario(self, rng):
        month = rain.gen_rain_month(30, 250.0, 0.55, 0.20, None, rng)

        assert month.values.size == 30
        assert month.values.sum() == pytest.approx(month.amounts.sum())
        assert month.total_error == pytest.approx(100 * abs(month.amounts.sum() - 250.0) / 250.0)
        pww, pwd, _ = prob_ww_wd(month.values)
        expected_seq = max(100 * abs(pww - 0.55) / 0.55, 100 * abs(pwd - 0.20) / 0.20)
        assert month.sequence_error == pytest.approx(expected_seq)
        assert month.converged == (month.total_error <= 2.5 and month.sequence_error <= 5.0)

    def test_wet_day_count(self, rng):
        month = rain.gen_rain_month(30, 250.0, 0.55, 0.20, None, rng, CalibrationConfig(rain_max_attempts=10))
        assert month.amounts.size == int(30 * (0.2 / 0.65 + 0.033))

    def test_zero_total(self, rng):
        month = rain.gen_rain_month(30, 0.0, 0.55, 0.20, 3.0, rng)
        assert month.values.size == 30
        assert not month.values.any()


class TestGenerate:

    def test_full_year(self, fast_config):
        met = Met(2020, rain_targets())
        result = rain.generate(met, random_state=17, config=fast_config, verbose=False)

        assert result.values.size == 366
        assert (result.values >= 0).all()
        assert result.errors.size == 39
        totrain, pww, pwd = partition_rain(2020, result.values)
        assert result.est.totrain == pytest.approx(totrain)
        assert result.est.pww == pytest.approx(pww)
        assert result.est.pwd == pytest.approx(pwd)
        assert result.est.totrain[0] == pytest.approx(result.values.sum())

    def test_dry_month(self, fast_config):
        obs = rain_targets()
        obs.totrain[0] -= obs.totrain[6]
        obs.totrain[6] = 0.0
        result = rain.generate(Met(2021, obs), random_state=2, config=fast_config, verbose=False)

        june = result.values[151:181]
        assert june.size == 30
        assert not june.any()
        assert result.est.totrain[6] == 0.0

    def test_same_seed_same_values(self, fast_config):
        met = Met(2020, rain_targets())
        a = rain.generate(met, random_state=9, config=fast_config, verbose=False)
        b = rain.generate(met, random_state=9, config=fast_config, verbose=False)
        assert numpy.array_equal(a.values, b.values)

    def test_negative_seed_draws_fresh_entropy(self, fast_config):
        result = rain.generate(Met(2020, rain_targets()), random_state=-3, config=fast_config, verbose=False)
        assert result.values.size == 366

    def test_create_rain(self, summary):
        mets = rain.create_rain(summary)
        assert mets[1].obs.totrain[1] == pytest.approx(250.0)
        assert mets[1].obs.pwd[0] == pytest.approx(0.20)

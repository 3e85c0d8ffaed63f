"""
Pytest configuration and fixtures for pymetgen tests.
"""

import numpy
import pandas
import pytest

from pymetgen.config import CalibrationConfig
from pymetgen.met import Rain, Temp, Wind

MONTHS = numpy.arange(1, 13)


def _with_annual(monthly, annual):
    return numpy.concatenate([[annual], monthly])


def temp_targets(base: float) -> Temp:
    """a tropical-ish temperature climate with a mild seasonal swing"""
    mean = base + 1.5 * numpy.sin(2 * numpy.pi * (MONTHS - 3) / 12)
    return Temp(mean=_with_annual(mean, mean.mean()),
                sd=numpy.full(13, 1.5),
                rlag=numpy.full(13, 0.6),
                skew=numpy.full(13, 0.1))


def wind_targets() -> Wind:
    return Wind(mean=numpy.full(13, 2.0),
                sd=numpy.full(13, 0.8),
                rlag=numpy.full(13, 0.5))


def rain_targets() -> Rain:
    totrain = numpy.array([250, 180, 200, 220, 160, 120, 110, 130, 170, 240, 300, 280], dtype=float)
    return Rain(totrain=_with_annual(totrain, totrain.sum()),
                pww=numpy.full(13, 0.55),
                pwd=numpy.full(13, 0.20))


def make_summary(years=(2019, 2020), variables=("tmin", "tmax", "wind", "rain")) -> pandas.DataFrame:
    params = {"tmin": (temp_targets(22.0), "_tmin"),
              "tmax": (temp_targets(31.0), "_tmax"),
              "wind": (wind_targets(), "_wind"),
              "rain": (rain_targets(), "")}
    rows = []
    for year in years:
        row = {"year": year}
        for var in variables:
            param, suffix = params[var]
            row.update(zip(param.names(suffix), param.values()))
        rows.append(row)
    return pandas.DataFrame(rows)


@pytest.fixture
def fast_config() -> CalibrationConfig:
    """small attempt caps so whole years generate quickly"""
    return CalibrationConfig(max_attempts=30, rain_max_attempts=30, f_sample_size=2_000)


@pytest.fixture
def rng() -> numpy.random.Generator:
    return numpy.random.default_rng(1234)


@pytest.fixture
def summary() -> pandas.DataFrame:
    return make_summary()


@pytest.fixture
def observed_daily() -> pandas.DataFrame:
    """two complete years of plausible observed daily weather"""
    gen = numpy.random.default_rng(99)
    dates = pandas.date_range("2019-01-01", "2020-12-31", freq="D")
    n = len(dates)
    tmin = 22 + gen.normal(0, 1.2, n)
    wet = gen.random(n) < 0.35
    return pandas.DataFrame({"date": dates.strftime("%Y-%m-%d"),
                             "tmin": tmin.round(1),
                             "tmax": (tmin + 8 + gen.normal(0, 1.0, n)).round(1),
                             "wind": (1.5 + numpy.abs(gen.normal(0, 0.8, n))).round(1),
                             "rain": numpy.where(wet, gen.gamma(0.8, 12.0, n), 0.0).round(1)})

"""
daily air temperature (minimum or maximum) from monthly targets of mean, standard deviation, lag-1 autocorrelation and
skewness. each month is a lag-1 autoregression with skewed residuals, drawn repeatedly until its statistics fall within
the tolerance of the targets. a month starts from the last day of the month before.
"""

import logging
import math
import numpy
import pandas
from typing import NamedTuple, Union
from . import stats
from ._stats import skewed_dist
from ._utils import (best_of, check_errors, days_in_each_month, lag1_series, log_start, log_update, make_rng,
                     relative_error, summarize_by_month, threshold_for)
from .config import CalibrationConfig
from .met import Met, Temp, create_mets, statistic_errors

logger = logging.getLogger(__name__)


class MonthFit(NamedTuple):
    values: numpy.ndarray
    innovations: numpy.ndarray
    error: float
    converged: bool


def create_temp(summary: pandas.DataFrame, kw: str) -> list[Met]:
    """
    Args:
        summary: summary table with columns `mean_<kw>0` to `skew_<kw>12`
        kw: `tmin` or `tmax`
    """
    return create_mets(summary, Temp, f"_{kw}")


def month_error(x: numpy.ndarray, avg: float, sd: float, rlag: float, skew: float) -> float:
    """worst relative error (%) among mean, standard deviation, lag-1 autocorrelation and skewness"""
    return max(relative_error(stats.mean(x), avg),
               relative_error(stats.std(x), sd),
               relative_error(stats.lag1_autocorrelation(x), rlag),
               relative_error(stats.skewness(x), skew))


def generate_month(avg: float,
                   sd: float,
                   rlag: float,
                   skew: float,
                   n_days: int,
                   carry: float,
                   random_state: numpy.random.Generator,
                   config: CalibrationConfig = None) -> MonthFit:
    """
    generate the daily temperatures of one month

    Args:
        avg: target mean
        sd: target standard deviation
        rlag: target lag-1 autocorrelation
        skew: target skewness
        n_days: number of days in the month
        carry: temperature on the day before the first day
        random_state: random source
        config: calibration settings

    Returns:
        the best draw, its residuals, its worst relative error and whether that error is within tolerance
    """
    config = config or CalibrationConfig()
    sde = math.sqrt(max(0.0, sd ** 2 * (1 - rlag ** 2)))
    dist = skewed_dist(0.0, sde, skew, random_state,
                       cutoff=config.skew_cutoff, df2=config.f_df2, sample_size=config.f_sample_size)

    def sample():
        e = dist.rvs(size=n_days, random_state=random_state)
        x = lag1_series(e, avg, rlag, carry)
        return (x, e), month_error(x, avg, sd, rlag, skew)

    (x, e), err, converged = best_of(sample, config.max_attempts, config.tolerance)
    return MonthFit(x, e, err, converged)


def generate(temp: Met,
             random_state: Union[int, numpy.random.SeedSequence, numpy.random.Generator] = None,
             config: CalibrationConfig = None,
             verbose: bool = True) -> Met:
    """
    generate a year of daily temperatures

    Args:
        temp: observed `Met` with `Temp` targets
        random_state: seed or random source; `None` or a negative seed draws fresh entropy
        config: calibration settings
        verbose: log targets, thresholds and errors of the annual statistics

    Returns:
        a new, calibrated `Met`
    """
    config = config or CalibrationConfig()
    rng = make_rng(random_state)
    year, obs = temp.year, temp.obs

    tgt = obs.annual()
    thd = [*config.temp_thresholds, threshold_for(obs.rlag[0]), threshold_for(obs.skew[0])]
    if verbose:
        log_start(year, tgt, thd)

    values, innovations = [], []
    carry = obs.mean[0]
    for i, n_days in enumerate(days_in_each_month(year), start=1):
        fit = generate_month(obs.mean[i], obs.sd[i], obs.rlag[i], obs.skew[i], n_days, carry, rng, config)
        if not fit.converged:
            logger.debug("%d month %d: best error %.2f%% after %d attempts", year, i, fit.error, config.max_attempts)
        values.append(fit.values)
        innovations.append(fit.innovations)
        carry = fit.values[-1]

    data = numpy.concatenate(values)
    est = Temp(mean=summarize_by_month(data, year, stats.mean),
               sd=summarize_by_month(data, year, stats.std),
               rlag=summarize_by_month(data, year, stats.lag1_autocorrelation),
               skew=summarize_by_month(data, year, stats.skewness))

    ok, annual_errors, _ = check_errors(thd, tgt, est.annual(), config.pass_quota)
    if verbose:
        log_update(ok, annual_errors)

    return temp.calibrated(est, statistic_errors(obs, est), data, ok, numpy.concatenate(innovations))

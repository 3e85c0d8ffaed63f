import logging
import numpy
import pandas
from typing import NamedTuple, Union
from . import stats
from ._stats import weibull_dist
from ._utils import (best_of, check_errors, days_in_each_month, lag1_series, log_start, log_update, make_rng,
                     relative_error, summarize_by_month)
from .config import CalibrationConfig
from .met import Met, Wind, create_mets, statistic_errors

logger = logging.getLogger(__name__)


class MonthFit(NamedTuple):
    values: numpy.ndarray
    innovations: numpy.ndarray
    error: float
    converged: bool


def create_wind(summary: pandas.DataFrame) -> list[Met]:
    return create_mets(summary, Wind, "_wind")


def month_error(x: numpy.ndarray, avg: float, sd: float, rlag: float) -> float:
    return max(relative_error(stats.mean(x), avg),
               relative_error(stats.std(x), sd),
               relative_error(stats.lag1_autocorrelation(x), rlag))


def generate_month(avg: float,
                   sd: float,
                   rlag: float,
                   n_days: int,
                   carry: float,
                   random_state: numpy.random.Generator,
                   config: CalibrationConfig = None) -> MonthFit:
    """
    generate the daily wind speeds of one month. the autoregression residuals are Weibull values (fitted to the mean
    and the autocorrelation-corrected standard deviation) minus the mean, so they can be negative. wind speed never
    drops below `config.wind_floor`.
    """
    config = config or CalibrationConfig()
    dist = weibull_dist(avg, sd, rlag)

    def sample():
        e = dist.rvs(size=n_days, random_state=random_state) - avg
        x = lag1_series(e, avg, rlag, carry, floor=config.wind_floor)
        return (x, e), month_error(x, avg, sd, rlag)

    (x, e), err, converged = best_of(sample, config.max_attempts, config.tolerance)
    return MonthFit(x, e, err, converged)


def generate(wind: Met,
             random_state: Union[int, numpy.random.SeedSequence, numpy.random.Generator] = None,
             config: CalibrationConfig = None,
             verbose: bool = True) -> Met:
    """
    generate a year of daily wind speeds

    Args:
        wind: observed `Met` with `Wind` targets
        random_state: seed or random source; `None` or a negative seed draws fresh entropy
        config: calibration settings
        verbose: log targets, thresholds and errors of the annual statistics

    Returns:
        a new, calibrated `Met`
    """
    config = config or CalibrationConfig()
    rng = make_rng(random_state)
    year, obs = wind.year, wind.obs

    tgt = obs.annual()
    thd = list(config.wind_thresholds)
    if verbose:
        log_start(year, tgt, thd)

    values, innovations = [], []
    carry = obs.mean[0]
    for i, n_days in enumerate(days_in_each_month(year), start=1):
        fit = generate_month(obs.mean[i], obs.sd[i], obs.rlag[i], n_days, carry, rng, config)
        if not fit.converged:
            logger.debug("%d month %d: best error %.2f%% after %d attempts", year, i, fit.error, config.max_attempts)
        values.append(fit.values)
        innovations.append(fit.innovations)
        carry = fit.values[-1]

    data = numpy.concatenate(values)
    est = Wind(mean=summarize_by_month(data, year, stats.mean),
               sd=summarize_by_month(data, year, stats.std),
               rlag=summarize_by_month(data, year, stats.lag1_autocorrelation))

    ok, annual_errors, _ = check_errors(thd, tgt, est.annual(), config.pass_quota)
    if verbose:
        log_update(ok, annual_errors)

    return wind.calibrated(est, statistic_errors(obs, est), data, ok, numpy.concatenate(innovations))

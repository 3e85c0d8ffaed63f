"""
daily rainfall from monthly targets of total rain and of the wet/dry transition probabilities `pww` (wet day after a
wet day) and `pwd` (wet day after a dry day).

each month is built in two phases:

1. the number of wet days is worked out from `pww` and `pwd`, and that many gamma distributed amounts are drawn until
    their sum is close to the monthly total.
2. a two-state Markov chain decides which days are wet, and the amounts are placed on the wet days in order. the
    placement is repeated until the transition probabilities of the month are close to their targets.
"""

import logging
import math
import numpy
import pandas
from typing import NamedTuple, Optional, Union
from .stats import partition_rain, prob_ww_wd
from ._stats import gamma_params, get_dist_func
from ._utils import best_of, check_errors, days_in_each_month, log_start, log_update, make_rng, relative_error
from .config import CalibrationConfig
from .met import Met, Rain, create_mets, statistic_errors

logger = logging.getLogger(__name__)


class RainMonth(NamedTuple):
    values: numpy.ndarray
    amounts: numpy.ndarray
    total_error: float
    sequence_error: float
    converged: bool


def create_rain(summary: pandas.DataFrame) -> list[Met]:
    return create_mets(summary, Rain)


def wet_day_fraction(pww: float, pwd: float, bias: float = 0.033) -> float:
    """long-run fraction of wet days of the Markov chain, plus an empirical `bias`"""
    d = 1 - pww + pwd
    pw = 1.0 if math.isclose(d, 0.0, abs_tol=1e-12) else pwd / d
    return pw + bias


def sequence_error(x: numpy.ndarray, pww: float, pwd: float) -> float:
    est_pww, est_pwd, _ = prob_ww_wd(x)
    return max(relative_error(est_pww, pww), relative_error(est_pwd, pwd))


def gen_wetdays(n_wet: int,
                totrain: float,
                avg: float,
                random_state: numpy.random.Generator,
                config: CalibrationConfig = None) -> tuple[numpy.ndarray, float, bool]:
    """
    draw the rain amounts of the wet days of one month

    Args:
        n_wet: number of wet days
        totrain: target total rain of the month
        avg: mean rain per wet day
        random_state: random source
        config: calibration settings

    Returns:
        `(amounts, error, converged)` where `error` is the relative error (%) of the sum of `amounts` against `totrain`
    """
    config = config or CalibrationConfig()
    if n_wet == 0 or math.isclose(avg, 0.0, abs_tol=1e-12):
        return numpy.zeros(n_wet), relative_error(0.0, totrain), math.isclose(totrain, 0.0, abs_tol=1e-12)

    gamma = get_dist_func("gamma")

    def sample():
        k, theta = gamma_params(avg, random_state, loc=config.gev_loc, scale=config.gev_scale, shape=config.gev_shape)
        x = gamma.rvs(k, scale=theta, size=n_wet, random_state=random_state)
        return x, relative_error(x.sum(), totrain)

    return best_of(sample, config.rain_max_attempts, config.tolerance)


def place_amounts(n_days: int,
                  amounts: numpy.ndarray,
                  pww: float,
                  pwd: float,
                  pw: float,
                  rain0: Optional[float],
                  random_state: numpy.random.Generator) -> numpy.ndarray:
    """
    run the wet/dry Markov chain for one month and put `amounts` on its wet days

    Args:
        n_days: number of days in the month
        amounts: rain amounts, placed in order on wet days
        pww: probability of a wet day after a wet day
        pwd: probability of a wet day after a dry day
        pw: probability of any day being wet, used for the day before the month when `rain0` is `None`
        rain0: rain on the last day of the previous month, or `None` for the first month
        random_state: random source

    Returns:
        daily rain. wet days beyond the last amount stay dry. amounts left over when the chain has too few wet days
            go to randomly chosen dry days, largest amounts first
    """
    x = numpy.zeros(n_days)
    wet = (random_state.random() <= pw) if rain0 is None else (rain0 > 0)
    ix = 0
    for i, r in enumerate(random_state.random(n_days).tolist()):
        wet = r <= (pww if wet else pwd)
        if wet and ix < amounts.size:
            x[i] = amounts[ix]
            ix += 1

    leftover = amounts[ix:]
    if leftover.size > 0:
        dry = numpy.flatnonzero(x == 0)
        n = min(dry.size, leftover.size)
        days = random_state.choice(dry, size=n, replace=False)
        x[days] = numpy.sort(leftover)[::-1][:n]
    return x


def distribute_wetdays(n_days: int,
                       amounts: numpy.ndarray,
                       pww: float,
                       pwd: float,
                       pw: float,
                       rain0: Optional[float],
                       random_state: numpy.random.Generator,
                       config: CalibrationConfig = None) -> tuple[numpy.ndarray, float, bool]:
    """
    repeat `place_amounts` until the month's `pww` and `pwd` are within `config.rain_sequence_tolerance`

    Returns:
        `(daily rain, error, converged)`
    """
    config = config or CalibrationConfig()

    def sample():
        x = place_amounts(n_days, amounts, pww, pwd, pw, rain0, random_state)
        return x, sequence_error(x, pww, pwd)

    return best_of(sample, config.rain_max_attempts, config.rain_sequence_tolerance)


def gen_rain_month(n_days: int,
                   totrain: float,
                   pww: float,
                   pwd: float,
                   rain0: Optional[float],
                   random_state: numpy.random.Generator,
                   config: CalibrationConfig = None) -> RainMonth:
    """
    generate the daily rain of one month

    Args:
        n_days: number of days in the month
        totrain: target total rain
        pww: target probability of a wet day after a wet day
        pwd: target probability of a wet day after a dry day
        rain0: rain on the last day of the previous month, or `None` for the first month
        random_state: random source
        config: calibration settings
    """
    config = config or CalibrationConfig()
    if not totrain > 0:
        x = numpy.zeros(n_days)
        return RainMonth(x, numpy.zeros(0), 0.0, sequence_error(x, pww, pwd), True)

    pw = wet_day_fraction(pww, pwd, config.wet_day_bias)
    n_wet = min(n_days, int(math.floor(n_days * pw)))
    avg = totrain / n_wet if n_wet > 0 else 0.0  # a month may be completely rain-free

    amounts, total_err, total_ok = gen_wetdays(n_wet, totrain, avg, random_state, config)
    x, seq_err, seq_ok = distribute_wetdays(n_days, amounts, pww, pwd, pw, rain0, random_state, config)
    return RainMonth(x, amounts, total_err, seq_err, total_ok and seq_ok)


def generate(rain: Met,
             random_state: Union[int, numpy.random.SeedSequence, numpy.random.Generator] = None,
             config: CalibrationConfig = None,
             verbose: bool = True) -> Met:
    """
    generate a year of daily rainfall

    Args:
        rain: observed `Met` with `Rain` targets
        random_state: seed or random source; `None` or a negative seed draws fresh entropy
        config: calibration settings
        verbose: log targets, thresholds and errors of the annual statistics

    Returns:
        a new, calibrated `Met`
    """
    config = config or CalibrationConfig()
    rng = make_rng(random_state)
    year, obs = rain.year, rain.obs

    tgt = obs.annual()
    thd = list(config.rain_thresholds)
    if verbose:
        log_start(year, tgt, thd)

    months = []
    for i, n_days in enumerate(days_in_each_month(year), start=1):
        rain0 = months[-1].values[-1] if months else None
        month = gen_rain_month(n_days, obs.totrain[i], obs.pww[i], obs.pwd[i], rain0, rng, config)
        if not month.converged:
            logger.debug("%d month %d: total error %.2f%%, sequence error %.2f%%",
                         year, i, month.total_error, month.sequence_error)
        months.append(month)

    data = numpy.concatenate([m.values for m in months])
    totrain, pww, pwd = partition_rain(year, data)
    est = Rain(totrain=totrain, pww=pww, pwd=pwd)

    ok, annual_errors, _ = check_errors(thd, tgt, est.annual(), config.pass_quota)
    if verbose:
        log_update(ok, annual_errors)

    return rain.calibrated(est, statistic_errors(obs, est), data, ok)

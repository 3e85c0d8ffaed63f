"""
goodness-of-fit metrics between observed and estimated values. each metric takes `(obs, est)` and returns a float,
`nan` when the metric is undefined for the data (e.g. zero observed spread).
"""

import numpy
from typing import Sequence


def _pair(obs: Sequence[float], est: Sequence[float]) -> tuple[numpy.ndarray, numpy.ndarray]:
    obs = numpy.asarray(obs, dtype=float)
    est = numpy.asarray(est, dtype=float)
    assert obs.shape == est.shape, "'obs' and 'est' should have the same shape"
    keep = numpy.isfinite(obs) & numpy.isfinite(est)
    return obs[keep], est[keep]


def _ratio(num: float, den: float) -> float:
    return float(num / den) if den != 0 else numpy.nan


def nmae(obs: Sequence[float], est: Sequence[float]) -> float:
    """normalized mean absolute error (%)"""
    obs, est = _pair(obs, est)
    if obs.size == 0:
        return numpy.nan
    return 100 * _ratio(numpy.mean(numpy.abs(est - obs)), numpy.mean(numpy.abs(obs)))


def nmbe(obs: Sequence[float], est: Sequence[float]) -> float:
    """normalized mean bias error (%); positive when `est` overestimates"""
    obs, est = _pair(obs, est)
    if obs.size == 0:
        return numpy.nan
    return 100 * _ratio(numpy.mean(est - obs), numpy.mean(obs))


def kge(obs: Sequence[float], est: Sequence[float]) -> float:
    """Kling-Gupta efficiency; 1 is a perfect fit"""
    obs, est = _pair(obs, est)
    if obs.size < 2:
        return numpy.nan
    so, se = obs.std(), est.std()
    if so == 0 or se == 0:
        return numpy.nan
    r = numpy.corrcoef(obs, est)[0, 1]
    alpha = se / so
    beta = _ratio(est.mean(), obs.mean())
    return float(1 - numpy.sqrt((r - 1) ** 2 + (alpha - 1) ** 2 + (beta - 1) ** 2))


def dr(obs: Sequence[float], est: Sequence[float]) -> float:
    """Willmott's refined index of agreement, between -1 and 1"""
    obs, est = _pair(obs, est)
    if obs.size == 0:
        return numpy.nan
    c = 2
    a = numpy.sum(numpy.abs(est - obs))
    b = c * numpy.sum(numpy.abs(obs - obs.mean()))
    if a == 0:
        return 1.0
    if a <= b:
        return float(1 - a / b)
    return float(b / a - 1)


METRICS = (nmae, nmbe, kge, dr)

import numpy
from typing import Sequence
from ._utils import partition_by_month


def _is_constant(data: numpy.ndarray) -> bool:
    # a spread at rounding level counts as no spread
    return data.size == 0 or numpy.ptp(data) <= 1e-9 * max(1.0, float(numpy.abs(data).max()))


def lag1_autocorrelation(data: Sequence[float]) -> float:
    """
    Pearson correlation between each day and the day before. returns `0` when it is undefined (either lagged copy is
    constant, or fewer than three values).
    """
    data = numpy.asarray(data, dtype=float)
    if data.size < 3:
        return 0.0
    head, tail = data[:-1], data[1:]
    if _is_constant(head) or _is_constant(tail):
        return 0.0
    a = head - head.mean()
    b = tail - tail.mean()
    den = numpy.sqrt(numpy.dot(a, a) * numpy.dot(b, b))
    if den == 0 or not numpy.isfinite(den):
        return 0.0
    return float(numpy.dot(a, b) / den)


def skewness(data: Sequence[float]) -> float:
    """third standardized moment (population form); `0` for a constant series"""
    data = numpy.asarray(data, dtype=float)
    if _is_constant(data):
        return 0.0
    d = data - data.mean()
    m2 = numpy.mean(d ** 2)
    if m2 == 0:
        return 0.0
    return float(numpy.mean(d ** 3) / m2 ** 1.5)


def std(data: Sequence[float]) -> float:
    data = numpy.asarray(data, dtype=float)
    if data.size < 2 or _is_constant(data):
        return 0.0
    return float(data.std(ddof=1))


def mean(data: Sequence[float]) -> float:
    return float(numpy.mean(data))


def rain_counts(amounts: Sequence[float]) -> tuple[int, int, int, int]:
    """
    count wet and dry days and the day-to-day transitions into a wet day

    :param amounts: daily rainfall
    :return: `(n_wet, n_dry, n_wet_wet, n_wet_dry)` where `n_wet_wet` counts wet days following a wet day and
        `n_wet_dry` counts wet days following a dry day
    """
    wet = numpy.asarray(amounts, dtype=float) > 0
    n_wet = int(wet.sum())
    n_ww = int(numpy.count_nonzero(wet[:-1] & wet[1:]))
    n_wd = int(numpy.count_nonzero(~wet[:-1] & wet[1:]))
    return n_wet, wet.size - n_wet, n_ww, n_wd


def prob_ww_wd(amounts: Sequence[float]) -> tuple[float, float, float]:
    """
    transition probabilities of a daily rainfall series

    Returns:
        `(pww, pwd, pw)`: probability of a wet day after a wet day, of a wet day after a dry day, and of any day
            being wet
    """
    n_wet, n_dry, n_ww, n_wd = rain_counts(amounts)
    pww = n_ww / n_wet if n_wet > 0 else 0.0
    pwd = n_wd / n_dry if n_dry > 0 else 0.0
    pw = n_wet / (n_wet + n_dry) if (n_wet + n_dry) > 0 else 0.0
    return pww, pwd, pw


def partition_rain(year: int, amounts: Sequence[float]) -> tuple[numpy.ndarray, numpy.ndarray, numpy.ndarray]:
    """
    annual and monthly rainfall statistics of a daily series

    Returns:
        `(totrain, pww, pwd)`, each of length 13 with the annual value at index 0
    """
    amounts = numpy.asarray(amounts, dtype=float)
    months = partition_by_month(amounts, year)
    totrain = [amounts.sum()] + [m.sum() for m in months]
    probs = [prob_ww_wd(amounts)] + [prob_ww_wd(m) for m in months]
    pww = [p[0] for p in probs]
    pwd = [p[1] for p in probs]
    return numpy.array(totrain), numpy.array(pww), numpy.array(pwd)

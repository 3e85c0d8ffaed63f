import calendar
import logging
import numpy
import pandas
from pathlib import Path
from typing import Callable, Optional, Sequence, Union

logger = logging.getLogger(__name__)


def days_in_each_month(year: int) -> list[int]:
    """
    number of days in each calendar month of `year`

    :param year: calendar year
    :return: list of 12 month lengths, January first
    """
    return [calendar.monthrange(year, month)[1] for month in range(1, 13)]


def days_in_year(year: int) -> int:
    return 366 if calendar.isleap(year) else 365


def partition_by_month(data: Sequence[float], year: int) -> list[numpy.ndarray]:
    """
    split a daily series covering `year` into 12 monthly slices

    :param data: daily values for the whole year
    :param year: calendar year of `data`
    :return: list of 12 arrays
    """
    data = numpy.asarray(data, dtype=float)
    assert data.size == days_in_year(year), f"expected {days_in_year(year)} daily values for {year}"
    ends = numpy.cumsum(days_in_each_month(year))
    return numpy.split(data, ends[:-1])


def summarize_by_month(data: Sequence[float],
                       year: int,
                       func: Callable,
                       annual: bool = True) -> numpy.ndarray:
    """
    apply `func` to each month of a daily series. when `annual` is `True`, the value for the whole year is placed at
    index 0 so that months sit at indices 1 to 12.
    """
    data = numpy.asarray(data, dtype=float)
    vals = [func(month) for month in partition_by_month(data, year)]
    if annual:
        vals.insert(0, func(data))
    return numpy.array(vals, dtype=float)


def relative_error(est: float, tgt: float, floor: float = 0.01) -> float:
    """percentage error of `est` relative to `tgt`. the denominator is floored so zero targets stay finite"""
    return 100 * abs(est - tgt) / max(abs(tgt), floor)


def check_errors(thd: Sequence[float],
                 tgt: Sequence[float],
                 est: Sequence[float],
                 pass_quota: float = 0.99) -> tuple[bool, numpy.ndarray, numpy.ndarray]:
    """
    compare estimated statistics against their targets

    Args:
        thd: threshold (%) allowed for each statistic
        tgt: target statistics
        est: estimated statistics
        pass_quota: fraction of statistics that must be at or below their threshold

    Returns:
        `(ok, errors, deltas)` where `errors` is the relative error (%) of each statistic and `deltas` the relative
            excess (%) of each error over its threshold
    """
    assert 1 >= pass_quota > 0, "'pass_quota' should be between 0 and 1"
    thd = numpy.asarray(thd, dtype=float)
    errors = numpy.array([relative_error(e, t) for e, t in zip(est, tgt)])
    deltas = 100 * (errors - thd) / thd
    ok = numpy.count_nonzero(deltas <= 0) / deltas.size >= pass_quota
    return bool(ok), errors, deltas


def best_of(sample: Callable[[], tuple], n_attempts: int, tolerance: float) -> tuple:
    """
    bounded random search. `sample` is called up to `n_attempts` times and must return `(candidate, error)`. the
    candidate with the lowest error is kept, and the search stops once that error is at or below `tolerance`.

    Returns:
        `(candidate, error, converged)`
    """
    assert n_attempts > 0, "'n_attempts' should be positive"
    best, min_err = None, numpy.inf
    for _ in range(n_attempts):
        candidate, err = sample()
        if best is None or err < min_err:
            best, min_err = candidate, err
        if min_err <= tolerance:
            break
    return best, min_err, bool(min_err <= tolerance)


def lag1_series(innovations: Sequence[float],
                avg: float,
                rlag: float,
                carry: float,
                floor: float = None) -> numpy.ndarray:
    """
    lag-1 autoregression `x[i] = c + rlag * x[i - 1] + e[i]` with `c = avg * (1 - rlag)`

    Args:
        innovations: random residuals `e`, one per day
        avg: mean of the series
        rlag: lag-1 autocorrelation
        carry: value of the day before the first day
        floor: when given, every value is raised to at least `floor` before it feeds the next day

    Returns:
        the daily series
    """
    c = avg * (1 - rlag)
    x = numpy.empty(len(innovations))
    prev = carry
    for i, e in enumerate(numpy.asarray(innovations, dtype=float).tolist()):
        v = c + rlag * prev + e
        if floor is not None:
            v = max(floor, v)
        x[i] = prev = v
    return x


def resolve_seed(seed: int = None) -> int:
    """a concrete seed for the run. `None` or a negative seed is replaced by fresh entropy"""
    if seed is None or seed < 0:
        return int(numpy.random.SeedSequence().entropy % 2 ** 63)  # fits a toml integer
    return int(seed)


def make_rng(random_state=None) -> numpy.random.Generator:
    """random source from a seed, `SeedSequence` or `Generator`. a negative integer seed draws fresh entropy"""
    if isinstance(random_state, (int, numpy.integer)) and random_state < 0:
        random_state = None
    return numpy.random.default_rng(random_state)


def threshold_for(target: float, scale: float = 10.0) -> float:
    # lag-1 and skew targets are small numbers, so their tolerance widens as they shrink
    return scale / max(abs(target), 0.01)


def format_row(prefix: str, values: Sequence[float]) -> str:
    return prefix + " ".join("{:8.2f}".format(v) for v in numpy.ravel(values))


def log_start(year: int, tgt: Sequence[float], thd: Sequence[float]) -> None:
    logger.info("Year: %d", year)
    logger.info(format_row("TGT: ", tgt))
    logger.info(format_row("THD: ", thd))


def log_update(ok: bool, errors: Sequence[float]) -> None:
    logger.info(format_row("ERR: ", errors))
    logger.info("** success **" if ok else "~ above threshold ~")


def read_table(path: Union[str, Path]) -> tuple[pandas.DataFrame, Optional[float]]:
    """
    read a csv file whose first line may hold the site latitude on its own. lines starting with `#` are comments.

    :return: `(table, latitude)`, latitude is `None` when the first line is the header
    """
    with open(path, "r") as f:
        first = f.readline().strip().rstrip(",")
        try:
            lat = float(first)
        except ValueError:
            lat = None
            f.seek(0)
        table = pandas.read_csv(f, comment="#", skip_blank_lines=True)
    return table, lat


def calc_exceedance(data: pandas.Series) -> pandas.DataFrame:
    """
    Calculate empirical probability of being equalled or exceeded

    :param data: pandas Series with data
    :return: dataframe with columns `val`, `len`, and `prob`
    """
    exceedance = data.value_counts().reset_index()
    exceedance.columns = ["val", "len"]
    exceedance = exceedance.sort_values("val", ascending=False)
    exceedance.len = exceedance.len.cumsum()
    exceedance["prob"] = exceedance.len.div(len(data) + 1)
    return exceedance

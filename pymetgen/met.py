import numpy
import pandas
from typing import Sequence
from ._utils import days_in_year, relative_error

N_STATS = 13
"""one annual value followed by 12 monthly values"""


class MetParam:
    """
    statistics of one weather variable for one year. every field is an array of 13 values: index 0 is the annual
    value and indices 1 to 12 are January to December.
    """

    fields: tuple[str, ...] = ()
    """names of the statistics, in the order they are reported"""

    def __init__(self, **stats: Sequence[float]):
        unknown = set(stats) - set(self.fields)
        if unknown:
            raise ValueError(f"{type(self).__name__} has no statistics {sorted(unknown)}")
        for field in self.fields:
            vals = numpy.asarray(stats.get(field, numpy.full(N_STATS, numpy.nan)), dtype=float)
            assert vals.shape == (N_STATS,), f"'{field}' should have {N_STATS} values"
            setattr(self, field, vals)

    def names(self, suffix: str = "") -> list[str]:
        """flattened statistic names, e.g. `mean_tmin0` to `mean_tmin12`"""
        return [f"{field}{suffix}{i}" for field in self.fields for i in range(N_STATS)]

    def values(self) -> numpy.ndarray:
        """flattened statistic values in the order of `names`"""
        return numpy.concatenate([getattr(self, field) for field in self.fields])

    def annual(self) -> numpy.ndarray:
        return numpy.array([getattr(self, field)[0] for field in self.fields])

    def month(self, i: int) -> dict[str, float]:
        """statistics for month `i` (1 to 12), or the year when `i` is 0"""
        return {field: float(getattr(self, field)[i]) for field in self.fields}

    @classmethod
    def from_values(cls, values: Sequence[float]) -> "MetParam":
        values = numpy.asarray(values, dtype=float)
        return cls(**{field: values[i * N_STATS:(i + 1) * N_STATS] for i, field in enumerate(cls.fields)})

    def __eq__(self, other):
        return type(self) is type(other) and numpy.array_equal(self.values(), other.values(), equal_nan=True)

    def __repr__(self):
        return f"{type(self).__name__}({', '.join(self.fields)})"


class Temp(MetParam):
    """daily air temperature statistics: mean, standard deviation, lag-1 autocorrelation and skewness"""
    fields = ("mean", "sd", "rlag", "skew")


class Wind(MetParam):
    """daily wind speed statistics: mean, standard deviation and lag-1 autocorrelation"""
    fields = ("mean", "sd", "rlag")


class Rain(MetParam):
    """rainfall statistics: total rain, probability of wet after wet, probability of wet after dry"""
    fields = ("totrain", "pww", "pwd")


VARIABLES = ("tmin", "tmax", "wind", "rain")
"""supported weather variables, in the order they are generated"""

PARAMS = {"tmin": (Temp, "_tmin"),
          "tmax": (Temp, "_tmax"),
          "wind": (Wind, "_wind"),
          "rain": (Rain, "")}
"""statistics type and column-name suffix of each variable"""


class Met:
    """
    target and achieved statistics of one weather variable for one year, together with the generated daily values.
    an observed `Met` (only `obs` set) is never modified; generators return a new, calibrated `Met`.
    """

    def __init__(self,
                 year: int,
                 obs: MetParam,
                 est: MetParam = None,
                 errors: Sequence[float] = None,
                 values: Sequence[float] = None,
                 ok: bool = None,
                 innovations: Sequence[float] = None):
        self.year = int(year)
        """calendar year"""

        self.obs = obs
        """target statistics"""

        self.est = est
        """statistics of the generated daily values"""

        self.errors = None if errors is None else numpy.asarray(errors, dtype=float)
        """relative error (%) of every statistic in `est` against `obs`, in the order of `obs.names()`"""

        self.values = None if values is None else numpy.asarray(values, dtype=float)
        """generated daily values for the whole year"""

        self.ok = ok
        """whether the annual statistics met their thresholds"""

        self.innovations = None if innovations is None else numpy.asarray(innovations, dtype=float)
        """random residuals of the autoregression (temperature and wind only)"""

        if self.values is not None:
            assert self.values.size == days_in_year(self.year), \
                f"{self.year} needs {days_in_year(self.year)} daily values, got {self.values.size}"

    @property
    def is_calibrated(self) -> bool:
        return self.values is not None

    def calibrated(self,
                   est: MetParam,
                   errors: Sequence[float],
                   values: Sequence[float],
                   ok: bool,
                   innovations: Sequence[float] = None) -> "Met":
        return Met(self.year, self.obs, est=est, errors=errors, values=values, ok=ok, innovations=innovations)

    def with_values(self, values: Sequence[float]) -> "Met":
        """copy of this `Met` with its daily values replaced"""
        return Met(self.year, self.obs, est=self.est, errors=self.errors, values=values, ok=self.ok,
                   innovations=self.innovations)

    def __repr__(self):
        state = "calibrated" if self.is_calibrated else "observed"
        return f"Met({type(self.obs).__name__}, year={self.year}, {state})"


def statistic_errors(obs: MetParam, est: MetParam) -> numpy.ndarray:
    """relative error (%) of every statistic in `est` against `obs`, annual then monthly for each field"""
    return numpy.array([relative_error(e, o) for e, o in zip(est.values(), obs.values())])


def create_mets(summary: pandas.DataFrame, param_cls: type, suffix: str = "") -> list[Met]:
    """
    read target statistics from a summary table with one row per year

    Args:
        summary: table with a `year` column and columns named `<field><suffix><i>` for `i` in 0 to 12, e.g.
            `mean_tmin0` or `totrain5`
        param_cls: one of `Temp`, `Wind` or `Rain`
        suffix: variable suffix of the column names, e.g. `_tmin`

    Returns:
        one observed `Met` per year, in calendar order
    """
    mets = []
    for year, group in summary.groupby("year", sort=True):
        row = group.iloc[0]
        stats = {}
        for field in param_cls.fields:
            cols = [f"{field}{suffix}{i}" for i in range(N_STATS)]
            missing = [c for c in cols if c not in row.index]
            if missing:
                raise KeyError(f"summary is missing columns {missing}")
            stats[field] = row[cols].to_numpy(dtype=float)
        mets.append(Met(year=int(year), obs=param_cls(**stats)))
    return mets

import numpy
import pandas
from scipy import interpolate
from typing import Callable, Union
from . import stats
from ._utils import calc_exceedance, days_in_year, summarize_by_month
from .met import PARAMS, VARIABLES, Temp, Wind


def _floored_std(data):
    return max(0.01, stats.std(data))


def collect_stats(var: str, year: int, data: numpy.ndarray):
    """annual and monthly statistics of one year of daily values of `var`"""
    param_cls, _ = PARAMS[var]
    if param_cls is Temp:
        return Temp(mean=summarize_by_month(data, year, stats.mean),
                    sd=summarize_by_month(data, year, _floored_std),
                    rlag=summarize_by_month(data, year, stats.lag1_autocorrelation),
                    skew=summarize_by_month(data, year, stats.skewness))
    if param_cls is Wind:
        return Wind(mean=summarize_by_month(data, year, stats.mean),
                    sd=summarize_by_month(data, year, _floored_std),
                    rlag=summarize_by_month(data, year, stats.lag1_autocorrelation))
    totrain, pww, pwd = stats.partition_rain(year, data)
    return param_cls(totrain=totrain, pww=pww, pwd=pwd)


class Weather:
    """
    class that holds daily weather data in long format and provides methods for summarizing it. this class is
    inherited by [`ObservedWeather`](./observed_weather.html) and [`SyntheticWeather`](./synthetic_weather.html).
    """

    def __init__(self, data: pandas.DataFrame):
        self.data = data
        """
        `DataFrame` with columns `year`, `month`, `day`, `doy` and one column for each weather variable (`tmin`, `tmax`,
        `wind`, `rain`), one row per day
        """

        self.variables = [var for var in VARIABLES if var in data.columns]
        """weather variables present in `data`"""

        self.years = sorted(int(y) for y in data["year"].unique())
        """calendar years in `data`"""

    @staticmethod
    def _group_keys(group_by: str) -> list[str]:
        assert group_by in ("year", "month"), "'group_by' should be 'year' or 'month'"
        return ["year"] if group_by == "year" else ["year", "month"]

    def get_summary(self,
                    funcs: Union[str, list[str], Callable, list[Callable]] = "mean",
                    group_by: str = "month") -> pandas.DataFrame:
        """
        summarize each weather variable

        Args:
            funcs: the functions to use for summarizing. default is `mean`. can also be a list of functions.
            group_by: `year` or `month`

        Returns:
            `DataFrame`: summary data
        """
        if not isinstance(funcs, list):
            funcs = [funcs]
        return self.data.groupby(self._group_keys(group_by))[self.variables].agg(funcs)

    def get_wet_days(self, group_by: str = "month") -> pandas.Series:
        """number of days with rain in each year or month"""
        assert "rain" in self.variables, "there is no rain data"
        wet = self.data["rain"].gt(0)
        return wet.groupby([self.data[k] for k in self._group_keys(group_by)]).sum()

    def get_exceedance(self,
                       windows: Union[int, list[int]],
                       n_digits: int = 2,
                       probs: list[float] = None) -> Union[dict[str, pandas.DataFrame], pandas.DataFrame]:
        """
        for annual maxima of rainfall totals over `windows` days, calculate probability of being equalled or exceeded.

        Args:
            windows: number of consecutive days over which rainfall values will be totalled
            n_digits: rainfall totals will be rounded to this many decimal places
            probs: optional exceedance probabilities for which corresponding rainfall values will be interpolated
                and returned.

        Returns:
            if `probs` is provided, a `DataFrame` where the `index` is `probs` and columns are `windows`. otherwise a
                `dict` of `DataFrame` where the keys are `windows`.
        """
        assert "rain" in self.variables, "there is no rain data"
        if isinstance(windows, int):
            windows = [windows]

        arr = {}
        for window in windows:
            assert window >= 1, "windows need to be at least one day"
            nm = f"{window}D"
            totals = self.data.groupby("year")["rain"].transform(lambda x: x.rolling(window=window).sum())
            max_ = totals.groupby(self.data["year"]).max().round(n_digits)
            ex = calc_exceedance(max_)

            if probs is not None:
                interpolate_vals = interpolate.interp1d(ex.prob, ex.val, bounds_error=False)
                arr[nm] = interpolate_vals(probs)
            else:
                arr[nm] = ex[["val", "prob"]]

        return pandas.DataFrame(arr, index=probs) if probs is not None else arr

    def get_statistics(self) -> pandas.DataFrame:
        """
        annual and monthly statistics of every complete year, in the layout of a summary table: a `year` column and
        columns like `mean_tmin0` to `mean_tmin12`, `totrain0` to `totrain12`
        """
        rows = []
        for year, group in self.data.groupby("year", sort=True):
            year = int(year)
            assert len(group) == days_in_year(year), f"{year} is not a complete year"
            row = {"year": year}
            for var in self.variables:
                _, suffix = PARAMS[var]
                param = collect_stats(var, year, group[var].to_numpy(dtype=float))
                row.update(zip(param.names(suffix), param.values()))
            rows.append(row)
        return pandas.DataFrame(rows)

import warnings
import pandas
from pandas.api import types
from pathlib import Path
from typing import Union
from .weather import Weather
from .weather_summary import WeatherSummary
from ._utils import days_in_year, read_table
from .met import VARIABLES


class ObservedWeather(Weather):
    """observed daily weather, read and tidied for building a summary of target statistics. inherits
    [`Weather`](./weather.html)."""

    def __init__(self,
                 weather: Union[str, Path, pandas.DataFrame],
                 datetime_col: str = None,
                 date_format: str = None,
                 lat: float = None):
        """
        Args:
            weather: pandas Dataframe with daily weather or path to the csv file containing it. a csv file may hold
                the site latitude alone on its first line
            datetime_col: name of the date column. if `None`, dates come from `year`, `month` and `day` columns, or
                from the order of rows within each `year`
            date_format: format to use for parsing the date column
            lat: site latitude, overrides the one found in the csv file
        """
        self.lat = lat
        "site latitude"

        Weather.__init__(self, self.__read_weather(weather, datetime_col, date_format))

    def __read_weather(self, data, datetime_col, date_format):
        if isinstance(data, (str, Path)):
            weather, lat = read_table(data)
            if self.lat is None:
                self.lat = lat
        elif isinstance(data, pandas.DataFrame):
            weather = data.copy()
        else:
            raise ValueError("'weather' is not valid")

        variables = [var for var in VARIABLES if var in weather.columns]
        assert variables, f"weather data needs at least one of the columns {list(VARIABLES)}"

        weather.index = self.__parse_dates(weather, datetime_col, date_format)
        weather = weather[variables].copy()

        for var in variables:
            if not types.is_numeric_dtype(weather[var]):
                weather[var] = pandas.to_numeric(weather[var], errors="coerce")

        full_index = pandas.date_range(weather.index.min(), weather.index.max(), freq="D")
        if len(full_index) != len(weather):
            warnings.warn(f"\nGaps were found in data: {len(full_index) - len(weather)} days are missing")
            weather = weather.reindex(full_index)

        if weather.isna().any().any():
            warnings.warn("NA values in temperature and wind were interpolated, and in rainfall filled with zero")
            for var in variables:
                if var == "rain":
                    weather[var] = weather[var].fillna(0)
                else:
                    weather[var] = weather[var].interpolate(limit_direction="both")

        counts = weather.groupby(weather.index.year).size()
        partial = [int(y) for y, n in counts.items() if n != days_in_year(int(y))]
        if partial:
            warnings.warn(f"partial years were dropped: {partial}")
            weather = weather[~weather.index.year.isin(partial)]
        assert len(weather) > 0, "there is no complete year of data"

        weather.insert(0, "doy", weather.index.dayofyear)
        weather.insert(0, "day", weather.index.day)
        weather.insert(0, "month", weather.index.month)
        weather.insert(0, "year", weather.index.year)
        return weather.reset_index(drop=True)

    @staticmethod
    def __parse_dates(weather, datetime_col, date_format) -> pandas.DatetimeIndex:
        if datetime_col is not None:
            dates = weather[datetime_col]
            if not types.is_datetime64_any_dtype(dates):
                dates = pandas.to_datetime(dates, format=date_format)
            return pandas.DatetimeIndex(dates)

        if {"year", "month", "day"}.issubset(weather.columns):
            return pandas.DatetimeIndex(pandas.to_datetime(weather[["year", "month", "day"]]))

        assert "year" in weather.columns, "weather data needs a date column or a 'year' column"
        day = weather.groupby("year").cumcount()
        dates = pandas.to_datetime(weather["year"].astype(str) + "-01-01") + pandas.to_timedelta(day, unit="D")
        return pandas.DatetimeIndex(dates)

    def create_summary(self) -> WeatherSummary:
        """
        calculate the annual and monthly target statistics of every year, to drive the weather generator

        Returns:
            object of class [`WeatherSummary`](./weather_summary.html)
        """
        return WeatherSummary(self.get_statistics(), lat=self.lat)

import pandas
import toml
from pathlib import Path
from typing import Union
from .collate import collate_mets, create_mets, find_variables, generate_mets
from .config import CalibrationConfig
from .met import Met
from .synthetic_weather import SyntheticWeather
from ._utils import read_table, resolve_seed


def read_summary(path: Union[str, Path]) -> "WeatherSummary":
    """
    read a summary table saved with [`WeatherSummary.save()`](./weather_summary.html). the first line holds the site
    latitude, the rest is a csv table with a `year` column and target statistics columns.
    """
    data, lat = read_table(path)
    return WeatherSummary(data, lat=lat)


def load_synthetic_weather(data_path: Union[str, Path],
                           info_path: Union[str, Path] = None) -> SyntheticWeather:
    """
    load saved synthetic weather data.
    see [`SyntheticWeather.save()`](./synthetic_weather.html#pymetgen.synthetic_weather.SyntheticWeather.save)

    Args:
        data_path: path to the weather data csv
        info_path: path to the weather data info

    Returns:
        [`SyntheticWeather`](./synthetic_weather.html)
    """
    data = pandas.read_csv(data_path)

    if info_path is None:
        seed, lat, config = [None] * 3
    else:
        info = toml.load(info_path)
        seed = info.get("seed")
        lat = info.get("lat")
        config = CalibrationConfig.from_dict(info["calibration"]) if "calibration" in info else None

    return SyntheticWeather(data, seed=seed, lat=lat, config=config)


class WeatherSummary:
    """annual and monthly target statistics of every year, from which daily weather is generated"""

    def __init__(self,
                 data: pandas.DataFrame,
                 lat: float = None):
        """
        Args:
            data: table with a `year` column and one column per statistic and month, e.g. `mean_tmin0` to
                `mean_tmin12` (index 0 is the year, 1 to 12 are the months)
            lat: site latitude
        """
        assert "year" in data.columns, "summary needs a 'year' column"
        self.data = data.sort_values("year").reset_index(drop=True)
        """summary table, one row per year"""

        self.lat = lat
        """site latitude"""

        self.variables = find_variables(self.data.columns)
        """weather variables with target statistics"""

        assert self.variables, "summary has no weather variables"

    @property
    def years(self) -> list[int]:
        return [int(y) for y in self.data["year"]]

    def get_mets(self, var: str) -> list[Met]:
        """observed `Met` objects of `var`, one per year"""
        return create_mets(self.data, var)

    def generate(self,
                 seed: int = None,
                 verbose: bool = True,
                 n_cores: int = 1,
                 config: CalibrationConfig = None) -> SyntheticWeather:
        """
        generate daily weather for every year of the summary

        Args:
            seed: `None` or negative for a different run every time; a non-negative integer to reproduce a run
            verbose: log targets, thresholds and errors of every year
            n_cores: number of cores to use in parallel, if available
            config: calibration settings

        Returns:
            [`SyntheticWeather`](./synthetic_weather.html)
        """
        config = config or CalibrationConfig()
        seed = resolve_seed(seed)
        mets = generate_mets(self.data, seed=seed, verbose=verbose, n_cores=n_cores, config=config)
        return SyntheticWeather(collate_mets(mets), mets=mets, seed=seed, lat=self.lat, config=config)

    def save(self, path: Union[str, Path]):
        """save the summary as a csv file with the latitude on the first line"""
        with open(path, "w", newline="") as f:
            if self.lat is not None:
                f.write(f"{self.lat}\n")
            self.data.to_csv(f, index=False)

import pandas
import toml
from pathlib import Path
from typing import Union
from .weather import Weather
from .collate import collate_stats, gof
from .config import CalibrationConfig
from .met import Met


class SyntheticWeather(Weather):
    """Class that holds generated daily weather. inherits [`Weather`](./weather.html)"""

    def __init__(self,
                 data: pandas.DataFrame,
                 mets: dict[str, list[Met]] = None,
                 seed: int = None,
                 lat: float = None,
                 config: CalibrationConfig = None):
        Weather.__init__(self, data)
        self.mets = mets
        """generated `Met` objects by variable, with target and achieved statistics. `None` when loaded from file"""

        self.seed = seed
        """seed that reproduces this run"""

        self.lat = lat
        """site latitude"""

        self.config = config or CalibrationConfig()
        """calibration settings used for the run"""

    def _require_mets(self):
        assert self.mets is not None, "statistics are only available right after generation"

    def get_stats(self, mettype: str = "est", transpose: bool = False) -> pandas.DataFrame:
        """
        Args:
            mettype: `est` for the statistics of the generated weather, `obs` for the targets
            transpose: if `True`, rows are statistics and columns are years
        """
        self._require_mets()
        return collate_stats(self.mets, mettype=mettype, transpose=transpose)

    def gof(self, n_decimals: int = None) -> pandas.DataFrame:
        """goodness of fit of the generated statistics against the targets, see [`collate.gof`](./collate.html)"""
        self._require_mets()
        return gof(self.mets, n_decimals=n_decimals)

    def acceptance(self) -> pandas.DataFrame:
        """whether the annual statistics of each variable and year met their thresholds"""
        self._require_mets()
        return pandas.DataFrame({var: pandas.Series({met.year: met.ok for met in lst}) for var, lst in self.mets.items()})

    def save(self,
             root: Union[str, Path],
             prefix: str = "",
             save_info: bool = True,
             n_digits: int = 2):
        """
        Save synthetic weather data locally

        Args:
            root: the directory where the synthetic weather data should be saved
            prefix: the prefix that will be added to the file names
            save_info: if `False`, only the weather data will be saved
            n_digits: the weather values will be rounded to this many decimal places
        """
        root = Path(root)
        data = self.data.copy()
        data[self.variables] = data[self.variables].round(n_digits)
        data.to_csv(root / "{prefix}_synthetic_weather.csv".format(prefix=prefix), index=False)
        if save_info:
            info = {"seed": self.seed,
                    "variables": self.variables,
                    "years": self.years,
                    "calibration": self.config.to_dict()}
            if self.lat is not None:
                info["lat"] = self.lat
            with open(root / "{prefix}_synthetic_weather_info.toml".format(prefix=prefix), "w") as f:
                toml.dump({k: v for k, v in info.items() if v is not None}, f)

import toml
from pathlib import Path
from typing import Union
from ._stats import min_f_skew


class CalibrationConfig:
    """
    tuning constants of the calibration loops. the defaults reproduce the published generator; every value can be
    overridden by keyword or read from a toml file with `from_toml`.
    """

    def __init__(self,
                 max_attempts: int = 5_000,
                 rain_max_attempts: int = 1_000,
                 tolerance: float = 2.5,
                 rain_sequence_tolerance: float = 5.0,
                 pass_quota: float = 0.99,
                 wet_day_bias: float = 0.033,
                 wind_floor: float = 0.1,
                 skew_cutoff: float = 0.995272,
                 f_df2: float = 500,
                 f_sample_size: int = 10_000,
                 gev_loc: float = 0.50,
                 gev_scale: float = 0.17,
                 gev_shape: float = 0.14,
                 temp_thresholds: tuple[float, float] = (5.0, 5.0),
                 wind_thresholds: tuple[float, float, float] = (5.0, 5.0, 5.0),
                 rain_thresholds: tuple[float, float, float] = (5.0, 10.0, 10.0)):
        """
        Args:
            max_attempts: attempts per month for temperature and wind
            rain_max_attempts: attempts per month for each of the two rain phases
            tolerance: early-exit error (%) for temperature, wind and monthly rain totals
            rain_sequence_tolerance: early-exit error (%) when placing wet days in a month
            pass_quota: fraction of annual statistics that must meet their threshold for a year to pass
            wet_day_bias: added to the implied wet-day fraction when counting wet days in a month
            wind_floor: smallest wind speed allowed
            skew_cutoff: above this absolute skew, temperature innovations come from a transformed F-distribution. it
                must exceed the smallest skew that F-distribution can reach with `f_df2`
            f_df2: fixed second degrees of freedom of that F-distribution
            f_sample_size: size of the F-distribution sample used to build its density
            gev_loc: location of the GEV distribution of the gamma shape for wet-day amounts
            gev_scale: scale of that GEV distribution
            gev_shape: shape of that GEV distribution
            temp_thresholds: annual thresholds (%) for temperature mean and sd. lag-1 and skew thresholds are
                `10 / |target|`
            wind_thresholds: annual thresholds (%) for wind mean, sd and lag-1
            rain_thresholds: annual thresholds (%) for total rain, pww and pwd
        """
        assert max_attempts > 0 and rain_max_attempts > 0, "attempts should be positive"
        assert tolerance > 0 and rain_sequence_tolerance > 0, "tolerances should be positive"
        assert 1 >= pass_quota > 0, "'pass_quota' should be between 0 and 1"
        assert f_df2 > 8, "'f_df2' should be larger than 8 for the F-distribution skew to exist"
        assert min_f_skew(f_df2) < abs(skew_cutoff) < 1, \
            f"'skew_cutoff' should be between {min_f_skew(f_df2):.4f} and 1 for 'f_df2' {f_df2}"
        assert gev_scale > 0, "'gev_scale' should be positive"

        self.max_attempts = int(max_attempts)
        self.rain_max_attempts = int(rain_max_attempts)
        self.tolerance = float(tolerance)
        self.rain_sequence_tolerance = float(rain_sequence_tolerance)
        self.pass_quota = float(pass_quota)
        self.wet_day_bias = float(wet_day_bias)
        self.wind_floor = float(wind_floor)
        self.skew_cutoff = float(skew_cutoff)
        self.f_df2 = float(f_df2)
        self.f_sample_size = int(f_sample_size)
        self.gev_loc = float(gev_loc)
        self.gev_scale = float(gev_scale)
        self.gev_shape = float(gev_shape)
        self.temp_thresholds = tuple(float(v) for v in temp_thresholds)
        self.wind_thresholds = tuple(float(v) for v in wind_thresholds)
        self.rain_thresholds = tuple(float(v) for v in rain_thresholds)

    def to_dict(self) -> dict:
        return {k: list(v) if isinstance(v, tuple) else v for k, v in vars(self).items()}

    @classmethod
    def from_dict(cls, values: dict) -> "CalibrationConfig":
        unknown = set(values) - set(cls().to_dict())
        if unknown:
            raise KeyError(f"unknown calibration settings: {sorted(unknown)}")
        return cls(**values)

    @classmethod
    def from_toml(cls, path: Union[str, Path]) -> "CalibrationConfig":
        """
        read calibration settings from a toml file. settings may sit at the top level or under a `[calibration]`
        table; missing settings keep their defaults.
        """
        info = toml.load(path)
        return cls.from_dict(info.get("calibration", info))

    def __eq__(self, other):
        return isinstance(other, CalibrationConfig) and self.to_dict() == other.to_dict()

    def __repr__(self):
        args = ", ".join(f"{k}={v!r}" for k, v in vars(self).items())
        return f"CalibrationConfig({args})"

"""
# pymetgen

A python package for daily weather generation - stochastically generating daily minimum and maximum air temperature,
wind speed, and rainfall for a site from annual and monthly summary statistics.

## Method

Each weather variable is generated one year at a time from 13 target values per statistic (one for the year and one
for each month). Months are generated in calendar order.

1. *Temperature* (`tmin`, `tmax`) targets are the mean, standard deviation, lag-1 autocorrelation, and skewness.
    - Each month is a lag-1 autoregression `x[i] = c + r * x[i - 1] + e[i]` with `c = mean * (1 - r)`. The first day
        of a month follows on from the last day of the month before (January follows on from the annual mean).
    - The residuals `e` follow a skew-normal distribution with the standard deviation corrected for autocorrelation.
        When the skew is too large for a skew-normal distribution, the residuals are drawn from the density of a
        rescaled F-distribution sample instead.
    - A month is drawn repeatedly (by default up to 5,000 times) until its four statistics are all within 2.5% of
        their targets. The best draw is kept if none is.
2. *Wind speed* (`wind`) targets are the mean, standard deviation, and lag-1 autocorrelation. Months are generated as
    for temperature, but with Weibull residuals centred on zero, and wind speed is never below 0.1.
3. *Rainfall* (`rain`) targets are the total rain, and the probabilities of a wet day after a wet day (`pww`) and
    after a dry day (`pwd`).
    - The number of wet days in a month follows from `pww` and `pwd`. Wet-day amounts are drawn from a gamma
        distribution whose shape is itself random, until their sum is within 2.5% of the monthly total.
    - A wet/dry Markov chain places the amounts on wet days, until the month's `pww` and `pwd` are within 5% of
        their targets.
4. Days where the generated `tmax` is not above `tmin` are repaired by swapping the two values, or by raising `tmax`
    by 0.1 when they are equal.

The search never fails: when a month cannot reach its tolerance, the closest draw is kept and the shortfall shows in
the errors reported for the year.

## Usage

```python
import pymetgen

observed = pymetgen.ObservedWeather("./data/daily.csv", datetime_col="date")
summary = observed.create_summary()
synthetic = summary.generate(seed=42, n_cores=4)
synthetic.save("./output", prefix="site")
print(synthetic.gof(n_decimals=2))
```

Or start from a saved summary table with `pymetgen.read_summary("./data/summary.csv")`.
"""

from .config import CalibrationConfig
from .met import Met, Rain, Temp, Wind
from .observed_weather import ObservedWeather
from .synthetic_weather import SyntheticWeather
from .weather_summary import WeatherSummary, load_synthetic_weather, read_summary
from .collate import collate_mets, collate_stats, generate_mets, gof, repair_temperatures

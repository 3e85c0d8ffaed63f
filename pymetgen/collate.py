import logging
import numpy
import pandas
from multiprocessing import Pool
from typing import Callable, Sequence
from . import rain, temperature, wind
from .config import CalibrationConfig
from .gof import METRICS
from .met import Met, VARIABLES
from ._utils import resolve_seed

logger = logging.getLogger(__name__)

_GENERATORS = {"tmin": temperature.generate,
               "tmax": temperature.generate,
               "wind": wind.generate,
               "rain": rain.generate}


def find_variables(columns: Sequence[str]) -> list[str]:
    """weather variables that have columns in a summary table"""
    return [var for var in VARIABLES if any(var in col for col in columns)]


def create_mets(summary: pandas.DataFrame, var: str) -> list[Met]:
    if var in ("tmin", "tmax"):
        return temperature.create_temp(summary, var)
    if var == "wind":
        return wind.create_wind(summary)
    if var == "rain":
        return rain.create_rain(summary)
    raise ValueError(f"'var' has to be in {list(VARIABLES)}")


def seed_sequence(seed: int, var: str, year: int) -> numpy.random.SeedSequence:
    """independent random stream for one variable and year, the same whatever else is generated in the run"""
    return numpy.random.SeedSequence(seed, spawn_key=(VARIABLES.index(var), int(year)))


def _generate(var: str, met: Met, seed: numpy.random.SeedSequence, config: CalibrationConfig, verbose: bool) -> Met:
    return _GENERATORS[var](met, random_state=seed, config=config, verbose=verbose)


def repair_temperatures(tmin: Sequence[float], tmax: Sequence[float]) -> tuple[numpy.ndarray, numpy.ndarray]:
    """
    make every daily maximum strictly higher than the minimum: values are swapped on days where `tmax < tmin`, and
    `tmax` is raised by 0.1 on days where the two are equal

    :return: repaired copies of `(tmin, tmax)`
    """
    tmin = numpy.array(tmin, dtype=float)
    tmax = numpy.array(tmax, dtype=float)
    assert tmin.shape == tmax.shape, "'tmin' and 'tmax' should have the same length"
    swap = tmax < tmin
    tmin[swap], tmax[swap] = tmax[swap], tmin[swap]
    tmax[tmax == tmin] += 0.1
    return tmin, tmax


def generate_mets(summary: pandas.DataFrame,
                  seed: int = None,
                  verbose: bool = True,
                  n_cores: int = 1,
                  config: CalibrationConfig = None) -> dict[str, list[Met]]:
    """
    generate daily weather for every variable and year in a summary table

    Args:
        summary: summary table with a `year` column and target statistics columns
        seed: `None` or negative for a different run every time; a non-negative integer for a reproducible run
        verbose: log the targets and errors of every year
        n_cores: number of processes to generate years in parallel. results do not depend on it
        config: calibration settings

    Returns:
        `dict` of variable name to calibrated `Met` objects, one per year
    """
    config = config or CalibrationConfig()
    n_cores = int(max(1, n_cores))
    seed = resolve_seed(seed)
    variables = find_variables(summary.columns)
    assert variables, f"no columns found for any of {list(VARIABLES)}"

    tasks = []
    for var in variables:
        for met in create_mets(summary, var):
            tasks.append((var, met, seed_sequence(seed, var, met.year), config, verbose))

    if n_cores > 1:
        if verbose:
            logger.info("Generating %s on %d processes", ", ".join(variables), n_cores)
        with Pool(n_cores) as pool:
            container = [pool.apply_async(_generate, task) for task in tasks]
            results = [res.get() for res in container]
    else:
        results = []
        current = None
        for task in tasks:
            if verbose and task[0] != current:
                current = task[0]
                logger.info("Generating %s", current)
            results.append(_generate(*task))

    mets = {var: [] for var in variables}
    for (var, *_), met in zip(tasks, results):
        mets[var].append(met)

    if "tmin" in mets and "tmax" in mets:
        if verbose:
            logger.info("Verifying Tmin < Tmax")
        tmaxs = {met.year: met for met in mets["tmax"]}
        for i, tmin in enumerate(mets["tmin"]):
            tmax = tmaxs.get(tmin.year)
            if tmax is None:
                continue
            new_tmin, new_tmax = repair_temperatures(tmin.values, tmax.values)
            mets["tmin"][i] = tmin.with_values(new_tmin)
            tmaxs[tmin.year] = tmax.with_values(new_tmax)
        mets["tmax"] = [tmaxs[met.year] for met in mets["tmax"]]

    return mets


def collate_mets(mets: dict[str, list[Met]]) -> pandas.DataFrame:
    """
    join the daily values of all variables and years into one table with columns `year`, `month`, `day`, `doy` and
    one column per variable
    """
    assert mets, "'mets' is empty"
    years = None
    data = {}
    for var, lst in mets.items():
        var_years = [met.year for met in lst]
        assert years is None or var_years == years, f"'{var}' does not cover the same years as the other variables"
        years = var_years
        data[var] = numpy.concatenate([met.values for met in lst])

    dates = pandas.DatetimeIndex(numpy.concatenate(
        [pandas.date_range(f"{year}-01-01", f"{year}-12-31", freq="D").to_numpy() for year in years]))
    table = pandas.DataFrame({"year": dates.year,
                              "month": dates.month,
                              "day": dates.day,
                              "doy": dates.dayofyear})
    for var, vals in data.items():
        table[var] = vals
    return table


def collate_stats(mets: dict[str, list[Met]], mettype: str = "est", transpose: bool = False) -> pandas.DataFrame:
    """
    statistics of every year in one table

    Args:
        mets: generated `Met` objects by variable
        mettype: `est` for the statistics of the generated values, `obs` for the targets
        transpose: if `True`, rows are statistics and columns are years

    Returns:
        `DataFrame` indexed by year with columns like `tmin_mean0` or `rain_totrain12`
    """
    assert mettype in ("est", "obs"), "'mettype' should be 'est' or 'obs'"
    frames = []
    for var, lst in mets.items():
        params = [getattr(met, mettype) for met in lst]
        columns = [f"{var}_{name}" for name in params[0].names()]
        frames.append(pandas.DataFrame([p.values() for p in params],
                                       columns=columns,
                                       index=pandas.Index([met.year for met in lst], name="year")))
    stats = pandas.concat(frames, axis=1)
    return stats.T if transpose else stats


def gof(mets: dict[str, list[Met]],
        metrics: Sequence[Callable] = METRICS,
        n_decimals: int = None) -> pandas.DataFrame:
    """
    goodness of fit of the generated statistics against their targets, across years

    Args:
        mets: generated `Met` objects by variable
        metrics: functions taking `(obs, est)` arrays
        n_decimals: round results to this many decimal places

    Returns:
        `DataFrame` with one row per statistic and one column per metric
    """
    est = collate_stats(mets, mettype="est")
    obs = collate_stats(mets, mettype="obs")
    fit = pandas.DataFrame({metric.__name__: [metric(obs[col], est[col]) for col in obs.columns]
                            for metric in metrics},
                           index=pandas.Index(obs.columns, name="param"))
    return fit.round(n_decimals) if n_decimals is not None else fit

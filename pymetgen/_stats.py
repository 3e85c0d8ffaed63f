import math
import numpy
from scipy import special
from scipy.stats import f, gamma, gaussian_kde, genextreme, skewnorm, weibull_min
from enum import Enum

# largest |skew| a skew-normal distribution can reach through moment matching
SKEW_CUTOFF = 0.995272


class _Constant:
    """degenerate distribution used when the target spread is zero"""

    def __init__(self, value=0.0):
        self.value = value

    def rvs(self, size=1, random_state=None):
        return numpy.full(size, self.value, dtype=float)

    def mean(self):
        return self.value


class _EmpiricalSkewed:
    """
    kernel density of a rescaled F-distribution sample. stands in for the skew-normal when the skew is beyond what
    the skew-normal can reach.
    """

    def __init__(self, sample):
        self.sample = numpy.asarray(sample, dtype=float)
        self.kde = gaussian_kde(self.sample)

    def rvs(self, size=1, random_state=None):
        return self.kde.resample(size, seed=random_state)[0]

    def mean(self):
        return float(self.sample.mean())


class Dists(Enum):
    f = f
    gamma = gamma
    gev = genextreme
    skewnorm = skewnorm
    weibull_min = weibull_min


def get_dist_func(dist):
    try:
        dist_func = Dists[dist].value
    except KeyError as err:
        print(f"'dist' {dist} is not valid. 'dist' has to be in {[e.name for e in Dists]}")
        raise KeyError(err)

    return dist_func


def skewnorm_params(avg: float, sd: float, skew: float) -> tuple[float, float, float]:
    """
    skew-normal parameters matching the first three moments

    :param avg: mean
    :param sd: standard deviation
    :param skew: skewness, |skew| must be below `SKEW_CUTOFF`
    :return: `(shape, loc, scale)` as used by `scipy.stats.skewnorm`
    """
    assert abs(skew) < SKEW_CUTOFF, f"|skew| should be below {SKEW_CUTOFF} for a skew-normal distribution"
    sk2_3 = abs(skew) ** (2 / 3)
    n1 = 0.5 * math.pi * sk2_3
    n2 = sk2_3 + ((4 - math.pi) / 2) ** (2 / 3)
    delta = math.copysign(math.sqrt(n1 / n2), skew)
    shape = delta / math.sqrt(1 - delta ** 2)
    scale = math.sqrt(sd ** 2 / (1 - 2 * delta ** 2 / math.pi))
    loc = avg - scale * math.sqrt(2 / math.pi) * delta
    return shape, loc, scale


def min_f_skew(df2: float = 500) -> float:
    """smallest skew an F-distribution with second degrees of freedom `df2` can have, reached as `df1` grows"""
    return math.sqrt(32 * (df2 - 4)) / (df2 - 6)


def f_dfs(skew: float, df2: float = 500) -> tuple[float, float]:
    """
    degrees of freedom of an F-distribution whose skew equals |skew|. `df2` is fixed and `df1` is solved from the
    F-distribution skewness formula.
    """
    sk = abs(skew)
    assert sk > min_f_skew(df2), f"|skew| should be above {min_f_skew(df2):.4f} for 'df2' {df2}"
    d6 = df2 - 6
    d4 = df2 - 4
    d2 = df2 - 2
    a = math.sqrt(-32 * d4 + sk ** 2 * d6 ** 2)
    b = d2 * (-d6 * sk + a)
    df1 = -b / (2 * a)
    return df1, df2


def high_skew_sample(avg: float,
                     sd: float,
                     skew: float,
                     random_state: numpy.random.Generator,
                     df2: float = 500,
                     size: int = 10_000) -> numpy.ndarray:
    """
    sample an F-distribution with the desired skew magnitude, rescale it to `avg` and `sd`, and mirror it for
    negative skew
    """
    df1, df2 = f_dfs(skew, df2)
    sample = f.rvs(df1, df2, size=size, random_state=random_state)
    sample = avg + (sample - sample.mean()) * sd / sample.std(ddof=1)
    if skew < 0:
        sample = sample.mean() - sample
    return sample + (avg - sample.mean())


def skewed_dist(avg: float,
                sd: float,
                skew: float,
                random_state: numpy.random.Generator,
                cutoff: float = SKEW_CUTOFF,
                df2: float = 500,
                sample_size: int = 10_000):
    """
    distribution with the given mean, standard deviation and skewness

    Args:
        avg: mean
        sd: standard deviation
        skew: skewness
        random_state: random source used to build the empirical density for high skews
        cutoff: |skew| at and above which the F-distribution based density is used
        df2: second degrees of freedom of that F-distribution
        sample_size: size of the F-distribution sample

    Returns:
        object with a `rvs(size, random_state)` method
    """
    if not sd > 0:
        return _Constant(avg)
    if abs(skew) < min(cutoff, SKEW_CUTOFF):
        shape, loc, scale = skewnorm_params(avg, sd, skew)
        return skewnorm(shape, loc=loc, scale=scale)
    return _EmpiricalSkewed(high_skew_sample(avg, sd, skew, random_state, df2=df2, size=sample_size))


def weibull_params(avg: float, sd: float, rlag: float) -> tuple[float, float]:
    """
    Weibull shape and scale for the residuals of a lag-1 autoregression

    :param avg: mean of the series
    :param sd: standard deviation of the series, corrected here for its lag-1 autocorrelation
    :param rlag: lag-1 autocorrelation
    :return: `(shape, scale)`
    """
    sde = math.sqrt(sd ** 2 * (1 - rlag ** 2))
    shape = (sde / avg) ** -1.086
    scale = avg / special.gamma(1 + 1 / shape)
    return shape, scale


def weibull_dist(avg: float, sd: float, rlag: float):
    if not (avg > 0 and sd > 0 and abs(rlag) < 1):
        return _Constant(avg)
    shape, scale = weibull_params(avg, sd, rlag)
    return weibull_min(shape, scale=scale)


def gamma_params(avg: float,
                 random_state: numpy.random.Generator,
                 loc: float = 0.50,
                 scale: float = 0.17,
                 shape: float = 0.14) -> tuple[float, float]:
    """
    gamma shape and scale for daily rain amounts with mean `avg`. the shape is drawn from a GEV distribution (resampled
    until positive), so the spread of wet-day amounts varies from one draw to the next.

    :return: `(shape, scale)`
    """
    gev = genextreme(-shape, loc=loc, scale=scale)
    k = -1.0
    while k <= 0:
        k = float(gev.rvs(random_state=random_state))
    return k, avg / k

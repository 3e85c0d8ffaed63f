"""
Tests for observed and synthetic weather, and summary tables.
"""

import numpy
import pandas
import pytest

from pymetgen import (CalibrationConfig, ObservedWeather, SyntheticWeather, WeatherSummary, load_synthetic_weather,
                      read_summary)


@pytest.fixture
def observed(observed_daily):
    return ObservedWeather(observed_daily, datetime_col="date")


class TestObservedWeather:

    def test_read_dataframe(self, observed):
        assert observed.years == [2019, 2020]
        assert observed.variables == ["tmin", "tmax", "wind", "rain"]
        assert list(observed.data.columns) == ["year", "month", "day", "doy", "tmin", "tmax", "wind", "rain"]
        assert len(observed.data) == 731
        assert observed.data.doy.max() == 366
        assert observed.lat is None

    def test_year_month_day_columns(self, observed_daily):
        dates = pandas.to_datetime(observed_daily.pop("date"))
        observed_daily.insert(0, "day", dates.dt.day)
        observed_daily.insert(0, "month", dates.dt.month)
        observed_daily.insert(0, "year", dates.dt.year)
        weather = ObservedWeather(observed_daily)
        assert weather.years == [2019, 2020]
        assert weather.data.loc[59, "month"] == 3

    def test_year_column_only(self, observed_daily):
        dates = pandas.to_datetime(observed_daily.pop("date"))
        observed_daily.insert(0, "year", dates.dt.year)
        weather = ObservedWeather(observed_daily)
        assert len(weather.data) == 731
        assert weather.data.loc[365 + 59, "day"] == 29

    def test_missing_values_and_partial_year(self, observed_daily):
        extra = pandas.DataFrame({"date": ["2018-12-30", "2018-12-31"], "tmin": [21.0, 22.0], "tmax": [30.0, 30.5],
                                  "wind": [1.0, 2.0], "rain": [0.0, 4.0]})
        data = pandas.concat([extra, observed_daily], ignore_index=True)
        data["rain"] = data["rain"].astype(object)
        data.loc[10, "tmin"] = numpy.nan
        data.loc[11, "rain"] = "NA"
        data = data.drop(index=200)

        with pytest.warns(UserWarning) as record:
            weather = ObservedWeather(data, datetime_col="date")

        messages = " ".join(str(w.message) for w in record)
        assert "Gaps" in messages
        assert "partial years" in messages
        assert weather.years == [2019, 2020]
        assert not weather.data[weather.variables].isna().any().any()
        assert weather.data.loc[9, "rain"] == 0

    def test_no_weather_columns(self):
        with pytest.raises(AssertionError):
            ObservedWeather(pandas.DataFrame({"year": [2020], "solar": [20.0]}))

    def test_not_a_table(self):
        with pytest.raises(ValueError):
            ObservedWeather([1, 2, 3])

    def test_csv_with_latitude(self, observed_daily, tmp_path):
        path = tmp_path / "site.csv"
        with open(path, "w", newline="") as f:
            f.write("-27.47\n")
            observed_daily.to_csv(f, index=False)

        assert ObservedWeather(path, datetime_col="date").lat == pytest.approx(-27.47)
        assert ObservedWeather(str(path), datetime_col="date", lat=10.0).lat == 10.0

    def test_summaries(self, observed, observed_daily):
        yearly = observed.get_summary(group_by="year")
        assert yearly.shape == (2, 4)
        assert yearly.loc[2019, ("tmin", "mean")] == pytest.approx(observed_daily.tmin[:365].mean())

        monthly = observed.get_summary(["min", "max"])
        assert monthly.shape == (24, 8)

        wet = observed.get_wet_days()
        assert len(wet) == 24
        assert wet.sum() == (observed_daily.rain > 0).sum()

        with pytest.raises(AssertionError):
            observed.get_summary(group_by="week")

    def test_exceedance(self, observed):
        ex = observed.get_exceedance([1, 3])
        assert set(ex) == {"1D", "3D"}
        assert list(ex["1D"].columns) == ["val", "prob"]
        assert ex["1D"].prob.between(0, 1).all()
        assert ex["3D"].val.max() >= ex["1D"].val.max()

        table = observed.get_exceedance(2, probs=[0.5])
        assert list(table.columns) == ["2D"]
        assert list(table.index) == [0.5]

    def test_exceedance_windows_stay_within_year(self, observed_daily):
        observed_daily["rain"] = 0.0
        observed_daily.loc[364, "rain"] = 50.0
        observed_daily.loc[365, "rain"] = 40.0
        weather = ObservedWeather(observed_daily, datetime_col="date")

        ex = weather.get_exceedance(2)["2D"]
        assert sorted(ex.val) == [40.0, 50.0]


class TestWeatherSummary:

    def test_create_summary(self, observed, observed_daily):
        summary = observed.create_summary()
        assert isinstance(summary, WeatherSummary)
        assert summary.years == [2019, 2020]
        assert summary.variables == ["tmin", "tmax", "wind", "rain"]

        data = summary.data
        assert len(data.columns) == 1 + 2 * 52 + 2 * 39
        assert data.loc[0, "totrain0"] == pytest.approx(observed_daily.rain[:365].sum())
        assert data.loc[1, "mean_wind2"] == pytest.approx(observed_daily.wind[365 + 31:365 + 60].mean())
        assert (data.filter(like="sd_") >= 0.01).all().all()

    def test_get_mets(self, summary):
        mets = WeatherSummary(summary).get_mets("rain")
        assert [m.year for m in mets] == [2019, 2020]

    def test_needs_variables(self, summary):
        with pytest.raises(AssertionError):
            WeatherSummary(summary[["year"]])

    def test_save_and_read(self, summary, tmp_path):
        path = tmp_path / "summary.csv"
        WeatherSummary(summary, lat=-12.5).save(path)
        loaded = read_summary(path)
        assert loaded.lat == -12.5
        pandas.testing.assert_frame_equal(loaded.data, summary, check_dtype=False)

        WeatherSummary(summary).save(path)
        assert read_summary(path).lat is None


class TestSyntheticWeather:

    @pytest.fixture
    def synthetic(self, observed, fast_config):
        summary = observed.create_summary()
        summary.lat = -27.47
        return summary.generate(seed=5, verbose=False, config=fast_config)

    def test_generate(self, synthetic, fast_config):
        assert isinstance(synthetic, SyntheticWeather)
        assert synthetic.seed == 5
        assert synthetic.lat == -27.47
        assert synthetic.config == fast_config
        assert synthetic.years == [2019, 2020]
        assert len(synthetic.data) == 731
        assert (synthetic.data.tmax > synthetic.data.tmin).all()
        assert (synthetic.data.rain >= 0).all()

    def test_same_seed(self, synthetic, observed, fast_config):
        again = observed.create_summary().generate(seed=5, verbose=False, config=fast_config)
        pandas.testing.assert_frame_equal(synthetic.data, again.data)

    def test_stats(self, synthetic):
        est = synthetic.get_stats()
        assert list(est.index) == [2019, 2020]
        assert est.loc[2019, "rain_totrain0"] == pytest.approx(synthetic.data.rain[:365].sum())
        assert synthetic.get_stats("obs", transpose=True).shape == (2 * 52 + 2 * 39, 2)
        assert list(synthetic.gof(n_decimals=2).columns) == ["nmae", "nmbe", "kge", "dr"]

        accepted = synthetic.acceptance()
        assert list(accepted.columns) == ["tmin", "tmax", "wind", "rain"]
        assert list(accepted.index) == [2019, 2020]

    def test_save_and_load(self, synthetic, fast_config, tmp_path):
        synthetic.save(tmp_path, prefix="site", n_digits=1)
        data_path = tmp_path / "site_synthetic_weather.csv"
        info_path = tmp_path / "site_synthetic_weather_info.toml"
        assert data_path.exists()
        assert info_path.exists()

        loaded = load_synthetic_weather(data_path, info_path)
        assert loaded.seed == 5
        assert loaded.lat == pytest.approx(-27.47)
        assert loaded.config == fast_config
        assert loaded.mets is None
        assert loaded.data.rain.to_numpy() == pytest.approx(synthetic.data.rain.round(1).to_numpy())
        with pytest.raises(AssertionError):
            loaded.get_stats()

        bare = load_synthetic_weather(data_path)
        assert bare.seed is None
        assert bare.config == CalibrationConfig()

    def test_save_data_only(self, synthetic, tmp_path):
        synthetic.save(tmp_path, save_info=False)
        assert (tmp_path / "_synthetic_weather.csv").exists()
        assert not (tmp_path / "_synthetic_weather_info.toml").exists()

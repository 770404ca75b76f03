"""
Unit tests for rate tables and rate distributions.
"""

import numpy as np
import pytest

from segsim.exceptions import FormatError
from segsim.io.rates import load_rate_table
from segsim.segments import SiteRange
from segsim.simulate.rates import ConstantDistribution, GammaDistribution


class TestRateTable:
    """Test loading and slicing of rate tables."""

    def test_load(self, rate_file):
        table = load_rate_table(rate_file)

        assert table.n_sites == 10
        assert len(table) == 10
        assert table.rates[0] == pytest.approx(0.5)
        assert table.rates[9] == pytest.approx(1.4)

    def test_rows_are_dense(self, rate_file):
        rows = list(load_rate_table(rate_file).rows())
        assert [index for index, _ in rows] == list(range(10))

    def test_slice_matches_site_range(self, rate_file):
        table = load_rate_table(rate_file)
        rates = table.slice(SiteRange(3, 10))

        assert len(rates) == 7
        np.testing.assert_allclose(rates, table.rates[3:10])

    def test_slice_out_of_range(self, rate_file):
        with pytest.raises(ValueError):
            load_rate_table(rate_file).slice(SiteRange(5, 11))

    def test_custom_column(self, tmp_path):
        path = tmp_path / "rates.tsv"
        path.write_text("site\tpr\trate\n1\t0.1\t2.0\n2\t0.2\t3.0\n")

        table = load_rate_table(path, column="rate")
        np.testing.assert_allclose(table.rates, [2.0, 3.0])

    def test_missing_column(self, tmp_path):
        path = tmp_path / "rates.tsv"
        path.write_text("site\trate\n1\t0.5\n")

        with pytest.raises(FormatError, match="no column 'pr'"):
            load_rate_table(path)

    def test_unparsable_rate(self, tmp_path):
        path = tmp_path / "rates.tsv"
        path.write_text("site\tpr\n1\t0.5\n2\tfast\n3\t1.0\n")

        with pytest.raises(FormatError, match="'fast' of site 1"):
            load_rate_table(path)

    def test_blank_rate(self, tmp_path):
        path = tmp_path / "rates.tsv"
        path.write_text("site\tpr\n1\t0.5\n2\t\n")

        with pytest.raises(FormatError, match="site 1"):
            load_rate_table(path)

    @pytest.mark.parametrize("value", ["-1.0", "inf", "-inf"])
    def test_negative_or_infinite_rate(self, tmp_path, value):
        path = tmp_path / "rates.tsv"
        rows = [f"{i + 1}\t0.5" for i in range(9)] + [f"10\t{value}"]
        path.write_text("site\tpr\n" + "\n".join(rows) + "\n")

        with pytest.raises(FormatError, match="of site 9 must be a finite non-negative"):
            load_rate_table(path)

    def test_zero_rate_allowed(self, tmp_path):
        path = tmp_path / "rates.tsv"
        path.write_text("site\tpr\n1\t0\n2\t1.5\n")

        np.testing.assert_allclose(load_rate_table(path).rates, [0.0, 1.5])

    def test_header_only(self, tmp_path):
        path = tmp_path / "rates.tsv"
        path.write_text("site\tpr\n")

        with pytest.raises(FormatError, match="no rows"):
            load_rate_table(path)

    def test_empty_file(self, tmp_path):
        path = tmp_path / "rates.tsv"
        path.write_text("")

        with pytest.raises(FormatError, match="empty"):
            load_rate_table(path)


class TestRateDistributions:
    """Test site rate distributions."""

    def test_constant(self):
        rates = ConstantDistribution(1.5).sample(5, np.random.default_rng(1))
        np.testing.assert_array_equal(rates, np.full(5, 1.5))

    def test_gamma_mean_is_one(self):
        dist = GammaDistribution(alpha=0.5, n_categories=4)

        assert dist.categories.mean() == pytest.approx(1.0)
        assert np.all(np.diff(dist.categories) > 0)

    def test_gamma_known_values(self):
        # Yang (1994), alpha = 0.5, four categories
        dist = GammaDistribution(alpha=0.5, n_categories=4)
        np.testing.assert_allclose(
            dist.categories, [0.0334, 0.2519, 0.8203, 2.8944], atol=1e-3
        )

    def test_gamma_sample_uses_categories(self):
        dist = GammaDistribution(alpha=1.0, n_categories=3)
        rates = dist.sample(200, np.random.default_rng(7))

        assert rates.shape == (200,)
        assert set(np.unique(rates)) <= set(dist.categories)

    def test_gamma_invalid(self):
        with pytest.raises(ValueError, match="alpha"):
            GammaDistribution(alpha=0.0)
        with pytest.raises(ValueError, match="n_categories"):
            GammaDistribution(alpha=1.0, n_categories=0)

"""
Tests for simulation settings and parameter files.
"""

from pathlib import Path

import pytest

from segsim.config import SimulationConfig, parse_param_lines
from segsim.exceptions import ConfigError
from segsim.simulate.rates import ConstantDistribution, GammaDistribution


class TestParamLines:
    """Tests for key=value parsing."""

    def test_basic(self):
        params = parse_param_lines([
            "# comment",
            "",
            "alphabet = DNA",
            "number_of_sites=500",
        ])
        assert params == {'alphabet': 'DNA', 'number_of_sites': '500'}

    def test_later_key_wins(self):
        assert parse_param_lines(["kappa=1", "kappa=3"]) == {'kappa': '3'}

    def test_missing_equals(self):
        with pytest.raises(ConfigError, match="line 2"):
            parse_param_lines(["kappa=1", "kappa 3"])


class TestFromParams:
    """Tests for building settings from parameter entries."""

    def test_single_tree(self):
        config = SimulationConfig.from_params({
            'alphabet': 'DNA',
            'tree.file': 'tree.nwk',
            'number_of_sites': '250',
            'model': 'K80',
            'kappa': '3.5',
        })

        assert config.alphabet == 'dna'
        assert config.tree_file == Path('tree.nwk')
        assert config.segments_file is None
        assert config.tree_method == 'single'
        assert config.n_sites == 250
        assert config.model == 'K80'
        assert config.kappa == 3.5

    def test_multiple_trees(self):
        config = SimulationConfig.from_params({
            'input.tree.method': 'multiple',
            'tree.file': 'segments.txt',
            'input.infos': 'rates.tsv',
            'input.infos.column': 'rate',
        })

        assert config.segments_file == Path('segments.txt')
        assert config.tree_file is None
        assert config.tree_method == 'multiple'
        assert config.rates_file == Path('rates.tsv')
        assert config.rate_column == 'rate'

    def test_unknown_tree_method(self):
        with pytest.raises(ConfigError, match="input.tree.method"):
            SimulationConfig.from_params({'input.tree.method': 'forest'})

    def test_none_value_skipped(self):
        config = SimulationConfig.from_params({'output.tree.path': 'none'})
        assert config.tagged_tree is None

    def test_unknown_key_warns(self):
        with pytest.warns(UserWarning, match="Unknown parameter ignored: foo"):
            config = SimulationConfig.from_params({'foo': 'bar'})
        assert config == SimulationConfig()

    def test_invalid_number(self):
        with pytest.raises(ConfigError, match="number_of_sites"):
            SimulationConfig.from_params({'number_of_sites': 'many'})

    def test_gamma(self):
        config = SimulationConfig.from_params({
            'rate_distribution': 'Gamma', 'alpha': '0.5', 'classes': '6',
        })
        distribution = config.rate_distribution()

        assert isinstance(distribution, GammaDistribution)
        assert distribution.n_categories == 6

    def test_gamma_requires_alpha(self):
        with pytest.raises(ConfigError, match="requires alpha"):
            SimulationConfig.from_params({'rate_distribution': 'gamma'})

    def test_constant_drops_alpha(self):
        config = SimulationConfig.from_params({'rate_distribution': 'constant', 'alpha': '0.5'})
        assert config.gamma_alpha is None
        assert isinstance(config.rate_distribution(), ConstantDistribution)

    def test_unknown_distribution(self):
        with pytest.raises(ConfigError, match="Unknown rate_distribution"):
            SimulationConfig.from_params({'rate_distribution': 'lognormal'})

    def test_from_param_file(self, tmp_path):
        path = tmp_path / "sim.bpp"
        path.write_text("tree.file=tree.nwk\nseed=7\noutput.sequence.format=PHYLIP\n")
        config = SimulationConfig.from_param_file(path)

        assert config.seed == 7
        assert config.output_format == 'phylip'


class TestSimulationConfig:
    """Tests for merging and validation."""

    def test_merge_ignores_none(self):
        base = SimulationConfig(n_sites=50, kappa=3.0)
        merged = base.merge(n_sites=None, kappa=1.5, seed=4)

        assert merged.n_sites == 50
        assert merged.kappa == 1.5
        assert merged.seed == 4
        assert base.kappa == 3.0

    def test_valid(self):
        SimulationConfig(tree_file=Path('tree.nwk')).validate()

    @pytest.mark.parametrize("config, message", [
        (SimulationConfig(), "is required"),
        (SimulationConfig(tree_file=Path('a'), segments_file=Path('b')), "not both"),
        (SimulationConfig(segments_file=Path('b'), tagged_tree=Path('t')), "single tree"),
        (SimulationConfig(tree_file=Path('a'), n_sites=0), "must be positive"),
        (SimulationConfig(tree_file=Path('a'), output_format='nexus'), "Unknown output format"),
        (SimulationConfig(tree_file=Path('a'), gamma_alpha=-1.0), "Gamma shape"),
        (SimulationConfig(tree_file=Path('a'), gamma_categories=0), "Gamma categories"),
    ])
    def test_invalid(self, config, message):
        with pytest.raises(ConfigError, match=message):
            config.validate()

    def test_default_rate_distribution(self):
        distribution = SimulationConfig().rate_distribution()
        assert isinstance(distribution, ConstantDistribution)

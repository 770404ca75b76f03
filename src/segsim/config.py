"""
Simulation settings.

Settings come from command-line options and, optionally, from a parameter
file of ``key=value`` lines in the style of Bio++ programs::

    # simulate 500 sites along two trees
    alphabet=DNA
    input.tree.method=multiple
    tree.file=segments.txt
    number_of_sites=500
    model=HKY85
    kappa=2.5

Command-line options take precedence over the parameter file.
"""

import dataclasses
import warnings
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, Optional

from .exceptions import ConfigError
from .io.rates import DEFAULT_RATE_COLUMN
from .simulate.output import FORMATS
from .simulate.rates import ConstantDistribution, GammaDistribution, RateDistribution

DEFAULT_N_SITES = 100


@dataclass(frozen=True)
class SimulationConfig:
    """
    Everything needed to run one simulation.

    Attributes
    ----------
    alphabet : str
        'dna', 'rna', 'protein' or 'codon'
    tree_file : Path, optional
        Single Newick tree (single-tree mode)
    segments_file : Path, optional
        Segment file (multiple-tree mode)
    rates_file : Path, optional
        Tab-separated per-site rate table
    rate_column : str
        Column of the rate table holding the rates
    n_sites : int, optional
        Number of sites (ignored when a rate table is given)
    model : str, optional
        Substitution model name (default depends on the alphabet)
    kappa, omega : float
        Model parameters
    gamma_alpha : float, optional
        Shape of a discrete gamma rate distribution (constant rates if None)
    gamma_categories : int
        Number of gamma categories
    seed : int, optional
        Random seed
    output : Path, optional
        Alignment output file
    output_format : str
        'fasta' or 'phylip'
    tagged_tree : Path, optional
        Write the tree with node ids to this file instead of simulating
    """

    alphabet: str = 'dna'
    tree_file: Optional[Path] = None
    segments_file: Optional[Path] = None
    rates_file: Optional[Path] = None
    rate_column: str = DEFAULT_RATE_COLUMN
    n_sites: Optional[int] = None
    model: Optional[str] = None
    kappa: float = 2.0
    omega: float = 0.4
    gamma_alpha: Optional[float] = None
    gamma_categories: int = 4
    seed: Optional[int] = None
    output: Optional[Path] = None
    output_format: str = 'fasta'
    tagged_tree: Optional[Path] = None

    @property
    def tree_method(self) -> str:
        return 'multiple' if self.segments_file is not None else 'single'

    def merge(self, **overrides: Any) -> "SimulationConfig":
        """Return a copy with every non-None override applied."""
        return dataclasses.replace(
            self, **{key: value for key, value in overrides.items() if value is not None}
        )

    def validate(self) -> None:
        """
        Check that the settings describe a runnable simulation.

        Raises
        ------
        ConfigError
            If a setting is missing or inconsistent
        """
        if self.tree_file is None and self.segments_file is None:
            raise ConfigError("A tree file (--tree) or a segment file (--trees) is required")
        if self.tree_file is not None and self.segments_file is not None:
            raise ConfigError("Give either a single tree or a segment file, not both")
        if self.tagged_tree is not None and self.tree_method == 'multiple':
            raise ConfigError("Tagged tree output is only available for a single tree")
        if self.n_sites is not None and self.n_sites <= 0:
            raise ConfigError(f"Number of sites must be positive, got {self.n_sites}")
        if self.output_format not in FORMATS:
            raise ConfigError(
                f"Unknown output format {self.output_format!r} (expected one of {', '.join(FORMATS)})"
            )
        if self.gamma_alpha is not None and self.gamma_alpha <= 0:
            raise ConfigError(f"Gamma shape must be positive, got {self.gamma_alpha}")
        if self.gamma_categories < 1:
            raise ConfigError(f"Gamma categories must be at least 1, got {self.gamma_categories}")

    def rate_distribution(self) -> RateDistribution:
        """Rate distribution described by the settings."""
        if self.gamma_alpha is None:
            return ConstantDistribution(1.0)
        return GammaDistribution(self.gamma_alpha, self.gamma_categories)

    @classmethod
    def from_params(cls, params: Dict[str, str]) -> "SimulationConfig":
        """
        Build settings from parameter file entries.

        Parameters
        ----------
        params : dict
            Raw ``key -> value`` strings

        Raises
        ------
        ConfigError
            If a value cannot be converted
        """
        values: Dict[str, Any] = {}
        method = params.get('input.tree.method', 'single').lower()
        if method not in ('single', 'multiple'):
            raise ConfigError(f"Unknown input.tree.method option: {method}")

        for key, raw in params.items():
            if key == 'input.tree.method':
                continue
            if key == 'tree.file':
                values['segments_file' if method == 'multiple' else 'tree_file'] = Path(raw)
                continue
            if key not in PARAMETER_KEYS:
                warnings.warn(f"Unknown parameter ignored: {key}")
                continue
            field_name, convert = PARAMETER_KEYS[key]
            if raw.lower() == 'none':
                continue
            try:
                values[field_name] = convert(raw)
            except ValueError:
                raise ConfigError(f"Invalid value for {key}: {raw!r}")

        distribution = values.pop('rate_distribution', None)
        if distribution == 'constant':
            values.pop('gamma_alpha', None)
        elif distribution == 'gamma' and 'gamma_alpha' not in values:
            raise ConfigError("rate_distribution=gamma requires alpha")
        elif distribution not in (None, 'constant', 'gamma'):
            raise ConfigError(f"Unknown rate_distribution: {distribution}")

        return cls(**values)

    @classmethod
    def from_param_file(cls, filepath: Path | str) -> "SimulationConfig":
        """Read settings from a parameter file."""
        with open(filepath) as f:
            return cls.from_params(parse_param_lines(f))


def _lower(value: str) -> str:
    return value.strip().lower()


# Parameter file key -> (config field, converter)
PARAMETER_KEYS = {
    'alphabet': ('alphabet', _lower),
    'input.infos': ('rates_file', Path),
    'input.infos.column': ('rate_column', str),
    'number_of_sites': ('n_sites', int),
    'model': ('model', str),
    'kappa': ('kappa', float),
    'omega': ('omega', float),
    'rate_distribution': ('rate_distribution', _lower),
    'alpha': ('gamma_alpha', float),
    'classes': ('gamma_categories', int),
    'seed': ('seed', int),
    'output.sequence.file': ('output', Path),
    'output.sequence.format': ('output_format', _lower),
    'output.tree.path': ('tagged_tree', Path),
}


def parse_param_lines(lines: Iterable[str]) -> Dict[str, str]:
    """
    Parse ``key=value`` lines.

    Blank lines and lines starting with '#' are skipped; later keys
    override earlier ones.

    Raises
    ------
    ConfigError
        If a line has no '='
    """
    params = {}
    for line_number, raw in enumerate(lines, start=1):
        line = raw.strip()
        if not line or line.startswith('#'):
            continue
        key, sep, value = line.partition('=')
        if not sep or not key.strip():
            raise ConfigError(f"line {line_number}: expected 'key=value', got {line!r}")
        params[key.strip()] = value.strip()
    return params

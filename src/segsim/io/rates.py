"""
Per-site rate tables.

A rate table is a tab-separated file with a header row and one row per
site, read top to bottom as site order. The rate of each site is taken from
a named column (``pr`` by default)::

    site    pr
    1       0.83
    2       1.20
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Iterator

import numpy as np
import pandas as pd

from ..exceptions import FormatError
from ..segments import SiteRange

DEFAULT_RATE_COLUMN = "pr"


@dataclass(frozen=True)
class RateTable:
    """
    Substitution rate scalars indexed by absolute site.

    Attributes
    ----------
    rates : np.ndarray, shape (n_sites,)
        Rate of site i at index i
    """

    rates: np.ndarray

    @property
    def n_sites(self) -> int:
        return len(self.rates)

    def __len__(self) -> int:
        return len(self.rates)

    def rows(self) -> Iterator[tuple[int, float]]:
        """Iterate over ``(site_index, rate)`` pairs."""
        for index, rate in enumerate(self.rates):
            yield index, float(rate)

    def slice(self, site_range: SiteRange) -> np.ndarray:
        """
        Rates of the sites in ``[site_range.start, site_range.end)``.

        Raises
        ------
        ValueError
            If the range does not lie within the table
        """
        if not 0 <= site_range.start <= site_range.end <= self.n_sites:
            raise ValueError(f"Site range {site_range} outside rate table of {self.n_sites} sites")
        return self.rates[site_range.start:site_range.end]


def load_rate_table(filepath: Path | str, column: str = DEFAULT_RATE_COLUMN) -> RateTable:
    """
    Load a tab-separated rate table.

    Parameters
    ----------
    filepath : Path or str
        Path to the table
    column : str
        Name of the column holding the site rates

    Returns
    -------
    RateTable
        Rates in row order; its length is the number of sites to simulate

    Raises
    ------
    FormatError
        If the column is missing, the table is empty or a rate is not a
        finite non-negative number
    """
    try:
        table = pd.read_csv(filepath, sep="\t", dtype=str, keep_default_na=False)
    except pd.errors.EmptyDataError:
        raise FormatError(f"Rate table {filepath} is empty")
    except pd.errors.ParserError as e:
        raise FormatError(f"Could not read rate table {filepath}: {e}") from e

    table.columns = [str(name).strip() for name in table.columns]
    if column not in table.columns:
        raise FormatError(
            f"Rate table {filepath} has no column {column!r} "
            f"(found: {', '.join(table.columns)})"
        )
    if table.empty:
        raise FormatError(f"Rate table {filepath} has no rows")

    raw = table[column].str.strip()
    rates = pd.to_numeric(raw, errors="coerce")
    bad = rates.isna().to_numpy().nonzero()[0]
    if len(bad):
        site = int(bad[0])
        raise FormatError(
            f"Rate table {filepath}: rate {raw.iloc[site]!r} of site {site} is not a number"
        )

    values = rates.to_numpy(dtype=float)
    invalid = np.nonzero(~np.isfinite(values) | (values < 0))[0]
    if len(invalid):
        site = int(invalid[0])
        raise FormatError(
            f"Rate table {filepath}: rate {raw.iloc[site]!r} of site {site} "
            "must be a finite non-negative number"
        )

    return RateTable(rates=values)

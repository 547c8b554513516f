"""
Data loading utilities for delimited genotype and sex files
"""

import warnings
import numpy as np
import pandas as pd
from pathlib import Path
from typing import Union

from ..utils.data_types import GenotypeMatrix, SexRoster, MISSING_VALUE
from ..utils.errors import ConfigurationError

# Robust NA handling: recognize common missing tokens
NA_VALUES = [
    '', 'NA', 'NaN', 'nan', 'NAN', 'na', 'N/A', 'n/a', 'Null', 'NULL',
    '.', '-', '--',
]

VALID_GENOTYPES = (0, 1, 2)


def detect_file_format(filepath: Union[str, Path]) -> str:
    """Detect delimited file format from the extension, falling back to content

    Returns:
        'csv' or 'tsv'
    """
    filepath = Path(filepath)
    name_lower = filepath.name.lower()
    if name_lower.endswith('.gz'):
        name_lower = name_lower[:-3]

    if name_lower.endswith('.csv'):
        return 'csv'
    if name_lower.endswith('.tsv') or name_lower.endswith('.txt'):
        return 'tsv'

    try:
        with filepath.open('r') as handle:
            line = handle.readline()
    except (OSError, UnicodeDecodeError):
        return 'csv'
    # Prefer the character that appears more frequently.
    return 'tsv' if line.count('\t') > line.count(',') else 'csv'


def _read_delimited(filepath: Union[str, Path], **kwargs) -> pd.DataFrame:
    sep = '\t' if detect_file_format(filepath) == 'tsv' else ','
    return pd.read_csv(filepath, sep=sep, na_values=NA_VALUES, keep_default_na=True, **kwargs)


def load_genotype_file(filepath: Union[str, Path]) -> GenotypeMatrix:
    """Load a loci × individuals genotype table

    The first column holds locus names and the header holds individual ids.
    Genotypes are coded 0/1/2; empty cells, NA tokens and -9 are missing.
    Non-numeric calls are counted as missing with a warning.

    Args:
        filepath: Path to a CSV or TSV file

    Returns:
        GenotypeMatrix with missing calls stored as NaN
    """
    filepath = Path(filepath)
    if not filepath.exists():
        raise FileNotFoundError(f"Genotype file not found: {filepath}")

    df = _read_delimited(filepath, index_col=0)
    df.index = df.index.astype(str)
    df.columns = [str(col) for col in df.columns]

    numeric = df.apply(pd.to_numeric, errors='coerce')
    values = np.array(numeric.to_numpy(dtype=np.float64, na_value=np.nan), dtype=np.float64)

    unparsed = df.notna().to_numpy() & np.isnan(values)
    if unparsed.any():
        warnings.warn(
            f"{int(unparsed.sum())} genotype calls are not numeric; "
            "they are counted as missing calls"
        )

    values[values == MISSING_VALUE] = np.nan

    unexpected = ~np.isnan(values) & ~np.isin(values, VALID_GENOTYPES)
    if unexpected.any():
        warnings.warn(
            f"{int(unexpected.sum())} genotype calls are not 0, 1 or 2; "
            "they are counted as scored homozygous calls"
        )

    return GenotypeMatrix(values, locus_names=list(df.index), individual_ids=list(df.columns))


def load_sex_file(filepath: Union[str, Path],
                  id_column: str = 'id',
                  sex_column: str = 'sex') -> SexRoster:
    """Load an individual metrics table with id and sex columns

    Args:
        filepath: Path to a CSV or TSV file
        id_column: Name of the individual id column
        sex_column: Name of the sex column ('F', 'M', anything else is unknown)

    Returns:
        SexRoster
    """
    filepath = Path(filepath)
    if not filepath.exists():
        raise FileNotFoundError(f"Sex file not found: {filepath}")

    df = _read_delimited(filepath, dtype={id_column: str})
    for col in (id_column, sex_column):
        if col not in df.columns:
            raise ConfigurationError(f"Missing required column in {filepath.name}: {col}")
    return SexRoster(df, id_column=id_column, sex_column=sex_column)

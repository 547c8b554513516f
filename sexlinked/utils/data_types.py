"""
Core data structures for sexlinked package
"""

import enum
import numpy as np
import pandas as pd
from typing import Optional, Union, Tuple, Dict, Any, List, Iterator, Mapping

from .errors import ConfigurationError

MISSING_VALUE = -9

# Sex-determination systems: heterogametic-linked flag, homogametic-linked flag,
# and the sex whose call rate identifies heterogametic-linked loci.
SEX_SYSTEMS: Dict[str, Dict[str, str]] = {
    'zw': {
        'heterogametic': 'w.linked',
        'homogametic': 'z.linked',
        'heterogametic_label': 'W-linked',
        'homogametic_label': 'Z-linked',
        'absent_sex': 'M',
    },
    'xy': {
        'heterogametic': 'y.linked',
        'homogametic': 'x.linked',
        'heterogametic_label': 'Y-linked',
        'homogametic_label': 'X-linked',
        'absent_sex': 'F',
    },
}

CALLRATE_COLUMNS = [
    'count.F.miss', 'count.M.miss', 'count.F.scored', 'count.M.scored',
    'ratio', 'p.value', 'p.adjusted', 'scoringRate.F', 'scoringRate.M',
]

HETEROZYGOSITY_COLUMNS = [
    'count.F.het', 'count.M.het', 'count.F.hom', 'count.M.hom',
    'stat', 'stat.p.value', 'stat.p.adjusted', 'heterozygosity.F', 'heterozygosity.M',
]


def validate_system(system: Optional[str]) -> str:
    """Return the sex-determination system or raise ConfigurationError"""
    if system is None:
        raise ConfigurationError(
            "You must specify the sex-determination system with the parameter "
            "'system' ('zw' or 'xy')."
        )
    if system not in SEX_SYSTEMS:
        raise ConfigurationError(f"Parameter 'system' must be 'zw' or 'xy', got {system!r}.")
    return system


def result_columns(system: str) -> List[str]:
    """Ordered output columns of the result table for a system"""
    flags = SEX_SYSTEMS[validate_system(system)]
    return (['index'] + CALLRATE_COLUMNS + [flags['heterogametic'], 'sex.biased']
            + HETEROZYGOSITY_COLUMNS + [flags['homogametic'], 'gametolog'])


class LocusStage(enum.IntEnum):
    """Per-locus progress through the two test families"""
    UNCLASSIFIED = 0
    CALLRATE_TESTED = 1
    EXCLUDED = 2
    HET_TESTED = 3


class GenotypeMatrix:
    """Loci × individuals genotype matrix

    Cells hold 0, 1 (heterozygous), 2, or missing (NaN or -9).
    The matrix is read-only; subsets are new objects.
    """

    def __init__(self, data: Union[np.ndarray, pd.DataFrame],
                 locus_names: Optional[List[str]] = None,
                 individual_ids: Optional[List[str]] = None):

        if isinstance(data, pd.DataFrame):
            if locus_names is None:
                locus_names = [str(name) for name in data.index]
            if individual_ids is None:
                individual_ids = [str(name) for name in data.columns]
            values = data.to_numpy(dtype=np.float64, na_value=np.nan)
        elif isinstance(data, np.ndarray):
            values = np.asarray(data, dtype=np.float64)
        else:
            raise ConfigurationError("Genotypes must be a numpy array or pandas DataFrame")

        if values.ndim != 2:
            raise ConfigurationError(f"Genotype matrix must be 2D (loci × individuals), got {values.ndim}D")

        n_loci, n_individuals = values.shape
        if locus_names is None:
            locus_names = [str(i + 1) for i in range(n_loci)]
        if individual_ids is None:
            individual_ids = [str(i + 1) for i in range(n_individuals)]
        if len(locus_names) != n_loci:
            raise ConfigurationError(
                f"Number of locus names ({len(locus_names)}) does not match loci ({n_loci})"
            )
        if len(individual_ids) != n_individuals:
            raise ConfigurationError(
                f"Number of individual ids ({len(individual_ids)}) does not match "
                f"individuals ({n_individuals})"
            )

        values = values.copy()
        values.flags.writeable = False
        self._data = values
        self._locus_names = list(locus_names)
        self._individual_ids = [str(ind) for ind in individual_ids]

    @property
    def shape(self) -> Tuple[int, int]:
        """Matrix shape (n_loci, n_individuals)"""
        return self._data.shape

    @property
    def n_loci(self) -> int:
        return self.shape[0]

    @property
    def n_individuals(self) -> int:
        return self.shape[1]

    @property
    def locus_names(self) -> List[str]:
        return list(self._locus_names)

    @property
    def individual_ids(self) -> List[str]:
        return list(self._individual_ids)

    def __getitem__(self, key):
        return self._data[key]

    def to_numpy(self) -> np.ndarray:
        return self._data

    def subset_individuals(self, indices: Union[np.ndarray, list]) -> "GenotypeMatrix":
        """Return a GenotypeMatrix restricted to a subset of individuals (columns).

        Row order and locus names are preserved exactly.
        """
        if isinstance(indices, list):
            indices = np.asarray(indices)
        if isinstance(indices, np.ndarray) and indices.dtype == bool:
            indexer = np.flatnonzero(indices)
        else:
            indexer = np.asarray(indices, dtype=int)
        return GenotypeMatrix(
            self._data[:, indexer],
            locus_names=self._locus_names,
            individual_ids=[self._individual_ids[i] for i in indexer],
        )

    def missing_mask(self) -> np.ndarray:
        """Boolean mask of missing calls (NaN or the -9 sentinel)"""
        return np.isnan(self._data) | (self._data == MISSING_VALUE)

    def count_missing(self) -> np.ndarray:
        """Missing calls per locus"""
        return self.missing_mask().sum(axis=1).astype(np.int64)

    def count_scored(self) -> np.ndarray:
        """Non-missing calls per locus"""
        return (~self.missing_mask()).sum(axis=1).astype(np.int64)

    def count_heterozygous(self) -> np.ndarray:
        """Heterozygous (1) calls per locus"""
        return (self._data == 1).sum(axis=1).astype(np.int64)

    def count_homozygous(self) -> np.ndarray:
        """Scored calls other than heterozygous, per locus"""
        return ((~self.missing_mask()) & (self._data != 1)).sum(axis=1).astype(np.int64)


class SexRoster:
    """Individual id -> sex label

    Only the labels 'F' and 'M' are treated as known sex; every other
    value (blank, NaN, 'U', ...) marks the individual as unknown.
    """

    FEMALE = 'F'
    MALE = 'M'

    def __init__(self, data: Union[Mapping[str, Any], pd.Series, pd.DataFrame],
                 id_column: str = 'id',
                 sex_column: str = 'sex'):
        if isinstance(data, pd.DataFrame):
            for col in (id_column, sex_column):
                if col not in data.columns:
                    raise ConfigurationError(f"Missing required column in sex roster: {col}")
            ids = data[id_column].tolist()
            labels = data[sex_column].tolist()
        elif isinstance(data, pd.Series):
            ids = data.index.tolist()
            labels = data.tolist()
        elif isinstance(data, Mapping):
            ids = list(data.keys())
            labels = list(data.values())
        else:
            raise ConfigurationError("Sex roster must be a mapping, Series or DataFrame")

        self._sex: Dict[str, Optional[str]] = {}
        for ind, label in zip(ids, labels):
            self._sex[str(ind)] = label if isinstance(label, str) else None

    def __len__(self) -> int:
        return len(self._sex)

    def sex_of(self, individual_id: str) -> Optional[str]:
        """Known sex ('F' or 'M') of an individual, None if unknown or absent"""
        label = self._sex.get(str(individual_id))
        return label if label in (self.FEMALE, self.MALE) else None

    def ids_for(self, label: str) -> List[str]:
        return [ind for ind, sex in self._sex.items() if sex == label]

    @property
    def females(self) -> List[str]:
        return self.ids_for(self.FEMALE)

    @property
    def males(self) -> List[str]:
        return self.ids_for(self.MALE)

    def has_known_sex(self) -> bool:
        """True if at least one individual is labelled 'F' or 'M'"""
        return any(sex in (self.FEMALE, self.MALE) for sex in self._sex.values())


class SexLinkedResults:
    """Per-locus result table with category views

    Rows follow the input locus order and are never re-sorted. Columns are
    accessed by name; the heterogametic/homogametic flag names depend on
    the sex-determination system.
    """

    def __init__(self, table: pd.DataFrame, system: str,
                 stages: Optional[np.ndarray] = None,
                 n_females: int = 0, n_males: int = 0):
        self.system = validate_system(system)
        missing = [col for col in result_columns(system) if col not in table.columns]
        if missing:
            raise ValueError(f"Result table is missing columns: {', '.join(missing)}")
        self.table = table[result_columns(system)]
        if stages is None:
            excluded = self.table[self.heterogametic_column].to_numpy(dtype=bool) | \
                self.table['sex.biased'].to_numpy(dtype=bool)
            stages = np.where(excluded, LocusStage.EXCLUDED, LocusStage.HET_TESTED)
        if len(stages) != len(table):
            raise ValueError("Stage vector must have one entry per locus")
        self.stages = np.asarray(stages, dtype=np.int8)
        self.n_females = n_females
        self.n_males = n_males

    @property
    def heterogametic_column(self) -> str:
        return SEX_SYSTEMS[self.system]['heterogametic']

    @property
    def homogametic_column(self) -> str:
        return SEX_SYSTEMS[self.system]['homogametic']

    @property
    def n_loci(self) -> int:
        return len(self.table)

    def _mask(self, column: str) -> np.ndarray:
        return self.table[column].to_numpy(dtype=bool)

    @property
    def autosomal_mask(self) -> np.ndarray:
        return ~(self._mask(self.heterogametic_column) | self._mask('sex.biased')
                 | self._mask(self.homogametic_column) | self._mask('gametolog'))

    @property
    def heterogametic(self) -> pd.DataFrame:
        """W-linked (zw) or Y-linked (xy) loci"""
        return self.table[self._mask(self.heterogametic_column)]

    @property
    def sex_biased(self) -> pd.DataFrame:
        return self.table[self._mask('sex.biased')]

    @property
    def homogametic(self) -> pd.DataFrame:
        """Z-linked (zw) or X-linked (xy) loci"""
        return self.table[self._mask(self.homogametic_column)]

    @property
    def gametolog(self) -> pd.DataFrame:
        return self.table[self._mask('gametolog')]

    @property
    def autosomal(self) -> pd.DataFrame:
        return self.table[self.autosomal_mask]

    @property
    def category(self) -> pd.Series:
        """Category label of every locus, in table order"""
        labels = np.full(self.n_loci, 'autosomal', dtype=object)
        # Later assignments would overwrite earlier ones; the flags are disjoint.
        labels[self._mask('gametolog')] = 'gametolog'
        labels[self._mask(self.homogametic_column)] = self.homogametic_column
        labels[self._mask('sex.biased')] = 'sex.biased'
        labels[self._mask(self.heterogametic_column)] = self.heterogametic_column
        return pd.Series(labels, index=self.table.index, name='category')

    def summary(self) -> Dict[str, int]:
        """Locus counts per category"""
        counts = {
            self.heterogametic_column: int(self._mask(self.heterogametic_column).sum()),
            'sex.biased': int(self._mask('sex.biased').sum()),
            self.homogametic_column: int(self._mask(self.homogametic_column).sum()),
            'gametolog': int(self._mask('gametolog').sum()),
            'autosomal': int(self.autosomal_mask.sum()),
        }
        counts['sex.linked'] = counts['sex.biased'] + counts['gametolog'] + \
            counts[self.heterogametic_column] + counts[self.homogametic_column]
        counts['total'] = self.n_loci
        return counts

    def format_summary(self) -> str:
        """Human-readable summary of the classification"""
        counts = self.summary()
        labels = SEX_SYSTEMS[self.system]
        return (
            f"**FINISHED** Total of analyzed loci: {counts['total']}.\n"
            f"Found {counts['sex.linked']} sex-linked loci:\n"
            f"   {counts[self.heterogametic_column]} {labels['heterogametic_label']} loci\n"
            f"   {counts['sex.biased']} sex-biased loci\n"
            f"   {counts[self.homogametic_column]} {labels['homogametic_label']} loci\n"
            f"   {counts['gametolog']} gametologs.\n"
            f"And {counts['autosomal']} autosomal loci."
        )

    def to_dataframe(self) -> pd.DataFrame:
        """Copy of the result table"""
        return self.table.copy()

    def records(self) -> Iterator[Dict[str, Any]]:
        """Iterate over loci as dictionaries keyed by column name"""
        for locus, row in self.table.iterrows():
            record = {'locus': locus}
            record.update(row.to_dict())
            yield record

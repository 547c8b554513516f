import numpy as np
import pandas as pd
import pytest

N_PER_GROUP = 40


def _calls(*runs) -> np.ndarray:
    """Concatenate (value, count) runs into one row of calls"""
    return np.concatenate([np.full(count, value, dtype=float) for value, count in runs])


def build_dataset(system: str):
    """Ten loci typed on 40 homogametic, 40 heterogametic and 3 unsexed individuals.

    Returns the genotype DataFrame (loci × individuals), the sex roster as a
    dict and the expected category of every locus, independent of system.
    """
    nan = np.nan
    cycled = np.resize(np.array([0.0, 1.0, 2.0]), N_PER_GROUP)
    loci = {
        # name: (homogametic sex, heterogametic sex, expected category)
        'autosome_a': (_calls((1, 20), (0, 20)), _calls((1, 20), (0, 20)), 'autosomal'),
        'heterogametic': (_calls((nan, 40)), _calls((0, 40)), 'heterogametic'),
        'sex_biased': (_calls((2, 40)), _calls((2, 20), (nan, 20)), 'sex.biased'),
        'homogametic': (_calls((1, 32), (0, 8)), _calls((0, 40)), 'homogametic'),
        'gametolog': (_calls((0, 40)), _calls((1, 40)), 'gametolog'),
        'autosome_b': (cycled, cycled, 'autosomal'),
        'autosome_c': (_calls((nan, 4), (1, 18), (2, 18)), _calls((-9, 4), (1, 18), (2, 18)), 'autosomal'),
        'autosome_d': (_calls((2, 40)), _calls((2, 40)), 'autosomal'),
        'autosome_e': (_calls((1, 10), (0, 30)), _calls((1, 10), (0, 30)), 'autosomal'),
        'autosome_f': (_calls((1, 30), (2, 10)), _calls((1, 30), (2, 10)), 'autosomal'),
    }

    hom_ids = [f"hom_{i:02d}" for i in range(N_PER_GROUP)]
    het_ids = [f"het_{i:02d}" for i in range(N_PER_GROUP)]
    unknown_ids = ["unk_1", "unk_2", "unk_3"]

    rows = [np.concatenate([hom, het, np.full(len(unknown_ids), nan)]) for hom, het, _ in loci.values()]
    genotypes = pd.DataFrame(rows, index=list(loci), columns=hom_ids + het_ids + unknown_ids)

    hom_sex, het_sex = ('F', 'M') if system == 'xy' else ('M', 'F')
    roster = {ind: hom_sex for ind in hom_ids}
    roster.update({ind: het_sex for ind in het_ids})
    roster.update({'unk_1': 'U', 'unk_2': np.nan, 'unk_3': ''})

    expected = {name: category for name, (_, _, category) in loci.items()}
    return genotypes, roster, expected


def expected_labels(system: str, expected: dict) -> dict:
    """Map generic categories to the flag names of a sex-determination system"""
    names = {
        'xy': {'heterogametic': 'y.linked', 'homogametic': 'x.linked'},
        'zw': {'heterogametic': 'w.linked', 'homogametic': 'z.linked'},
    }[system]
    return {locus: names.get(category, category) for locus, category in expected.items()}


@pytest.fixture
def xy_dataset():
    return build_dataset('xy')


@pytest.fixture
def zw_dataset():
    return build_dataset('zw')

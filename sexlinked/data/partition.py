"""
Split a genotype matrix into female and male sub-matrices
"""

import warnings
import numpy as np
from typing import Tuple

from ..utils.data_types import GenotypeMatrix, SexRoster
from ..utils.errors import ConfigurationError


def partition_by_sex(genotypes: GenotypeMatrix,
                     roster: SexRoster) -> Tuple[GenotypeMatrix, GenotypeMatrix]:
    """Subset the individuals (columns) of a genotype matrix by known sex

    Individuals whose roster label is neither 'F' nor 'M', or who are missing
    from the roster, are left out of both sub-matrices. Column order within
    each sub-matrix follows the source matrix; rows are unchanged.
    Raises ConfigurationError when no individual of known sex is in the matrix.

    Args:
        genotypes: Loci × individuals genotype matrix
        roster: Sex label per individual

    Returns:
        Tuple of (female_genotypes, male_genotypes)
    """
    if not roster.has_known_sex():
        raise ConfigurationError(
            "Females and males in the sex roster must be labelled 'F' or 'M', respectively."
        )

    sexes = np.array([roster.sex_of(ind) or '' for ind in genotypes.individual_ids], dtype=object)
    female = genotypes.subset_individuals(sexes == SexRoster.FEMALE)
    male = genotypes.subset_individuals(sexes == SexRoster.MALE)

    if female.n_individuals == 0 and male.n_individuals == 0:
        raise ConfigurationError(
            "None of the individuals labelled 'F' or 'M' in the sex roster are in the genotype matrix."
        )

    for label, subset in (('females', female), ('males', male)):
        if subset.n_individuals == 0:
            warnings.warn(f"No {label} of known sex in the genotype matrix; their rates will be NaN")

    return female, male

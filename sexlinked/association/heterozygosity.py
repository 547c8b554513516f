"""
Heterozygosity by sex: detection of Z-/X-linked loci and gametologs

Only loci left unclassified by the call-rate phase are tested. Z-linked
(zw) and X-linked (xy) loci are hemizygous in the heterogametic sex and
show lower heterozygosity there; gametologs, read as one locus from both
sex chromosomes, show higher heterozygosity in the heterogametic sex.
"""

import numpy as np
import pandas as pd
from functools import partial
from typing import Tuple

from ..utils.data_types import GenotypeMatrix, SEX_SYSTEMS, validate_system
from ..utils.stats import build_contingency_tables, fdr_correction, independence_tests, safe_rate
from ..utils.context import ExecutionContext

# Maximum FDR-adjusted p-value for a significant heterozygosity difference
STAT_P_ADJUSTED_THRESHOLD = 0.01


def heterozygosity_test_mask(heterogametic: np.ndarray, sex_biased: np.ndarray) -> np.ndarray:
    """Loci eligible for the heterozygosity test: neither heterogametic-linked nor sex-biased"""
    return ~(np.asarray(heterogametic, dtype=bool) | np.asarray(sex_biased, dtype=bool))


def compute_heterozygosity_statistics(female: GenotypeMatrix,
                                      male: GenotypeMatrix,
                                      eligible: np.ndarray,
                                      context: ExecutionContext) -> pd.DataFrame:
    """Count heterozygous/homozygous calls per sex and test eligible loci

    Loci outside ``eligible`` keep NaN for stat and stat.p.value.

    Returns:
        DataFrame with count.F.het, count.M.het, count.F.hom, count.M.hom,
        stat and stat.p.value, one row per locus
    """
    eligible = np.asarray(eligible, dtype=bool)
    counts = pd.DataFrame({
        'count.F.het': female.count_heterozygous(),
        'count.M.het': male.count_heterozygous(),
        'count.F.hom': female.count_homozygous(),
        'count.M.hom': male.count_homozygous(),
    })

    tables = build_contingency_tables(
        counts['count.F.het'].to_numpy(),
        counts['count.M.het'].to_numpy(),
        counts['count.F.hom'].to_numpy(),
        counts['count.M.hom'].to_numpy(),
    )

    stat = np.full(len(counts), np.nan)
    stat_p_value = np.full(len(counts), np.nan)
    if eligible.any():
        worker = partial(independence_tests, progress=context.verbose >= 3 and not context.parallel)
        tested = context.map_chunks(worker, tables[eligible])
        stat[eligible] = tested[:, 0]
        stat_p_value[eligible] = tested[:, 1]

    counts['stat'] = stat
    counts['stat.p.value'] = stat_p_value
    return counts


def classify_heterozygosity(heterozygosity_f: np.ndarray,
                            heterozygosity_m: np.ndarray,
                            stat_p_adjusted: np.ndarray,
                            system: str) -> Tuple[np.ndarray, np.ndarray]:
    """Apply the heterozygosity decision rules

    For loci with a non-NaN adjusted p-value at most 0.01: zw loci more
    heterozygous in males are Z-linked, xy loci more heterozygous in
    females are X-linked; every other significant locus with heterozygosity
    defined in both sexes is a gametolog.

    Returns:
        Tuple of (homogametic_linked, gametolog) boolean arrays
    """
    system = validate_system(system)
    heterozygosity_f = np.asarray(heterozygosity_f, dtype=np.float64)
    heterozygosity_m = np.asarray(heterozygosity_m, dtype=np.float64)
    stat_p_adjusted = np.asarray(stat_p_adjusted, dtype=np.float64)

    with np.errstate(invalid='ignore'):
        significant = ~np.isnan(stat_p_adjusted) & (stat_p_adjusted <= STAT_P_ADJUSTED_THRESHOLD)
        if system == 'zw':
            excess = heterozygosity_m > heterozygosity_f
        else:
            excess = heterozygosity_f > heterozygosity_m

    comparable = ~np.isnan(heterozygosity_f) & ~np.isnan(heterozygosity_m)
    homogametic = significant & excess
    gametolog = significant & comparable & ~excess
    return homogametic, gametolog


def run_heterozygosity_phase(female: GenotypeMatrix,
                             male: GenotypeMatrix,
                             eligible: np.ndarray,
                             system: str,
                             context: ExecutionContext) -> pd.DataFrame:
    """Heterozygosity test, FDR correction and classification for all loci

    Returns:
        DataFrame with every heterozygosity column plus the homogametic flag
        (z.linked or x.linked) and gametolog
    """
    block = compute_heterozygosity_statistics(female, male, eligible, context)

    _, block['stat.p.adjusted'] = fdr_correction(block['stat.p.value'].to_numpy())
    block['heterozygosity.F'] = safe_rate(
        block['count.F.het'], block['count.F.het'] + block['count.F.hom']
    )
    block['heterozygosity.M'] = safe_rate(
        block['count.M.het'], block['count.M.het'] + block['count.M.hom']
    )

    homogametic, gametolog = classify_heterozygosity(
        block['heterozygosity.F'].to_numpy(),
        block['heterozygosity.M'].to_numpy(),
        block['stat.p.adjusted'].to_numpy(),
        system,
    )
    block[SEX_SYSTEMS[system]['homogametic']] = homogametic
    block['gametolog'] = gametolog
    return block

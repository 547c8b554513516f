"""
Call rate by sex: detection of W-/Y-linked and sex-biased loci

Loci on the W (zw) or Y (xy) chromosome are absent from one sex, so they
are scored in one sex and missing in the other. Each locus gets a 2×2
table of sex × {missing, scored}, an independence test, FDR correction
across loci, and the decision rules below.
"""

import numpy as np
import pandas as pd
from functools import partial
from typing import Tuple

from ..utils.data_types import GenotypeMatrix, SEX_SYSTEMS, validate_system
from ..utils.stats import build_contingency_tables, fdr_correction, independence_tests, safe_rate
from ..utils.context import ExecutionContext

# Maximum call rate of the sex lacking the heterogametic chromosome
SCORING_RATE_THRESHOLD = 0.10
# Maximum FDR-adjusted p-value for a significant call-rate difference
P_ADJUSTED_THRESHOLD = 0.01


def compute_callrate_statistics(female: GenotypeMatrix,
                                male: GenotypeMatrix,
                                context: ExecutionContext) -> pd.DataFrame:
    """Count missing/scored calls per sex and test independence of sex and missingness

    Returns:
        DataFrame with count.F.miss, count.M.miss, count.F.scored,
        count.M.scored, ratio and p.value, one row per locus
    """
    counts = pd.DataFrame({
        'count.F.miss': female.count_missing(),
        'count.M.miss': male.count_missing(),
        'count.F.scored': female.count_scored(),
        'count.M.scored': male.count_scored(),
    })

    tables = build_contingency_tables(
        counts['count.F.miss'].to_numpy(),
        counts['count.M.miss'].to_numpy(),
        counts['count.F.scored'].to_numpy(),
        counts['count.M.scored'].to_numpy(),
    )
    worker = partial(independence_tests, progress=context.verbose >= 3 and not context.parallel)
    tested = context.map_chunks(worker, tables)

    counts['ratio'] = tested[:, 0]
    counts['p.value'] = tested[:, 1]
    return counts


def classify_callrate(scoring_rate_f: np.ndarray,
                      scoring_rate_m: np.ndarray,
                      p_adjusted: np.ndarray,
                      system: str) -> Tuple[np.ndarray, np.ndarray]:
    """Apply the call-rate decision rules

    zw: W-linked when the male call rate is at most 0.10 and the adjusted
    p-value at most 0.01. xy: Y-linked, same rule on the female call rate.
    Any other locus with adjusted p-value at most 0.01 and a defined call
    rate in both sexes is sex-biased. NaN rates or p-values never pass a
    threshold.

    Returns:
        Tuple of (heterogametic_linked, sex_biased) boolean arrays
    """
    system = validate_system(system)
    absent_rate = scoring_rate_m if SEX_SYSTEMS[system]['absent_sex'] == 'M' else scoring_rate_f

    with np.errstate(invalid='ignore'):
        significant = np.asarray(p_adjusted, dtype=np.float64) <= P_ADJUSTED_THRESHOLD
        heterogametic = (np.asarray(absent_rate, dtype=np.float64) <= SCORING_RATE_THRESHOLD) & significant
    comparable = ~np.isnan(np.asarray(scoring_rate_f, dtype=np.float64)) & \
        ~np.isnan(np.asarray(scoring_rate_m, dtype=np.float64))
    sex_biased = significant & comparable & ~heterogametic
    return heterogametic, sex_biased


def run_callrate_phase(female: GenotypeMatrix,
                       male: GenotypeMatrix,
                       system: str,
                       context: ExecutionContext) -> pd.DataFrame:
    """Call-rate test, FDR correction and classification for all loci

    Returns:
        DataFrame with every call-rate column plus the heterogametic flag
        (w.linked or y.linked) and sex.biased
    """
    block = compute_callrate_statistics(female, male, context)

    _, block['p.adjusted'] = fdr_correction(block['p.value'].to_numpy())
    block['scoringRate.F'] = safe_rate(
        block['count.F.scored'], block['count.F.scored'] + block['count.F.miss']
    )
    block['scoringRate.M'] = safe_rate(
        block['count.M.scored'], block['count.M.scored'] + block['count.M.miss']
    )

    heterogametic, sex_biased = classify_callrate(
        block['scoringRate.F'].to_numpy(),
        block['scoringRate.M'].to_numpy(),
        block['p.adjusted'].to_numpy(),
        system,
    )
    block[SEX_SYSTEMS[system]['heterogametic']] = heterogametic
    block['sex.biased'] = sex_biased
    return block

"""
Statistical utilities for sex-linked locus detection
"""

import numpy as np
from typing import Tuple
from scipy import stats
from scipy.stats.contingency import odds_ratio
from tqdm import tqdm

# Contingency tables with at least this many observations use the chi-square
# test; smaller tables use Fisher's exact test.
CHI_SQUARE_MIN_TOTAL = 1000


def fdr_correction(pvalues: np.ndarray, alpha: float = 0.05, method: str = 'bh') -> Tuple[np.ndarray, np.ndarray]:
    """Apply False Discovery Rate correction (Benjamini-Hochberg)

    NaN p-values are passed through unchanged and do not count towards the
    number of tests.

    Args:
        pvalues: Array of p-values
        alpha: False discovery rate (default: 0.05)
        method: Method ('bh' for Benjamini-Hochberg)

    Returns:
        Tuple of (rejected_hypotheses, corrected_pvalues)
    """
    if method != 'bh':
        raise ValueError(f"Unknown method: {method}")

    pvalues = np.asarray(pvalues, dtype=np.float64)
    corrected_pvalues = np.full(pvalues.shape, np.nan)
    valid = ~np.isnan(pvalues)
    valid_pvalues = pvalues[valid]

    n = len(valid_pvalues)
    if n > 0:
        pvalues_sortind = np.argsort(valid_pvalues, kind='mergesort')
        pvalues_sorted = valid_pvalues[pvalues_sortind]
        sortrevind = pvalues_sortind.argsort(kind='mergesort')

        i = np.arange(1, n + 1)
        corrected = pvalues_sorted * n / i
        corrected = np.minimum.accumulate(corrected[::-1])[::-1]
        corrected = np.minimum(corrected, 1.0)
        corrected_pvalues[valid] = corrected[sortrevind]

    with np.errstate(invalid='ignore'):
        rejected = corrected_pvalues <= alpha
    return rejected, corrected_pvalues


def safe_rate(numerator: np.ndarray, denominator: np.ndarray) -> np.ndarray:
    """Element-wise ratio, NaN where the denominator is zero"""
    numerator = np.asarray(numerator, dtype=np.float64)
    denominator = np.asarray(denominator, dtype=np.float64)
    rate = np.full(numerator.shape, np.nan)
    nonzero = denominator != 0
    rate[nonzero] = numerator[nonzero] / denominator[nonzero]
    return rate


def build_contingency_tables(f_first: np.ndarray, m_first: np.ndarray,
                             f_second: np.ndarray, m_second: np.ndarray) -> np.ndarray:
    """Stack per-locus 2×2 tables laid out as rows (F, M) × columns (first, second)

    Returns:
        Integer array of shape (n_loci, 2, 2)
    """
    tables = np.empty((len(f_first), 2, 2), dtype=np.int64)
    tables[:, 0, 0] = f_first
    tables[:, 0, 1] = f_second
    tables[:, 1, 0] = m_first
    tables[:, 1, 1] = m_second
    return tables


def replace_zero_cells(table: np.ndarray) -> np.ndarray:
    """Copy of a contingency table with every zero cell set to 1.

    Keeps both tests defined on degenerate tables. This inflates counts of
    loci with extreme (all-or-nothing) cells.
    """
    adjusted = np.array(table, dtype=np.int64, copy=True)
    adjusted[adjusted == 0] = 1
    return adjusted


def uses_chi_square(table: np.ndarray) -> bool:
    """Test selection on the observed (unadjusted) total count"""
    return int(np.sum(table)) >= CHI_SQUARE_MIN_TOTAL


def independence_test(table: np.ndarray) -> Tuple[float, float]:
    """Test independence of sex and the column variable for one 2×2 table

    Chi-square without continuity correction when the table holds at least
    CHI_SQUARE_MIN_TOTAL observations, Fisher's exact test otherwise.

    Returns:
        (statistic, p-value): the chi-square statistic, or the conditional
        maximum-likelihood odds ratio for Fisher's test.
    """
    observed = replace_zero_cells(table)

    if uses_chi_square(table):
        chi2, pvalue, _, _ = stats.chi2_contingency(observed, correction=False)
        return float(chi2), float(pvalue)

    _, pvalue = stats.fisher_exact(observed)
    estimate = odds_ratio(observed, kind='conditional').statistic
    return float(estimate), float(pvalue)


def independence_tests(tables: np.ndarray, progress: bool = False) -> np.ndarray:
    """Run independence_test over a stack of tables

    Args:
        tables: Array of shape (n_tables, 2, 2)
        progress: Show a tqdm progress bar

    Returns:
        Array of shape (n_tables, 2) with columns [statistic, p-value]
    """
    results = np.full((len(tables), 2), np.nan)
    for i, table in enumerate(tqdm(tables, disable=not progress, desc="Loci", unit="locus")):
        results[i] = independence_test(table)
    return results

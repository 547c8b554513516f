"""
Main report function - sex-linked locus identification
"""

import time
import numpy as np
import pandas as pd
from typing import Optional, Union, Mapping, Any
from pathlib import Path

from ..utils.data_types import (
    GenotypeMatrix, SexRoster, SexLinkedResults, LocusStage,
    SEX_SYSTEMS, validate_system, result_columns,
)
from ..utils.context import ExecutionContext, resolve_verbosity
from ..utils.errors import ConfigurationError
from ..data.partition import partition_by_sex
from ..association.callrate import run_callrate_phase
from ..association.heterozygosity import run_heterozygosity_phase, heterozygosity_test_mask
from ..visualization.scatter import plot_sexlinked_report, close_report


def _as_genotype_matrix(genotypes: Union[GenotypeMatrix, pd.DataFrame, np.ndarray]) -> GenotypeMatrix:
    if isinstance(genotypes, GenotypeMatrix):
        return genotypes
    if isinstance(genotypes, (pd.DataFrame, np.ndarray)):
        return GenotypeMatrix(genotypes)
    raise ConfigurationError("Invalid genotype input type; expected GenotypeMatrix, DataFrame or array")


def _as_roster(roster: Union[SexRoster, Mapping[str, Any], pd.Series, pd.DataFrame]) -> SexRoster:
    if isinstance(roster, SexRoster):
        return roster
    return SexRoster(roster)


def report_sexlinked(genotypes: Union[GenotypeMatrix, pd.DataFrame, np.ndarray],
                     roster: Union[SexRoster, Mapping[str, Any], pd.Series, pd.DataFrame],
                     system: Optional[str] = None,
                     ncores: int = 1,
                     plot_display: bool = False,
                     plot_file: Optional[str] = None,
                     plot_dir: Optional[Union[str, Path]] = None,
                     verbose: Optional[int] = None,
                     backend: str = 'loky',
                     context: Optional[ExecutionContext] = None) -> SexLinkedResults:
    """Identify W-/Y-linked, sex-biased, Z-/X-linked, gametologous and autosomal loci

    Phase 1 tests, per locus, whether call rate is independent of sex and
    flags heterogametic-linked (W/Y) and sex-biased loci. Phase 2 tests the
    remaining loci for independence of heterozygosity and sex and flags
    homogametic-linked (Z/X) loci and gametologs. Everything else is
    autosomal.

    Args:
        genotypes: Loci × individuals genotypes (0/1/2, missing as NaN or -9)
        roster: Sex per individual id ('F', 'M', anything else is ignored)
        system: Sex-determination system, 'zw' or 'xy' (required)
        ncores: Number of worker processes for the per-locus tests
        plot_display: Show the call rate and heterozygosity plots
        plot_file: Base name (no extension) for saving the combined plot
        plot_dir: Directory for the saved plot (default: working directory)
        verbose: 0 silent, 1 begin and end, 2 progress, 3 progress bars,
            5 full report (default 2)
        backend: joblib backend used when ncores > 1
        context: Existing execution context (its ncores/backend take precedence;
            its verbose is set to the resolved level)

    Returns:
        SexLinkedResults with one row per locus in input order
    """
    verbose = resolve_verbosity(verbose)
    if verbose == 0:
        plot_display = False

    system = validate_system(system)
    if context is None:
        context = ExecutionContext(ncores=ncores, backend=backend, verbose=verbose)
    else:
        context.verbose = verbose
    genotype = _as_genotype_matrix(genotypes)
    sex_roster = _as_roster(roster)

    if verbose >= 1:
        print("Starting report_sexlinked")

    female, male = partition_by_sex(genotype, sex_roster)
    if verbose >= 2:
        print(f"Detected {female.n_individuals} females and {male.n_individuals} males.")

    start_time = time.time()
    stages = np.full(genotype.n_loci, LocusStage.UNCLASSIFIED, dtype=np.int8)

    with context:
        # Phase 1: call rate by sex
        if verbose >= 2:
            if context.parallel:
                print(f"Starting phase 1. Working in parallel on {context.ncores} cores...")
            else:
                print("Starting phase 1. May take a while...")
        callrate_block = run_callrate_phase(female, male, system, context)
        stages[:] = LocusStage.CALLRATE_TESTED
        context.check_cancelled()

        # Phase 2: heterozygosity by sex, only for loci phase 1 left unclassified
        eligible = heterozygosity_test_mask(
            callrate_block[SEX_SYSTEMS[system]['heterogametic']].to_numpy(),
            callrate_block['sex.biased'].to_numpy(),
        )
        stages[:] = np.where(eligible, LocusStage.HET_TESTED, LocusStage.EXCLUDED)
        if verbose >= 2:
            print(f"Starting phase 2 on {int(eligible.sum())} loci. May take a while...")
        heterozygosity_block = run_heterozygosity_phase(female, male, eligible, system, context)
        context.check_cancelled()

    table = pd.concat([callrate_block, heterozygosity_block], axis=1)
    table.insert(0, 'index', np.arange(1, genotype.n_loci + 1))
    table.index = pd.Index(genotype.locus_names, name='locus')

    results = SexLinkedResults(
        table[result_columns(system)],
        system=system,
        stages=stages,
        n_females=female.n_individuals,
        n_males=male.n_individuals,
    )

    if verbose >= 2:
        print(f"Tests complete ({time.time() - start_time:.2f}s)")
        print(results.format_summary())
    if verbose >= 5:
        sex_linked = results.table[~results.autosomal_mask]
        print(sex_linked.to_string())

    if plot_display or plot_file is not None:
        if verbose >= 2:
            print("Building call rate and heterozygosity plots.")
        plot_report = plot_sexlinked_report(
            results,
            plot_display=plot_display,
            plot_file=plot_file,
            plot_dir=plot_dir,
            verbose=verbose,
        )
        if not plot_display:
            close_report(plot_report)

    if verbose >= 1:
        print("Completed: report_sexlinked")

    return results

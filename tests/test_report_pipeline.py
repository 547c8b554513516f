"""End-to-end tests for report_sexlinked."""

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
import pytest

from conftest import expected_labels
from sexlinked import report_sexlinked, ExecutionContext, LocusStage, GenotypeMatrix, SexRoster
from sexlinked.utils.data_types import result_columns
from sexlinked.utils.errors import ConfigurationError, ComputationCancelled

FLAG_COLUMNS = {
    'xy': ['y.linked', 'sex.biased', 'x.linked', 'gametolog'],
    'zw': ['w.linked', 'sex.biased', 'z.linked', 'gametolog'],
}


@pytest.mark.parametrize("system", ['xy', 'zw'])
def test_report_classifies_every_category(system, request) -> None:
    genotypes, roster, expected = request.getfixturevalue(f"{system}_dataset")

    results = report_sexlinked(genotypes, roster, system=system, verbose=0)

    assert list(results.table.columns) == result_columns(system)
    assert list(results.table.index) == list(genotypes.index)
    assert results.table['index'].tolist() == list(range(1, 11))
    assert results.category.to_dict() == expected_labels(system, expected)
    assert results.n_females == 40 and results.n_males == 40


@pytest.mark.parametrize("system", ['xy', 'zw'])
def test_report_exactly_one_category_per_locus(system, request) -> None:
    genotypes, roster, _ = request.getfixturevalue(f"{system}_dataset")

    results = report_sexlinked(genotypes, roster, system=system, verbose=0)

    flags = results.table[FLAG_COLUMNS[system]].to_numpy(dtype=int)
    per_locus = flags.sum(axis=1) + results.autosomal_mask.astype(int)
    np.testing.assert_array_equal(per_locus, np.ones(results.n_loci, dtype=int))
    assert sum(results.summary()[name] for name in FLAG_COLUMNS[system] + ['autosomal']) == 10


def test_report_excludes_unknown_sex_and_tracks_stages(xy_dataset) -> None:
    genotypes, roster, _ = xy_dataset

    results = report_sexlinked(genotypes, roster, system='xy', verbose=0)
    table = results.table

    assert (table['count.F.miss'] + table['count.F.scored'] == 40).all()
    assert (table['count.M.miss'] + table['count.M.scored'] == 40).all()
    assert table.loc['heterogametic', 'scoringRate.F'] == 0.0
    assert table.loc['homogametic', 'heterozygosity.F'] == pytest.approx(0.8)
    assert np.isnan(table.loc['heterogametic', 'stat.p.value'])
    assert np.isnan(table.loc['sex_biased', 'stat.p.adjusted'])
    assert not np.isnan(table.loc['autosome_a', 'stat.p.value'])

    stages = pd.Series(results.stages, index=table.index)
    assert stages['heterogametic'] == LocusStage.EXCLUDED
    assert stages['sex_biased'] == LocusStage.EXCLUDED
    assert (stages.drop(['heterogametic', 'sex_biased']) == LocusStage.HET_TESTED).all()


def test_report_is_idempotent(xy_dataset) -> None:
    genotypes, roster, _ = xy_dataset

    first = report_sexlinked(genotypes, roster, system='xy', verbose=0).to_dataframe()
    second = report_sexlinked(genotypes, roster, system='xy', verbose=0).to_dataframe()

    pd.testing.assert_frame_equal(first, second, check_exact=True)


def test_report_parallel_matches_sequential(zw_dataset) -> None:
    genotypes, roster, _ = zw_dataset

    sequential = report_sexlinked(genotypes, roster, system='zw', ncores=1, verbose=0)
    parallel = report_sexlinked(genotypes, roster, system='zw', ncores=4, verbose=0)

    pd.testing.assert_frame_equal(
        sequential.table[FLAG_COLUMNS['zw']], parallel.table[FLAG_COLUMNS['zw']]
    )
    pd.testing.assert_frame_equal(sequential.table, parallel.table, check_exact=False, rtol=1e-12)


def test_report_threading_backend_with_shared_context(xy_dataset) -> None:
    genotypes, roster, expected = xy_dataset
    ctx = ExecutionContext(ncores=3, backend='threading')

    results = report_sexlinked(genotypes, roster, system='xy', verbose=0, context=ctx)

    assert results.category.to_dict() == expected_labels('xy', expected)
    assert ctx._parallel is None


def test_report_y_linked_locus_among_ten() -> None:
    n = 20
    rows = np.tile(np.resize([0.0, 1.0, 2.0], 2 * n), (10, 1))
    rows[3, :n] = np.nan        # females unscored
    rows[3, n:] = 0.0           # males fully scored
    ids = [f"F{i}" for i in range(n)] + [f"M{i}" for i in range(n)]
    roster = {ind: ind[0] for ind in ids}

    results = report_sexlinked(GenotypeMatrix(rows, individual_ids=ids), roster, system='xy', verbose=0)

    assert results.table['y.linked'].tolist() == [i == 3 for i in range(10)]
    assert results.table['p.adjusted'].iloc[3] < 0.01
    assert results.summary()['sex.biased'] == 0


def test_report_six_by_six_is_not_significant() -> None:
    # Six unscored vs six scored individuals cannot reach p.adjusted <= 0.01
    # once zero cells are replaced by 1.
    n = 6
    rows = np.tile(np.resize([0.0, 1.0, 2.0], 2 * n), (10, 1))
    rows[3, :n] = 0.0
    rows[3, n:] = np.nan
    ids = [f"F{i}" for i in range(n)] + [f"M{i}" for i in range(n)]
    roster = pd.Series({ind: ind[0] for ind in ids})

    results = report_sexlinked(GenotypeMatrix(rows, individual_ids=ids), roster, system='xy', verbose=0)

    assert results.table['p.value'].iloc[3] == pytest.approx(0.0291, abs=1e-3)
    assert not results.table['y.linked'].any()
    assert not results.table['sex.biased'].any()
    assert results.table['scoringRate.M'].iloc[3] == 0.0


def test_report_with_one_sex_only(zw_dataset) -> None:
    genotypes, roster, _ = zw_dataset
    females_only = {ind: ('F' if sex == 'F' else 'U') for ind, sex in roster.items()}

    with pytest.warns(UserWarning, match="No males"):
        results = report_sexlinked(genotypes, females_only, system='zw', verbose=0)

    assert results.table['scoringRate.M'].isna().all()
    assert results.summary()['w.linked'] == 0
    assert results.summary()['sex.biased'] == 0


def test_report_roster_dataframe_input(xy_dataset) -> None:
    genotypes, roster, expected = xy_dataset
    frame = pd.DataFrame({'id': list(roster), 'sex': list(roster.values())})

    results = report_sexlinked(GenotypeMatrix(genotypes), SexRoster(frame), system='xy', verbose=0)

    assert results.category.to_dict() == expected_labels('xy', expected)


@pytest.mark.parametrize("system", [None, 'XY', 'zz'])
def test_report_requires_valid_system(system, xy_dataset) -> None:
    genotypes, roster, _ = xy_dataset
    with pytest.raises(ConfigurationError):
        report_sexlinked(genotypes, roster, system=system, verbose=0)


def test_report_configuration_errors(xy_dataset) -> None:
    genotypes, roster, _ = xy_dataset

    with pytest.raises(ConfigurationError, match="ncores"):
        report_sexlinked(genotypes, roster, system='xy', ncores=0, verbose=0)
    with pytest.raises(ConfigurationError, match="'F' or 'M'"):
        report_sexlinked(genotypes, {ind: 'U' for ind in roster}, system='xy', verbose=0)
    with pytest.raises(ConfigurationError):
        report_sexlinked(genotypes.values.tolist(), roster, system='xy', verbose=0)


def test_report_cancelled_context(xy_dataset) -> None:
    genotypes, roster, _ = xy_dataset
    ctx = ExecutionContext()
    ctx.cancel()

    with pytest.raises(ComputationCancelled):
        report_sexlinked(genotypes, roster, system='xy', verbose=0, context=ctx)


def test_report_verbosity_levels(xy_dataset, capsys) -> None:
    genotypes, roster, _ = xy_dataset

    report_sexlinked(genotypes, roster, system='xy', verbose=0)
    assert capsys.readouterr().out == ""

    report_sexlinked(genotypes, roster, system='xy', verbose=1)
    out = capsys.readouterr().out
    assert "Starting report_sexlinked" in out
    assert "Completed: report_sexlinked" in out
    assert "**FINISHED**" not in out

    report_sexlinked(genotypes, roster, system='xy')
    out = capsys.readouterr().out
    assert "Detected 40 females and 40 males." in out
    assert "**FINISHED** Total of analyzed loci: 10." in out
    assert "Found 4 sex-linked loci:" in out
    assert "1 Y-linked loci" in out
    assert "And 6 autosomal loci." in out

    report_sexlinked(genotypes, roster, system='xy', verbose=5)
    out = capsys.readouterr().out
    assert "gametolog" in out and "heterogametic" in out


def test_report_saves_plot_and_closes_figures(xy_dataset, tmp_path) -> None:
    genotypes, roster, _ = xy_dataset
    plt.close('all')

    report_sexlinked(
        genotypes, roster, system='xy', verbose=0,
        plot_file="sexlinked_plot", plot_dir=tmp_path / "plots",
    )

    assert (tmp_path / "plots" / "sexlinked_plot.png").exists()
    assert plt.get_fignums() == []


def test_report_progress_bars_follow_verbose_with_shared_context(xy_dataset, capsys) -> None:
    genotypes, roster, _ = xy_dataset
    ctx = ExecutionContext(ncores=1, verbose=0)

    report_sexlinked(genotypes, roster, system='xy', verbose=3, context=ctx)

    assert ctx.verbose == 3
    assert "Loci" in capsys.readouterr().err

"""
Call rate and heterozygosity scatter plots for sex-linked locus results
"""

import pandas as pd
import matplotlib.pyplot as plt
import seaborn as sns
from pathlib import Path
from typing import Optional, Union, Dict, Tuple

from ..utils.data_types import SexLinkedResults

BACKGROUND_COLOR = '#545454'    # grey33
SEX_BIASED_COLOR = '#1874CD'    # dodgerblue3
HETEROGAMETIC_COLOR = '#FFD700'  # gold
GAMETOLOG_COLOR = '#66CD00'     # chartreuse3
HOMOGAMETIC_COLOR = '#FF7F00'   # darkorange1


def _scatter_layer(ax, data: pd.DataFrame, x: str, y: str, color: str,
                   label: str, point_size: float) -> None:
    data = data[[x, y]].dropna()
    if data.empty:
        return
    sns.scatterplot(data=data, x=x, y=y, color=color, label=f"{label} ({len(data)})",
                    s=point_size, edgecolor=None, ax=ax)


def _finish_axes(ax, xlabel: str, ylabel: str, title: str) -> None:
    ax.set_xlim(0, 1)
    ax.set_ylim(0, 1)
    ax.set_xlabel(xlabel)
    ax.set_ylabel(ylabel)
    ax.set_title(title)
    ax.grid(True, alpha=0.3)
    if ax.get_legend_handles_labels()[0]:
        ax.legend(loc='best', fontsize='small')


def draw_callrate_plot(ax, results: SexLinkedResults, point_size: float = 12.0) -> None:
    """Female vs male call rate; heterogametic-linked and sex-biased loci highlighted"""
    table = results.table
    background = ~(table[results.heterogametic_column].to_numpy(dtype=bool)
                   | table['sex.biased'].to_numpy(dtype=bool))
    heterogametic_label = results.heterogametic_column

    _scatter_layer(ax, table[background], 'scoringRate.F', 'scoringRate.M',
                   BACKGROUND_COLOR, 'other', point_size)
    _scatter_layer(ax, results.sex_biased, 'scoringRate.F', 'scoringRate.M',
                   SEX_BIASED_COLOR, 'sex.biased', point_size)
    _scatter_layer(ax, results.heterogametic, 'scoringRate.F', 'scoringRate.M',
                   HETEROGAMETIC_COLOR, heterogametic_label, point_size)
    _finish_axes(ax, "Call rate Females", "Call rate Males", "Call rate by sex")


def draw_heterozygosity_plot(ax, results: SexLinkedResults, point_size: float = 12.0) -> None:
    """Female vs male heterozygosity; homogametic-linked loci and gametologs highlighted"""
    _scatter_layer(ax, results.autosomal, 'heterozygosity.F', 'heterozygosity.M',
                   BACKGROUND_COLOR, 'autosomal', point_size)
    _scatter_layer(ax, results.gametolog, 'heterozygosity.F', 'heterozygosity.M',
                   GAMETOLOG_COLOR, 'gametolog', point_size)
    _scatter_layer(ax, results.homogametic, 'heterozygosity.F', 'heterozygosity.M',
                   HOMOGAMETIC_COLOR, results.homogametic_column, point_size)
    _finish_axes(ax, "% Heterozygous Females", "% Heterozygous Males", "Heterozygosity by sex")


def create_callrate_plot(results: SexLinkedResults,
                         figsize: Tuple[int, int] = (6, 6),
                         point_size: float = 12.0) -> plt.Figure:
    """Create the call rate scatter plot

    Returns:
        matplotlib Figure object
    """
    fig, ax = plt.subplots(figsize=figsize)
    draw_callrate_plot(ax, results, point_size=point_size)
    plt.tight_layout()
    return fig


def create_heterozygosity_plot(results: SexLinkedResults,
                               figsize: Tuple[int, int] = (6, 6),
                               point_size: float = 12.0) -> plt.Figure:
    """Create the heterozygosity scatter plot

    Returns:
        matplotlib Figure object
    """
    fig, ax = plt.subplots(figsize=figsize)
    draw_heterozygosity_plot(ax, results, point_size=point_size)
    plt.tight_layout()
    return fig


def create_combined_plot(results: SexLinkedResults,
                         figsize: Tuple[int, int] = (12, 6),
                         point_size: float = 12.0) -> plt.Figure:
    """Both plots side by side"""
    fig, (ax1, ax2) = plt.subplots(1, 2, figsize=figsize)
    draw_callrate_plot(ax1, results, point_size=point_size)
    draw_heterozygosity_plot(ax2, results, point_size=point_size)
    plt.tight_layout()
    return fig


def plot_sexlinked_report(results: SexLinkedResults,
                          plot_display: bool = True,
                          plot_file: Optional[str] = None,
                          plot_dir: Optional[Union[str, Path]] = None,
                          dpi: int = 300,
                          point_size: float = 12.0,
                          verbose: int = 0) -> Dict:
    """Generate the call rate and heterozygosity plots

    Args:
        results: Output of report_sexlinked
        plot_display: Show the figures
        plot_file: Base name (no extension) for saving the combined figure as PNG
        plot_dir: Directory for the saved figure (default: working directory)
        dpi: Resolution of the saved figure
        point_size: Marker size
        verbose: Print progress information when >= 2

    Returns:
        Dictionary with plot objects and the list of files created
    """
    report = {
        'plots': {},
        'files_created': []
    }

    report['plots']['callrate'] = create_callrate_plot(results, point_size=point_size)
    report['plots']['heterozygosity'] = create_heterozygosity_plot(results, point_size=point_size)
    report['plots']['combined'] = create_combined_plot(results, point_size=point_size)

    if plot_file is not None:
        out_dir = Path(plot_dir) if plot_dir is not None else Path.cwd()
        out_dir.mkdir(parents=True, exist_ok=True)
        filename = out_dir / f"{plot_file}.png"
        report['plots']['combined'].savefig(filename, dpi=dpi, bbox_inches='tight')
        report['files_created'].append(str(filename))
        if verbose >= 2:
            print(f"Saved plot to {filename}")

    if plot_display:
        plt.show()

    return report


def close_report(report: Dict) -> None:
    """Close every figure held by a plot report"""
    for fig in report['plots'].values():
        plt.close(fig)

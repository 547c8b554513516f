"""
sexlinked: identification of sex-linked and autosomal loci in SNP datasets

Compares call rate and heterozygosity between individuals of known sex to
separate W-/Y-linked, sex-biased, Z-/X-linked, gametologous and autosomal
loci.
"""

__version__ = "0.1.0"
__author__ = "sexlinked Development Team"

from .core.report import report_sexlinked
from .utils.data_types import GenotypeMatrix, SexRoster, SexLinkedResults, LocusStage
from .utils.context import ExecutionContext
from .utils.errors import ConfigurationError, ComputationCancelled
from .utils.stats import fdr_correction
from .data.partition import partition_by_sex
from .data.loaders import load_genotype_file, load_sex_file
from .visualization.scatter import plot_sexlinked_report

__all__ = [
    'report_sexlinked',
    'GenotypeMatrix',
    'SexRoster',
    'SexLinkedResults',
    'LocusStage',
    'ExecutionContext',
    'ConfigurationError',
    'ComputationCancelled',
    'fdr_correction',
    'partition_by_sex',
    'load_genotype_file',
    'load_sex_file',
    'plot_sexlinked_report',
]

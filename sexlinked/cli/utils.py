import argparse
from typing import List, Optional


def parse_args(argv: Optional[List[str]] = None):
    """Parse command line arguments for the sex-linked loci report"""
    parser = argparse.ArgumentParser(
        description="Identify sex-linked and autosomal loci from call rate and heterozygosity by sex",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )

    # Required arguments
    parser.add_argument("--genotype", "-g", required=True,
                       help="Genotype file (CSV/TSV, loci in rows, individual ids in header)")
    parser.add_argument("--sex-file", "-s", required=True,
                       help="Individual metrics file with id and sex columns")
    parser.add_argument("--system", required=True, choices=['zw', 'xy'],
                       help="Sex-determination system")

    # Optional arguments
    parser.add_argument("--id-column", default='id',
                       help="Column name for individual ids in the sex file")
    parser.add_argument("--sex-column", default='sex',
                       help="Column name for sex ('F'/'M') in the sex file")
    parser.add_argument("--ncores", type=int, default=1,
                       help="Number of worker processes")
    parser.add_argument("--output", "-o", default="sexlinked_results.csv",
                       help="Output CSV for the per-locus result table")

    # Plots
    parser.add_argument("--plot-dir", default=None,
                       help="Directory for the saved plot (default: working directory)")
    parser.add_argument("--plot-file", default=None,
                       help="Base name (no extension) of the saved plot")
    parser.add_argument("--plot-display", action='store_true',
                       help="Show the plots")
    parser.add_argument("--verbose", "-v", type=int, default=2,
                       help="Verbosity: 0 silent, 1 begin and end, 2 progress, 3 progress bars, 5 full report")

    return parser.parse_args(argv)

#!/usr/bin/env python3
"""
Sex-linked loci report from delimited genotype and sex files
"""
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from sexlinked.cli.utils import parse_args
from sexlinked.core.report import report_sexlinked
from sexlinked.data.loaders import load_genotype_file, load_sex_file


def main(argv=None):
    args = parse_args(argv)

    genotypes = load_genotype_file(args.genotype)
    roster = load_sex_file(args.sex_file, id_column=args.id_column, sex_column=args.sex_column)
    if args.verbose >= 2:
        print(f"Loaded {genotypes.n_loci} loci for {genotypes.n_individuals} individuals")

    results = report_sexlinked(
        genotypes,
        roster,
        system=args.system,
        ncores=args.ncores,
        plot_display=args.plot_display,
        plot_file=args.plot_file,
        plot_dir=args.plot_dir,
        verbose=args.verbose,
    )

    output = Path(args.output)
    output.parent.mkdir(parents=True, exist_ok=True)
    results.to_dataframe().to_csv(output, index_label='locus')
    if args.verbose >= 1:
        print(f"Results written to {output}")
    return results


if __name__ == '__main__':
    main()

"""
Genotype and sex roster input handling
"""

from .partition import partition_by_sex
from .loaders import load_genotype_file, load_sex_file

__all__ = ['partition_by_sex', 'load_genotype_file', 'load_sex_file']

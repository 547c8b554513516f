"""
Per-locus independence tests and classification rules
"""

from .callrate import run_callrate_phase, classify_callrate
from .heterozygosity import run_heterozygosity_phase, classify_heterozygosity, heterozygosity_test_mask

__all__ = [
    'run_callrate_phase',
    'classify_callrate',
    'run_heterozygosity_phase',
    'classify_heterozygosity',
    'heterozygosity_test_mask',
]

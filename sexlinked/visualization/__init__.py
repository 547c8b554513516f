"""
Scatter plots of call rate and heterozygosity by sex
"""

from .scatter import plot_sexlinked_report, create_callrate_plot, create_heterozygosity_plot

__all__ = ['plot_sexlinked_report', 'create_callrate_plot', 'create_heterozygosity_plot']

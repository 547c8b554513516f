"""
Top-level analysis entry point
"""

from .report import report_sexlinked

__all__ = ['report_sexlinked']

"""
Exceptions raised by the sexlinked package
"""


class ConfigurationError(ValueError):
    """Invalid analysis configuration, raised before any computation starts."""


class ComputationCancelled(RuntimeError):
    """The execution context was cancelled before the analysis completed."""

"""
Shared data structures, statistics and execution helpers
"""

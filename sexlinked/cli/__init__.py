"""
Command line helpers
"""

"""
Commission engine.

Multi-level CPA commission distribution and affiliate category progression.
"""

__version__ = "0.1.0"

"""
unitctl — resolve graphs of idempotent provisioning units.

Each unit knows how to check whether its goal already holds and how to
remediate it when it does not. Units may require other units; the
engine walks that graph depth-first and stops at the first failure.
"""

__version__ = "0.1.0"

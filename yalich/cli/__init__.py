"""CLI module for yalich.

This module provides the command-line interface that loads a configuration
file, runs the license pipeline and writes the license table.
"""

from .main import cli, main, run

__all__ = [
    "cli",
    "main",
    "run",
]

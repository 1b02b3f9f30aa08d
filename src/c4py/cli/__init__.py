"""
c4py Command-Line Interface
===========================

This package provides the command-line tools for c4py:

- **c4run**: Mini-C interpreter

Each tool is implemented as a Click-based CLI application with
comprehensive help and error reporting.
"""

__all__ = ["c4run"]

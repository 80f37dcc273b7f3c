"""
cmasm Command-Line Interface
============================

This package provides command-line tools for cmasm:

- **cmlex**: Dump the token stream of a Cm assembly source file

Each tool is implemented as a Click-based CLI application with
comprehensive help and error reporting.
"""

__all__ = ["cmlex"]

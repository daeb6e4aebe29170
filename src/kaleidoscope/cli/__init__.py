"""
Kaleidoscope Command-Line Interface
===================================

This package provides the ``kaleido`` command-line tool, a Click-based
application that reads Kaleidoscope source and reports each top-level
unit as it is parsed.
"""

__all__ = ["kaleido"]

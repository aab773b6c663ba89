"""
BRISC Command-Line Interface
============================

- **assemble**: BRISC assembler

The tool is a Click-based CLI application with help and error reporting.
"""

__all__ = ["assemble"]

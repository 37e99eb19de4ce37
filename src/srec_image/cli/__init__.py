"""
SREC Image Command-Line Interface
=================================

This package provides the srecimg command-line tool for inspecting,
extracting and patching Motorola S-record files.

The tool is implemented as a Click-based CLI application with
comprehensive help and error reporting.
"""

__all__ = ["srecimg"]

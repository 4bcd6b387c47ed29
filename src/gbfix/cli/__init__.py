"""
gbfix Command-Line Interface
============================

This package provides the `gbfix` command-line tool:

- **gbfix fix**: Pad/truncate, edit header fields and validate a ROM image
- **gbfix info**: Show the decoded cartridge header

The tool is implemented as a Click-based CLI application with
comprehensive help and error reporting.
"""

__all__ = ["gbfix"]

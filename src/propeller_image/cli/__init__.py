"""
Propeller Image Command-Line Interface
======================================

This package provides the command-line tool for the toolkit:

- **propimg**: Inspect, validate, retarget and convert application images

The tool is implemented as a Click-based CLI application with
comprehensive help and error reporting.
"""

__all__ = ["propimg"]

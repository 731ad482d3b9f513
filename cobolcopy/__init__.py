"""COBOL copybook inlining, name extraction and parse-error diagnostics."""

__version__ = "0.1.0"
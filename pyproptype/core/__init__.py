"""Core components for pyproptype.

This package contains the checker factory and validation pipeline, the
validator spec normalization, the error types, the record-level helper and
the configuration manager.
"""

"""Utility modules for pyproptype.

This package contains helpers for loading records and field declarations
from JSON and TOML files.
"""

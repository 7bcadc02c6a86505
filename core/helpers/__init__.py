"""Shared helper utilities for consistency across the journal."""

from .validation import finite_float, optional_float, parse_datetime, string_list

__all__ = [
    "finite_float",
    "optional_float",
    "parse_datetime",
    "string_list",
]

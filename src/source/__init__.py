"""Table data sources.

This module streams relational tables as CSV bytes for export.
"""

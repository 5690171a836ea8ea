"""Export pipeline orchestration.

This module wires table sources, streaming transforms, and storage
uploaders into bounded-memory export runs.
"""

"""Object storage layer.

This module uploads export streams to durable object storage.
"""

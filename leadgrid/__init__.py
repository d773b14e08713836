"""Collect business leads from grounded maps search results."""

__version__ = "0.1.0"

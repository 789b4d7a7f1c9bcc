"""Admission control and response caching for external profile lookups."""

__version__ = "0.1.0"

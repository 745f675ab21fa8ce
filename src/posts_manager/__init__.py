"""Headless orchestration layer for a paginated, filterable posts manager."""

__version__ = "0.1.0"

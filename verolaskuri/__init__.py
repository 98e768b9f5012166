"""Verolaskuri - Tax and bookkeeping tools for Finnish sole-trader doctors."""

__version__ = "0.1.0"

"""Workforce ledger API: employee lifecycle and attendance."""

__version__ = "0.1.0"

"""Browsable, filterable client views over remote flight and passenger data."""

__version__ = "0.1.0"

"""Payroll administration core: periods, records and their lifecycles."""

__version__ = "0.1.0"

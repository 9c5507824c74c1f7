"""Genetic optimizer for monthly shift schedules."""

__version__ = "1.0.0"

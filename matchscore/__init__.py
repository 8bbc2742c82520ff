"""Résumé / job description match scoring and recommendation engine."""

__version__ = "0.1.0"

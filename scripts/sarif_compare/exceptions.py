#!/usr/bin/env python3
"""
SARIF Compare Exceptions Module

Custom exception classes for the SARIF comparison tool.
Centralized exception definitions for consistent error handling.

The comparison core never raises for well-typed input; these exceptions
belong to the layers around it (ingestion, session, configuration).
"""

__all__ = [
    "SarifCompareError",
    "SarifLoadError",
    "DatasetLimitError",
    "ConfigError",
]


class SarifCompareError(Exception):
    """Base exception for all SARIF Compare errors"""
    pass


class SarifLoadError(SarifCompareError):
    """Raised when a SARIF document cannot be read, parsed or validated"""
    pass


class DatasetLimitError(SarifCompareError):
    """Raised when a comparison session slot is out of range or the session is full"""
    pass


class ConfigError(SarifCompareError):
    """Raised when a configuration file cannot be loaded"""
    pass

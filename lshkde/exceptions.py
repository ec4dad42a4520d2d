# lshkde/exceptions.py
"""
Exception types raised by the density engines.

InvalidArgumentError covers caller mistakes (bad eps, bandwidth, shapes).
InternalInvariantError marks a broken construction invariant and is never
expected in correct use.
"""

from __future__ import annotations


class LSHKDEError(Exception):
    """Base class for all lshkde errors."""


class InvalidArgumentError(LSHKDEError, ValueError):
    """Raised when an engine is constructed or queried with invalid input."""


class InternalInvariantError(LSHKDEError, RuntimeError):
    """Raised when a sampling level or density guess is out of range."""

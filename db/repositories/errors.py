"""
Repository-layer exceptions for dashboard reads.
"""

from __future__ import annotations


class RepositoryError(Exception):
    """Raised when a read against the hosted database fails."""

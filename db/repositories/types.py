"""
Typed DTOs returned by repository reads.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ClientSummary:
    """
    One selectable client for the dashboard filter.
    """

    client_id: int
    name: str

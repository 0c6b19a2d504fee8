"""
attribution/errors.py

Failure types raised or reported by the attribution engine.
"""

from __future__ import annotations

from dataclasses import dataclass


class ConfigurationError(ValueError):
    """
    Raised when an aggregation call is configured with an unsupported value
    (e.g. an unknown ``group_by`` granularity).

    Fatal to the single call; never retried.
    """


@dataclass(frozen=True)
class DataIntegrityWarning:
    """
    Non-fatal report of one input record excluded from aggregation.

    Attributes
    ----------
    record_kind:
        ``"lead"`` or the spend feed name (``"ppc"``, ``"lsa"``, ``"seo"``).
    index:
        Position of the offending record in its input collection.
    field:
        Name of the field that failed the check.
    value:
        The rejected value, as received.
    reason:
        Short description, e.g. ``"negative"`` or ``"not a number"``.
    """

    record_kind: str
    index: int
    field: str
    value: object
    reason: str

    def describe(self) -> str:
        return (
            f"{self.record_kind}[{self.index}].{self.field}={self.value!r} "
            f"excluded: {self.reason}"
        )

"""
Repository package exports.
"""

from db.repositories.call_repository import CallRepository
from db.repositories.client_repository import ClientRepository
from db.repositories.errors import RepositoryError
from db.repositories.lead_repository import LeadRepository
from db.repositories.spend_repository import SpendRepository
from db.repositories.types import ClientSummary

__all__ = [
    "CallRepository",
    "ClientRepository",
    "ClientSummary",
    "LeadRepository",
    "RepositoryError",
    "SpendRepository",
]

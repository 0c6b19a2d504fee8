"""
Model package exports.

Import all SQLAlchemy models here so metadata registration works without
extra imports.
"""

from db.models.ai_call import AICallRecord
from db.models.client_settings import ClientSettings
from db.models.lead import Lead
from db.models.spend import GoogleAdsCampaignData, LSASpend, SEOSpend

__all__ = [
    "AICallRecord",
    "ClientSettings",
    "GoogleAdsCampaignData",
    "Lead",
    "LSASpend",
    "SEOSpend",
]

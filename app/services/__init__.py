"""
app/services package marker.
"""

from app.services.dashboard_service import (
    CallEngagement,
    ChannelReport,
    DashboardService,
    SpcCrossCheck,
)

__all__ = [
    "CallEngagement",
    "ChannelReport",
    "DashboardService",
    "SpcCrossCheck",
]

"""ORM models package export."""

from quotekit.models.client import Client
from quotekit.models.quote import Quote, QuoteStatus, ServiceType
from quotekit.models.settings_document import SettingsDocument
from quotekit.models.team_member import TeamMember

__all__ = [
    "Client",
    "Quote",
    "QuoteStatus",
    "ServiceType",
    "SettingsDocument",
    "TeamMember",
]

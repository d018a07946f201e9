"""
Models package — the Deal record and the SQLAlchemy settings table.
"""

from deal_hunter.models.app_setting import AppSetting
from deal_hunter.models.base import Base
from deal_hunter.models.deal import Deal

__all__ = ["AppSetting", "Base", "Deal"]

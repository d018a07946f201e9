"""
Deal Hunter — Persisted Settings Model

One row per setting key. Keys are namespaced strings:
    aiProvider            -> active provider name
    apiKeys.<provider>    -> API key for that provider
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import TIMESTAMP, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from deal_hunter.models.base import Base


class AppSetting(Base):
    """Key/value row backing the settings store."""

    __tablename__ = "app_settings"

    key: Mapped[str] = mapped_column(
        String(128), primary_key=True, comment="Namespaced key, e.g. 'apiKeys.openai'"
    )
    value: Mapped[str] = mapped_column(
        Text, nullable=False, comment="Raw string value"
    )
    updated_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        comment="Last time this key was written",
    )

    def __repr__(self) -> str:
        # Never print stored secrets
        return f"<AppSetting key={self.key!r}>"

"""SQLAlchemy model for installed shop credentials."""

from datetime import datetime

from sqlalchemy import DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from shopbridge.common.models import Base, TimestampMixin, utcnow


class ShopModel(Base, TimestampMixin):
    __tablename__ = "shops"

    tenant_id: Mapped[str] = mapped_column(String(255), primary_key=True)
    access_credential: Mapped[str] = mapped_column(Text, nullable=False)
    scope: Mapped[str] = mapped_column(String(1024), nullable=False, default="")
    installed_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

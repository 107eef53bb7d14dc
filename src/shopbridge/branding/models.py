"""SQLAlchemy model for per-shop branding configuration."""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from shopbridge.common.models import Base, TimestampMixin


class BrandingConfigModel(Base, TimestampMixin):
    __tablename__ = "branding_configs"

    # Matches shops.tenant_id by convention; not a foreign key.
    tenant_id: Mapped[str] = mapped_column(String(255), primary_key=True)
    sender_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    sender_email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    primary_color: Mapped[str | None] = mapped_column(String(7), nullable=True)
    secondary_color: Mapped[str | None] = mapped_column(String(7), nullable=True)
    logo_url: Mapped[str | None] = mapped_column(String(2048), nullable=True)

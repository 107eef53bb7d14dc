"""SQLAlchemy models for compliance audit records and customer-level data."""

from sqlalchemy import JSON, String
from sqlalchemy.orm import Mapped, mapped_column

from shopbridge.common.models import Base, TimestampMixin, generate_uuid


class ComplianceRequestModel(Base, TimestampMixin):
    __tablename__ = "compliance_requests"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    topic: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    tenant_id: Mapped[str | None] = mapped_column(String(255), nullable=True, index=True)
    customer_email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    payload: Mapped[dict] = mapped_column(JSON, default=dict)


class AbandonedCartModel(Base, TimestampMixin):
    """Checkout rows written by the event pipeline behind checkouts/create."""

    __tablename__ = "abandoned_carts"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    tenant_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    checkout_token: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    payload: Mapped[dict] = mapped_column(JSON, default=dict)

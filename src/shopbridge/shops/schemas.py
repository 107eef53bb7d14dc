"""Pydantic schemas for install status."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class InstallStatus(BaseModel):
    installed: bool
    tenant_id: Optional[str] = None
    installed_at: Optional[datetime] = None

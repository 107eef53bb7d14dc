"""Pydantic schemas for branding configuration."""

import re
from typing import Optional

from pydantic import BaseModel, Field, field_validator

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
_COLOR_RE = re.compile(r"^#(?:[0-9a-fA-F]{3}){1,2}$")


class BrandingConfigUpdate(BaseModel):
    tenant_id: Optional[str] = None
    shop: Optional[str] = None
    sender_name: Optional[str] = Field(None, max_length=255)
    sender_email: Optional[str] = None
    primary_color: Optional[str] = None
    secondary_color: Optional[str] = None
    logo_url: Optional[str] = Field(None, max_length=2048)

    @field_validator("sender_email")
    @classmethod
    def _check_email(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not _EMAIL_RE.match(v):
            raise ValueError("sender_email must be a valid email address")
        return v

    @field_validator("primary_color", "secondary_color")
    @classmethod
    def _check_color(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not _COLOR_RE.match(v):
            raise ValueError("colors must be hex values like #1a2b3c")
        return v

    @field_validator("logo_url")
    @classmethod
    def _check_logo_url(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.startswith(("https://", "http://")):
            raise ValueError("logo_url must be an http(s) URL")
        return v

    def branding_fields(self) -> dict[str, Optional[str]]:
        """Fields the caller explicitly sent, minus the tenant keys."""
        return self.model_dump(exclude_unset=True, exclude={"tenant_id", "shop"})

"""Shared Pydantic schemas for Shopbridge."""

from datetime import datetime

from pydantic import BaseModel


class HealthEnv(BaseModel):
    has_client_id: bool
    has_client_secret: bool
    has_database: bool


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str = "0.1.0"
    service: str = "shopbridge"
    timestamp: datetime
    env: HealthEnv


class ErrorResponse(BaseModel):
    error: str
    code: str
    detail: str = ""


class SuccessResponse(BaseModel):
    success: bool = True
    message: str = ""

"""Shared response schemas."""

from typing import Any

from pydantic import BaseModel


class HealthResponse(BaseModel):
    status: str = "healthy"
    service: str
    version: str
    env: str


class HomeResponse(BaseModel):
    message: str
    version: str
    status: str = "running"


class ErrorResponse(BaseModel):
    """Body of every API error response."""

    error: bool = True
    code: str
    message: str
    path: str
    request_id: str | None = None
    details: dict[str, Any] | None = None
    validation: dict[str, list[str]] | None = None


class PaginationMeta(BaseModel):
    page: int
    per_page: int
    total_count: int
    total_pages: int

"""
PerkHub — Pydantic Request/Response Schemas
=============================================

What:  Pydantic models defining the API contract between the Query Service
       and its clients (including the Search-and-Filter view).
How:   FastAPI validates request bodies against the *Create/*Update models and
       serializes responses through the *Read/*Response models. The view
       parses GET /perks/all bodies with the same PerkListResponse model.

Wire format:
    JSON keys are camelCase (discountPercent, createdBy); Python attributes
    are snake_case. Both spellings are accepted on input.
"""

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base for every API model: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class UserSummary(CamelModel):
    """Creator info embedded in each perk (never includes the API token)."""
    id: uuid.UUID
    name: str = ""
    email: str = ""

    @property
    def display_name(self) -> str:
        return self.name or self.email


class PerkRead(CamelModel):
    """
    Full representation of a perk.

    Returned inside PerkListResponse and PerkResponse. Timestamps are
    optional so older servers (or hand-written fixtures) still parse.
    """
    id: uuid.UUID = Field(description="Unique perk identifier (UUID)")
    title: str = Field(description="Display name")
    merchant: Optional[str] = Field(default=None, description="Owning merchant name")
    category: str = Field(default="other", description="Classification tag")
    discount_percent: int = Field(default=0, description="Discount in percent; 0 = no badge")
    description: Optional[str] = Field(default=None)
    created_by: Optional[UserSummary] = Field(default=None, description="Creator of the perk")
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class PerkListResponse(CamelModel):
    """Body of GET /api/perks/all and GET /api/perks: {"perks": [...]}."""
    perks: List[PerkRead] = Field(default_factory=list)


class PerkResponse(CamelModel):
    """Body of single-perk routes: {"perk": {...}}."""
    perk: PerkRead


class MessageResponse(BaseModel):
    message: str


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class PerkCreate(CamelModel):
    """
    Body of POST /api/perks.

    Shape and ranges are checked here (422 on violation); trimming and the
    category whitelist are business rules enforced by PerkService (400).
    """
    title: str = Field(min_length=1, max_length=200)
    merchant: Optional[str] = Field(default=None, max_length=120)
    category: str = Field(default="other", max_length=50)
    discount_percent: int = Field(default=0, ge=0, le=100)
    description: Optional[str] = Field(default=None, max_length=2000)


class PerkUpdate(CamelModel):
    """Body of PATCH /api/perks/{id}; only the fields sent are changed."""
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    merchant: Optional[str] = Field(default=None, max_length=120)
    category: Optional[str] = Field(default=None, max_length=50)
    discount_percent: Optional[int] = Field(default=None, ge=0, le=100)
    description: Optional[str] = Field(default=None, max_length=2000)


# ══════════════════════════════════════════════════════════════════════════
# Error and Health Models
# ══════════════════════════════════════════════════════════════════════════


class ErrorResponse(BaseModel):
    """
    Standardized error body for all API errors.

    The view reads `message` for its error banner; every handler in main.py
    fills it.
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")

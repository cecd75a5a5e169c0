"""
PerkHub — Perk Route Handlers
===============================

What:  The perk REST surface.
How:   Extracts query/path/body data, delegates to PerkService, returns the
       {"perks": [...]} / {"perk": {...}} envelopes.

Route Inventory:
    GET    /api/perks/all         public search + merchant filter
    GET    /api/perks             caller's own perks          (bearer)
    GET    /api/perks/{id}        single perk                 (bearer)
    POST   /api/perks             create                      (bearer)
    PATCH  /api/perks/{id}        partial update, owner only  (bearer)
    DELETE /api/perks/{id}        delete, owner only          (bearer)

/perks/all is declared before /perks/{perk_id} so the literal path wins.
"""

import logging
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from perkhub.auth import require_user
from perkhub.database import get_db_session
from perkhub.models import User
from perkhub.schemas.perk import (
    ErrorResponse,
    MessageResponse,
    PerkCreate,
    PerkListResponse,
    PerkResponse,
    PerkUpdate,
)
from perkhub.services.perk_service import perk_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Perks"])

_AUTH_ERRORS = {
    401: {"description": "Missing or invalid bearer token", "model": ErrorResponse},
}


@router.get(
    "/perks/all",
    response_model=PerkListResponse,
    responses={
        200: {"description": "Matching perks", "model": PerkListResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Search all perks",
    description=(
        "Public listing of every perk in the database. `search` matches the title "
        "case-insensitively as a substring; `merchant` must match exactly. Both are "
        "optional and combine with AND."
    ),
)
async def list_all_perks(
    response: Response,
    search: Optional[str] = Query(
        default=None,
        max_length=200,
        description="Case-insensitive substring of the perk title",
    ),
    merchant: Optional[str] = Query(
        default=None,
        max_length=120,
        description="Exact merchant name",
    ),
    db: AsyncSession = Depends(get_db_session),
) -> PerkListResponse:
    result = await perk_service.list_public(db=db, search=search, merchant=merchant)
    response.headers["X-Total-Count"] = str(len(result.perks))
    return result


@router.get(
    "/perks",
    response_model=PerkListResponse,
    responses=_AUTH_ERRORS,
    summary="List the caller's perks",
)
async def list_my_perks(
    user: User = Depends(require_user),
    db: AsyncSession = Depends(get_db_session),
) -> PerkListResponse:
    return await perk_service.list_for_user(db=db, user=user)


@router.get(
    "/perks/{perk_id}",
    response_model=PerkResponse,
    responses={
        **_AUTH_ERRORS,
        404: {"description": "Perk not found", "model": ErrorResponse},
    },
    summary="Get a single perk by ID",
)
async def get_perk(
    perk_id: UUID,
    user: User = Depends(require_user),
    db: AsyncSession = Depends(get_db_session),
) -> PerkResponse:
    perk = await perk_service.get_perk(db=db, perk_id=perk_id)
    return PerkResponse(perk=perk)


@router.post(
    "/perks",
    status_code=201,
    response_model=PerkResponse,
    responses={
        **_AUTH_ERRORS,
        400: {"description": "Business rule violated", "model": ErrorResponse},
    },
    summary="Create a perk",
)
async def create_perk(
    payload: PerkCreate,
    user: User = Depends(require_user),
    db: AsyncSession = Depends(get_db_session),
) -> PerkResponse:
    perk = await perk_service.create_perk(db=db, user=user, data=payload)
    return PerkResponse(perk=perk)


# PATCH rather than PUT: clients send only the fields they change
@router.patch(
    "/perks/{perk_id}",
    response_model=PerkResponse,
    responses={
        **_AUTH_ERRORS,
        400: {"description": "Business rule violated", "model": ErrorResponse},
        403: {"description": "Not the creator of this perk", "model": ErrorResponse},
        404: {"description": "Perk not found", "model": ErrorResponse},
    },
    summary="Update a perk",
)
async def update_perk(
    perk_id: UUID,
    payload: PerkUpdate,
    user: User = Depends(require_user),
    db: AsyncSession = Depends(get_db_session),
) -> PerkResponse:
    perk = await perk_service.update_perk(db=db, user=user, perk_id=perk_id, data=payload)
    return PerkResponse(perk=perk)


@router.delete(
    "/perks/{perk_id}",
    response_model=MessageResponse,
    responses={
        **_AUTH_ERRORS,
        403: {"description": "Not the creator of this perk", "model": ErrorResponse},
        404: {"description": "Perk not found", "model": ErrorResponse},
    },
    summary="Delete a perk",
)
async def delete_perk(
    perk_id: UUID,
    user: User = Depends(require_user),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    await perk_service.delete_perk(db=db, user=user, perk_id=perk_id)
    return MessageResponse(message="Perk deleted")

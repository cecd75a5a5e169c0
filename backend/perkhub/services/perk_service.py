"""
PerkHub — Perk Service (Business Logic)
=========================================

What:  All perk reads and writes: the public search/filter listing and the
       creator-scoped CRUD operations.
How:   Builds SQLAlchemy statements, applies business rules (trimming,
       category whitelist, ownership), translates database failures into
       DatabaseError.
Who:   Called by the route handlers in routes/perks.py.

Filter semantics (GET /api/perks/all):
    search    case-insensitive substring on title, LIKE wildcards escaped
    merchant  exact match
    Both are trimmed first and ignored when blank; given together they AND.

Every call receives its session; the singleton below carries no
per-request state.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from uuid import UUID

from sqlalchemy import desc, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from perkhub.exceptions import (
    DatabaseError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from perkhub.models import PERK_CATEGORIES, Perk, User
from perkhub.schemas.perk import PerkCreate, PerkListResponse, PerkRead, PerkUpdate

logger = logging.getLogger(__name__)


def clean_filter(value: Optional[str]) -> Optional[str]:
    """Trim a query-string filter; blank means "not given"."""
    if value is None:
        return None
    value = value.strip()
    return value or None


def _clean_optional_text(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


class PerkService:
    """
    Business logic layer for perk operations.

    Error Handling Strategy:
        Application exceptions (NotFoundError, ValidationError, ...) propagate
        unchanged. SQLAlchemy errors are logged with detail and re-raised as
        DatabaseError carrying a generic message.
    """

    # ── Public listing ────────────────────────────────────────────────────

    async def list_public(
        self,
        db: AsyncSession,
        search: Optional[str] = None,
        merchant: Optional[str] = None,
    ) -> PerkListResponse:
        """
        List every perk, optionally filtered, newest first.

        Args:
            db: Async database session
            search: Substring to look for in the title (case-insensitive)
            merchant: Exact merchant name

        Returns:
            PerkListResponse; the full set when neither filter is given.
        """
        search = clean_filter(search)
        merchant = clean_filter(merchant)

        query = select(Perk)
        if search:
            query = query.where(Perk.title.icontains(search, autoescape=True))
        if merchant:
            query = query.where(Perk.merchant == merchant)
        query = query.order_by(desc(Perk.created_at), Perk.title)

        try:
            result = await db.execute(query)
            perks = list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error("Database error listing perks: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve perks. Please try again.",
                context={"search": search, "merchant": merchant},
            )

        logger.debug(
            "Public perk listing: search=%r merchant=%r -> %d results",
            search,
            merchant,
            len(perks),
        )
        return PerkListResponse(perks=[PerkRead.model_validate(p) for p in perks])

    # ── Creator-scoped reads ──────────────────────────────────────────────

    async def list_for_user(self, db: AsyncSession, user: User) -> PerkListResponse:
        """Perks created by `user`, newest first."""
        try:
            result = await db.execute(
                select(Perk)
                .where(Perk.created_by_id == user.id)
                .order_by(desc(Perk.created_at), Perk.title)
            )
            perks = list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error("Database error listing perks for user %s: %s", user.id, str(e))
            raise DatabaseError(
                message="Could not retrieve your perks. Please try again.",
                context={"user_id": str(user.id)},
            )
        return PerkListResponse(perks=[PerkRead.model_validate(p) for p in perks])

    async def get_perk(self, db: AsyncSession, perk_id: UUID) -> PerkRead:
        """
        Retrieve a single perk.

        Raises:
            NotFoundError: No perk with this ID (→ 404)
            DatabaseError: Query execution failed (→ 500)
        """
        perk = await self._load(db, perk_id)
        return PerkRead.model_validate(perk)

    # ── Writes ────────────────────────────────────────────────────────────

    async def create_perk(self, db: AsyncSession, user: User, data: PerkCreate) -> PerkRead:
        """
        Create a perk owned by `user`.

        The row is flushed (not committed); get_db_session commits when the
        request finishes without error.
        """
        fields = self._clean_fields(data.model_dump())
        perk = Perk(**fields)
        perk.created_by = user

        try:
            db.add(perk)
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error creating perk: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not save the perk. Please try again.",
                context={"user_id": str(user.id)},
            )

        logger.info("Perk %s created by %s", perk.id, user.email)
        return PerkRead.model_validate(perk)

    async def update_perk(
        self,
        db: AsyncSession,
        user: User,
        perk_id: UUID,
        data: PerkUpdate,
    ) -> PerkRead:
        """
        Apply a partial update. Only fields present in the request body change.

        Raises:
            NotFoundError, PermissionDeniedError, ValidationError, DatabaseError
        """
        perk = await self._load(db, perk_id)
        self._ensure_owner(perk, user)

        changes = self._clean_fields(data.model_dump(exclude_unset=True), partial=True)
        if not changes:
            return PerkRead.model_validate(perk)

        for name, value in changes.items():
            setattr(perk, name, value)
        perk.updated_at = datetime.now(timezone.utc)

        try:
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error updating perk %s: %s", perk_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not update the perk. Please try again.",
                context={"perk_id": str(perk_id)},
            )

        logger.info("Perk %s updated by %s: %s", perk.id, user.email, sorted(changes))
        return PerkRead.model_validate(perk)

    async def delete_perk(self, db: AsyncSession, user: User, perk_id: UUID) -> None:
        """Delete a perk the caller created."""
        perk = await self._load(db, perk_id)
        self._ensure_owner(perk, user)

        try:
            await db.delete(perk)
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error deleting perk %s: %s", perk_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not delete the perk. Please try again.",
                context={"perk_id": str(perk_id)},
            )

        logger.info("Perk %s deleted by %s", perk_id, user.email)

    # ── Helpers ───────────────────────────────────────────────────────────

    async def _load(self, db: AsyncSession, perk_id: UUID) -> Perk:
        try:
            result = await db.execute(select(Perk).where(Perk.id == perk_id))
            perk = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error fetching perk %s: %s", perk_id, str(e))
            raise DatabaseError(
                message="Could not retrieve the perk. Please try again.",
                context={"perk_id": str(perk_id)},
            )

        if perk is None:
            raise NotFoundError(resource="perk", resource_id=str(perk_id))
        return perk

    @staticmethod
    def _ensure_owner(perk: Perk, user: User) -> None:
        if perk.created_by_id != user.id:
            raise PermissionDeniedError(
                context={"perk_id": str(perk.id), "user_id": str(user.id)},
            )

    @staticmethod
    def _clean_fields(fields: Dict[str, Any], partial: bool = False) -> Dict[str, Any]:
        """
        Apply the write-side business rules.

        - title is trimmed and must stay non-empty
        - merchant and description are trimmed; blank becomes None
        - category is lower-cased and must be one of PERK_CATEGORIES
        - an explicit null for title, category or discount is rejected on PATCH
        """
        cleaned: Dict[str, Any] = {}

        if "title" in fields:
            title = (fields["title"] or "").strip()
            if not title:
                raise ValidationError(message="Title must not be blank", field="title")
            cleaned["title"] = title

        for name in ("merchant", "description"):
            if name in fields:
                cleaned[name] = _clean_optional_text(fields[name])

        if "category" in fields:
            category = (fields["category"] or "").strip().lower()
            if category not in PERK_CATEGORIES:
                raise ValidationError(
                    message=(
                        f"Unknown category '{fields['category']}'. "
                        f"Must be one of: {', '.join(PERK_CATEGORIES)}"
                    ),
                    field="category",
                    context={"allowed": list(PERK_CATEGORIES)},
                )
            cleaned["category"] = category

        if "discount_percent" in fields:
            if fields["discount_percent"] is None:
                raise ValidationError(
                    message="discountPercent must be a number between 0 and 100",
                    field="discountPercent",
                )
            cleaned["discount_percent"] = fields["discount_percent"]

        if not partial:
            cleaned.setdefault("category", "other")
            cleaned.setdefault("discount_percent", 0)
        return cleaned


# ── Singleton Instance ────────────────────────────────────────────────────
perk_service = PerkService()


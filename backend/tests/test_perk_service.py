"""
PerkHub — PerkService Tests
=============================

Tests the public search/filter listing and the creator-scoped CRUD rules
against an in-memory SQLite database.
"""

import uuid

import pytest
from sqlalchemy.exc import OperationalError

from perkhub.exceptions import (
    DatabaseError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from perkhub.schemas.perk import PerkCreate, PerkUpdate
from perkhub.services.perk_service import clean_filter, perk_service


def titles(result):
    return [p.title for p in result.perks]


class TestCleanFilter:
    def test_none_stays_none(self):
        assert clean_filter(None) is None

    def test_whitespace_only_means_not_given(self):
        assert clean_filter("   ") is None

    def test_value_is_trimmed(self):
        assert clean_filter("  coffee ") == "coffee"


class TestListPublic:
    """GET /perks/all semantics at the service level."""

    @pytest.mark.asyncio
    async def test_no_filters_returns_everything_newest_first(self, db_session, make_perk):
        await make_perk("Free Coffee", "Bean There")
        await make_perk("10% off laptops", "ACME")
        await make_perk("Gym day pass")

        result = await perk_service.list_public(db_session)

        assert titles(result) == ["Free Coffee", "10% off laptops", "Gym day pass"]

    @pytest.mark.asyncio
    async def test_empty_database_returns_empty_list(self, db_session):
        result = await perk_service.list_public(db_session)
        assert result.perks == []

    @pytest.mark.asyncio
    async def test_search_is_case_insensitive_substring(self, db_session, make_perk):
        await make_perk("Free COFFEE on Mondays", "Bean There")
        await make_perk("Coffee beans 2-for-1", "ACME")
        await make_perk("Gym day pass", "PulseFit")

        result = await perk_service.list_public(db_session, search="coffee")

        assert titles(result) == ["Free COFFEE on Mondays", "Coffee beans 2-for-1"]

    @pytest.mark.asyncio
    async def test_search_is_trimmed(self, db_session, make_perk):
        await make_perk("Free Coffee", "Bean There")
        await make_perk("Gym day pass", "PulseFit")

        result = await perk_service.list_public(db_session, search="  coffee  ")

        assert titles(result) == ["Free Coffee"]

    @pytest.mark.asyncio
    async def test_blank_filters_are_ignored(self, db_session, make_perk):
        await make_perk("Free Coffee", "Bean There")
        await make_perk("Gym day pass")

        result = await perk_service.list_public(db_session, search="   ", merchant="")

        assert len(result.perks) == 2

    @pytest.mark.asyncio
    async def test_search_does_not_match_merchant_or_description(self, db_session, make_perk):
        await make_perk("Gym day pass", "Coffee Corp", description="coffee included")

        result = await perk_service.list_public(db_session, search="coffee")

        assert result.perks == []

    @pytest.mark.asyncio
    async def test_like_wildcards_are_literal(self, db_session, make_perk):
        await make_perk("50% off", "ACME")
        await make_perk("500 points", "ACME")
        await make_perk("snake_case stickers", "ACME")
        await make_perk("snakeXcase mugs", "ACME")

        percent = await perk_service.list_public(db_session, search="50%")
        underscore = await perk_service.list_public(db_session, search="snake_case")

        assert titles(percent) == ["50% off"]
        assert titles(underscore) == ["snake_case stickers"]

    @pytest.mark.asyncio
    async def test_merchant_is_exact_match(self, db_session, make_perk):
        await make_perk("Laptop deal", "ACME")
        await make_perk("Anvil discount", "ACME Corp")
        await make_perk("Lowercase", "acme")

        result = await perk_service.list_public(db_session, merchant="ACME")

        assert titles(result) == ["Laptop deal"]

    @pytest.mark.asyncio
    async def test_merchant_excludes_perks_without_merchant(self, db_session, make_perk):
        await make_perk("Orphan perk")
        await make_perk("Laptop deal", "ACME")

        result = await perk_service.list_public(db_session, merchant="ACME")

        assert titles(result) == ["Laptop deal"]

    @pytest.mark.asyncio
    async def test_search_and_merchant_combine_with_and(self, db_session, make_perk):
        await make_perk("Free coffee", "ACME")
        await make_perk("Free coffee", "Bean There")
        await make_perk("Laptop deal", "ACME")

        result = await perk_service.list_public(db_session, search="coffee", merchant="ACME")

        assert [(p.title, p.merchant) for p in result.perks] == [("Free coffee", "ACME")]

    @pytest.mark.asyncio
    async def test_creator_is_embedded(self, db_session, make_perk, user):
        await make_perk("Free Coffee", "Bean There", creator=user)

        result = await perk_service.list_public(db_session)

        assert result.perks[0].created_by.email == "riley@example.com"
        assert result.perks[0].created_by.display_name == "Riley Curator"

    @pytest.mark.asyncio
    async def test_database_failure_raises_database_error(self, mock_db_session):
        mock_db_session.execute.side_effect = OperationalError("SELECT", {}, Exception("down"))

        with pytest.raises(DatabaseError) as exc_info:
            await perk_service.list_public(mock_db_session, search="coffee")

        assert "down" not in exc_info.value.message
        assert exc_info.value.context["search"] == "coffee"


class TestCreatePerk:

    @pytest.mark.asyncio
    async def test_create_trims_and_normalizes(self, db_session, user):
        data = PerkCreate(
            title="  Free Coffee  ",
            merchant="  Bean There ",
            category=" Food ",
            discount_percent=15,
            description="   ",
        )

        perk = await perk_service.create_perk(db_session, user, data)

        assert perk.title == "Free Coffee"
        assert perk.merchant == "Bean There"
        assert perk.category == "food"
        assert perk.discount_percent == 15
        assert perk.description is None
        assert perk.created_by.id == user.id

    @pytest.mark.asyncio
    async def test_create_defaults(self, db_session, user):
        perk = await perk_service.create_perk(db_session, user, PerkCreate(title="Plain"))

        assert perk.category == "other"
        assert perk.discount_percent == 0
        assert perk.merchant is None

    @pytest.mark.asyncio
    async def test_blank_title_rejected(self, db_session, user):
        with pytest.raises(ValidationError) as exc_info:
            await perk_service.create_perk(db_session, user, PerkCreate(title="   "))
        assert exc_info.value.field == "title"

    @pytest.mark.asyncio
    async def test_unknown_category_rejected(self, db_session, user):
        with pytest.raises(ValidationError) as exc_info:
            await perk_service.create_perk(
                db_session, user, PerkCreate(title="Deal", category="weapons")
            )
        assert exc_info.value.field == "category"
        assert "food" in exc_info.value.context["allowed"]


class TestUpdateAndDelete:

    @pytest.mark.asyncio
    async def test_partial_update_changes_only_sent_fields(self, db_session, make_perk, user):
        perk = await make_perk("Free Coffee", "Bean There", creator=user, discount_percent=10)

        updated = await perk_service.update_perk(
            db_session, user, perk.id, PerkUpdate(discount_percent=25)
        )

        assert updated.discount_percent == 25
        assert updated.title == "Free Coffee"
        assert updated.merchant == "Bean There"

    @pytest.mark.asyncio
    async def test_update_can_clear_merchant(self, db_session, make_perk, user):
        perk = await make_perk("Free Coffee", "Bean There", creator=user)

        updated = await perk_service.update_perk(
            db_session, user, perk.id, PerkUpdate(merchant=None)
        )

        assert updated.merchant is None

    @pytest.mark.asyncio
    async def test_update_rejects_null_title(self, db_session, make_perk, user):
        perk = await make_perk("Free Coffee", creator=user)

        with pytest.raises(ValidationError):
            await perk_service.update_perk(db_session, user, perk.id, PerkUpdate(title=None))

    @pytest.mark.asyncio
    async def test_update_by_non_owner_forbidden(self, db_session, make_perk, user, other_user):
        perk = await make_perk("Free Coffee", creator=other_user)

        with pytest.raises(PermissionDeniedError):
            await perk_service.update_perk(db_session, user, perk.id, PerkUpdate(title="Mine"))

    @pytest.mark.asyncio
    async def test_update_unknown_perk_not_found(self, db_session, user):
        with pytest.raises(NotFoundError):
            await perk_service.update_perk(db_session, user, uuid.uuid4(), PerkUpdate(title="x"))

    @pytest.mark.asyncio
    async def test_delete_removes_perk(self, db_session, make_perk, user):
        perk = await make_perk("Free Coffee", creator=user)

        await perk_service.delete_perk(db_session, user, perk.id)

        with pytest.raises(NotFoundError):
            await perk_service.get_perk(db_session, perk.id)

    @pytest.mark.asyncio
    async def test_delete_by_non_owner_forbidden(self, db_session, make_perk, user, other_user):
        perk = await make_perk("Free Coffee", creator=other_user)

        with pytest.raises(PermissionDeniedError):
            await perk_service.delete_perk(db_session, user, perk.id)

    @pytest.mark.asyncio
    async def test_list_for_user_only_returns_own_perks(
        self, db_session, make_perk, user, other_user
    ):
        await make_perk("Mine", creator=user)
        await make_perk("Theirs", creator=other_user)
        await make_perk("Nobody's")

        result = await perk_service.list_for_user(db_session, user)

        assert titles(result) == ["Mine"]

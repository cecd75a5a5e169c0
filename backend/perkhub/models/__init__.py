"""ORM models. Importing this package registers every table with Base.metadata."""

from perkhub.models.perk import PERK_CATEGORIES, Perk
from perkhub.models.user import User

__all__ = ["PERK_CATEGORIES", "Perk", "User"]

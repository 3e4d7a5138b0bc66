# backend/tutorhub/models/base_enum.py
"""
Safe enum helpers for SQLAlchemy.

Enum columns persist the enum VALUES (not NAMES) so ORM writes and raw SQL
seeding agree on the stored strings.

Usage:
    from tutorhub.models.base_enum import create_safe_enum

    class TutorAvailability(Base):
        day_of_week = Column(create_safe_enum(DayOfWeek, "day_of_week_enum"), nullable=False)

Note:
    All Python enums for database storage inherit from (str, Enum).
"""

from enum import Enum
from typing import Sequence, Type

from sqlalchemy import Enum as SAEnum


def create_safe_enum(
    enum_class: Type[Enum],
    name: str,
    *,
    native_enum: bool = False,
    validate_strings: bool = True,
) -> SAEnum:
    """
    Create a SQLAlchemy Enum that stores enum values and rejects unknown ones.

    Non-native by default: a VARCHAR plus CHECK constraint, which behaves the
    same on PostgreSQL and SQLite.

    Args:
        enum_class: The Python Enum class to use
        name: Constraint/type name
        native_enum: Whether to use a PostgreSQL native enum type
        validate_strings: Whether to validate string values on bind

    Returns:
        SQLAlchemy Enum column type configured for value-based storage
    """
    return SAEnum(
        enum_class,
        name=name,
        native_enum=native_enum,
        create_constraint=True,
        validate_strings=validate_strings,
        values_callable=_get_enum_values,
    )


def _get_enum_values(enum_class: Type[Enum]) -> Sequence[str]:
    """Extract values from an enum class for SAEnum storage."""
    return [member.value for member in enum_class]

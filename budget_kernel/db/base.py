"""
Module: budget_kernel.db.base
Responsibility: Declarative base for the budget store's ORM models.
Architecture position: Kernel > DB.  Lowest import target of the persistence
    adapter; MUST NOT import from models/, selectors/ or domain/.

Invariants enforced:
    - Every row has a uuid4 primary key, stored as text so SQLite and
      PostgreSQL hold it the same way.
    - ``Mapped[Decimal]`` columns are Numeric(38, 9); budget amounts never
      pass through float.
"""

from decimal import Decimal
from typing import ClassVar
from uuid import UUID, uuid4

from sqlalchemy import Numeric, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.types import TypeDecorator


class UUIDString(TypeDecorator):
    """UUID column stored as its 36-character string form."""

    impl = String(36)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        return None if value is None else str(value)

    def process_result_value(self, value, dialect):
        return None if value is None else UUID(value)


class Base(DeclarativeBase):
    type_annotation_map: ClassVar[dict] = {
        Decimal: Numeric(38, 9),
        UUID: UUIDString(),
    }

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)

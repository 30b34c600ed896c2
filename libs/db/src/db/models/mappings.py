from __future__ import annotations

from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, Integer, String, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


# ---------------------------
# Reference: biller_mappings
# ---------------------------


class BillerMappingRow(Base):
    """One ``biller -> category`` entry of the mapping table.

    ``biller`` is stored upper-cased, which makes the unique constraint a
    case-insensitive identity. Category labels are validated by the reader,
    not by the database.
    """

    __tablename__ = "biller_mappings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    biller: Mapped[str] = mapped_column(String(128), nullable=False, unique=True)
    category: Mapped[str] = mapped_column(String(64), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.current_timestamp()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.current_timestamp(),
        onupdate=func.current_timestamp(),
    )

    __table_args__ = (
        CheckConstraint("biller = upper(biller)", name="ck_biller_mappings_upper"),
        CheckConstraint("length(trim(biller)) > 0", name="ck_biller_mappings_non_blank"),
    )

from __future__ import annotations

from sqlalchemy import Boolean, Column, DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.database import Base


# Columns the partial-update operation may rewrite. id, owner and bookkeeping columns are excluded.
MUTABLE_COLUMNS: tuple[str, ...] = (
    "name",
    "email",
    "mobile_no",
    "secondary_mobile_no",
    "state",
    "district",
    "city",
    "service_category",
    "service_name",
    "designation",
    "experience",
    "service_price",
    "price_unit",
    "need_support",
    "profession_description",
)


class Profession(Base):
    __tablename__ = "professions"

    id = Column(Integer, primary_key=True, index=True)
    # No unique constraint: one profile per owner is assumed, not enforced.
    owner_user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False)
    mobile_no = Column(String(32), nullable=False)
    secondary_mobile_no = Column(String(32), nullable=True)

    state = Column(String(100), nullable=True)
    district = Column(String(100), nullable=True)
    city = Column(String(100), nullable=True)

    service_category = Column(String(255), nullable=False)
    service_name = Column(String(255), nullable=False, index=True)
    designation = Column(String(255), nullable=True)
    experience = Column(String(255), nullable=True)

    service_price = Column(Float, nullable=True)
    price_unit = Column(String(64), nullable=True)
    need_support = Column(Boolean, nullable=True)
    profession_description = Column(Text, nullable=True)

    # Internal write counter; never part of a response projection.
    revision = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    owner = relationship("User", backref="professions")

    def snapshot(self) -> dict:
        return {column: getattr(self, column) for column in MUTABLE_COLUMNS}

from __future__ import annotations

import math
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError


REQUIRED_FIELDS: tuple[str, ...] = ("name", "email", "mobile_no", "service_category", "service_name")


def is_blank(value: Any) -> bool:
    """None, or a string holding only whitespace."""
    return value is None or (isinstance(value, str) and not value.strip())


def parse_service_price(value: Any) -> float | None:
    """Parse a client-supplied price, returning None when it is not a finite number.

    Callers decide what "unparseable" means for their operation: creation drops
    the field, partial update keeps the stored value.
    """
    if isinstance(value, bool):
        return None
    try:
        if isinstance(value, (int, float)):
            number = float(value)
        elif isinstance(value, str):
            number = float(value.strip())
        else:
            return None
    except (ValueError, OverflowError):
        return None
    if not math.isfinite(number):
        return None
    return number


class ProfessionFields(BaseModel):
    """Raw, untrusted profession payload.

    Every field is optional so the same model serves creation and partial
    update; ``model_fields_set`` tells which keys the client actually sent.
    Unknown keys (``user``, ``ownerUserId``, ``id``...) are dropped.
    """

    name: str | None = None
    email: str | None = None
    mobile_no: str | None = None
    secondary_mobile_no: str | None = None
    state: str | None = None
    district: str | None = None
    city: str | None = None
    service_category: str | None = None
    service_name: str | None = None
    designation: str | None = None
    experience: str | None = None
    # Left untyped: price coercion is lenient and differs per operation.
    service_price: Any = None
    price_unit: str | None = None
    need_support: bool | None = None
    profession_description: str | None = None

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        coerce_numbers_to_str=True,
        extra="ignore",
    )


class ProfessionRecord(BaseModel):
    """Shape a profession must have before it is written to the store."""

    name: str
    email: str
    mobile_no: str
    secondary_mobile_no: str | None = None
    state: str | None = None
    district: str | None = None
    city: str | None = None
    service_category: str
    service_name: str
    designation: str | None = None
    experience: str | None = None
    service_price: float | None = Field(default=None, ge=0, allow_inf_nan=False)
    price_unit: str | None = None
    need_support: bool | None = None
    profession_description: str | None = None

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    @field_validator(*REQUIRED_FIELDS, mode="before")
    @classmethod
    def _require_text(cls, v: Any) -> Any:
        if is_blank(v):
            raise PydanticCustomError("missing", "Field required")
        return v


class ProfessionRead(BaseModel):
    id: int
    owner_user_id: int
    name: str
    email: str
    mobile_no: str
    secondary_mobile_no: str | None = None
    state: str | None = None
    district: str | None = None
    city: str | None = None
    service_category: str
    service_name: str
    designation: str | None = None
    experience: str | None = None
    service_price: float | None = None
    price_unit: str | None = None
    need_support: bool | None = None
    profession_description: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True, alias_generator=to_camel, populate_by_name=True)


class ProfessionResponse(BaseModel):
    success: bool = True
    data: ProfessionRead


class ProfessionUpdateResponse(BaseModel):
    success: bool = True
    message: str = "Professional profile updated successfully"
    data: ProfessionRead


class ProfessionListResponse(BaseModel):
    success: bool = True
    data: list[ProfessionRead] = Field(default_factory=list)


class ErrorResponse(BaseModel):
    success: bool = False
    error: str
    details: str | None = None

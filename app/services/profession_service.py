from __future__ import annotations

import logging
from typing import Any, Mapping

from pydantic import ValidationError
from sqlalchemy.orm import Session

from app.models.profession import Profession
from app.schemas.profession import ProfessionFields, ProfessionRecord, is_blank, parse_service_price
from app.services import profession_store
from app.services.errors import (
    InvalidQuery,
    PersistenceError,
    ProfessionNotFound,
    ProfessionValidationError,
    Unauthenticated,
    validation_failed,
)


logger = logging.getLogger(__name__)


def parse_profession_fields(raw: Mapping[str, Any] | None) -> ProfessionFields:
    if raw is None:
        raw = {}
    if not isinstance(raw, Mapping):
        raise ProfessionValidationError("Request body must be a JSON object")
    try:
        return ProfessionFields.model_validate(dict(raw))
    except ValidationError as exc:
        raise validation_failed(exc, ProfessionFields) from exc


def validate_profession_record(values: dict[str, Any]) -> dict[str, Any]:
    try:
        record = ProfessionRecord.model_validate(values)
    except ValidationError as exc:
        raise validation_failed(exc, ProfessionRecord) from exc
    # Keep only the keys that came in so the store can still tell "omitted" apart.
    return {key: value for key, value in record.model_dump().items() if key in values}


def build_new_profession(fields: ProfessionFields) -> dict[str, Any]:
    values: dict[str, Any] = {}
    for name in fields.model_fields_set:
        if name == "service_price":
            continue
        values[name] = getattr(fields, name)

    price = fields.service_price
    if not is_blank(price):
        parsed = parse_service_price(price)
        # Unparseable prices are dropped on create rather than rejected.
        if parsed is not None:
            values["service_price"] = parsed
    return values


def merge_profession_update(current: Mapping[str, Any], fields: ProfessionFields) -> dict[str, Any]:
    """Apply a partial update to a stored snapshot.

    A key the client did not send leaves the stored value alone; a key it did
    send overwrites it, empty or null included. ``service_price`` is the one
    exception: a blank value clears it and an unparseable one is ignored.
    """
    merged = dict(current)
    for name in fields.model_fields_set:
        value = getattr(fields, name)
        if name == "service_price":
            if is_blank(value):
                merged[name] = None
                continue
            parsed = parse_service_price(value)
            if parsed is not None:
                merged[name] = parsed
            continue
        merged[name] = value
    return merged


def create_profession(db: Session, authenticated_user_id: int | None, raw_fields: Mapping[str, Any] | None) -> Profession:
    if authenticated_user_id is None:
        raise Unauthenticated("User not authenticated to add profession.")

    fields = parse_profession_fields(raw_fields)
    values = validate_profession_record(build_new_profession(fields))
    profession = profession_store.create_profession_record(db, authenticated_user_id, values)
    logger.info("profession.create owner_id=%s id=%s", authenticated_user_id, profession.id)

    # Second, independent write. Its failure must not undo the profile above.
    try:
        if not profession_store.mark_user_as_profession(db, authenticated_user_id):
            logger.warning("profession.flag user_missing owner_id=%s id=%s", authenticated_user_id, profession.id)
    except PersistenceError as exc:
        logger.warning(
            "profession.flag failed owner_id=%s id=%s details=%s",
            authenticated_user_id,
            profession.id,
            exc.details,
        )
    return profession


def find_professions_by_service(db: Session, service_name: str | None) -> list[Profession]:
    query = (service_name or "").strip()
    if not query:
        raise InvalidQuery("Service name is required")
    return profession_store.find_professions_by_service_name(db, query)


def load_own_profession(db: Session, authenticated_user_id: int | None) -> Profession:
    if authenticated_user_id is None:
        raise Unauthenticated("User not authenticated to update profession.")
    profession = profession_store.find_profession_by_owner(db, authenticated_user_id)
    if profession is None:
        raise ProfessionNotFound("Professional profile not found. Please add one first.")
    return profession


def update_own_profession(db: Session, authenticated_user_id: int | None, raw_fields: Mapping[str, Any] | None) -> Profession:
    profession = load_own_profession(db, authenticated_user_id)
    fields = parse_profession_fields(raw_fields)
    merged = validate_profession_record(merge_profession_update(profession.snapshot(), fields))
    saved = profession_store.save_profession_snapshot(db, profession, merged)
    logger.info(
        "profession.update owner_id=%s id=%s fields=%s",
        authenticated_user_id,
        saved.id,
        sorted(fields.model_fields_set),
    )
    return saved

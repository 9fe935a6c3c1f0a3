from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.config import settings
from app.models.profession import MUTABLE_COLUMNS, Profession
from app.models.user import User
from app.services.errors import PersistenceError


logger = logging.getLogger(__name__)


def create_profession_record(db: Session, owner_user_id: int, values: dict[str, Any]) -> Profession:
    row = dict(values)
    # Default only when the key is missing; an explicit None/"" is stored as given.
    if "price_unit" not in row:
        row["price_unit"] = settings.default_price_unit
    profession = Profession(owner_user_id=owner_user_id, revision=0, **row)
    try:
        db.add(profession)
        db.commit()
        db.refresh(profession)
    except SQLAlchemyError as exc:
        db.rollback()
        raise PersistenceError("Failed to add profession.", details=str(exc)) from exc
    return profession


def find_profession_by_owner(db: Session, owner_user_id: int) -> Profession | None:
    try:
        return (
            db.query(Profession)
            .filter(Profession.owner_user_id == owner_user_id)
            .order_by(Profession.id)
            .first()
        )
    except SQLAlchemyError as exc:
        db.rollback()
        raise PersistenceError("Server error while loading profile", details=str(exc)) from exc


def find_professions_by_service_name(db: Session, service_name: str) -> list[Profession]:
    # Whole-value comparison, case-folded the same way on both sides. Not a LIKE/regex search.
    try:
        if db.get_bind().dialect.name == "sqlite":
            # casefold() is registered on every sqlite connection by app.database.
            condition = func.casefold(Profession.service_name) == func.casefold(service_name)
        else:
            condition = func.lower(Profession.service_name) == func.lower(service_name)
        return db.query(Profession).filter(condition).all()
    except SQLAlchemyError as exc:
        db.rollback()
        raise PersistenceError("Server error while fetching professionals", details=str(exc)) from exc


def save_profession_snapshot(db: Session, profession: Profession, snapshot: dict[str, Any]) -> Profession:
    """Write every mutable column of ``snapshot`` back over the stored row.

    The whole snapshot is written, not just the changed columns, so a save
    based on an older read overwrites anything written since (last write wins).
    """
    values: dict[Any, Any] = {getattr(Profession, column): snapshot.get(column) for column in MUTABLE_COLUMNS}
    values[Profession.revision] = Profession.revision + 1
    values[Profession.updated_at] = func.now()
    try:
        db.query(Profession).filter(Profession.id == profession.id).update(values, synchronize_session=False)
        db.commit()
        db.refresh(profession)
    except SQLAlchemyError as exc:
        db.rollback()
        raise PersistenceError("Server error while updating profile", details=str(exc)) from exc
    return profession


def mark_user_as_profession(db: Session, user_id: int) -> bool:
    """Set users.is_profession. Returns False when no user row matched."""
    try:
        updated = (
            db.query(User)
            .filter(User.id == user_id)
            .update({User.is_profession: True}, synchronize_session=False)
        )
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise PersistenceError("Failed to update user profession flag", details=str(exc)) from exc
    return bool(updated)


def set_user_profession_flags(db: Session, user_ids: list[int], value: bool) -> int:
    if not user_ids:
        return 0
    try:
        updated = (
            db.query(User)
            .filter(User.id.in_(user_ids))
            .update({User.is_profession: value}, synchronize_session=False)
        )
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise PersistenceError("Failed to update user profession flags", details=str(exc)) from exc
    logger.info("profession.flags value=%s updated=%s", value, updated)
    return int(updated or 0)

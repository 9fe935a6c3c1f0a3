from __future__ import annotations

import logging
from dataclasses import dataclass, field

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.models.profession import Profession
from app.models.user import User
from app.services import profession_store
from app.services.errors import PersistenceError


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProfessionFlagAudit:
    flagged_without_profile: list[int] = field(default_factory=list)
    profile_without_flag: list[int] = field(default_factory=list)
    duplicate_owners: dict[int, int] = field(default_factory=dict)

    @property
    def consistent(self) -> bool:
        return not self.flagged_without_profile and not self.profile_without_flag


def audit_profession_flags(db: Session) -> ProfessionFlagAudit:
    """Compare users.is_profession against the owners actually present in professions."""
    try:
        counts = {
            int(owner_id): int(total)
            for owner_id, total in db.query(Profession.owner_user_id, func.count(Profession.id))
            .group_by(Profession.owner_user_id)
            .all()
        }
        flagged = {int(user_id) for (user_id,) in db.query(User.id).filter(User.is_profession.is_(True)).all()}
        known = {int(user_id) for (user_id,) in db.query(User.id).filter(User.id.in_(list(counts))).all()} if counts else set()
    except SQLAlchemyError as exc:
        db.rollback()
        raise PersistenceError("Server error while auditing profession flags", details=str(exc)) from exc

    return ProfessionFlagAudit(
        flagged_without_profile=sorted(flagged - set(counts)),
        # Orphaned professions (owner row gone) cannot be flagged; skip them.
        profile_without_flag=sorted((set(counts) & known) - flagged),
        duplicate_owners={owner: total for owner, total in sorted(counts.items()) if total > 1},
    )


def reconcile_profession_flags(db: Session, *, dry_run: bool = False) -> ProfessionFlagAudit:
    """Repair is_profession in both directions. Returns the audit taken before repairing."""
    audit = audit_profession_flags(db)
    if audit.duplicate_owners:
        logger.warning("profession.audit duplicate_owners=%s", audit.duplicate_owners)
    if dry_run or audit.consistent:
        return audit

    profession_store.set_user_profession_flags(db, audit.profile_without_flag, True)
    profession_store.set_user_profession_flags(db, audit.flagged_without_profile, False)
    logger.info(
        "profession.reconcile flagged=%s unflagged=%s",
        len(audit.profile_without_flag),
        len(audit.flagged_without_profile),
    )
    return audit

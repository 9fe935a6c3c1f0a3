from __future__ import annotations

import argparse
import sys
from datetime import timedelta
from pathlib import Path


def _bootstrap_import_path() -> None:
    root = Path(__file__).resolve().parents[1]
    if str(root) not in sys.path:
        sys.path.insert(0, str(root))


_bootstrap_import_path()

from app.config import build_sqlalchemy_db_url, settings  # noqa: E402
from app.database import Base, SessionLocal, engine  # noqa: E402
from app.models.user import User  # noqa: E402
from app.utils.jwt_handler import create_user_token  # noqa: E402


def _ensure_tables() -> None:
    db_url = build_sqlalchemy_db_url(settings)
    if db_url.startswith("sqlite"):
        Base.metadata.create_all(bind=engine)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description=(
            "Create (or reuse) a user row and print a bearer token for it. "
            "For local testing only; production tokens come from the auth service."
        )
    )
    parser.add_argument("--email", required=True, help="User email")
    parser.add_argument("--name", default=None, help="Display name")
    parser.add_argument(
        "--minutes",
        type=int,
        default=settings.access_token_expire_minutes,
        help="Token lifetime in minutes",
    )
    args = parser.parse_args(argv)

    _ensure_tables()

    with SessionLocal() as db:
        user = db.query(User).filter(User.email == args.email).first()
        if user is None:
            user = User(email=args.email, name=args.name)
            db.add(user)
            db.commit()
            db.refresh(user)
            print(f"created user id={user.id} email={args.email}")
        else:
            print(f"user already exists id={user.id} email={args.email}")
        user_id = user.id

    print(create_user_token(user_id, timedelta(minutes=args.minutes)))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

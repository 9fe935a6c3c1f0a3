from __future__ import annotations

import argparse
import sys
from pathlib import Path


def _bootstrap_import_path() -> None:
    root = Path(__file__).resolve().parents[1]
    if str(root) not in sys.path:
        sys.path.insert(0, str(root))


_bootstrap_import_path()

from app.database import SessionLocal  # noqa: E402
from app.services.errors import PersistenceError  # noqa: E402
from app.services.profession_audit import reconcile_profession_flags  # noqa: E402


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description=(
            "Bring users.is_profession back in line with the professions table. "
            "The flag is only set best-effort when a profession is created."
        )
    )
    parser.add_argument("--dry-run", action="store_true", help="Report mismatches without writing")
    args = parser.parse_args(argv)

    with SessionLocal() as db:
        try:
            audit = reconcile_profession_flags(db, dry_run=args.dry_run)
        except PersistenceError as exc:
            sys.stderr.write(f"ERROR: {exc.message}: {exc.details}\n")
            return 1

    print(f"flagged without profile: {audit.flagged_without_profile or '-'}")
    print(f"profile without flag:    {audit.profile_without_flag or '-'}")
    if audit.duplicate_owners:
        # One profile per user is assumed but not enforced; left for manual review.
        print("owners with several profiles:")
        for owner_id, total in audit.duplicate_owners.items():
            print(f"  user_id={owner_id} professions={total}")

    if audit.consistent:
        print("flags consistent")
    elif args.dry_run:
        print("dry run: nothing written")
    else:
        print("flags repaired")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

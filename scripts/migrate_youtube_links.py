"""
One-time data migration: copy legacy youtubelinks into external_links.

    alembic upgrade head
    python scripts/migrate_youtube_links.py [--dry-run]

Only rows without links_migrated_at are touched; youtubelinks is left as is.
Safe to run twice.
"""
import argparse
import sys
from pathlib import Path

from dotenv import load_dotenv

sys.path.append(str(Path(__file__).resolve().parents[1]))
load_dotenv()

from portfolio.db.session import SessionLocal  # noqa: E402
from portfolio.models.assignment import Assignment  # noqa: E402
from portfolio.services.assignments import AssignmentRepository  # noqa: E402


def main():
    parser = argparse.ArgumentParser(description=__doc__.strip().splitlines()[0])
    parser.add_argument("--dry-run", action="store_true", help="Report without writing")
    args = parser.parse_args()

    db = SessionLocal()
    try:
        repo = AssignmentRepository(db)
        pending = db.query(Assignment).filter(Assignment.links_migrated_at.is_(None)).all()
        derived = 0
        for a in pending:
            before = list(a.external_links or [])
            repo.migrate_links(a)
            if a.external_links != before:
                derived += 1

        print(f"{len(pending)} rows stamped, {derived} gained links from youtubelinks")
        if args.dry_run:
            db.rollback()
            print("dry run: nothing written")
        else:
            db.commit()
    finally:
        db.close()


if __name__ == "__main__":
    main()

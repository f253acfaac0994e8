"""
Seed script for a local SafeTrade database.

Usage:
  - Dry run (default): python scripts/seed_db.py
  - Apply to configured DB: python scripts/seed_db.py --apply
  - Use another seed file: python scripts/seed_db.py --seed path/to/seed.json --apply

Behavior:
  - Loads `db_seed.json` from repo root.
  - Creates the schema and catalogs (DB_AUTO_CREATE) through initialize_database().
  - Registers each seed user (skipping e-mails that already exist) and files
    each seed report, anonymous or on behalf of its user.
"""

import argparse
import json
import os
from datetime import datetime

from safetrade.config.database import initialize_database
from safetrade.core.errors import SafeTradeError
from safetrade.services.report_service import get_report_service
from safetrade.services.user_service import get_user_service


def load_seed(path: str) -> dict:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def seed_users(seed: dict, apply: bool) -> dict:
    """Create seed users; returns e-mail -> user ID for the ones available."""
    user_service = get_user_service()
    ids = {}
    for entry in seed.get("users", []):
        print(f"Preparing user: {entry['email']}")
        existing = user_service.find_by_email(entry["email"])
        if existing:
            ids[entry["email"]] = existing["id"]
            continue
        if not apply:
            continue
        user = user_service.create_user(entry["email"], entry["password"], entry.get("name"))
        ids[entry["email"]] = user["id"]
        print(f"Wrote user: {entry['email']}")
    return ids


def seed_reports(seed: dict, user_ids: dict, apply: bool) -> None:
    report_service = get_report_service()
    for entry in seed.get("reports", []):
        owner = entry.get("user_email")
        print(f"Preparing report: {entry['attack_type']} / {entry['impact_level']} ({owner or 'anónimo'})")
        if not apply:
            continue

        data = {key: value for key, value in entry.items() if key != "user_email"}
        data["incident_date"] = datetime.fromisoformat(entry["incident_date"])
        data["is_anonymous"] = owner is None
        data["user_id"] = user_ids.get(owner)
        try:
            report = report_service.create_report(data)
            print(f"Wrote report: {report['id']}")
        except SafeTradeError as e:
            print(f"Failed to write report: {e.message}")


def main():
    parser = argparse.ArgumentParser()
    parser.add_argument("--apply", action="store_true", help="Write seed to the DB instead of dry-run")
    parser.add_argument("--seed", default=os.path.join(os.getcwd(), "db_seed.json"), help="Seed file path")
    args = parser.parse_args()

    if not os.path.exists(args.seed):
        print(f"Seed file not found: {args.seed}")
        return

    seed = load_seed(args.seed)
    initialize_database()

    user_ids = seed_users(seed, apply=args.apply)
    seed_reports(seed, user_ids, apply=args.apply)

    if args.apply:
        print("Seeding completed.")
    else:
        print("Dry run complete. Re-run with --apply to write to DB.")


if __name__ == "__main__":
    main()

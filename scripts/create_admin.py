"""
Create a SafeTrade administrator account.

Usage:
  - Dry run (default): python scripts/create_admin.py admin@example.com
  - Apply to configured DB: python scripts/create_admin.py admin@example.com --apply

Behavior:
  - Prompts for the password (or reads SAFETRADE_ADMIN_PASSWORD).
  - Creates tables and seeds catalogs if DB_AUTO_CREATE is enabled.
  - Refuses to overwrite an existing admin with the same e-mail.

There is no public admin registration endpoint; this script is the only way to add admins.
"""

import argparse
import getpass
import os
import sys

from safetrade.config.database import initialize_database
from safetrade.repositories.users_repository import AdminUsersRepository
from safetrade.services.auth_service import get_auth_service

MIN_PASSWORD_LENGTH = 8


def read_password() -> str:
    password = os.environ.get("SAFETRADE_ADMIN_PASSWORD")
    if password:
        return password
    password = getpass.getpass("Admin password: ")
    if password != getpass.getpass("Repeat password: "):
        print("Passwords do not match.")
        sys.exit(1)
    return password


def main():
    parser = argparse.ArgumentParser()
    parser.add_argument("email", help="Administrator e-mail")
    parser.add_argument("--apply", action="store_true", help="Write the admin to the DB instead of dry-run")
    args = parser.parse_args()

    password = read_password()
    if len(password) < MIN_PASSWORD_LENGTH:
        print(f"Password must have at least {MIN_PASSWORD_LENGTH} characters.")
        sys.exit(1)

    initialize_database()

    if AdminUsersRepository().find_by_email(args.email):
        print(f"Admin already exists: {args.email}")
        sys.exit(1)

    print(f"Preparing admin: {args.email}")
    if not args.apply:
        print("Dry run complete. Re-run with --apply to write to DB.")
        return

    admin = get_auth_service().create_admin(args.email, password)
    print(f"Created admin {admin['email']} (id {admin['id']})")


if __name__ == "__main__":
    main()

#!/usr/bin/env python3
"""
Create a user directly in the users JSON file.

Usage:
  python scripts/add_user.py --email admin2@uas [--password s3cret!] [--role ADMIN]
"""
from __future__ import annotations

import argparse
import secrets
import string
import sys

from storefront.core.config import get_settings
from storefront.services.user_service import UserError, UserService


def gen_password(length: int = 12) -> str:
    alphabet = string.ascii_letters + string.digits
    return "".join(secrets.choice(alphabet) for _ in range(length))


def main() -> None:
    ap = argparse.ArgumentParser(description="Create a storefront user")
    ap.add_argument("--email", required=True, help="Login e-mail (must be unique)")
    ap.add_argument("--password", help="Password (default: random 12 characters)")
    ap.add_argument("--role", default="USER", help="ADMIN or USER (default: USER)")
    args = ap.parse_args()

    settings = get_settings()
    service = UserService(settings.users_file)
    password = (args.password or "").strip() or gen_password()
    try:
        user = service.create_user(args.email, password, args.role)
    except UserError as exc:
        raise SystemExit(exc.message)

    print("OK: user created")
    print(f"  File: {settings.users_file}")
    print(f"  Email: {user.email}")
    print(f"  Role: {user.role}")
    if not args.password:
        print(f"  Password: {password}")


if __name__ == "__main__":
    try:
        main()
    except SystemExit:
        raise
    except Exception as exc:  # pragma: no cover - CLI usage
        sys.stderr.write(f"Error: {exc}\n")
        raise SystemExit(1)

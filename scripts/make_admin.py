#!/usr/bin/env python3
"""
Grant (or with --revoke, remove) admin rights for an existing user by email.

The user must have signed in at least once so the account is mirrored locally.
"""
import argparse
import sys

from easytrip.accounts.service import create_account_service
from easytrip.core.db import SessionLocal


def main() -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("email")
    parser.add_argument("--revoke", action="store_true", help="remove admin rights instead")
    args = parser.parse_args()

    db = SessionLocal()
    try:
        user = create_account_service(db).set_admin(args.email, not args.revoke)
        if not user:
            print(f"No user with email '{args.email}'. They need to sign in once first.")
            return 1
        state = "is now" if user.is_admin else "is no longer"
        print(f"{user.email} ({user.firebase_uid}) {state} an admin")
        return 0
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())

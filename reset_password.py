#!/usr/bin/env python3
"""
Reset a user's password in the member registry SQLite database.

This script DOES NOT read or reveal any existing passwords.  It simply
stores a new password hash (PBKDF2-HMAC-SHA256, format
"salthex$hashhex") for the given username.

Usage:
    python reset_password.py --db ./member_registry.db --username admin --password "NewStrongPass!234"

If --password is omitted, you will be prompted to enter it securely.
"""

import argparse
import getpass
import os
import sys

from member_registry_api.app.core.db import get_cursor
from member_registry_api.app.core.security import hash_password


def main():
    ap = argparse.ArgumentParser(description="Reset a member registry user's password (SQLite).")
    ap.add_argument("--db", required=True, help="Path to SQLite DB file (e.g., ./member_registry.db)")
    ap.add_argument("--username", required=True, help="Username to update")
    ap.add_argument("--password", help="New password. If omitted, you'll be prompted securely.")
    args = ap.parse_args()

    db_path = os.path.abspath(args.db)
    if not os.path.exists(db_path):
        print(f"[!] DB not found: {args.db}", file=sys.stderr)
        sys.exit(1)

    new_password = args.password or getpass.getpass("Enter NEW password: ")
    if not new_password:
        print("[!] Empty password is not allowed.", file=sys.stderr)
        sys.exit(1)

    with get_cursor(db_path) as cur:
        cur.execute(
            "UPDATE users SET password_hash = ?, updated_at = CURRENT_TIMESTAMP WHERE username = ?",
            (hash_password(new_password), args.username),
        )
        updated = cur.rowcount
    if not updated:
        print(f"[!] No user found with username: {args.username}", file=sys.stderr)
        sys.exit(2)
    print(f"[+] Password updated for user: {args.username}")


if __name__ == "__main__":
    main()

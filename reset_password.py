#!/usr/bin/env python3
"""
Reset an admin's password in the configured store.

This script does not read or reveal existing passwords.  It stores a new
PBKDF2-HMAC-SHA256 hash (format ``salthex$hashhex``) for the admin.  It
is also how accounts carried over from older data files, which kept
plain passwords, are given a usable credential.

Usage:
    python reset_password.py --username alice --password "NewStrongPass!234"

If --password is omitted, you will be prompted to enter it securely.
Storage is selected with the same environment variables as the server
(``STORAGE_BACKEND``, ``DATA_DIR``, ``MONGO_URI`` ...).
"""

import argparse
import asyncio
import getpass
import sys
from typing import List, Optional

from moviemania_api.app.core.errors import AppError
from moviemania_api.app.services.admin_service import AdminService


def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(description="Reset an admin password.")
    ap.add_argument("--username", required=True, help="Admin username to update")
    ap.add_argument("--password", help="New password. If omitted, you'll be prompted securely.")
    args = ap.parse_args(argv)

    new_password = args.password or getpass.getpass("Enter NEW password: ")
    if not new_password:
        print("[!] Empty password is not allowed.", file=sys.stderr)
        return 1

    try:
        asyncio.run(AdminService.set_password(args.username, new_password))
    except AppError as exc:
        print(f"[!] {exc.detail}", file=sys.stderr)
        return 2
    print(f"[+] Password updated for admin: {args.username}")
    return 0


if __name__ == "__main__":
    sys.exit(main())

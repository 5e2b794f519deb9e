#!/usr/bin/env python3
"""
Issue a long-lived bearer token for an existing admin.

Useful for scripts and integrations that cannot log in interactively.
The token is signed with ``SECRET_KEY``, so the same key must be set for
the running server.

Usage:
    SECRET_KEY=... python create_token.py --username alice --days 365
"""

import argparse
import asyncio
import os
import sys
from typing import List, Optional

from moviemania_api.app.core.security import create_access_token
from moviemania_api.app.services.admin_service import UNKNOWN_ROLE, AdminService


def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(description="Issue a bearer token for an admin.")
    ap.add_argument("--username", required=True, help="Admin username the token belongs to")
    ap.add_argument("--days", type=int, default=365, help="Token lifetime in days")
    args = ap.parse_args(argv)

    if not os.getenv("SECRET_KEY"):
        print("[!] SECRET_KEY is not set; the server would reject this token.", file=sys.stderr)
        return 1
    role = asyncio.run(AdminService.get_role(args.username))
    if role == UNKNOWN_ROLE:
        print(f"[!] No admin named {args.username}", file=sys.stderr)
        return 2
    token = create_access_token({"username": args.username, "role": role}, expires_delta=args.days * 24 * 60 * 60)
    print(token)
    return 0


if __name__ == "__main__":
    sys.exit(main())

#!/usr/bin/env python3
"""
Create the tables and a finance administrator account.

Usage: python scripts/create_admin.py admin@agrolink.org 'a-strong-password' "Finance Admin"
"""

import argparse
import asyncio

from agrofinance.core.db_init import create_admin, init_db
from agrofinance.core.logging import setup_logging


async def run(email: str, password: str, full_name: str) -> None:
    await init_db()
    user = await create_admin(email, password, full_name)
    print(f"✅ Administrator ready: {user.email} (id={user.id})")


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("email")
    parser.add_argument("password")
    parser.add_argument("full_name", nargs="?", default=None)
    args = parser.parse_args()

    setup_logging()
    asyncio.run(run(args.email, args.password, args.full_name))


if __name__ == "__main__":
    main()

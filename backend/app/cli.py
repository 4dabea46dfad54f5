"""
Admin provisioning.

    holiday-lets-admin create-admin --username u --password p --tenant preswylfa --display-name "..."
    holiday-lets-admin reset-password --username u --password p
    holiday-lets-admin hash-password secret [secret ...]
"""
from __future__ import annotations

import argparse
import asyncio
from typing import Optional, Sequence

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.core.config import settings
from app.core.security import hash_password
from app.crud.admin_user import create_admin_user, get_admin_by_username, set_admin_password


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="holiday-lets-admin", description="Manage admin users.")
    sub = parser.add_subparsers(dest="command", required=True)

    create = sub.add_parser("create-admin", help="Create an admin bound to one property")
    create.add_argument("--username", required=True)
    create.add_argument("--password", required=True)
    create.add_argument("--tenant", required=True, help="Property slug, e.g. preswylfa")
    create.add_argument("--display-name", default=None)

    reset = sub.add_parser("reset-password", help="Replace an admin's password")
    reset.add_argument("--username", required=True)
    reset.add_argument("--password", required=True)

    hash_cmd = sub.add_parser("hash-password", help="Print bcrypt hashes")
    hash_cmd.add_argument("passwords", nargs="+")

    return parser.parse_args(argv)


async def run(args: argparse.Namespace, session_factory: async_sessionmaker[AsyncSession]) -> int:
    if args.command == "hash-password":
        for password in args.passwords:
            print(f"{password}: {hash_password(password)}")
        return 0

    async with session_factory() as db:
        existing = await get_admin_by_username(db, args.username)

        if args.command == "create-admin":
            if existing is not None:
                print(f"User '{args.username}' already exists.")
                return 1
            if args.tenant not in settings.TENANTS:
                print(f"Warning: property '{args.tenant}' is not configured; the admin will not be able to use it.")
            user = await create_admin_user(
                db,
                username=args.username,
                password=args.password,
                property_id=args.tenant,
                display_name=args.display_name or args.username,
            )
            print(f"Admin created: id={user.id} username={user.username} property={user.property_id}")
            return 0

        if args.command == "reset-password":
            if existing is None:
                print(f"User '{args.username}' not found.")
                return 1
            await set_admin_password(db, existing, args.password)
            print(f"Password updated for '{existing.username}'.")
            return 0

    return 2


def main(argv: Optional[Sequence[str]] = None) -> int:
    from app.db.session import AsyncSessionLocal, engine

    args = parse_args(argv)

    async def _run() -> int:
        try:
            return await run(args, AsyncSessionLocal)
        finally:
            await engine.dispose()

    return asyncio.run(_run())


if __name__ == "__main__":
    raise SystemExit(main())

"""Provision an Admin account directly in the database.

The public API never creates Admins; run this once per deployment:

    python scripts/create_admin.py --email director@sce.example --username director
"""
import argparse
import asyncio
import getpass
import sys

from sce_archive.database import async_session_maker, close_db, init_db
from sce_archive.errors import ArchiveError
from sce_archive.kernel.identity.identity_service import IdentityService
from sce_archive.logging_config import configure_logging


async def create_admin(email: str, username: str, password: str) -> None:
    await init_db()
    try:
        async with async_session_maker() as session:
            account = await IdentityService(session).provision_admin(email, username, password)
            await session.commit()
            print(f"Admin created: {account.username} <{account.email}> id={account.id}")
    finally:
        await close_db()


def main() -> int:
    parser = argparse.ArgumentParser(description="Provision an Admin account")
    parser.add_argument("--email", required=True)
    parser.add_argument("--username", required=True)
    parser.add_argument("--password", help="prompted for when omitted")
    args = parser.parse_args()

    configure_logging(log_level="WARNING")
    password = args.password or getpass.getpass("Password: ")
    try:
        asyncio.run(create_admin(args.email, args.username, password))
    except ArchiveError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())

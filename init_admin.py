"""
Create the default administrator account.

Administrators can issue refunds and review listings without a completed booking.
"""
import asyncio
import os

from sqlalchemy import select

from fiilar.db.models import Account
from fiilar.infrastructure.database import get_session, init_db
from fiilar.modules.accounts import AccountCreateInput, AccountService


async def create_default_admin():
    """Create the admin account unless one already exists."""
    await init_db()

    async for db in get_session():
        stmt = select(Account).where(Account.role == "admin")
        result = await db.execute(stmt)
        existing_admin = result.scalars().first()

        if existing_admin:
            print("Administrator account already exists, nothing to do")
            return

        password = os.environ.get("FIILAR_ADMIN_PASSWORD", "admin123")
        service = AccountService.with_session(db)
        await service.create_account(
            AccountCreateInput(
                username="admin",
                password=password,
                role="admin",
                email="admin@example.com",
                is_active=True,
            )
        )

        print("=" * 50)
        print("Default administrator created")
        print("=" * 50)
        print("Username: admin")
        print("Password: taken from FIILAR_ADMIN_PASSWORD (default admin123)")
        print("=" * 50)
        print("Change the password after the first login.")
        print("=" * 50)


if __name__ == "__main__":
    asyncio.run(create_default_admin())

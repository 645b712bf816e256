"""
Seed the first OWNER account so staff can log in and create shops.
"""
import asyncio
import os

from sqlalchemy import select

from parcelhub.db.models import Account
from parcelhub.db.session import get_db, init_db
from parcelhub.modules.accounts import AccountCreateInput, AccountService, Role, STAFF_ROLES


async def create_default_owner():
    await init_db()

    async for db in get_db():
        stmt = select(Account).where(Account.role.in_([role.value for role in STAFF_ROLES]))
        result = await db.execute(stmt)
        if result.scalars().first() is not None:
            print("A staff account already exists, nothing to do")
            return

        username = os.environ.get("PARCELHUB_OWNER_USERNAME", "owner")
        password = os.environ.get("PARCELHUB_OWNER_PASSWORD", "owner123")

        service = AccountService.with_session(db)
        await service.create_account(
            AccountCreateInput(
                username=username,
                password=password,
                role=Role.OWNER,
                is_active=True,
            )
        )
        await db.commit()

        print("=" * 50)
        print("Owner account created")
        print(f"username: {username}")
        print(f"password: {password}")
        print("Change the password after the first login.")
        print("=" * 50)


if __name__ == "__main__":
    asyncio.run(create_default_owner())

#!/usr/bin/env python
"""Create or reset the initial HR administrator account."""

import argparse
import asyncio

from hr_api.config import get_settings
from hr_api.database import create_engine, create_session_maker
from hr_api.models.domain.roles import UserRole
from hr_api.repositories.user_account_repository import UserAccountRepository
from hr_api.security.auth import create_access_token
from hr_api.security.password import PasswordService

MIN_PASSWORD_LENGTH = 12


async def create_hradmin(email: str, password: str, print_token: bool = False) -> bool:
    """Create the HR administrator, or reset its password and role if it exists."""
    if len(password) < MIN_PASSWORD_LENGTH:
        print(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
        return False

    settings = get_settings()
    engine = create_engine(settings)
    session_maker = create_session_maker(engine)

    password_hash = PasswordService().hash_password(password)

    try:
        async with session_maker() as session:
            repo = UserAccountRepository(session)
            account = await repo.get_by_email(email)
            if account is None:
                account = await repo.create(
                    email=email.strip().lower(),
                    password_hash=password_hash,
                    role=UserRole.HRADMIN.value,
                    employee_id=None,
                )
                print(f"HR administrator created: {account.email}")
            else:
                account = await repo.update(
                    account,
                    password_hash=password_hash,
                    role=UserRole.HRADMIN.value,
                )
                print(f"HR administrator updated: {account.email}")
            await session.commit()

            if print_token:
                print(create_access_token(account, settings))
    finally:
        await engine.dispose()

    return True


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Create the HR administrator account")
    parser.add_argument("--email", required=True, help="Email address")
    parser.add_argument("--password", required=True, help=f"Password (min {MIN_PASSWORD_LENGTH} chars)")
    parser.add_argument("--print-token", action="store_true", help="Print a bearer token for the account")
    args = parser.parse_args()

    asyncio.run(create_hradmin(args.email, args.password, args.print_token))

"""Create a platform super admin, or promote an existing account.

Run inside Docker:
    docker compose exec backend python -m scripts.create_admin admin@zamora.com
    docker compose exec backend python -m scripts.create_admin admin@zamora.com --reset-password

When no password is given, a temporary one is generated and printed.
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Add project root to path so imports work when run as a script
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from sqlalchemy import func, select

from zamora.auth.passwords import generate_temporary_password, hash_password
from zamora.auth.policy import Role
from zamora.database import async_session_factory


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("email")
    parser.add_argument("--password", help="password to set (default: generated)")
    parser.add_argument(
        "--reset-password",
        action="store_true",
        help="also replace the password of an existing account",
    )
    parser.add_argument("--first-name", default="Admin")
    parser.add_argument("--last-name", default="User")
    return parser.parse_args(argv)


async def create_admin(args: argparse.Namespace) -> None:
    from zamora.models.user import User

    email = args.email.lower()
    password = args.password or generate_temporary_password()

    async with async_session_factory() as session:
        print(f"Checking if user {email} exists...")
        result = await session.execute(select(User).where(func.lower(User.email) == email))
        user = result.scalar_one_or_none()

        if user is None:
            print("Creating new user...")
            user = User(
                email=email,
                hashed_password=hash_password(password),
                first_name=args.first_name,
                last_name=args.last_name,
            )
            session.add(user)
            show_password = True
        else:
            print(f"User already exists. ID: {user.id}")
            show_password = args.reset_password or user.hashed_password is None
            if show_password:
                user.hashed_password = hash_password(password)

        user.role = Role.SUPER_ADMIN
        user.is_active = True
        await session.commit()

    print(f"✅ {email} is now a super_admin (id={user.id})")
    if show_password:
        print(f"   Password: {password}")


if __name__ == "__main__":
    asyncio.run(create_admin(_parse_args()))

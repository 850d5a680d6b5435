import argparse
import asyncio
import getpass

from gardenbook.auth import hash_password
from gardenbook.config import get_settings
from gardenbook.core.domain_types import Table
from gardenbook.database import dispose_engine, get_session_factory, init_engine
from gardenbook.models import Role
from gardenbook.repository import SqlCatalogRepository


async def create_admin(email: str, password: str, role: str) -> None:
    settings = get_settings()
    init_engine(settings.database_url)
    repository = SqlCatalogRepository(get_session_factory())

    try:
        existing = await repository.select(Table.USERS, where={"email": email}, limit=1)
        if existing:
            user = existing[0]
            await repository.update(
                Table.USERS, user["id"],
                {"password_hash": hash_password(password), "role": role, "is_active": True},
            )
            print(f"Updated existing account '{email}' (id={user['id']}, role={role}).")
            return

        user = await repository.insert(Table.USERS, {
            "email": email,
            "password_hash": hash_password(password),
            "role": role,
            "is_active": True,
        })
        print(f"\n✅ Account Created Successfully!")
        print(f"--------------------------------")
        print(f"ID:    {user['id']}")
        print(f"Email: {user['email']}")
        print(f"Role:  {user['role']}")
        print(f"--------------------------------")
    finally:
        await dispose_engine()


def main():
    parser = argparse.ArgumentParser(description="Create or reset a MyGardenBook admin account")
    parser.add_argument("--email", required=True, help="Login email")
    parser.add_argument("--password", help="Password (prompted when omitted)")
    parser.add_argument(
        "--role", default=Role.ADMIN.value, choices=[r.value for r in Role],
        help="Account role (default: admin)",
    )

    args = parser.parse_args()
    password = args.password or getpass.getpass("Password: ")
    if len(password) < 8:
        parser.error("password must be at least 8 characters")

    asyncio.run(create_admin(args.email.strip().lower(), password, args.role))


if __name__ == "__main__":
    main()

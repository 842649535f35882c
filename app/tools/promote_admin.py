# app/tools/promote_admin.py

from __future__ import annotations

import argparse
import asyncio

from sqlalchemy.ext.asyncio import AsyncSession

from app.db.session import AsyncSessionLocal
from app.domain import Role
from app.services.auth import get_user_by_email


async def set_role(session: AsyncSession, email: str, role: Role) -> bool:
    """Returns False when no user has that email."""
    user = await get_user_by_email(session, email)
    if user is None:
        return False
    user.role = role
    await session.commit()
    return True


async def _run(email: str, demote: bool) -> int:
    role = Role.USER if demote else Role.ADMIN
    async with AsyncSessionLocal() as session:
        ok = await set_role(session, email, role)
    if not ok:
        print(f"No user with email {email}")
        return 1
    print(f"{email} is now {role.value}")
    return 0


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Grant (or revoke) the Admin role for an existing user."
    )
    parser.add_argument("--email", required=True, help="Email of the registered user.")
    parser.add_argument(
        "--demote",
        action="store_true",
        help="Set the role back to User instead of Admin.",
    )

    args = parser.parse_args()
    raise SystemExit(asyncio.run(_run(args.email, args.demote)))


if __name__ == "__main__":
    main()

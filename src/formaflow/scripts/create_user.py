"""Interactive account creation: ``python -m formaflow.scripts.create_user``."""

import asyncio
from typing import NamedTuple

from sqlalchemy import select

from formaflow.core.db import AsyncSessionLocal
from formaflow.core.security import hash_password
from formaflow.core.validators import validate_email
from formaflow.models.enums import AppRole
from formaflow.models.user import User

ROLE_CHOICES = "/".join(role.value for role in AppRole)


class NewUser(NamedTuple):
    email: str
    password: str
    first_name: str
    last_name: str
    department: str | None
    role: AppRole


def parse_role(raw: str) -> AppRole:
    """Blank means apprenant; anything else must be a role value."""
    return AppRole(raw.strip().lower() or AppRole.APPRENANT.value)


def _ask(prompt: str) -> str:
    return input(f"{prompt}: ").strip()


def get_user_input() -> NewUser:
    print("\nNew FormaFlow account\n")
    return NewUser(
        email=validate_email(_ask("Email")),
        password=_ask("Password"),
        first_name=_ask("First name"),
        last_name=_ask("Last name"),
        department=_ask("Department (optional)") or None,
        role=parse_role(_ask(f"Role ({ROLE_CHOICES}) [apprenant]")),
    )


async def create_user() -> None:
    try:
        answers = get_user_input()
    except ValueError as exc:
        print(f"Invalid input: {exc}")
        return

    async with AsyncSessionLocal() as db:
        existing = await db.scalar(select(User.id).where(User.email == answers.email))
        if existing is not None:
            print(f"{answers.email} is already registered")
            return

        user = User(
            email=answers.email,
            hashed_password=hash_password(answers.password),
            first_name=answers.first_name,
            last_name=answers.last_name,
            department=answers.department,
            role=answers.role.value,
        )
        db.add(user)
        await db.commit()

    print(f"\nCreated {user.display_name} <{user.email}> as {user.role} (id {user.id})\n")


if __name__ == "__main__":
    asyncio.run(create_user())

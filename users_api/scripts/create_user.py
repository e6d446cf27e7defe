"""
Create a user (e.g. the first admin). Run from project root:
  python -m users_api.scripts.create_user EMAIL NICKNAME PASSWORD [role] [--name N --lastname L]
Example:
  python -m users_api.scripts.create_user admin@example.com admin your-secure-password admin
"""
import argparse
import logging
import sys

from pydantic import ValidationError

from users_api.core.database import SessionLocal
from users_api.models.enums import UserRole, parse_enum
from users_api.schemas.user import UserCreate
from users_api.services.preferences import create_default_preference
from users_api.services.users import UserConflictError, create_user

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a Users API account (bypasses registration).")
    parser.add_argument("email", help="Email address (unique)")
    parser.add_argument("nickname", help="Nickname (unique, 1-15 chars)")
    parser.add_argument("password", help="Password (6-100 chars)")
    parser.add_argument("role", nargs="?", default="user", choices=[r.value for r in UserRole])
    parser.add_argument("--name", default="Admin")
    parser.add_argument("--lastname", default="User")
    args = parser.parse_args(argv)

    try:
        data = UserCreate(
            email=args.email.strip(),
            nickname=args.nickname.strip(),
            password=args.password,
            name=args.name,
            lastname=args.lastname,
        )
    except ValidationError as e:
        for error in e.errors():
            field = ".".join(str(p) for p in error["loc"])
            print(f"Invalid {field}: {error['msg']}", file=sys.stderr)
        return 1

    db = SessionLocal()
    try:
        try:
            user = create_user(db, data, role=parse_enum(UserRole, args.role))
        except UserConflictError as e:
            print(e.message, file=sys.stderr)
            return 1
        create_default_preference(db, user.id)
        print(f"Created user '{user.email}' (id={user.id}) with role '{user.role}'.")
        return 0
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())

"""
Create a user (e.g. the first admin). Run from project root:
  python -m app.scripts.create_user NAME EMAIL PASSWORD [role]
Example:
  python -m app.scripts.create_user "Site Admin" admin@example.com your-secure-password ADMIN
"""

import argparse
import sys

from app.database import SessionLocal
from app.exceptions import Conflict, InvalidInput
from app.models.user import UserRole
from app.services.user_store import get_user_store


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a UserHub user from the command line.")
    parser.add_argument("name", help="Display name")
    parser.add_argument("email", help="Email address (unique)")
    parser.add_argument("password", help="Password (8-72 chars)")
    parser.add_argument("role", nargs="?", default=UserRole.ADMIN.value, choices=[r.value for r in UserRole])
    args = parser.parse_args(argv)

    name = args.name.strip()
    email = args.email.strip()
    if not name or "@" not in email:
        print("A name and a valid email are required.", file=sys.stderr)
        return 1
    if len(args.password) < 8:
        print("Password must be at least 8 characters.", file=sys.stderr)
        return 1

    db = SessionLocal()
    try:
        user = get_user_store().create(db, name=name, email=email, password=args.password, role=UserRole(args.role))
    except Conflict:
        print(f"User '{email}' already exists.", file=sys.stderr)
        return 1
    except InvalidInput as e:
        print(e.message, file=sys.stderr)
        return 1
    finally:
        db.close()

    print(f"Created user '{user.email}' ({user.id}) with role '{user.role.value}'.")
    return 0


if __name__ == "__main__":
    sys.exit(main())

from __future__ import annotations

import argparse
import getpass

from sqlmodel import Session

from app.db.init_db import init_db
from app.db.session import engine
from app.services.user_service import ensure_admin


def main() -> None:
    parser = argparse.ArgumentParser(description='Create an admin account or promote an existing user.')
    parser.add_argument('email')
    parser.add_argument('--password', default=None, help='Only used when the account does not exist yet')
    parser.add_argument('--name', default=None)
    args = parser.parse_args()

    init_db()
    with Session(engine) as session:
        user, created = ensure_admin(
            session,
            args.email,
            password_factory=lambda: args.password or getpass.getpass("Password: "),
            name=args.name,
        )
    action = 'created' if created else 'promoted'
    print(f"{action} admin {user.email} ({user.id})")


if __name__ == '__main__':
    main()

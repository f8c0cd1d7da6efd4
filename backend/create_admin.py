"""Create the first administrator account.

Usage:
    python -m backend.create_admin --email admin@example.com --password <secret>

Defaults come from ADMIN_EMAIL / ADMIN_PASSWORD. Nothing is created when an
admin already exists.
"""
import argparse
import sys

from backend.core import config
from backend.database import Base, SessionLocal, engine
from backend.models.user import PROFILE_FIELDS, Role, User
from backend.services.user_service import create_user


def create_admin_user(db, email: str, password: str, full_name: str = 'System Administrator') -> User | None:
    existing_admin = db.query(User).filter(User.role == Role.ADMIN).first()
    if existing_admin is not None:
        return None

    profile = {field: 'N/A' for field in PROFILE_FIELDS}
    profile['full_name'] = full_name
    profile['profession'] = 'Administrator'
    return create_user(db, email=email, password=password, profile=profile, role=Role.ADMIN)


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description='Create the initial admin user.')
    parser.add_argument('--email', default=config.ADMIN_EMAIL)
    parser.add_argument('--password', default=config.ADMIN_PASSWORD)
    parser.add_argument('--name', default='System Administrator')
    args = parser.parse_args(argv)

    if not args.password:
        print('An admin password is required (--password or ADMIN_PASSWORD).', file=sys.stderr)
        sys.exit(1)

    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        admin = create_admin_user(db, args.email, args.password, args.name)
    finally:
        db.close()

    if admin is None:
        print('Admin user already exists')
        return
    print('Admin user created successfully:')
    print('Email:', admin.email)
    print('Role:', admin.role.value)
    print('Please change the password after first login!')


if __name__ == '__main__':
    main()

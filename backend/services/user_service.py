"""Data-store operations on users shared by the route modules."""

import logging

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from backend.auth.passwords import hash_password
from backend.core.errors import Conflict, NotFound, ValidationFailed
from backend.models.user import PROFILE_FIELDS, Role, User

logger = logging.getLogger(__name__)

USER_NOT_FOUND_MESSAGE = 'User not found'
RECENT_USERS_LIMIT = 5

STATUS_FILTERS = {'all', 'active', 'inactive'}
LIKE_ESCAPE = '\\'

SEARCHABLE_COLUMNS = (
    User.full_name,
    User.email,
    User.phone_number,
    User.village,
    User.union,
    User.upazila,
    User.district,
    User.educational_qualification,
    User.profession,
    User.election_seat_no,
    User.favorite_party,
    User.role,
)


def escape_like(term: str) -> str:
    return term.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2).replace('%', LIKE_ESCAPE + '%').replace('_', LIKE_ESCAPE + '_')


def is_blank(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def require_fields(values: dict, field_names, message: str) -> None:
    if any(is_blank(values.get(name)) for name in field_names):
        raise ValidationFailed(message)


def ensure_email_available(db: Session, email: str, message: str, exclude_user_id: str | None = None) -> None:
    query = db.query(User.id).filter(User.email == email)
    if exclude_user_id is not None:
        query = query.filter(User.id != exclude_user_id)
    if query.first() is not None:
        raise Conflict(message)


def ensure_facebook_id_available(db: Session, facebook_id: str, exclude_user_id: str | None = None) -> None:
    query = db.query(User.id).filter(User.facebook_id == facebook_id)
    if exclude_user_id is not None:
        query = query.filter(User.id != exclude_user_id)
    if query.first() is not None:
        raise Conflict('User with this Facebook id already exists')


def get_user_or_404(db: Session, user_id: str) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if user is None:
        raise NotFound(USER_NOT_FOUND_MESSAGE)
    return user


def create_user(
    db: Session,
    *,
    email: str,
    password: str,
    profile: dict,
    role: Role = Role.USER,
    is_active: bool = True,
    facebook_id: str | None = None,
) -> User:
    """Insert a user; profile fields that are missing default to an empty string."""
    user = User(
        email=email,
        password_hash=hash_password(password),
        role=role,
        is_active=is_active,
        facebook_id=facebook_id or None,
        **{field: profile.get(field) or '' for field in PROFILE_FIELDS},
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info('Created %s user %s', role.value, user.id)
    return user


def apply_updates(db: Session, user: User, changes: dict) -> User:
    for field, value in changes.items():
        setattr(user, field, value)
    db.commit()
    db.refresh(user)
    return user


def search_users(db: Session, query: str | None = None, status: str = 'all') -> list[User]:
    """Non-admin users, newest first, narrowed by free text and active status."""
    if status not in STATUS_FILTERS:
        raise ValidationFailed('Invalid status filter')

    users = db.query(User).filter(User.role != Role.ADMIN)

    term = (query or '').strip().lower()
    if term:
        pattern = f"%{escape_like(term)}%"
        users = users.filter(
            or_(*[func.lower(column).like(pattern, escape=LIKE_ESCAPE) for column in SEARCHABLE_COLUMNS])
        )

    if status == 'active':
        users = users.filter(User.is_active.is_(True))
    elif status == 'inactive':
        users = users.filter(User.is_active.is_(False))

    return users.order_by(User.created_at.desc()).all()


def collect_stats(db: Session) -> dict:
    total_users = db.query(func.count(User.id)).scalar()
    active_users = db.query(func.count(User.id)).filter(User.is_active.is_(True)).scalar()
    inactive_users = db.query(func.count(User.id)).filter(User.is_active.is_(False)).scalar()
    recent_users = db.query(User).order_by(User.created_at.desc()).limit(RECENT_USERS_LIMIT).all()
    return {
        'total_users': total_users,
        'active_users': active_users,
        'inactive_users': inactive_users,
        'recent_users': recent_users,
    }

"""Stateless, signed session credentials.

A session is a JWT carrying the user id and role, transported in an HTTP-only
cookie and verified on every request. Nothing is stored server side, so a
still-valid token can only be invalidated by expiry or by rotating
JWT_SECRET_KEY.
"""

import logging
from dataclasses import dataclass

import jwt
from fastapi import Response
from sqlalchemy import case, or_
from sqlalchemy.orm import Session as DBSession

from backend.auth import jwt_handler
from backend.auth.credentials import Identity, verify_credentials
from backend.core import config
from backend.core.errors import Unauthorized
from backend.models.user import Role, User

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS_MESSAGE = 'Invalid credentials'


@dataclass(frozen=True)
class Session:
    user_id: str
    role: Role
    email: str = ''
    name: str = ''

    def to_dict(self) -> dict:
        return {'id': self.user_id, 'email': self.email, 'name': self.name, 'role': self.role.value}


def issue_session(identity: Identity) -> str:
    return jwt_handler.create_access_token(
        subject=identity.id,
        claims={'role': identity.role.value, 'email': identity.email, 'name': identity.name},
    )


def read_session(token: str | None) -> Session | None:
    if not token:
        return None
    try:
        payload = jwt_handler.decode_access_token(token)
    except jwt.PyJWTError:
        return None

    try:
        role = Role(payload.get('role'))
    except ValueError:
        return None

    return Session(
        user_id=payload['sub'],
        role=role,
        email=payload.get('email', ''),
        name=payload.get('name', ''),
    )


def sign_in_with_credentials(db: DBSession, email: str | None, password: str | None) -> tuple[Identity, str]:
    identity = verify_credentials(db, email, password)
    if identity is None:
        raise Unauthorized(INVALID_CREDENTIALS_MESSAGE)
    logger.info('User %s signed in with credentials', identity.id)
    return identity, issue_session(identity)


def sign_in_with_oauth(db: DBSession, profile: dict) -> tuple[Identity, str]:
    """Sign in from a provider profile (`id`, `name`, `email`), linking or creating the local row.

    The provider is trusted as-is; OAuth sessions always carry the `user` role.
    """
    subject = str(profile.get('id') or '')
    email = profile.get('email') or ''
    if not subject or not email:
        raise Unauthorized(INVALID_CREDENTIALS_MESSAGE)

    user = (
        db.query(User)
        .filter(or_(User.facebook_id == subject, User.email == email))
        .order_by(case((User.facebook_id == subject, 0), else_=1))
        .first()
    )
    if user is None:
        user = User(
            email=email,
            password_hash='',
            full_name=profile.get('name') or email,
            facebook_id=subject,
            role=Role.USER,
            is_active=True,
        )
        db.add(user)
        logger.info('Created user for OAuth subject %s', subject)
    elif not user.facebook_id:
        user.facebook_id = subject
    db.commit()
    db.refresh(user)

    identity = Identity(id=user.id, email=user.email, name=user.full_name, role=Role.USER)
    return identity, issue_session(identity)


def set_session_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=config.SESSION_COOKIE_NAME,
        value=token,
        max_age=config.JWT_EXPIRES_MINUTES * 60,
        httponly=True,
        secure=config.SESSION_COOKIE_SECURE,
        samesite='lax',
        path='/',
    )


def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(
        key=config.SESSION_COOKIE_NAME,
        httponly=True,
        secure=config.SESSION_COOKIE_SECURE,
        samesite='lax',
        path='/',
    )

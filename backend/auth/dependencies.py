from fastapi import Depends
from fastapi.security import APIKeyCookie

from backend.auth.session import Session, read_session
from backend.core import config
from backend.core.errors import Forbidden, Unauthorized
from backend.models.user import Role

session_cookie = APIKeyCookie(name=config.SESSION_COOKIE_NAME, auto_error=False)


def require_role(session: Session | None, required_role: Role) -> Session:
    """Allow the request through or raise the uniform denial."""
    if session is None:
        raise Unauthorized()
    if session.role != required_role:
        raise Forbidden()
    return session


def get_optional_session(token: str | None = Depends(session_cookie)) -> Session | None:
    return read_session(token)


def get_current_session(session: Session | None = Depends(get_optional_session)) -> Session:
    if session is None:
        raise Unauthorized()
    return session


def require_admin(session: Session | None = Depends(get_optional_session)) -> Session:
    return require_role(session, Role.ADMIN)

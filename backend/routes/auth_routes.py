import logging
import secrets
from urllib.parse import parse_qsl, urlencode, urlparse, urlunparse

import httpx
from fastapi import APIRouter, Depends, Query, Request, status
from fastapi.responses import JSONResponse, RedirectResponse
from sqlalchemy.orm import Session

from backend.auth import session as session_issuer
from backend.auth.dependencies import get_current_session
from backend.auth.oauth import facebook_provider
from backend.core import config
from backend.core.errors import ServiceUnavailable, Unauthorized
from backend.database import get_db
from backend.models.user import PROFILE_FIELDS, Role
from backend.schemas.users import (
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    RegisterResponse,
    SessionUserResponse,
)
from backend.services import user_service

router = APIRouter(tags=['auth'])
registration_router = APIRouter(tags=['auth'])

logger = logging.getLogger(__name__)

OAUTH_STATE_COOKIE = 'oauth_state'
REGISTRATION_FIELDS = ('email', 'password') + PROFILE_FIELDS


@registration_router.post('/register', response_model=RegisterResponse)
def register(payload: RegisterRequest, db: Session = Depends(get_db)):
    values = payload.model_dump()
    user_service.require_fields(values, REGISTRATION_FIELDS, 'All fields are required.')
    user_service.ensure_email_available(db, payload.email, 'Email already registered.')

    user = user_service.create_user(
        db,
        email=payload.email,
        password=payload.password,
        profile=values,
        role=Role.USER,
        facebook_id=payload.facebook_id,
    )
    return {
        'success': True,
        'user': {'id': user.id, 'email': user.email, 'name': user.full_name, 'role': user.role},
    }


@router.post('/login', response_model=LoginResponse)
def login(payload: LoginRequest, db: Session = Depends(get_db)):
    identity, token = session_issuer.sign_in_with_credentials(db, payload.email, payload.password)
    response = JSONResponse(content={'user': identity.to_dict()})
    session_issuer.set_session_cookie(response, token)
    return response


@router.post('/logout')
def logout():
    response = JSONResponse(content={'message': 'Signed out'})
    session_issuer.clear_session_cookie(response)
    return response


@router.get('/session', response_model=SessionUserResponse)
def current_session(session: session_issuer.Session = Depends(get_current_session)):
    return session.to_dict()


@router.get('/oauth/facebook/login')
def facebook_login():
    if not facebook_provider.is_configured:
        raise ServiceUnavailable('Facebook sign-in is not configured')

    state = secrets.token_urlsafe(24)
    response = RedirectResponse(url=facebook_provider.get_authorization_url(state=state))
    response.set_cookie(
        key=OAUTH_STATE_COOKIE,
        value=state,
        max_age=600,
        httponly=True,
        secure=config.SESSION_COOKIE_SECURE,
        samesite='lax',
    )
    return response


@router.get('/oauth/facebook/callback')
async def facebook_callback(
    request: Request,
    code: str | None = Query(default=None),
    state: str | None = Query(default=None),
    db: Session = Depends(get_db),
):
    expected_state = request.cookies.get(OAUTH_STATE_COOKIE)
    if not code or not state or not expected_state or not secrets.compare_digest(state, expected_state):
        raise Unauthorized(session_issuer.INVALID_CREDENTIALS_MESSAGE)

    try:
        access_token = await facebook_provider.exchange_code_for_token(code)
        profile = await facebook_provider.get_user_profile(access_token)
    except (httpx.HTTPError, KeyError, ValueError) as exc:
        logger.warning('Facebook sign-in failed: %s', exc)
        raise Unauthorized(session_issuer.INVALID_CREDENTIALS_MESSAGE) from exc

    identity, token = session_issuer.sign_in_with_oauth(db, profile)

    if config.FRONTEND_LOGIN_REDIRECT_URL:
        parsed = urlparse(config.FRONTEND_LOGIN_REDIRECT_URL)
        query = dict(parse_qsl(parsed.query))
        query.update({'login': 'facebook'})
        response = RedirectResponse(
            url=urlunparse(parsed._replace(query=urlencode(query))),
            status_code=status.HTTP_302_FOUND,
        )
    else:
        response = JSONResponse(content={'user': identity.to_dict()})

    session_issuer.set_session_cookie(response, token)
    response.delete_cookie(OAUTH_STATE_COOKIE)
    return response

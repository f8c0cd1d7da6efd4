import os
from datetime import datetime

os.environ.setdefault('DATABASE_URL', 'sqlite://')
os.environ.setdefault('BCRYPT_ROUNDS', '4')
os.environ.setdefault('JWT_SECRET_KEY', 'test-secret-key')
os.environ.setdefault('APP_ENV', 'test')

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from backend.auth.credentials import Identity  # noqa: E402
from backend.auth.passwords import hash_password  # noqa: E402
from backend.auth.session import issue_session  # noqa: E402
from backend.core import config  # noqa: E402
from backend.database import Base, get_db  # noqa: E402
from backend.main import app  # noqa: E402
from backend.models.user import Role, User  # noqa: E402


@pytest.fixture
def session_factory():
    engine = create_engine(
        'sqlite://',
        connect_args={'check_same_thread': False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def make_user(db):
    counter = {'value': 0}

    def _make_user(
        email: str | None = None,
        password: str = 'password123',
        role: Role = Role.USER,
        is_active: bool = True,
        created_at: datetime | None = None,
        **profile,
    ) -> User:
        counter['value'] += 1
        user = User(
            email=email or f"user{counter['value']}@example.com",
            password_hash=hash_password(password),
            full_name=profile.pop('full_name', f"User {counter['value']}"),
            role=role,
            is_active=is_active,
            **profile,
        )
        if created_at is not None:
            user.created_at = created_at
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make_user


@pytest.fixture
def login_as(client):
    def _login_as(user: User) -> None:
        token = issue_session(Identity.from_user(user))
        client.cookies.set(config.SESSION_COOKIE_NAME, token)

    return _login_as


@pytest.fixture
def admin(make_user):
    return make_user(email='admin@example.com', role=Role.ADMIN, full_name='System Administrator')

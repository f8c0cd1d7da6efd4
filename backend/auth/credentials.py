"""Email/password verification against stored user records."""

from dataclasses import dataclass
from functools import lru_cache

from sqlalchemy.orm import Session

from backend.auth.passwords import hash_password, verify_password
from backend.models.user import Role, User


@dataclass(frozen=True)
class Identity:
    """The minimal, hash-free view of a user handed to the session layer."""
    id: str
    email: str
    name: str
    role: Role

    @classmethod
    def from_user(cls, user: User) -> 'Identity':
        return cls(id=user.id, email=user.email, name=user.full_name, role=Role(user.role))

    def to_dict(self) -> dict:
        return {'id': self.id, 'email': self.email, 'name': self.name, 'role': self.role.value}


@lru_cache(maxsize=1)
def _dummy_hash() -> str:
    return hash_password('not-a-real-password')


def verify_credentials(db: Session, email: str | None, password: str | None) -> Identity | None:
    """Return the identity for a matching email/password pair, otherwise None.

    Unknown emails and wrong passwords are indistinguishable to the caller;
    an unknown email still pays for one bcrypt comparison.
    """
    if not email or not password:
        return None

    user = db.query(User).filter(User.email == email).first()
    if user is None:
        verify_password(password, _dummy_hash())
        return None

    if not verify_password(password, user.password_hash):
        return None

    return Identity.from_user(user)

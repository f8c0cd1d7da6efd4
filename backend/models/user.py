"""User model definitions."""

import enum
import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, Enum, String
from backend.database import Base


class Role(str, enum.Enum):
    """Flat access tier; there is no hierarchy between the two."""
    ADMIN = "admin"
    USER = "user"


def _new_id() -> str:
    return uuid.uuid4().hex


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


PROFILE_FIELDS = (
    "full_name",
    "father_name",
    "educational_qualification",
    "profession",
    "village",
    "union",
    "upazila",
    "district",
    "election_seat_no",
    "phone_number",
    "favorite_party",
)


class User(Base):
    """Represents a registered voter profile or an administrator."""
    __tablename__ = "users"

    id = Column(String(32), primary_key=True, default=_new_id)
    email = Column(String, unique=True, index=True, nullable=False)
    password_hash = Column(String, nullable=False, default="")

    full_name = Column(String, nullable=False)
    father_name = Column(String, nullable=False, default="")
    educational_qualification = Column(String, nullable=False, default="")
    profession = Column(String, nullable=False, default="")
    village = Column(String, nullable=False, default="")
    union = Column(String, nullable=False, default="")
    upazila = Column(String, nullable=False, default="")
    district = Column(String, nullable=False, default="")
    election_seat_no = Column(String, nullable=False, default="")
    phone_number = Column(String, nullable=False, default="")
    favorite_party = Column(String, nullable=False, default="")
    facebook_id = Column(String, unique=True, nullable=True)

    role = Column(
        Enum(Role, native_enum=False, values_callable=lambda roles: [role.value for role in roles]),
        nullable=False,
        default=Role.USER,
    )
    is_active = Column(Boolean, nullable=False, default=True, index=True)

    created_at = Column(DateTime, nullable=False, default=_utcnow, index=True)
    updated_at = Column(DateTime, nullable=False, default=_utcnow, onupdate=_utcnow)

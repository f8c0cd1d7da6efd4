"""Request and response models for user endpoints.

JSON bodies use camelCase keys (`fullName`, `electionSeatNo`, ...); the
Python side keeps the column names. No response model has a password field.
"""

from datetime import datetime

from pydantic import BaseModel
from pydantic.alias_generators import to_camel

from backend.models.user import Role


class CamelModel(BaseModel):
    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


class ProfileFields(CamelModel):
    full_name: str | None = None
    father_name: str | None = None
    educational_qualification: str | None = None
    profession: str | None = None
    village: str | None = None
    union: str | None = None
    upazila: str | None = None
    district: str | None = None
    election_seat_no: str | None = None
    phone_number: str | None = None
    favorite_party: str | None = None


class RegisterRequest(ProfileFields):
    email: str | None = None
    password: str | None = None
    facebook_id: str | None = None


class LoginRequest(CamelModel):
    email: str | None = None
    password: str | None = None


class AdminCreateUserRequest(ProfileFields):
    email: str | None = None
    password: str | None = None
    facebook_id: str | None = None
    role: Role = Role.USER
    is_active: bool = True


class AdminUpdateUserRequest(ProfileFields):
    email: str | None = None
    password: str | None = None
    facebook_id: str | None = None
    role: Role | None = None
    is_active: bool | None = None


class ToggleStatusRequest(CamelModel):
    is_active: bool


class ProfileUpdateRequest(ProfileFields):
    """Fields a user may change on their own profile; anything else in the body is ignored."""


class SessionUserResponse(CamelModel):
    id: str
    email: str
    name: str
    role: Role


class LoginResponse(CamelModel):
    user: SessionUserResponse


class RegisterResponse(CamelModel):
    success: bool
    user: SessionUserResponse


class UserResponse(CamelModel):
    id: str
    email: str
    full_name: str
    father_name: str
    educational_qualification: str
    profession: str
    village: str
    union: str
    upazila: str
    district: str
    election_seat_no: str
    phone_number: str
    favorite_party: str
    facebook_id: str | None = None
    role: Role
    is_active: bool
    created_at: datetime
    updated_at: datetime


class RecentUserResponse(CamelModel):
    id: str
    full_name: str
    email: str
    role: Role
    is_active: bool
    created_at: datetime


class StatsResponse(CamelModel):
    total_users: int
    active_users: int
    inactive_users: int
    recent_users: list[RecentUserResponse]


class MessageResponse(CamelModel):
    message: str

import logging

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import Response
from sqlalchemy.orm import Session

from backend.auth.dependencies import require_admin
from backend.auth.passwords import hash_password
from backend.auth.session import Session as AuthSession
from backend.core.errors import ValidationFailed
from backend.database import get_db
from backend.schemas.users import (
    AdminCreateUserRequest,
    AdminUpdateUserRequest,
    MessageResponse,
    StatsResponse,
    ToggleStatusRequest,
    UserResponse,
)
from backend.services import pdf_export, user_service

# Every route here runs require_admin before its body, so a denied request has no side effects.
router = APIRouter(tags=['admin'], dependencies=[Depends(require_admin)])

logger = logging.getLogger(__name__)

CREATE_REQUIRED_FIELDS = ('email', 'password', 'full_name')
# Columns that may not be nulled through an update.
NON_NULLABLE_UPDATE_FIELDS = {
    'email', 'full_name', 'father_name', 'educational_qualification', 'profession', 'village',
    'union', 'upazila', 'district', 'election_seat_no', 'phone_number', 'favorite_party',
    'role', 'is_active', 'password',
}


@router.get('/stats', response_model=StatsResponse)
def get_stats(db: Session = Depends(get_db)):
    return user_service.collect_stats(db)


@router.get('/users', response_model=list[UserResponse])
def list_users(
    q: str | None = Query(default=None),
    status_filter: str = Query(default='all', alias='status'),
    db: Session = Depends(get_db),
):
    return user_service.search_users(db, query=q, status=status_filter)


@router.get('/users/export.pdf')
def export_users_pdf(
    q: str | None = Query(default=None),
    status_filter: str = Query(default='all', alias='status'),
    db: Session = Depends(get_db),
):
    users = user_service.search_users(db, query=q, status=status_filter)
    content = pdf_export.render_users_pdf(users)
    filename = pdf_export.export_filename()
    return Response(
        content=content,
        media_type='application/pdf',
        headers={'Content-Disposition': f'attachment; filename="{filename}"'},
    )


@router.post('/users', response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def create_user(payload: AdminCreateUserRequest, db: Session = Depends(get_db)):
    values = payload.model_dump()
    user_service.require_fields(values, CREATE_REQUIRED_FIELDS, 'Email, password, and full name are required')
    user_service.ensure_email_available(db, payload.email, 'User with this email already exists')
    if not user_service.is_blank(payload.facebook_id):
        user_service.ensure_facebook_id_available(db, payload.facebook_id)

    return user_service.create_user(
        db,
        email=payload.email,
        password=payload.password,
        profile=values,
        role=payload.role,
        is_active=payload.is_active,
        facebook_id=payload.facebook_id,
    )


@router.get('/users/{user_id}', response_model=UserResponse)
def get_user(user_id: str, db: Session = Depends(get_db)):
    return user_service.get_user_or_404(db, user_id)


@router.patch('/users/{user_id}', response_model=UserResponse)
def update_user(
    user_id: str,
    payload: AdminUpdateUserRequest,
    session: AuthSession = Depends(require_admin),
    db: Session = Depends(get_db),
):
    user = user_service.get_user_or_404(db, user_id)

    changes = {
        field: value
        for field, value in payload.model_dump(exclude_unset=True).items()
        if value is not None or field not in NON_NULLABLE_UPDATE_FIELDS
    }

    if 'email' in changes:
        if user_service.is_blank(changes['email']):
            raise ValidationFailed('Email cannot be empty')
        user_service.ensure_email_available(
            db, changes['email'], 'User with this email already exists', exclude_user_id=user.id
        )
    if 'facebook_id' in changes:
        if user_service.is_blank(changes['facebook_id']):
            changes['facebook_id'] = None
        else:
            user_service.ensure_facebook_id_available(db, changes['facebook_id'], exclude_user_id=user.id)
    if 'full_name' in changes and user_service.is_blank(changes['full_name']):
        raise ValidationFailed('Full name cannot be empty')
    if changes.get('is_active') is False and user.id == session.user_id:
        raise ValidationFailed('Cannot deactivate your own account')
    if 'password' in changes:
        password = changes.pop('password')
        if user_service.is_blank(password):
            raise ValidationFailed('Password cannot be empty')
        changes['password_hash'] = hash_password(password)

    user = user_service.apply_updates(db, user, changes)
    logger.info('Admin %s updated user %s', session.user_id, user.id)
    return user


@router.delete('/users/{user_id}', response_model=MessageResponse)
def delete_user(
    user_id: str,
    session: AuthSession = Depends(require_admin),
    db: Session = Depends(get_db),
):
    user = user_service.get_user_or_404(db, user_id)

    # Check and delete are not wrapped in a transaction.
    if user.id == session.user_id:
        raise ValidationFailed('Cannot delete your own account')

    db.delete(user)
    db.commit()
    logger.info('Admin %s deleted user %s', session.user_id, user_id)
    return {'message': 'User deleted successfully'}


@router.patch('/users/{user_id}/toggle-status', response_model=UserResponse)
def toggle_user_status(
    user_id: str,
    payload: ToggleStatusRequest,
    session: AuthSession = Depends(require_admin),
    db: Session = Depends(get_db),
):
    user = user_service.get_user_or_404(db, user_id)

    if user.id == session.user_id and not payload.is_active:
        raise ValidationFailed('Cannot deactivate your own account')

    return user_service.apply_updates(db, user, {'is_active': payload.is_active})

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from backend.auth.dependencies import get_current_session
from backend.auth.session import Session as AuthSession
from backend.core.errors import ValidationFailed
from backend.database import get_db
from backend.schemas.users import ProfileUpdateRequest, UserResponse
from backend.services import user_service

router = APIRouter(tags=['user'])


@router.get('/me', response_model=UserResponse)
def get_my_profile(session: AuthSession = Depends(get_current_session), db: Session = Depends(get_db)):
    return user_service.get_user_or_404(db, session.user_id)


@router.put('/me', response_model=UserResponse)
def update_my_profile(
    payload: ProfileUpdateRequest,
    session: AuthSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    # ProfileUpdateRequest only declares profile fields; role, email and status never get here.
    changes = {
        field: value
        for field, value in payload.model_dump(exclude_unset=True).items()
        if value is not None
    }
    if 'full_name' in changes and user_service.is_blank(changes['full_name']):
        raise ValidationFailed('Full name cannot be empty')

    user = user_service.get_user_or_404(db, session.user_id)
    return user_service.apply_updates(db, user, changes)

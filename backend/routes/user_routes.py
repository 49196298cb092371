import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from backend.auth.dependencies import get_current_user
from backend.auth.jwt_handler import TokenClaims
from backend.database import get_db
from backend.models.user import User
from backend.routes.auth_routes import UserProfileResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=['users'])


@router.get('/{user_id}', response_model=UserProfileResponse)
def get_user_profile(
    user_id: int,
    current_user: TokenClaims = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    del current_user

    try:
        user = db.query(User).filter(User.id == user_id).first()
    except SQLAlchemyError as exc:
        logger.exception('Fetching profile for user %s failed', user_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail='Server error while fetching profile',
        ) from exc

    if user is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail='User not found',
        )

    return UserProfileResponse.model_validate(user)

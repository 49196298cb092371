import logging

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, field_validator
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from backend.auth.dependencies import get_current_user
from backend.auth.jwt_handler import TokenClaims, TokenService, get_token_service
from backend.auth.password import MAX_PASSWORD_BYTES, hash_password, verify_password
from backend.database import get_db
from backend.models.student import Student, is_valid_prn
from backend.models.user import User

logger = logging.getLogger(__name__)

router = APIRouter(tags=['auth'])

ALREADY_REGISTERED_DETAIL = 'User already registered. Please login to continue.'


def coerce_prn(value):
    # Any JSON value is checked as text, so numbers and other shapes get the PRN error.
    if value is None or isinstance(value, str):
        return value
    return str(value)


class SignupRequest(BaseModel):
    prn: str | None = None
    password: str | None = None
    name: str | None = None
    course: str | None = None
    year: int | None = None
    interests: str | None = None

    @field_validator('prn', mode='before')
    @classmethod
    def normalize_prn(cls, value):
        return coerce_prn(value)


class LoginRequest(BaseModel):
    prn: str | None = None
    password: str | None = None

    @field_validator('prn', mode='before')
    @classmethod
    def normalize_prn(cls, value):
        return coerce_prn(value)


class UserProfileResponse(BaseModel):
    id: int
    prn: str
    name: str
    course: str
    year: int
    interests: str | None = None

    class Config:
        from_attributes = True


class MessageResponse(BaseModel):
    message: str


class LoginResponse(BaseModel):
    message: str
    token: str
    user: UserProfileResponse


@router.post('/signup', response_model=MessageResponse)
def signup(data: SignupRequest, db: Session = Depends(get_db)):
    if not is_valid_prn(data.prn):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail='PRN must be exactly 12 digits',
        )

    if not data.password:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail='Password is required',
        )

    if len(data.password.encode('utf-8')) > MAX_PASSWORD_BYTES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f'Password must be at most {MAX_PASSWORD_BYTES} bytes',
        )

    try:
        roster_entry = db.query(Student).filter(
            Student.prn == data.prn,
            Student.name == data.name,
            Student.course == data.course,
            Student.year == data.year,
        ).first()

        if roster_entry is None:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail='Invalid student details. Please enter correct information.',
            )

        existing_user = db.query(User.id).filter(User.prn == data.prn).first()
        if existing_user is not None:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=ALREADY_REGISTERED_DETAIL,
            )

        user = User(
            prn=roster_entry.prn,
            password_hash=hash_password(data.password),
            name=roster_entry.name,
            course=roster_entry.course,
            year=roster_entry.year,
            interests=data.interests,
        )
        db.add(user)
        db.commit()
    except IntegrityError as exc:
        # Another signup for the same PRN committed between the check and the insert.
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=ALREADY_REGISTERED_DETAIL,
        ) from exc
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception('Signup failed for PRN %s', data.prn)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail='Server error during signup',
        ) from exc

    logger.info('Registered user %s', data.prn)
    return {'message': 'User registered successfully'}


@router.post('/login', response_model=LoginResponse)
def login(
    data: LoginRequest,
    db: Session = Depends(get_db),
    token_service: TokenService = Depends(get_token_service),
):
    try:
        user = db.query(User).filter(User.prn == data.prn).first()
    except SQLAlchemyError as exc:
        logger.exception('Login lookup failed for PRN %s', data.prn)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail='Server error during login',
        ) from exc

    if user is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail='User not registered. Please signup first.',
        )

    try:
        is_match = verify_password(data.password or '', user.password_hash)
    except ValueError as exc:
        logger.exception('Stored password hash for user %s is malformed', user.id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail='Server error during login',
        ) from exc

    if not is_match:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail='Invalid password',
        )

    token = token_service.issue(user.id, user.prn)
    logger.info('Login: user %s', user.id)

    return LoginResponse(
        message='Login successful',
        token=token,
        user=UserProfileResponse.model_validate(user),
    )


@router.get('/dashboard', response_model=MessageResponse)
def dashboard(current_user: TokenClaims = Depends(get_current_user)):
    del current_user
    return {'message': 'Welcome to your dashboard'}

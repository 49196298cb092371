import os

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault('JWT_SECRET_KEY', 'test-secret-key')
os.environ.setdefault('DATABASE_URL', 'sqlite:///:memory:')

from backend.auth.jwt_handler import TokenService, get_token_service  # noqa: E402
from backend.auth.password import hash_password  # noqa: E402
from backend.database import Base, get_db  # noqa: E402
from backend.main import app  # noqa: E402
from backend.models.student import Student  # noqa: E402
from backend.models.user import User  # noqa: E402

TEST_SECRET = 'test-secret-key'


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
def db_session(session_factory):
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def token_service() -> TokenService:
    return TokenService(TEST_SECRET)


@pytest.fixture
def client(session_factory, token_service):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_token_service] = lambda: token_service
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def make_student(db_session):
    def _make_student(prn='123456789012', name='Alice', course='CS', year=2) -> Student:
        student = Student(prn=prn, name=name, course=course, year=year)
        db_session.add(student)
        db_session.commit()
        return student

    return _make_student


@pytest.fixture
def make_user(db_session, make_student):
    def _make_user(prn='123456789012', name='Alice', course='CS', year=2, password='p1', interests=None) -> User:
        make_student(prn=prn, name=name, course=course, year=year)
        user = User(
            prn=prn,
            password_hash=hash_password(password),
            name=name,
            course=course,
            year=year,
            interests=interests,
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make_user


@pytest.fixture
def auth_headers(token_service):
    def _auth_headers(user: User) -> dict[str, str]:
        return {'Authorization': f'Bearer {token_service.issue(user.id, user.prn)}'}

    return _auth_headers

"""
Shared fixtures for the users service tests.

- ``engine``/``db``: fresh in-memory SQLite database per test.
- ``role``/``document_type``: reference rows every user needs.
- ``pwd_context``: cheap passlib context so hashing stays fast.
"""

from collections.abc import Iterator

import pytest
from passlib.context import CryptContext
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.database import init_db
from app.models import DocumentType, Role
from app.services.user_service import UserService


@pytest.fixture
def engine() -> Iterator[Engine]:
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine: Engine) -> Iterator[Session]:
    TestingSession = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def role(db: Session) -> Role:
    role = Role(name="customer", description="Cliente registrado")
    db.add(role)
    db.commit()
    return role


@pytest.fixture
def document_type(db: Session) -> DocumentType:
    document_type = DocumentType(name="Cédula de ciudadanía", abbreviation="CC")
    db.add(document_type)
    db.commit()
    return document_type


@pytest.fixture
def pwd_context() -> CryptContext:
    return CryptContext(schemes=["pbkdf2_sha256"], pbkdf2_sha256__default_rounds=1000)


@pytest.fixture
def user_service(db: Session, pwd_context: CryptContext) -> UserService:
    return UserService(db, pwd_context=pwd_context)


@pytest.fixture
def valid_candidate() -> dict:
    """Transport-shaped (camelCase) input that passes every field rule."""
    return {
        "id": "1020304050",
        "firstName": "Ana",
        "lastName": "Gómez",
        "birthdate": "1990-05-17",
        "address": "Calle 10 # 5-20",
        "postalCode": "110111",
        "email": "ana.gomez@gmail.com",
        "password": "s3cret-pass",
        "areaCode": "57",
        "phoneNumber": "3001234567",
        "termsAndConditions": True,
        "status": "ACTIVE",
        "roleId": 1,
        "documentTypeId": 1,
    }


@pytest.fixture
def stored_candidate(valid_candidate: dict, role: Role, document_type: DocumentType) -> dict:
    """Valid input pointing at reference rows that exist in ``db``."""
    return {**valid_candidate, "roleId": role.id, "documentTypeId": document_type.id}

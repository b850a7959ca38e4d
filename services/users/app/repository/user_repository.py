import logging
from typing import List, Optional

from sqlalchemy import func, inspect
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.models.user import User, UserStatus
from app.repository.document_type_repository import get_document_type_by_id
from app.repository.errors import DuplicateKeyError, ReferenceNotFoundError
from app.repository.role_repository import get_role_by_id

logger = logging.getLogger(__name__)


def get_user_by_id(db: Session, user_id: str) -> Optional[User]:
    return db.query(User).filter(User.id == user_id).first()


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(func.lower(User.email) == email.strip().lower()).first()


def get_all_users(db: Session) -> List[User]:
    return db.query(User).order_by(User.create_date, User.id).all()


def get_users_by_status(db: Session, status: UserStatus) -> List[User]:
    return db.query(User).filter(User.status == status).order_by(User.id).all()


def get_users_by_role(db: Session, role_id: int) -> List[User]:
    return db.query(User).filter(User.role_id == role_id).order_by(User.id).all()


def _check_constraints(db: Session, user: User) -> None:
    is_new = inspect(user).transient or inspect(user).pending

    with db.no_autoflush:
        if is_new:
            existing = db.get(User, user.id)
            if existing is not None and existing is not user:
                raise DuplicateKeyError("User", "id", user.id)

        same_email = get_user_by_email(db, user.email)
        if same_email is not None and same_email is not user and same_email.id != user.id:
            raise DuplicateKeyError("User", "email", user.email)

        if user.role_id is None or get_role_by_id(db, user.role_id) is None:
            raise ReferenceNotFoundError("Role", "role_id", user.role_id)

        if (
            user.document_type_id is None
            or get_document_type_by_id(db, user.document_type_id) is None
        ):
            raise ReferenceNotFoundError("DocumentType", "document_type_id", user.document_type_id)


def save_user(db: Session, user: User) -> User:
    """Insert or update ``user`` after checking keys and references."""
    _check_constraints(db, user)

    db.add(user)
    try:
        db.flush()
    except IntegrityError as exc:
        # Carrera con otra transacción: el índice único tiene la última palabra
        logger.warning("Integrity error while saving user %s: %s", user.id, exc.orig)
        field = _duplicated_field(str(exc.orig))
        if field is None:
            raise
        raise DuplicateKeyError("User", field, getattr(user, field)) from exc
    return user


def _duplicated_field(message: str) -> Optional[str]:
    """Map a unique-violation message from SQLite, PostgreSQL or MySQL to a column."""
    message = message.lower()
    if "unique" not in message and "duplicate" not in message:
        return None
    if "email" in message:
        return "email"
    if "users.id" in message or "pkey" in message or "primary" in message:
        return "id"
    return None


def delete_user(db: Session, user: User) -> None:
    db.delete(user)
    db.flush()

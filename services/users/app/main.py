"""Entry point for the users service: logging, schema and reference data."""
from __future__ import annotations

import logging

from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.database import SessionLocal, init_db
from app.core.logging import configure_logging
from app.models.document_type import DocumentType
from app.models.role import Role
from app.repository import document_type_repository, role_repository

logger = logging.getLogger(__name__)

DEFAULT_ROLES: tuple[tuple[str, str], ...] = (
    ("admin", "Administrador de la plataforma"),
    ("customer", "Cliente registrado"),
)

DEFAULT_DOCUMENT_TYPES: tuple[tuple[str, str], ...] = (
    ("Cédula de ciudadanía", "CC"),
    ("Cédula de extranjería", "CE"),
    ("Tarjeta de identidad", "TI"),
    ("Pasaporte", "PA"),
)


def seed_reference_data(db: Session) -> None:
    """Insert the default roles and document types that are missing."""
    existing_roles = {role.name for role in role_repository.get_all_roles(db)}
    for name, description in DEFAULT_ROLES:
        if name not in existing_roles:
            role_repository.create_role(db, Role(name=name, description=description))

    existing_types = {item.name for item in document_type_repository.get_all_document_types(db)}
    for name, abbreviation in DEFAULT_DOCUMENT_TYPES:
        if name not in existing_types:
            document_type_repository.create_document_type(
                db, DocumentType(name=name, abbreviation=abbreviation)
            )
    db.commit()


def bootstrap(bind: Engine | None = None, session: Session | None = None) -> None:
    configure_logging()
    init_db(bind)
    db = session or SessionLocal()
    try:
        seed_reference_data(db)
    finally:
        if session is None:
            db.close()
    logger.info("%s ready", settings.PROJECT_NAME)


if __name__ == "__main__":
    bootstrap()

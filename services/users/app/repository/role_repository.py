from typing import List, Optional

from sqlalchemy.orm import Session

from app.models.role import Role


def get_role_by_id(db: Session, role_id: int) -> Optional[Role]:
    return db.query(Role).filter(Role.id == role_id).first()


def get_role_by_name(db: Session, name: str) -> Optional[Role]:
    return db.query(Role).filter(Role.name == name).first()


def get_all_roles(db: Session) -> List[Role]:
    return db.query(Role).order_by(Role.id).all()


def create_role(db: Session, role: Role) -> Role:
    db.add(role)
    db.flush()
    return role

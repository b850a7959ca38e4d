from typing import List, Optional

from sqlalchemy.orm import Session

from app.models.document_type import DocumentType


def get_document_type_by_id(db: Session, document_type_id: int) -> Optional[DocumentType]:
    return db.query(DocumentType).filter(DocumentType.id == document_type_id).first()


def get_all_document_types(db: Session) -> List[DocumentType]:
    return db.query(DocumentType).order_by(DocumentType.id).all()


def create_document_type(db: Session, document_type: DocumentType) -> DocumentType:
    db.add(document_type)
    db.flush()
    return document_type

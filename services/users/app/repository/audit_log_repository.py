from typing import List

from sqlalchemy.orm import Session

from app.models.audit_log import AuditLog


def create_audit_log(db: Session, audit_log: AuditLog) -> AuditLog:
    db.add(audit_log)
    db.flush()
    return audit_log


def get_audit_logs_by_user(db: Session, user_id: str) -> List[AuditLog]:
    return (
        db.query(AuditLog)
        .filter(AuditLog.user_id == user_id)
        .order_by(AuditLog.id_log)
        .all()
    )

from sqlalchemy import BigInteger, Column, DateTime, Integer, String, Text, func

from app.core.database import Base


class AuditLog(Base):
    __tablename__ = "audit_log"

    id_log = Column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True, index=True)
    entity = Column(String(100), nullable=False)
    action = Column(Text, nullable=False)
    message = Column(Text, nullable=False)
    state = Column(String(30), nullable=False)
    timestamp = Column(DateTime(timezone=True), server_default=func.now())
    # Sin FK: las entradas deben sobrevivir al borrado del usuario
    user_id = Column(String(50), nullable=True, index=True)

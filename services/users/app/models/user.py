from __future__ import annotations

import enum
from datetime import date, datetime
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, Date, DateTime, Enum, ForeignKey, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base

if TYPE_CHECKING:  # pragma: no cover
    from app.models.document_type import DocumentType
    from app.models.order import Order
    from app.models.role import Role


class UserStatus(str, enum.Enum):
    INACTIVE = "INACTIVE"
    ACTIVE = "ACTIVE"


DEFAULT_AREA_CODE = "57"


class User(Base):
    __tablename__ = "users"

    # Número de documento de identidad
    id: Mapped[str] = mapped_column(String(50), primary_key=True)
    first_name: Mapped[str] = mapped_column(String(50), nullable=False)
    last_name: Mapped[str] = mapped_column(String(50), nullable=False)
    birthdate: Mapped[date] = mapped_column(Date, nullable=False)
    address: Mapped[str | None] = mapped_column(String(50), nullable=True)
    postal_code: Mapped[str | None] = mapped_column(String(50), nullable=True)
    email: Mapped[str] = mapped_column(String(50), nullable=False, unique=True, index=True)
    password: Mapped[str | None] = mapped_column(Text, nullable=True)
    area_code: Mapped[str | None] = mapped_column(
        String(5), nullable=True, default=DEFAULT_AREA_CODE
    )
    phone_number: Mapped[str | None] = mapped_column(String(20), nullable=True)
    terms_and_conditions: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    status: Mapped[UserStatus] = mapped_column(
        Enum(UserStatus, name="user_status", native_enum=False, length=20),
        nullable=False,
        default=UserStatus.INACTIVE,
    )
    create_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    update_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
    role_id: Mapped[int] = mapped_column(Integer, ForeignKey("roles.id"), nullable=False)
    document_type_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("document_types.id"), nullable=False
    )

    role: Mapped["Role"] = relationship("Role", back_populates="users")
    document_type: Mapped["DocumentType"] = relationship("DocumentType", back_populates="users")
    orders: Mapped[list["Order"]] = relationship(
        "Order",
        back_populates="user",
        order_by="[Order.create_date, Order.id]",
        passive_deletes=True,
    )

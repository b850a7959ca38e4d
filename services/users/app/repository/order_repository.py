from typing import List, Optional

from sqlalchemy.orm import Session

from app.models.order import Order
from app.models.user import User
from app.repository.errors import ReferenceNotFoundError


def get_order_by_id(db: Session, order_id: int) -> Optional[Order]:
    return db.query(Order).filter(Order.id == order_id).first()


def get_orders_by_user(db: Session, user_id: str) -> List[Order]:
    return (
        db.query(Order)
        .filter(Order.user_id == user_id)
        .order_by(Order.create_date, Order.id)
        .all()
    )


def count_orders_by_user(db: Session, user_id: str) -> int:
    return db.query(Order).filter(Order.user_id == user_id).count()


def create_order(db: Session, order: Order) -> Order:
    with db.no_autoflush:
        if db.get(User, order.user_id) is None:
            raise ReferenceNotFoundError("User", "user_id", order.user_id)
    db.add(order)
    db.flush()
    return order

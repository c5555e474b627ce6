# backend/services/orders.py
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError
from sqlalchemy.orm import selectinload

from database import Store
from models.cart import CartItem
from models.order import Order, OrderItem, OrderStatus, TERMINAL_STATUSES
from models.users import User
from services.errors import InvalidInputError, NotFoundError, PersistenceError, StoreUnavailableError
from utils.audit import write_log
from utils.policy import Capability, authorize

logger = logging.getLogger(__name__)


class OrderService:
    """
    Order domain, separate from the cart.

    Placing an order is the only multi-statement write in the system and runs
    in a single transaction: the order row, its item rows, the cart cleanup
    and the audit entry either all land or none do.
    """

    def __init__(self, store: Store):
        self.store = store

    def create(
        self,
        user_id: int,
        total_amount: int,
        items: List[Dict[str, Any]],
        phone_number: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> int:
        """
        Use Case: checkout.

        1. Checks the submitted lines add up to total_amount
        2. Inserts the order and flushes to get its id
        3. Inserts the item snapshots stamped with that id
        4. Empties the caller's cart
        """
        if not items:
            raise InvalidInputError("Order must contain at least one item")

        computed = sum(i["price"] * i["quantity"] for i in items)
        if computed != total_amount:
            raise InvalidInputError(
                f"total_amount {total_amount} does not match item total {computed}"
            )

        try:
            with self.store.transaction() as db:
                order = Order(
                    user_id=user_id,
                    total_amount=total_amount,
                    phone_number=phone_number,
                    notes=notes,
                    status=OrderStatus.PENDING,
                )
                db.add(order)
                db.flush()

                db.add_all([
                    OrderItem(
                        order_id=order.id,
                        product_id=i["product_id"],
                        product_name=i["product_name"],
                        price=i["price"],
                        quantity=i["quantity"],
                    )
                    for i in items
                ])
                db.flush()

                db.query(CartItem).filter(CartItem.user_id == user_id).delete(synchronize_session=False)

                write_log(db, user_id=user_id, action="ORDER_CREATE", resource="orders",
                          meta={"order_id": order.id, "items": len(items), "total": total_amount})
                order_id = order.id
        except IntegrityError as e:
            logger.error("Order for user %s rolled back: %s", user_id, e.orig)
            raise InvalidInputError("Order references unknown products") from e
        except OperationalError as e:
            logger.error("Order for user %s rolled back, database unavailable: %s", user_id, e.orig)
            raise StoreUnavailableError("Database not available") from e
        except SQLAlchemyError as e:
            logger.exception("Order for user %s rolled back", user_id)
            raise PersistenceError("Order could not be placed") from e

        logger.info("Order %s created for user %s (%s items)", order_id, user_id, len(items))
        return order_id

    def my_orders(self, user_id: int) -> List[Order]:
        if not self.store.available:
            return []
        with self.store.session() as db:
            return (
                db.query(Order)
                .options(selectinload(Order.items))
                .filter(Order.user_id == user_id)
                .order_by(Order.created_at.asc(), Order.id.asc())
                .all()
            )

    def all(self, actor: Optional[User]) -> List[Order]:
        authorize(actor, Capability.ADMIN)
        if not self.store.available:
            return []
        with self.store.session() as db:
            return (
                db.query(Order)
                .options(selectinload(Order.items))
                .order_by(Order.created_at.asc(), Order.id.asc())
                .all()
            )

    def update_status(self, actor: Optional[User], order_id: int, status: OrderStatus) -> Order:
        authorize(actor, Capability.ADMIN)
        with self.store.transaction() as db:
            order = (
                db.query(Order)
                .options(selectinload(Order.items))
                .filter(Order.id == order_id)
                .first()
            )
            if not order:
                raise NotFoundError("Order not found")

            old_status = order.status
            if old_status in TERMINAL_STATUSES and status != old_status:
                raise InvalidInputError(f"Cannot change status from {old_status.value}")

            order.status = status
            write_log(db, user_id=actor.id, action="ORDER_STATUS_CHANGE", resource="orders",
                      meta={"order_id": order.id, "old": old_status.value, "new": status.value})
        return order

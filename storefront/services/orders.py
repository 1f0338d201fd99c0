"""Order capture and the aggregated order views.

An order header and its line items are written on one connection inside
one transaction: either all rows become visible or none do. Line item
prices are snapshots taken from the request and are never re-read from the
product table; the nested product on read views is the live product row.
"""
import enum
import logging
import math
import re
from typing import Callable, List, Sequence

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from storefront.core.errors import InvalidStatus, NotFound, OrderCreationFailed, ValidationError
from storefront.db.models import Order, OrderItem
from storefront.schemas import OrderCreate, OrderDetail, OrderHeader, OrderItemIn, OrderRead

log = logging.getLogger(__name__)

EMAIL_RE = re.compile(r'^[^\s@]+@[^\s@]+\.[^\s@]+$')


class OrderStatus(str, enum.Enum):
    PENDING = 'pending'
    PROCESSING = 'processing'
    SHIPPED = 'shipped'
    DELIVERED = 'delivered'
    CANCELLED = 'cancelled'


class OrderStore:
    """Persistence for orders. Each call opens its own session from the factory."""

    def __init__(self, session_factory: Callable[[], Session]):
        self._session_factory = session_factory

    def create(self, total: float, customer_name: str, customer_email: str, customer_contact: str,
               items: Sequence[OrderItemIn]) -> int:
        try:
            with self._session_factory() as session, session.begin():
                order = Order(
                    total=total,
                    status=OrderStatus.PENDING.value,
                    customer_name=customer_name,
                    customer_email=customer_email,
                    customer_contact=customer_contact,
                )
                session.add(order)
                session.flush()
                for item in items:
                    session.add(OrderItem(
                        order_id=order.id,
                        product_id=item.product_id,
                        quantity=item.quantity,
                        price=item.price,
                    ))
                    session.flush()
                order_id = order.id
        except Exception as exc:
            log.exception("order transaction rolled back")
            raise OrderCreationFailed() from exc
        return order_id

    def _query(self, with_products: bool):
        load = selectinload(Order.items)
        if with_products:
            load = load.selectinload(OrderItem.product)
        return select(Order).options(load)

    def get(self, order_id: int, with_products: bool = True):
        with self._session_factory() as session:
            order = session.execute(
                self._query(with_products).where(Order.id == order_id)
            ).scalar_one_or_none()
            if order is None:
                raise NotFound('Order not found')
            schema = OrderDetail if with_products else OrderRead
            return schema.model_validate(order)

    def list_all(self) -> List[OrderDetail]:
        with self._session_factory() as session:
            stmt = self._query(True).order_by(Order.created_at.desc(), Order.id.desc())
            return [OrderDetail.model_validate(o) for o in session.execute(stmt).scalars().all()]

    def set_status(self, order_id: int, status: str) -> OrderHeader:
        with self._session_factory() as session, session.begin():
            order = session.get(Order, order_id)
            if order is None:
                raise NotFound('Order not found')
            order.status = status
            session.flush()
            return OrderHeader.model_validate(order)


def validate_order(payload: OrderCreate):
    if not payload.items:
        raise ValidationError('Order items are required')
    if payload.total is None or not math.isfinite(payload.total) or payload.total <= 0:
        raise ValidationError('Valid total is required')
    if not (payload.customer_name or '').strip():
        raise ValidationError('Customer name is required')
    if not (payload.customer_email or '').strip():
        raise ValidationError('Customer email is required')
    if not (payload.customer_contact or '').strip():
        raise ValidationError('Customer contact is required')
    # untrimmed: surrounding whitespace fails the format check
    if not EMAIL_RE.match(payload.customer_email):
        raise ValidationError('Invalid email format')


class OrderService:
    def __init__(self, store: OrderStore):
        self.store = store

    def create_order(self, payload: OrderCreate) -> OrderRead:
        validate_order(payload)
        # total and item prices are stored as sent; see DESIGN.md
        order_id = self.store.create(
            total=payload.total,
            customer_name=payload.customer_name.strip(),
            customer_email=payload.customer_email.strip(),
            customer_contact=payload.customer_contact.strip(),
            items=payload.items,
        )
        log.info("created order %s with %d items", order_id, len(payload.items))
        return self.store.get(order_id, with_products=False)

    def list_orders(self) -> List[OrderDetail]:
        return self.store.list_all()

    def get_order(self, order_id: int) -> OrderDetail:
        return self.store.get(order_id)

    def update_status(self, order_id: int, status: str) -> OrderHeader:
        if status not in {s.value for s in OrderStatus}:
            raise InvalidStatus()
        header = self.store.set_status(order_id, status)
        log.info("order %s is now %s", order_id, status)
        return header

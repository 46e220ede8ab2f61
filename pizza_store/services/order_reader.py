"""Aggregate reader: rebuilds hydrated orders from the normalized tables.

Lookups are keyed bulk fetches, one query per level (orders, addresses,
pizzas, join rows, specials, toppings) instead of one per related row. The
result has the same shape as walking the graph row by row: pizzas ordered by
their id, toppings by topping id (the key order of the join table), not
the order they were submitted in.

Rows are mapped into typed records as soon as they are read. A reference that
points at a missing row fails the whole reconstruction with
OrderIntegrityError rather than producing a partial order.
"""
import logging
from collections import defaultdict
from datetime import datetime
from typing import Dict, Iterable, List, NamedTuple, Optional

from sqlalchemy.orm import Session

from pizza_store.core.timezone_utils import ensure_utc
from pizza_store.models.address import Address as AddressModel
from pizza_store.models.order import Order as OrderModel
from pizza_store.models.pizza import Pizza as PizzaModel
from pizza_store.models.pizza import PizzaTopping as PizzaToppingModel
from pizza_store.schemas.catalog import MAX_STORAGE_ID, ToppingRef
from pizza_store.schemas.order import Address, Order, Pizza
from pizza_store.services.catalog import fetch_specials, fetch_toppings
from pizza_store.services.errors import OrderIntegrityError, OrderNotFoundError, OrderValidationError

logger = logging.getLogger(__name__)


class OrderRow(NamedTuple):
    order_id: int
    user_id: Optional[str]
    created_time: datetime
    delivery_address_id: Optional[int]


class PizzaRow(NamedTuple):
    id: int
    order_id: int
    special_id: int
    size: int


class PizzaToppingRow(NamedTuple):
    pizza_id: int
    topping_id: int


def topping_from_join(join: PizzaToppingRow) -> ToppingRef:
    """Reduce a join row to an id-only topping reference.

    The result has no name or price; callers that need a real Topping must
    resolve it against the catalog.
    """
    return ToppingRef(id=join.topping_id)


def get_order(db: Session, order_id: int) -> Optional[Order]:
    """Return the hydrated order, or None when no such order exists."""
    if order_id is None or order_id < 1:
        raise OrderValidationError(f"order id must be a positive integer, got {order_id!r}")
    if order_id > MAX_STORAGE_ID:
        return None
    row = db.query(OrderModel).filter(OrderModel.order_id == order_id).first()
    if row is None:
        return None
    return _hydrate(db, [_order_row(row)])[0]


def require_order(db: Session, order_id: int) -> Order:
    """Like get_order, but a missing order raises OrderNotFoundError."""
    order = get_order(db, order_id)
    if order is None:
        raise OrderNotFoundError(order_id)
    return order


def list_orders(db: Session) -> List[Order]:
    """Return every persisted order, newest first, each fully hydrated."""
    rows = db.query(OrderModel).order_by(OrderModel.created_time.desc(), OrderModel.order_id.desc()).all()
    return _hydrate(db, [_order_row(r) for r in rows])


def _order_row(row: OrderModel) -> OrderRow:
    return OrderRow(
        order_id=row.order_id,
        user_id=row.user_id,
        created_time=ensure_utc(row.created_time),
        delivery_address_id=row.delivery_address_id,
    )


def _fetch_addresses(db: Session, address_ids: Iterable[int]) -> Dict[int, Address]:
    ids = set(address_ids)
    if not ids:
        return {}
    rows = db.query(AddressModel).filter(AddressModel.id.in_(list(ids))).all()
    return {
        r.id: Address(
            id=r.id,
            name=r.name,
            line1=r.line1,
            line2=r.line2,
            city=r.city,
            region=r.region,
            postal_code=r.postal_code,
        )
        for r in rows
    }


def _fetch_pizzas(db: Session, order_ids: List[int]) -> Dict[int, List[PizzaRow]]:
    rows = (
        db.query(PizzaModel)
        .filter(PizzaModel.order_id.in_(order_ids))
        .order_by(PizzaModel.id.asc())
        .all()
    )
    out = defaultdict(list)
    for r in rows:
        out[r.order_id].append(PizzaRow(id=r.id, order_id=r.order_id, special_id=r.special_id, size=r.size))
    return out


def _fetch_pizza_toppings(db: Session, pizza_ids: List[int]) -> Dict[int, List[PizzaToppingRow]]:
    if not pizza_ids:
        return {}
    rows = (
        db.query(PizzaToppingModel)
        .filter(PizzaToppingModel.pizza_id.in_(pizza_ids))
        .order_by(PizzaToppingModel.pizza_id.asc(), PizzaToppingModel.topping_id.asc())
        .all()
    )
    out = defaultdict(list)
    for r in rows:
        out[r.pizza_id].append(PizzaToppingRow(pizza_id=r.pizza_id, topping_id=r.topping_id))
    return out


def _hydrate(db: Session, orders: List[OrderRow]) -> List[Order]:
    if not orders:
        return []

    addresses = _fetch_addresses(db, (o.delivery_address_id for o in orders if o.delivery_address_id is not None))
    pizzas_by_order = _fetch_pizzas(db, [o.order_id for o in orders])
    pizza_rows = [p for rows in pizzas_by_order.values() for p in rows]
    joins_by_pizza = _fetch_pizza_toppings(db, [p.id for p in pizza_rows])
    specials = fetch_specials(db, (p.special_id for p in pizza_rows))
    toppings = fetch_toppings(
        db, (topping_from_join(j).id for joins in joins_by_pizza.values() for j in joins)
    )

    out = []
    for o in orders:
        address = None
        if o.delivery_address_id is not None:
            address = addresses.get(o.delivery_address_id)
            if address is None:
                logger.error("Order %s references missing address %s", o.order_id, o.delivery_address_id)
                raise OrderIntegrityError(f"order {o.order_id} references a missing delivery address")

        pizzas = []
        for p in pizzas_by_order.get(o.order_id, []):
            special = specials.get(p.special_id)
            if special is None:
                logger.error("Pizza %s references missing special %s", p.id, p.special_id)
                raise OrderIntegrityError(f"pizza {p.id} references a missing special")
            pizza_toppings = []
            for j in joins_by_pizza.get(p.id, []):
                topping = toppings.get(j.topping_id)
                if topping is None:
                    logger.error("Pizza %s references missing topping %s", p.id, j.topping_id)
                    raise OrderIntegrityError(f"pizza {p.id} references a missing topping")
                pizza_toppings.append(topping)
            pizzas.append(
                Pizza(
                    id=p.id,
                    order_id=p.order_id,
                    special_id=p.special_id,
                    special=special,
                    size=p.size,
                    toppings=pizza_toppings,
                )
            )

        out.append(
            Order(
                order_id=o.order_id,
                user_id=o.user_id,
                created_time=o.created_time,
                delivery_address=address,
                pizzas=pizzas,
            )
        )
    return out

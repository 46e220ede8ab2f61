"""Order writer: persists a client order graph as one atomic transaction.

The graph fans out into Address, Orders, Pizzas and PizzaToppings. Each
insert is flushed so the generated identifier can be handed to the rows that
depend on it (address -> order -> pizza -> toppings).

Database exceptions are turned into an ``OrderRejected`` result right where
the statement runs. ``place_order`` looks at the result and rolls the session
back for any rejection, so no row from a failed attempt is ever committed.
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional, Union

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from pizza_store.core.timezone_utils import ensure_utc
from pizza_store.models.address import Address as AddressModel
from pizza_store.models.catalog import Special as SpecialModel
from pizza_store.models.catalog import Topping as ToppingModel
from pizza_store.models.order import Order as OrderModel
from pizza_store.models.pizza import Pizza as PizzaModel
from pizza_store.models.pizza import PizzaTopping as PizzaToppingModel
from pizza_store.schemas.order import OrderCreate, PizzaCreate
from pizza_store.services.errors import (
    OrderError,
    OrderIntegrityError,
    OrderPersistenceError,
    OrderValidationError,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OrderPlaced:
    order_id: int


@dataclass(frozen=True)
class OrderRejected:
    error: OrderError


PlaceOrderResult = Union[OrderPlaced, OrderRejected]


def place_order(db: Session, order: Optional[OrderCreate], now: Optional[datetime] = None) -> PlaceOrderResult:
    if order is None:
        return OrderRejected(OrderValidationError("order payload is required"))
    if not order.pizzas:
        return OrderRejected(OrderValidationError("an order needs at least one pizza"))

    created_time = ensure_utc(now) if now is not None else datetime.now(timezone.utc)

    result = _check_catalog_references(db, order)
    if result is None:
        result = _write_graph(db, order, created_time)
    if isinstance(result, OrderPlaced):
        result = _commit(db, result)

    if isinstance(result, OrderRejected):
        db.rollback()
        logger.warning("Order rejected and rolled back: %s", result.error)
        return result

    logger.info("Placed order id=%s with %d pizza(s)", result.order_id, len(order.pizzas))
    return result


def _insert(db: Session, row, what: str) -> Optional[OrderRejected]:
    try:
        db.add(row)
        db.flush()
    except SQLAlchemyError as exc:
        logger.exception("Failed to insert %s", what)
        return OrderRejected(OrderPersistenceError(f"failed to insert {what}: {exc.__class__.__name__}"))
    return None


def _check_catalog_references(db: Session, order: OrderCreate) -> Optional[OrderRejected]:
    # An unknown special or topping rejects the whole order; nothing is dropped.
    special_ids = {p.special_id for p in order.pizzas}
    topping_ids = {t.id for p in order.pizzas for t in p.toppings}
    try:
        known_specials = {
            sid for (sid,) in db.query(SpecialModel.id).filter(SpecialModel.id.in_(list(special_ids)))
        }
        known_toppings = set()
        if topping_ids:
            known_toppings = {
                tid for (tid,) in db.query(ToppingModel.id).filter(ToppingModel.id.in_(list(topping_ids)))
            }
    except SQLAlchemyError as exc:
        logger.exception("Catalog lookup failed")
        return OrderRejected(OrderPersistenceError(f"catalog lookup failed: {exc.__class__.__name__}"))

    missing_specials = sorted(special_ids - known_specials)
    if missing_specials:
        return OrderRejected(OrderIntegrityError(f"unknown special id(s): {missing_specials}"))
    missing_toppings = sorted(topping_ids - known_toppings)
    if missing_toppings:
        return OrderRejected(OrderIntegrityError(f"unknown topping id(s): {missing_toppings}"))
    return None


def _write_graph(db: Session, order: OrderCreate, created_time: datetime) -> PlaceOrderResult:
    delivery_address_id = None
    if order.delivery_address is not None:
        address_row = AddressModel(**order.delivery_address.model_dump())
        failure = _insert(db, address_row, "address")
        if failure is not None:
            return failure
        delivery_address_id = address_row.id

    order_row = OrderModel(
        user_id=order.user_id,
        created_time=created_time,
        delivery_address_id=delivery_address_id,
    )
    failure = _insert(db, order_row, "order")
    if failure is not None:
        return failure

    # input order is kept; pizza ids therefore follow the submitted sequence
    for pizza in order.pizzas:
        failure = _insert_pizza(db, order_row.order_id, pizza)
        if failure is not None:
            return failure

    return OrderPlaced(order_id=order_row.order_id)


def _insert_pizza(db: Session, order_id: int, pizza: PizzaCreate) -> Optional[OrderRejected]:
    pizza_row = PizzaModel(order_id=order_id, special_id=pizza.special_id, size=pizza.size)
    failure = _insert(db, pizza_row, "pizza")
    if failure is not None:
        return failure
    for topping in pizza.toppings:
        failure = _insert(db, PizzaToppingModel(pizza_id=pizza_row.id, topping_id=topping.id), "pizza topping")
        if failure is not None:
            return failure
    return None


def _commit(db: Session, placed: OrderPlaced) -> PlaceOrderResult:
    try:
        db.commit()
    except SQLAlchemyError as exc:
        logger.exception("Commit failed for order id=%s", placed.order_id)
        return OrderRejected(OrderPersistenceError(f"commit failed: {exc.__class__.__name__}"))
    return placed

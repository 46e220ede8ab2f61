from datetime import datetime, timedelta, timezone

import pytest

from pizza_store.schemas.catalog import PizzaSpecial, Topping
from pizza_store.schemas.order import Order, Pizza
from pizza_store.services.order_status import (
    DELIVERED,
    OUT_FOR_DELIVERY,
    PLACED,
    PREPARING,
    derive_status,
)

CREATED = datetime(2026, 3, 14, 18, 0, 0, tzinfo=timezone.utc)


def _order(created_time=CREATED):
    special = PizzaSpecial(id=1, name="Margherita", base_price=9.99)
    pizza = Pizza(
        id=1,
        order_id=1,
        special_id=1,
        special=special,
        size=12,
        toppings=[Topping(id=1, name="Basil", price=1.50)],
    )
    return Order(order_id=1, user_id="user-001", created_time=created_time, pizzas=[pizza])


@pytest.mark.parametrize(
    "elapsed, expected",
    [
        (timedelta(seconds=0), PLACED),
        (timedelta(seconds=4), PLACED),
        (timedelta(seconds=5), PREPARING),
        (timedelta(seconds=9), PREPARING),
        (timedelta(seconds=10), OUT_FOR_DELIVERY),
        (timedelta(seconds=69), OUT_FOR_DELIVERY),
        (timedelta(seconds=70), DELIVERED),
        (timedelta(days=2), DELIVERED),
    ],
)
def test_status_follows_elapsed_time(elapsed, expected):
    result = derive_status(_order(), now=CREATED + elapsed)

    assert result.status_text == expected
    assert result.is_delivered is (expected == DELIVERED)


def test_estimated_delivery_time():
    result = derive_status(_order(), now=CREATED)

    assert result.estimated_delivery_time == CREATED + timedelta(seconds=70)


def test_naive_created_time_is_treated_as_utc():
    naive = CREATED.replace(tzinfo=None)

    result = derive_status(_order(created_time=naive), now=CREATED + timedelta(seconds=7))

    assert result.status_text == PREPARING
    assert result.order.created_time == CREATED


def test_same_inputs_give_same_status():
    now = CREATED + timedelta(seconds=30)

    assert derive_status(_order(), now=now) == derive_status(_order(), now=now)


def test_total_price_is_carried():
    result = derive_status(_order(), now=CREATED)

    assert result.total_price == 11.49

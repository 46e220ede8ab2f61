"""Tests for the read-only catalog, seed data and pizza pricing."""

from pizza_store.db.seed import SPECIALS, TOPPINGS, seed_catalog
from pizza_store.models.catalog import Topping as ToppingModel
from pizza_store.schemas.catalog import PizzaSpecial, Topping
from pizza_store.schemas.order import Order, Pizza
from pizza_store.services.catalog import fetch_specials, fetch_toppings


class TestSeed:
    def test_seeding_twice_is_a_no_op(self, db):
        assert seed_catalog(db) is False
        assert db.query(ToppingModel).count() == len(TOPPINGS)


class TestCatalogLookups:
    def test_fetch_toppings_skips_unknown_ids(self, db, toppings):
        found = fetch_toppings(db, [toppings["Basil"], 555555])

        assert list(found) == [toppings["Basil"]]
        assert found[toppings["Basil"]].price == 1.50

    def test_fetch_specials_includes_default_toppings(self, db, specials):
        found = fetch_specials(db, [specials["The Baconatorizor"]])

        special = found[specials["The Baconatorizor"]]
        assert sorted(t.name for t in special.default_toppings) == [
            "American bacon",
            "British bacon",
            "Canadian bacon",
        ]


class TestCatalogApi:
    def test_list_toppings_sorted_by_name(self, client):
        response = client.get("/toppings")

        assert response.status_code == 200
        names = [t["name"] for t in response.json()]
        assert names == sorted(names)
        assert len(names) == len(TOPPINGS)

    def test_list_specials_most_expensive_first(self, client):
        response = client.get("/specials")

        assert response.status_code == 200
        data = response.json()
        assert len(data) == len(SPECIALS)
        assert data[0]["name"] == "Buffalo chicken"
        assert {t["name"] for t in data[0]["default_toppings"]} == {"Buffalo chicken", "Blue cheese"}


class TestPricing:
    def _pizza(self, size, toppings=()):
        special = PizzaSpecial(id=1, name="Basic Cheese Pizza", base_price=9.99)
        return Pizza(id=1, order_id=1, special_id=1, special=special, size=size, toppings=list(toppings))

    def test_base_price_scales_with_size(self):
        assert self._pizza(12).base_price() == 9.99
        assert self._pizza(17).base_price() == 14.15

    def test_total_price_adds_toppings(self):
        pizza = self._pizza(12, [Topping(id=1, name="Extra cheese", price=2.50)])

        assert pizza.total_price() == 12.49
        assert pizza.formatted_total_price() == "12.49"

    def test_order_total_sums_pizzas(self):
        order = Order(
            order_id=1,
            created_time="2026-03-14T18:00:00Z",
            pizzas=[self._pizza(12), self._pizza(12, [Topping(id=2, name="Basil", price=1.50)])],
        )

        assert order.total_price() == 21.48
        assert Topping(id=3, name="Onions", price=1).formatted_price() == "1.00"

import logging

from sqlalchemy.orm import Session

from pizza_store.models.catalog import Special as SpecialModel
from pizza_store.models.catalog import SpecialTopping as SpecialToppingModel
from pizza_store.models.catalog import Topping as ToppingModel

logger = logging.getLogger(__name__)

TOPPINGS = [
    ("Extra cheese", 2.50),
    ("American bacon", 2.99),
    ("British bacon", 2.99),
    ("Canadian bacon", 2.99),
    ("Tea and crumpets", 5.00),
    ("Fresh-baked scones", 4.50),
    ("Bell peppers", 1.00),
    ("Onions", 1.00),
    ("Mushrooms", 1.00),
    ("Pepperoni", 1.00),
    ("Duck sausage", 3.20),
    ("Venison meatballs", 2.50),
    ("Served on a silver platter", 250.99),
    ("Lobster on top", 64.50),
    ("Sturgeon caviar", 101.75),
    ("Artichoke hearts", 3.40),
    ("Fresh tomatoes", 1.50),
    ("Basil", 1.50),
    ("Steak (medium-rare)", 8.50),
    ("Blazing hot peppers", 4.20),
    ("Buffalo chicken", 5.00),
    ("Blue cheese", 2.50),
]

# name, base price, description, image, default toppings
SPECIALS = [
    ("Basic Cheese Pizza", 9.99, "It's cheesy and delicious. Why wouldn't you want one?", "img/pizzas/cheese.jpg", ["Extra cheese"]),
    ("The Baconatorizor", 11.99, "It has EVERY kind of bacon", "img/pizzas/bacon.jpg", ["American bacon", "British bacon", "Canadian bacon"]),
    ("Classic pepperoni", 10.50, "It's the pizza you grew up with, but Blazing hot!", "img/pizzas/pepperoni.jpg", ["Pepperoni"]),
    ("Buffalo chicken", 12.75, "Spicy chicken, hot sauce and bleu cheese, guaranteed to warm you up", "img/pizzas/meaty.jpg", ["Buffalo chicken", "Blue cheese"]),
    ("Mushroom Lovers", 11.00, "It has mushrooms. Isn't that obvious?", "img/pizzas/mushroom.jpg", ["Mushrooms"]),
    ("The Brit", 10.25, "When in London...", "img/pizzas/brit.jpg", ["Tea and crumpets", "British bacon"]),
    ("Veggie Delight", 11.50, "It's like salad, but on a pizza", "img/pizzas/salad.jpg", ["Bell peppers", "Onions", "Fresh tomatoes"]),
    ("Margherita", 9.99, "Traditional Italian pizza with tomatoes and basil", "img/pizzas/margherita.jpg", ["Fresh tomatoes", "Basil"]),
]


def seed_catalog(db: Session) -> bool:
    """Populate Toppings and Specials when the catalog is empty.

    Returns True when rows were inserted. An already seeded catalog is left
    untouched.
    """
    if db.query(ToppingModel.id).first() is not None:
        return False
    try:
        toppings_by_name = {}
        for name, price in TOPPINGS:
            t = ToppingModel(name=name, price=price)
            db.add(t)
            toppings_by_name[name] = t
        db.flush()

        for name, base_price, description, image_url, defaults in SPECIALS:
            s = SpecialModel(name=name, base_price=base_price, description=description, image_url=image_url)
            db.add(s)
            db.flush()
            for topping_name in defaults:
                db.add(SpecialToppingModel(special_id=s.id, topping_id=toppings_by_name[topping_name].id))
        db.commit()
    except Exception:
        db.rollback()
        raise
    logger.info("Seeded catalog with %d toppings and %d specials", len(TOPPINGS), len(SPECIALS))
    return True

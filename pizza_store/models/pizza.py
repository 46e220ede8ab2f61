from sqlalchemy import Column, Integer, ForeignKey
from pizza_store.db.session import Base


class Pizza(Base):
    __tablename__ = "Pizzas"

    id = Column("Id", Integer, primary_key=True, index=True)
    order_id = Column("OrderId", Integer, ForeignKey("Orders.OrderId"), nullable=False, index=True)
    special_id = Column("SpecialId", Integer, ForeignKey("Specials.Id"), nullable=False)
    size = Column("Size", Integer, nullable=False)


class PizzaTopping(Base):
    """Join row between a pizza and a catalog topping, keyed by the pair."""

    __tablename__ = "PizzaToppings"

    pizza_id = Column("PizzaId", Integer, ForeignKey("Pizzas.Id"), primary_key=True)
    topping_id = Column("ToppingId", Integer, ForeignKey("Toppings.Id"), primary_key=True)

from sqlalchemy import Column, Integer, String, Text, Numeric, ForeignKey
from pizza_store.db.session import Base


# Catalog tables are filled by the seeding process and only read by orders.
class Topping(Base):
    __tablename__ = "Toppings"

    id = Column("Id", Integer, primary_key=True, index=True)
    name = Column("Name", String(100), nullable=False)
    price = Column("Price", Numeric(8, 2), nullable=False, default=0.0)


class Special(Base):
    __tablename__ = "Specials"

    id = Column("Id", Integer, primary_key=True, index=True)
    name = Column("Name", String(100), nullable=False)
    base_price = Column("BasePrice", Numeric(8, 2), nullable=False, default=0.0)
    description = Column("Description", Text, nullable=True)
    image_url = Column("ImageUrl", String(255), nullable=True)


class SpecialTopping(Base):
    """Default topping list of a special."""

    __tablename__ = "SpecialToppings"

    special_id = Column("SpecialId", Integer, ForeignKey("Specials.Id"), primary_key=True)
    topping_id = Column("ToppingId", Integer, ForeignKey("Toppings.Id"), primary_key=True)

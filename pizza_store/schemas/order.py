from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from pizza_store.core.config import settings
from pizza_store.schemas.catalog import MAX_STORAGE_ID, PizzaSpecial, Topping, ToppingRef

# Pizza sizes are diameters in inches; specials are priced at the default size.
DEFAULT_SIZE = 12
MINIMUM_SIZE = 9
MAXIMUM_SIZE = 17


class AddressCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    line1: str = Field(min_length=1, max_length=100)
    line2: Optional[str] = Field(default=None, max_length=100)
    city: str = Field(min_length=1, max_length=50)
    region: str = Field(min_length=1, max_length=20)
    postal_code: str = Field(min_length=1, max_length=20)


class Address(AddressCreate):
    model_config = ConfigDict(from_attributes=True)

    id: int


class PizzaCreate(BaseModel):
    special_id: int = Field(ge=1, le=MAX_STORAGE_ID)
    size: int = Field(default=DEFAULT_SIZE, ge=MINIMUM_SIZE, le=MAXIMUM_SIZE)
    toppings: List[ToppingRef] = []

    @field_validator("toppings")
    @classmethod
    def _check_toppings(cls, v: List[ToppingRef]) -> List[ToppingRef]:
        if len(v) > settings.MAX_TOPPINGS:
            raise ValueError(f"a pizza takes at most {settings.MAX_TOPPINGS} toppings")
        # PizzaToppings is keyed by (pizza, topping); a repeat would collide
        ids = [t.id for t in v]
        if len(ids) != len(set(ids)):
            raise ValueError("duplicate topping on the same pizza")
        return v


class OrderCreate(BaseModel):
    """Order graph as submitted by a client.

    Any created_time sent by the client is dropped; the writer stamps the
    server time instead.
    """

    user_id: Optional[str] = None
    delivery_address: Optional[AddressCreate] = None
    pizzas: List[PizzaCreate] = Field(min_length=1)


class Pizza(BaseModel):
    id: int
    order_id: int
    special_id: int
    special: PizzaSpecial
    size: int
    toppings: List[Topping] = []

    def base_price(self) -> float:
        return round(self.special.base_price * self.size / DEFAULT_SIZE, 2)

    def total_price(self) -> float:
        return round(self.base_price() + sum(t.price for t in self.toppings), 2)

    def formatted_total_price(self) -> str:
        return f"{self.total_price():.2f}"


class Order(BaseModel):
    order_id: int
    user_id: Optional[str] = None
    created_time: datetime
    delivery_address: Optional[Address] = None
    pizzas: List[Pizza] = []

    def total_price(self) -> float:
        return round(sum(p.total_price() for p in self.pizzas), 2)

    def formatted_total_price(self) -> str:
        return f"{self.total_price():.2f}"


class OrderWithStatus(BaseModel):
    """Order plus its derived progress. Built on every read, never stored."""

    order: Order
    status_text: str
    is_delivered: bool
    estimated_delivery_time: datetime
    total_price: float

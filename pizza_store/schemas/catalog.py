from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional

# Largest identifier a signed 64-bit INTEGER column can hold.
MAX_STORAGE_ID = 2**63 - 1


class ToppingRef(BaseModel):
    """Identifier-only reference to a catalog topping.

    This is what clients send when placing an order. It carries no name or
    price, so it must never stand in for a hydrated Topping.
    """

    id: int = Field(ge=1, le=MAX_STORAGE_ID)


class Topping(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    price: float

    def formatted_price(self) -> str:
        return f"{self.price:.2f}"


class PizzaSpecial(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    base_price: float
    description: Optional[str] = None
    image_url: Optional[str] = None
    default_toppings: List[Topping] = []

    def formatted_base_price(self) -> str:
        return f"{self.base_price:.2f}"

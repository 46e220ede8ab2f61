from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List

from pizza_store.db.session import get_db
from pizza_store.schemas.catalog import PizzaSpecial, Topping
from pizza_store.services import catalog

router = APIRouter(tags=["Catalog"])


@router.get("/specials", response_model=List[PizzaSpecial])
def list_specials(db: Session = Depends(get_db)):
    return catalog.list_specials(db)


@router.get("/toppings", response_model=List[Topping])
def list_toppings(db: Session = Depends(get_db)):
    return catalog.list_toppings(db)

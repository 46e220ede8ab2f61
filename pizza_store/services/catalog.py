import logging
from collections import defaultdict
from typing import Dict, Iterable, List

from sqlalchemy.orm import Session

from pizza_store.models.catalog import Special as SpecialModel
from pizza_store.models.catalog import SpecialTopping as SpecialToppingModel
from pizza_store.models.catalog import Topping as ToppingModel
from pizza_store.schemas.catalog import PizzaSpecial, Topping
from pizza_store.services.errors import OrderIntegrityError

logger = logging.getLogger(__name__)


def topping_from_row(row: ToppingModel) -> Topping:
    return Topping(id=row.id, name=row.name, price=float(row.price or 0))


def fetch_toppings(db: Session, topping_ids: Iterable[int]) -> Dict[int, Topping]:
    """Keyed bulk fetch of catalog toppings. Unknown ids are simply absent."""
    ids = set(topping_ids)
    if not ids:
        return {}
    rows = db.query(ToppingModel).filter(ToppingModel.id.in_(list(ids))).all()
    return {r.id: topping_from_row(r) for r in rows}


def _default_toppings(db: Session, special_ids: Iterable[int]) -> Dict[int, List[Topping]]:
    ids = set(special_ids)
    if not ids:
        return {}
    joins = (
        db.query(SpecialToppingModel)
        .filter(SpecialToppingModel.special_id.in_(list(ids)))
        .order_by(SpecialToppingModel.special_id.asc(), SpecialToppingModel.topping_id.asc())
        .all()
    )
    pairs = [(j.special_id, j.topping_id) for j in joins]
    toppings = fetch_toppings(db, (tid for _, tid in pairs))
    out = defaultdict(list)
    for special_id, topping_id in pairs:
        topping = toppings.get(topping_id)
        if topping is None:
            logger.error("Special %s lists missing topping %s", special_id, topping_id)
            raise OrderIntegrityError(f"special {special_id} references missing topping {topping_id}")
        out[special_id].append(topping)
    return out


def _specials_from_rows(db: Session, rows: List[SpecialModel]) -> List[PizzaSpecial]:
    defaults = _default_toppings(db, (r.id for r in rows))
    return [
        PizzaSpecial(
            id=r.id,
            name=r.name,
            base_price=float(r.base_price or 0),
            description=r.description,
            image_url=r.image_url,
            default_toppings=defaults.get(r.id, []),
        )
        for r in rows
    ]


def fetch_specials(db: Session, special_ids: Iterable[int]) -> Dict[int, PizzaSpecial]:
    ids = set(special_ids)
    if not ids:
        return {}
    rows = db.query(SpecialModel).filter(SpecialModel.id.in_(list(ids))).all()
    return {s.id: s for s in _specials_from_rows(db, rows)}


def list_specials(db: Session) -> List[PizzaSpecial]:
    rows = db.query(SpecialModel).order_by(SpecialModel.base_price.desc(), SpecialModel.id.asc()).all()
    return _specials_from_rows(db, rows)


def list_toppings(db: Session) -> List[Topping]:
    rows = db.query(ToppingModel).order_by(ToppingModel.name.asc()).all()
    return [topping_from_row(r) for r in rows]

from fastapi import APIRouter, Body, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import List, Optional
import logging

from pizza_store.db.session import get_db
from pizza_store.schemas.order import OrderCreate, OrderWithStatus
from pizza_store.services import order_reader
from pizza_store.services.errors import OrderIntegrityError, OrderNotFoundError, OrderValidationError
from pizza_store.services.order_status import derive_status
from pizza_store.services.order_writer import OrderRejected, place_order

router = APIRouter(prefix="/orders", tags=["Orders"])

logger = logging.getLogger(__name__)

# Details returned to clients stay generic; row-level context only goes to the log.
INCONSISTENT_ORDER_DETAIL = "Order data is inconsistent"
CREATE_FAILED_DETAIL = "Failed to create the order"


@router.get("", response_model=List[OrderWithStatus])
@router.get("/", response_model=List[OrderWithStatus])
def list_orders(db: Session = Depends(get_db)):
    try:
        orders = order_reader.list_orders(db)
    except OrderIntegrityError:
        raise HTTPException(status_code=500, detail=INCONSISTENT_ORDER_DETAIL)
    return [derive_status(o) for o in orders]


@router.get("/{order_id}", response_model=OrderWithStatus)
def get_order(order_id: int, db: Session = Depends(get_db)):
    # checked here so an invalid id never reaches the database
    if order_id < 1:
        raise HTTPException(status_code=400, detail="Order id must be a positive integer")
    try:
        order = order_reader.require_order(db, order_id)
    except OrderValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except OrderNotFoundError:
        raise HTTPException(status_code=404, detail="Order not found")
    except OrderIntegrityError:
        raise HTTPException(status_code=500, detail=INCONSISTENT_ORDER_DETAIL)
    return derive_status(order)


@router.post("", response_model=int)
@router.post("/", response_model=int)
def create_order(payload: Optional[OrderCreate] = Body(default=None), db: Session = Depends(get_db)):
    if payload is None:
        raise HTTPException(status_code=400, detail="Order payload is required")
    result = place_order(db, payload)
    if isinstance(result, OrderRejected):
        logger.info("create_order rejected: %s", result.error)
        raise HTTPException(status_code=400, detail=CREATE_FAILED_DETAIL)
    return result.order_id

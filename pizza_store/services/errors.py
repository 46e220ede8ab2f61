class OrderError(Exception):
    """Base class for order placement and retrieval failures."""


class OrderValidationError(OrderError):
    """Malformed or missing input, rejected before touching storage."""


class OrderNotFoundError(OrderError):
    """No order row for the requested identifier."""

    def __init__(self, order_id: int):
        super().__init__(f"order {order_id} not found")
        self.order_id = order_id


class OrderIntegrityError(OrderError):
    """A referenced catalog or owned row is missing."""


class OrderPersistenceError(OrderError):
    """The write transaction failed and was rolled back."""

class OrderError(Exception):
    """Base class for order placement failures"""


class OrderValidationError(OrderError):
    """Rejected input. Raised before anything is written."""

    def __init__(self, details):
        self.details = list(details)
        super().__init__('; '.join(self.details) or 'Invalid order items')


class OrderWriteError(OrderError):
    """The order or its detail rows could not be stored"""

    def __init__(self, message, order_id=None):
        self.order_id = order_id
        super().__init__(message)

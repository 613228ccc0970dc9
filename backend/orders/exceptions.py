"""
Custom exceptions for order lifecycle management.
"""


class OrderError(Exception):
    """Base exception for order-related errors."""
    pass


class IllegalTransitionError(OrderError):
    """Raised when a status change is not permitted by the lifecycle table."""

    def __init__(self, current_status, attempted_status, message=None):
        self.current_status = current_status
        self.attempted_status = attempted_status
        if message is None:
            message = f"Cannot transition order from {current_status} to {attempted_status}."
        super().__init__(message)


class OrderNotFoundError(OrderError):
    """Raised when an order id is unknown to the order store."""

    def __init__(self, order_id, message=None):
        self.order_id = order_id
        if message is None:
            message = f"Order {order_id} not found"
        super().__init__(message)

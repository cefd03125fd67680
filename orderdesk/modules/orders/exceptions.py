"""Exceptions raised by the orders module."""


class OrderDeskError(Exception):
    """Base class for OrderDesk errors"""


class InvalidStatusError(OrderDeskError, ValueError):
    """Raised when a status value is outside the order status enumeration"""

    def __init__(self, status):
        self.status = status
        super().__init__(f"Invalid order status: {status!r}")


class InvalidOrderDocument(OrderDeskError, ValueError):
    """Raised when a stored document cannot be turned into an Order"""

    def __init__(self, document_id, reason):
        self.document_id = document_id
        self.reason = reason
        super().__init__(f"Order document {document_id}: {reason}")

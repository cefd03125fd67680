"""
Orders Models
=============

Typed records for order documents mirrored from Firestore.
Documents are validated here, at the adapter boundary, so rendering
never sees missing fields.
"""

from dataclasses import dataclass, field
from numbers import Number
from typing import Any, List, Optional, Tuple

from .exceptions import InvalidOrderDocument

STATUSES = ('pending', 'confirmed', 'shipped', 'delivered', 'cancelled')
ALL_STATUSES = 'all'

STATUS_LABELS = {
    'pending': '⏳ Pending',
    'confirmed': '✅ Confirmed',
    'shipped': '🚚 Shipped',
    'delivered': '🎉 Delivered',
    'cancelled': '❌ Cancelled',
}

REQUIRED_FIELDS = ('id', 'name', 'phone', 'status', 'total')


def is_valid_status(value):
    return value in STATUSES


def _is_number(value):
    return isinstance(value, Number) and not isinstance(value, bool)


@dataclass(frozen=True)
class CartItem:
    name: str
    quantity: int
    price: float

    @property
    def line_total(self):
        return self.price * self.quantity

    @classmethod
    def from_dict(cls, data, document_id='?'):
        if not isinstance(data, dict):
            raise InvalidOrderDocument(document_id, 'cart line is not a mapping')

        name = data.get('name')
        quantity = data.get('quantity')
        price = data.get('price')

        if not isinstance(name, str):
            raise InvalidOrderDocument(document_id, 'cart line without a name')
        if not isinstance(quantity, int) or isinstance(quantity, bool) or quantity < 1:
            raise InvalidOrderDocument(document_id, f'cart line {name!r} has invalid quantity {quantity!r}')
        if not _is_number(price) or price < 0:
            raise InvalidOrderDocument(document_id, f'cart line {name!r} has invalid price {price!r}')

        return cls(name=name, quantity=quantity, price=price)


@dataclass(frozen=True)
class Order:
    external_id: str
    display_id: str
    status: str
    name: str
    phone: str
    total: float
    email: str = ''
    address: str = ''
    city: str = ''
    notes: Optional[str] = None
    order_date: Any = None
    cart: Tuple[CartItem, ...] = field(default_factory=tuple)
    created_at: Any = None
    updated_at: Any = None

    @property
    def full_address(self):
        return f"{self.address}, {self.city}"

    @classmethod
    def from_document(cls, document_id, data):
        """
        Build an Order from a Firestore document id and its data dict.

        Raises InvalidOrderDocument when a required field is missing or
        a field has the wrong shape.
        """
        if not isinstance(data, dict):
            raise InvalidOrderDocument(document_id, 'document has no data')

        missing = [key for key in REQUIRED_FIELDS if data.get(key) in (None, '')]
        if missing:
            raise InvalidOrderDocument(document_id, f"missing required fields: {', '.join(missing)}")

        status = data['status']
        if not is_valid_status(status):
            raise InvalidOrderDocument(document_id, f'unknown status {status!r}')

        total = data['total']
        if not _is_number(total):
            raise InvalidOrderDocument(document_id, f'total is not numeric: {total!r}')

        raw_cart = data.get('cart') or []
        if not isinstance(raw_cart, list):
            raise InvalidOrderDocument(document_id, 'cart is not a list')
        cart = tuple(CartItem.from_dict(item, document_id) for item in raw_cart)

        return cls(
            external_id=document_id,
            display_id=str(data['id']),
            status=status,
            name=str(data['name']),
            phone=str(data['phone']),
            total=total,
            email=str(data.get('email') or ''),
            address=str(data.get('address') or ''),
            city=str(data.get('city') or ''),
            notes=data.get('notes') or None,
            order_date=data.get('orderDate'),
            cart=cart,
            created_at=data.get('createdAt'),
            updated_at=data.get('updatedAt'),
        )


def orders_from_documents(documents) -> Tuple[List[Order], List[Tuple[str, str]]]:
    """
    Convert (document_id, data) pairs into Orders.

    Returns (orders, quarantined) where quarantined holds
    (document_id, reason) for every rejected document. Input order is kept.
    """
    orders = []
    quarantined = []
    for document_id, data in documents:
        try:
            orders.append(Order.from_document(document_id, data))
        except InvalidOrderDocument as e:
            quarantined.append((document_id, e.reason))
    return orders, quarantined

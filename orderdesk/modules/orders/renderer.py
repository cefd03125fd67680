"""
Order List Renderer
===================

Turns the filtered order list into a view-model of cards, then renders
that view-model with the orders/_order_list.html template.

The dataclasses and build_list_view do not touch Flask and can be tested
on their own; action targets are bound per card when it is built.
render_list needs an active Flask request context for the template.
"""

from dataclasses import dataclass, field
from typing import Callable, List, Optional, Tuple

from flask import render_template

from .formatting import format_date, format_line_total, format_money
from .models import STATUS_LABELS, STATUSES

LOADING_MESSAGE = 'Loading orders...'
EMPTY_MESSAGE = 'No orders found'


@dataclass(frozen=True)
class CartLine:
    name: str
    quantity: int
    line_total: str


@dataclass(frozen=True)
class StatusOption:
    value: str
    label: str
    selected: bool


@dataclass(frozen=True)
class OrderCard:
    external_id: str
    display_id: str
    status: str
    order_date: str
    total: str
    name: str
    phone: str
    email: str
    address: str
    notes: Optional[str]
    cart: Tuple[CartLine, ...]
    status_options: Tuple[StatusOption, ...]
    status_url: str
    delete_url: str
    call_url: str

    def to_dict(self):
        return {
            'external_id': self.external_id,
            'display_id': self.display_id,
            'status': self.status,
            'order_date': self.order_date,
            'total': self.total,
            'customer': {
                'name': self.name,
                'phone': self.phone,
                'email': self.email,
                'address': self.address,
                'notes': self.notes,
            },
            'cart': [
                {'name': line.name, 'quantity': line.quantity, 'line_total': line.line_total}
                for line in self.cart
            ],
            'status_options': [
                {'value': o.value, 'label': o.label, 'selected': o.selected}
                for o in self.status_options
            ],
            'actions': {
                'status': self.status_url,
                'delete': self.delete_url,
                'call': self.call_url,
            },
        }


@dataclass(frozen=True)
class ListView:
    state: str  # loading | empty | cards
    cards: Tuple[OrderCard, ...] = field(default_factory=tuple)
    message: Optional[str] = None


def _no_urls(action, external_id):
    return ''


def build_card(order, currency, url_for_action: Callable[[str, str], str] = _no_urls):
    """Build the display card for one order"""
    return OrderCard(
        external_id=order.external_id,
        display_id=order.display_id,
        status=order.status,
        order_date=format_date(order.order_date),
        total=format_money(order.total, currency),
        name=order.name,
        phone=order.phone,
        email=order.email,
        address=order.full_address,
        notes=order.notes or None,
        cart=tuple(
            CartLine(
                name=item.name,
                quantity=item.quantity,
                line_total=format_line_total(item, currency),
            )
            for item in order.cart
        ),
        status_options=tuple(
            StatusOption(value=status, label=STATUS_LABELS[status], selected=status == order.status)
            for status in STATUSES
        ),
        status_url=url_for_action('status', order.external_id),
        delete_url=url_for_action('delete', order.external_id),
        call_url=f"tel:{order.phone}",
    )


def build_list_view(orders, loaded=True, currency='EGP', url_for_action=_no_urls) -> ListView:
    if not loaded:
        return ListView(state='loading', message=LOADING_MESSAGE)

    cards: List[OrderCard] = [build_card(order, currency, url_for_action) for order in orders]
    if not cards:
        return ListView(state='empty', message=EMPTY_MESSAGE)
    return ListView(state='cards', cards=tuple(cards))


def render_list(view, next_url=''):
    """Render a ListView to HTML (needs a request context)"""
    return render_template('orders/_order_list.html', view=view, next_url=next_url)

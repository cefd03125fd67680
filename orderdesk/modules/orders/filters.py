"""
Order filtering and search.

Pure functions over the mirrored order list; nothing here touches Firestore.
"""

from .models import ALL_STATUSES, STATUSES


def normalize_status_filter(value):
    """Unknown or empty filter values fall back to 'all'"""
    if value in STATUSES:
        return value
    return ALL_STATUSES


def matches_search(order, search_term):
    """
    True if the term is found in the name or display id (case-insensitive)
    or in the phone number (as typed).
    """
    term = search_term.lower()
    return (
        term in order.name.lower()
        or term in order.phone
        or term in order.display_id.lower()
    )


def apply_filters(orders, status_filter=ALL_STATUSES, search_term=''):
    """Filter by status, then by search term. Relative order is preserved."""
    result = list(orders)

    if status_filter != ALL_STATUSES:
        result = [order for order in result if order.status == status_filter]

    if search_term:
        result = [order for order in result if matches_search(order, search_term)]

    return result

"""
Orders Admin Module
===================

Admin interface for orders stored in Firestore.

Provides:
- Live order list mirrored from the `orders` collection
- Status filter and search
- Status updates and confirmed deletes
- CSV export
"""

from flask import Blueprint

orders_bp = Blueprint(
    'orders_admin',
    __name__,
    url_prefix='/admin/orders-manager',
    template_folder='templates',
    static_folder='static',
    static_url_path='/orders/static'
)

from . import routes

__all__ = ['orders_bp']

"""
OrderDesk - Firestore Orders Admin for Flask
============================================

A Flask extension that mounts an admin panel over a Firestore `orders`
collection:
- Live order list pushed from Firestore
- Status filter and search
- Status updates and confirmed deletes
- CSV export

Usage:
    from orderdesk import OrderDesk

    app = Flask(__name__)
    OrderDesk(app)
    # panel at /admin/orders-manager/
"""

__version__ = '0.1.0'

import atexit
import logging

from flask_cors import CORS

from .core.config import Config
from .modules.orders.session import AdminSession

logger = logging.getLogger(__name__)

CONFIG_KEYS = [
    'FIRESTORE_PROJECT',
    'ORDERS_COLLECTION',
    'ORDERS_ORDER_FIELD',
    'ORDERDESK_CURRENCY',
    'ORDERDESK_EXPORT_PREFIX',
    'ORDERDESK_NOTIFY_SHOW_DELAY_MS',
    'ORDERDESK_NOTIFY_DURATION_MS',
    'ORDERDESK_NOTIFY_FADE_MS',
    'ORDERDESK_CORS_ORIGINS',
    'ORDERDESK_AUTOSTART',
    'DB_DIR',
    'LOG_DB',
]


class OrderDesk:
    """
    Flask extension wiring the orders blueprint to a Firestore-backed session.

    Args:
        app: Flask application (or call init_app later)
        config (dict): optional overrides
            'client'    - a ready google.cloud.firestore.Client (or test double)
            'autostart' - subscribe to the live query during init_app
    """

    def __init__(self, app=None, config=None):
        self._config = dict(config or {})
        self.session = None
        self._modules = []
        if app is not None:
            self.init_app(app)

    def init_app(self, app):
        self._apply_defaults(app)

        self.session = AdminSession.create(
            client=self._config.get('client'),
            project=app.config['FIRESTORE_PROJECT'],
            collection=app.config['ORDERS_COLLECTION'],
            order_field=app.config['ORDERS_ORDER_FIELD'],
            currency=app.config['ORDERDESK_CURRENCY'],
            export_prefix=app.config['ORDERDESK_EXPORT_PREFIX'],
            show_delay_ms=app.config['ORDERDESK_NOTIFY_SHOW_DELAY_MS'],
            duration_ms=app.config['ORDERDESK_NOTIFY_DURATION_MS'],
            fade_ms=app.config['ORDERDESK_NOTIFY_FADE_MS'],
            app=app,
        )

        app.extensions['orderdesk'] = self
        self._register_modules(app)
        self._setup_cors(app)

        if self._config.get('autostart', app.config['ORDERDESK_AUTOSTART']):
            with app.app_context():
                self.session.start()
            atexit.register(self.session.stop)

    def _apply_defaults(self, app):
        """Fill in any config key the host app did not set"""
        for key in CONFIG_KEYS:
            app.config.setdefault(key, getattr(Config, key))

    def _register_modules(self, app):
        from .modules.orders import orders_bp

        app.register_blueprint(orders_bp)
        self._modules.append('orders')
        logger.info("OrderDesk: registered orders module at /admin/orders-manager")

    def _setup_cors(self, app):
        origins = [o.strip() for o in app.config['ORDERDESK_CORS_ORIGINS'].split(',') if o.strip()]
        if not origins:
            return
        CORS(app, resources={r"/admin/orders-manager/api/*": {"origins": origins}})
        logger.info(f"OrderDesk: CORS enabled for {', '.join(origins)}")

    def get_registered_modules(self):
        return list(self._modules)


__all__ = ['OrderDesk', '__version__']

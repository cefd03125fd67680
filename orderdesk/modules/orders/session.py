"""
Admin Session
=============

Owns everything the panel keeps in memory: the order mirror, the
notification list and the Firestore sync adapter. Filter and search
values come in per request and are passed straight to the pure
filter and render functions.
"""

import logging

from orderdesk.core import db_log
from .exporter import export_csv, export_filename
from .filters import apply_filters, normalize_status_filter
from .notifications import Notifier
from .renderer import build_list_view
from .store import OrderStore
from .sync import FirestoreOrderSync

logger = logging.getLogger(__name__)


class AdminSession:

    def __init__(self, sync, currency='EGP', export_prefix='majormania-orders'):
        self.sync = sync
        self.currency = currency
        self.export_prefix = export_prefix
        sync.on_change = self.on_push

    @classmethod
    def create(cls, client=None, project=None, collection='orders', order_field='createdAt',
               currency='EGP', export_prefix='majormania-orders',
               show_delay_ms=100, duration_ms=3000, fade_ms=300, app=None):
        store = OrderStore()
        notifier = Notifier(show_delay_ms=show_delay_ms, duration_ms=duration_ms, fade_ms=fade_ms)
        sync = FirestoreOrderSync(
            store, notifier, client=client, project=project,
            collection=collection, order_field=order_field, app=app,
        )
        return cls(sync, currency=currency, export_prefix=export_prefix)

    @property
    def store(self):
        return self.sync.store

    @property
    def notifier(self):
        return self.sync.notifier

    @property
    def version(self):
        return self.store.version

    def start(self):
        return self.sync.subscribe()

    def stop(self):
        self.sync.unsubscribe()

    def check_watch(self):
        return self.sync.check_watch()

    def on_push(self, version):
        logger.debug(f"Orders changed, snapshot version {version}")

    def filtered(self, status_filter='all', search_term=''):
        status_filter = normalize_status_filter(status_filter)
        return apply_filters(self.store.all(), status_filter, search_term or '')

    def view(self, status_filter='all', search_term='', url_for_action=None):
        orders = self.filtered(status_filter, search_term)
        kwargs = {}
        if url_for_action is not None:
            kwargs['url_for_action'] = url_for_action
        return build_list_view(orders, loaded=self.store.loaded, currency=self.currency, **kwargs)

    def update_status(self, external_id, new_status):
        return self.sync.update_status(external_id, new_status)

    def delete_order(self, external_id, confirmed=False):
        return self.sync.delete_order(external_id, confirmed=confirmed)

    def export(self, today=None):
        """Export the full mirror (filters are ignored). Returns (filename, bytes)."""
        orders = self.store.all()
        data = export_csv(orders)
        filename = export_filename(self.export_prefix, today)
        db_log('info', 'export', f"Exported {len(orders)} orders to {filename}")
        self.notifier.notify('Orders exported to CSV', 'success')
        return filename, data

"""
Firestore Sync
==============

Keeps the local OrderStore in step with the remote `orders` collection
and sends status updates and deletes back to Firestore.

Every remote failure is logged, turned into an error notification and
otherwise ignored: the panel stays usable and nothing is retried.
"""

import logging
from contextlib import nullcontext

from flask import has_app_context
from google.cloud import firestore

from orderdesk.core import LoggingService, db_log
from .exceptions import InvalidStatusError
from .models import is_valid_status, orders_from_documents

logger = logging.getLogger(__name__)


class FirestoreOrderSync:
    """Live query subscription plus single-document mutations"""

    def __init__(self, store, notifier, client=None, project=None,
                 collection='orders', order_field='createdAt', on_change=None, app=None):
        self.store = store
        self.notifier = notifier
        self.collection_name = collection
        self.order_field = order_field
        self.on_change = on_change
        self._client = client
        self._project = project
        self._watch = None
        self.app = app

    @property
    def client(self):
        if self._client is None:
            self._client = firestore.Client(project=self._project)
        return self._client

    def _collection(self):
        return self.client.collection(self.collection_name)

    def _app_context(self):
        """App context for code running on the Firestore watch thread"""
        if self.app is None or has_app_context():
            return nullcontext()
        return self.app.app_context()

    # ---------------------------------------------------------------------
    # Live query
    # ---------------------------------------------------------------------

    def subscribe(self):
        """
        Start the live query (newest first). Returns True if the watch is running.

        Subscribing while a watch is already active does nothing.
        """
        if self._watch is not None:
            return True

        try:
            query = self._collection().order_by(
                self.order_field, direction=firestore.Query.DESCENDING
            )
            self._watch = query.on_snapshot(self._on_snapshot)
            logger.info(f"Subscribed to '{self.collection_name}' ordered by {self.order_field} desc")
            return True
        except Exception as e:
            self._report_load_error(e)
            return False

    def unsubscribe(self):
        if self._watch is None:
            return
        try:
            self._watch.unsubscribe()
        except Exception as e:
            logger.warning(f"Error closing order watch: {e}")
        finally:
            self._watch = None

    @property
    def subscribed(self):
        return self._watch is not None and bool(self._watch.is_active)

    def check_watch(self):
        """
        Report a watch the client closed after it started (permission or
        network errors end it on the watch thread). Reported once; the mirror
        keeps its last snapshot. Returns True while the watch is running.
        """
        if self._watch is None:
            return False
        if self._watch.is_active:
            return True

        self._watch = None
        logger.error("Order watch closed by Firestore")
        with self._app_context():
            db_log('error', 'sync', 'Order watch closed by Firestore')
        self.notifier.notify('Error loading orders', 'error')
        return False

    def _on_snapshot(self, documents, changes=None, read_time=None):
        """Watch callback: rebuild the whole mirror from the snapshot"""
        with self._app_context():
            self._apply_snapshot(documents)

    def _apply_snapshot(self, documents):
        try:
            pairs = [(doc.id, doc.to_dict()) for doc in documents]
            orders, quarantined = orders_from_documents(pairs)
        except Exception as e:
            self._report_load_error(e)
            return

        for document_id, reason in quarantined:
            logger.warning(f"Skipping order document {document_id}: {reason}")
        if quarantined:
            db_log('warning', 'sync', f"Skipped {len(quarantined)} malformed order documents",
                   {'documents': dict(quarantined)})

        version = self.store.replace(orders, quarantined)
        logger.debug(f"Order snapshot v{version}: {len(orders)} orders")

        if self.on_change is not None:
            self.on_change(version)

    def _report_load_error(self, error):
        logger.error(f"Error loading orders: {error}")
        LoggingService.log_error_with_traceback('sync', error, 'Error loading orders')
        self.notifier.notify('Error loading orders', 'error')

    # ---------------------------------------------------------------------
    # Mutations
    # ---------------------------------------------------------------------

    def update_status(self, external_id, new_status):
        """
        Set the order's status and a server-side updatedAt timestamp.

        The local mirror is not touched: the next push carries the new state.
        Raises InvalidStatusError before any remote call for unknown statuses.
        """
        if not is_valid_status(new_status):
            raise InvalidStatusError(new_status)

        try:
            self._collection().document(external_id).update({
                'status': new_status,
                'updatedAt': firestore.SERVER_TIMESTAMP,
            })
        except Exception as e:
            logger.error(f"Error updating order status: {e}")
            db_log('error', 'orders', 'Error updating order status',
                   {'order': external_id, 'status': new_status, 'error': str(e)})
            self.notifier.notify('Error updating order status', 'error')
            return False

        db_log('info', 'orders', f"Order {external_id} status set to {new_status}")
        self.notifier.notify(f"Order status updated to {new_status}", 'success')
        return True

    def delete_order(self, external_id, confirmed=False):
        """
        Delete one order. Nothing is sent unless the admin confirmed first.
        There is no undo.
        """
        if not confirmed:
            logger.info(f"Delete of order {external_id} not confirmed, skipping")
            return False

        try:
            self._collection().document(external_id).delete()
        except Exception as e:
            logger.error(f"Error deleting order: {e}")
            db_log('error', 'orders', 'Error deleting order',
                   {'order': external_id, 'error': str(e)})
            self.notifier.notify('Error deleting order', 'error')
            return False

        db_log('info', 'orders', f"Order {external_id} deleted")
        self.notifier.notify('Order deleted successfully', 'success')
        return True

"""
Orders Admin Routes
===================

Page, JSON API and CSV download for the orders panel.
Authentication is left to the host application.
"""

import logging
from flask import (
    render_template, request, redirect, url_for, jsonify, current_app, Response
)
from . import orders_bp
from .exceptions import InvalidStatusError
from .filters import normalize_status_filter
from .models import ALL_STATUSES, STATUS_LABELS, STATUSES
from .renderer import render_list

logger = logging.getLogger(__name__)

TRUTHY = ('1', 'true', 'yes', 'on')


def _get_session():
    """The AdminSession owned by the OrderDesk extension"""
    return current_app.extensions['orderdesk'].session


def _list_args():
    status_filter = normalize_status_filter(request.args.get('status', ALL_STATUSES))
    search_term = request.args.get('q') or ''
    return status_filter, search_term


def _page_url(status_filter, search_term):
    """Panel URL for the given filter and search, used as the form 'next' target"""
    return url_for('orders_admin.orders_manager', status=status_filter, q=search_term or None)


def _action_url(action, external_id):
    if action == 'status':
        return url_for('orders_admin.api_update_status', external_id=external_id)
    return url_for('orders_admin.api_delete_order', external_id=external_id)


def _request_value(key):
    """Read a value from a JSON body or a submitted form"""
    if request.is_json:
        data = request.get_json(silent=True) or {}
        return data.get(key)
    return request.form.get(key)


def _is_confirmed(value):
    if isinstance(value, bool):
        return value
    return str(value or '').strip().lower() in TRUTHY


def _respond(success, message, code=200):
    """JSON for API callers, redirect back to the panel for plain form posts"""
    if request.is_json:
        body = {'success': success}
        body['message' if success else 'error'] = message
        return jsonify(body), code
    next_url = request.form.get('next') or url_for('orders_admin.orders_manager')
    if not next_url.startswith('/') or next_url.startswith('//'):
        next_url = url_for('orders_admin.orders_manager')
    return redirect(next_url)


@orders_bp.route('/')
def orders_manager():
    """Order management page"""
    status_filter, search_term = _list_args()
    session = _get_session()
    view = session.view(status_filter, search_term, _action_url)

    filters = [(ALL_STATUSES, 'All')] + [(status, STATUS_LABELS[status]) for status in STATUSES]

    return render_template(
        'orders/orders_manager.html',
        view=view,
        filters=filters,
        status_filter=status_filter,
        search_term=search_term,
        next_url=_page_url(status_filter, search_term),
        version=session.version,
        quarantined=session.store.quarantined,
    )


@orders_bp.route('/list')
def order_list_fragment():
    """Rendered order list only, used by the page to refresh after a push"""
    status_filter, search_term = _list_args()
    view = _get_session().view(status_filter, search_term, _action_url)
    return render_list(view, _page_url(status_filter, search_term))


@orders_bp.route('/api/orders')
def api_orders():
    """Filtered orders as a JSON view-model"""
    status_filter, search_term = _list_args()
    session = _get_session()
    view = session.view(status_filter, search_term, _action_url)

    return jsonify({
        'success': True,
        'state': view.state,
        'message': view.message,
        'version': session.version,
        'orders': [card.to_dict() for card in view.cards],
    })


@orders_bp.route('/api/version')
def api_version():
    """Snapshot version, polled by the page to pick up pushes"""
    session = _get_session()
    session.check_watch()
    return jsonify({
        'version': session.version,
        'loaded': session.store.loaded,
        'subscribed': session.sync.subscribed,
    })


@orders_bp.route('/api/orders/<external_id>/status', methods=['POST'])
def api_update_status(external_id):
    """Set the status of one order"""
    new_status = _request_value('status')

    try:
        updated = _get_session().update_status(external_id, new_status)
    except InvalidStatusError as e:
        logger.warning(f"Rejected status update for {external_id}: {e}")
        return _respond(False, str(e), 400)

    if not updated:
        return _respond(False, 'Error updating order status', 500)
    return _respond(True, f'Order status updated to {new_status}')


@orders_bp.route('/api/orders/<external_id>/delete', methods=['POST'])
def api_delete_order(external_id):
    """Delete one order; the request must carry confirm=true"""
    if not _is_confirmed(_request_value('confirm')):
        return _respond(False, 'Deletion must be confirmed', 400)

    if not _get_session().delete_order(external_id, confirmed=True):
        return _respond(False, 'Error deleting order', 500)
    return _respond(True, 'Order deleted successfully')


@orders_bp.route('/export.csv')
def export_orders_csv():
    """Download every mirrored order as CSV"""
    filename, data = _get_session().export()
    return Response(
        data,
        mimetype='text/csv',
        headers={'Content-Disposition': f'attachment; filename="{filename}"'},
    )


@orders_bp.route('/api/notifications')
def api_notifications():
    """Notifications still on screen, with their remaining timings"""
    session = _get_session()
    session.check_watch()
    return jsonify({
        'success': True,
        'notifications': session.notifier.snapshot(),
    })

"""
Integration tests for the orders panel
======================================

Full Flask app with OrderDesk registered against a fake Firestore client.
Pushes are simulated by calling the watch callback directly.
Run with: pytest tests/ -v
"""

import csv
import io
import os
from datetime import datetime

from flask import Flask

from orderdesk import OrderDesk
from orderdesk.core import LoggingService
from orderdesk.modules.orders.formatting import format_date


# ---------------------------------------------------------------------------
# 1. Extension initialisation
# ---------------------------------------------------------------------------

def test_extension_registers_orders_module(app):
    """OrderDesk(app) stores itself on the app and registers the blueprint."""
    ext = app.extensions["orderdesk"]
    assert ext.get_registered_modules() == ["orders"]
    assert "orders_admin" in app.blueprints


def test_autostart_subscribes(app, session, firestore_client):
    query = firestore_client.collection.return_value.order_by.return_value
    query.on_snapshot.assert_called_once()
    assert session.sync.subscribed


def test_autostart_can_be_disabled(tmp_db_dir, firestore_client):
    app = Flask(__name__)
    app.config["LOG_DB"] = os.path.join(tmp_db_dir, "log.db")
    OrderDesk(app, {'client': firestore_client, 'autostart': False})

    assert not app.extensions["orderdesk"].session.sync.subscribed


def test_config_defaults_applied(app):
    assert app.config["ORDERS_COLLECTION"] == "orders"
    assert app.config["ORDERDESK_CURRENCY"] == "EGP"
    assert app.config["ORDERDESK_EXPORT_PREFIX"] == "majormania-orders"


def test_cors_enabled_when_origins_configured(tmp_db_dir, firestore_client):
    app = Flask(__name__)
    app.config["LOG_DB"] = os.path.join(tmp_db_dir, "log.db")
    app.config["ORDERDESK_CORS_ORIGINS"] = "https://shop.example.com"
    OrderDesk(app, {'client': firestore_client, 'autostart': False})

    response = app.test_client().get(
        "/admin/orders-manager/api/version",
        headers={"Origin": "https://shop.example.com"},
    )
    assert response.headers.get("Access-Control-Allow-Origin") == "https://shop.example.com"


# ---------------------------------------------------------------------------
# 2. Page and list rendering
# ---------------------------------------------------------------------------

def test_page_before_first_push_shows_loading(client):
    response = client.get("/admin/orders-manager/")
    assert response.status_code == 200
    assert b"Loading orders..." in response.data


def test_pending_filter_shows_single_card(client, push, order_data):
    push(("fs-1", order_data()))

    response = client.get("/admin/orders-manager/?status=pending")
    html = response.get_data(as_text=True)

    assert html.count('class="order-card') == 1
    assert "#1001" in html
    assert "20.00 EGP" in html
    assert 'href="tel:0100"' in html


def test_shipped_filter_shows_placeholder(client, push, order_data):
    push(("fs-1", order_data()))

    html = client.get("/admin/orders-manager/?status=shipped").get_data(as_text=True)
    assert "No orders found" in html
    assert 'class="order-card' not in html


def test_list_fragment_is_stable(client, push, order_data):
    push(("fs-1", order_data()), ("fs-2", order_data(id="1002", name="Mona")))

    first = client.get("/admin/orders-manager/list").get_data(as_text=True)
    second = client.get("/admin/orders-manager/list").get_data(as_text=True)
    assert first == second
    assert first.count('class="order-card') == 2


def test_api_orders_search(client, push, order_data):
    push(("fs-1", order_data()), ("fs-2", order_data(id="1002", name="Mona", phone="0199")))

    data = client.get("/admin/orders-manager/api/orders?q=ali").get_json()

    assert data["success"] is True
    assert data["state"] == "cards"
    assert [o["display_id"] for o in data["orders"]] == ["1001"]
    card = data["orders"][0]
    assert card["actions"]["status"] == "/admin/orders-manager/api/orders/fs-1/status"
    assert card["actions"]["delete"] == "/admin/orders-manager/api/orders/fs-1/delete"


def test_version_tracks_pushes(client, push, order_data):
    assert client.get("/admin/orders-manager/api/version").get_json()["version"] == 0
    push(("fs-1", order_data()))
    data = client.get("/admin/orders-manager/api/version").get_json()
    assert data["version"] == 1
    assert data["loaded"] is True


def test_quarantined_documents_are_reported(client, push, order_data):
    push(("fs-1", order_data()), ("broken", order_data(status="lost")))

    html = client.get("/admin/orders-manager/").get_data(as_text=True)
    assert "1 malformed order document(s) hidden" in html


def test_watch_log_rows_go_to_host_log_db(app, push, order_data, tmp_db_dir):
    """Snapshots arrive off any app context and still log to the host's LOG_DB."""
    push(("broken", order_data(status="lost")))

    with app.app_context():
        warnings = LoggingService.recent(level="warning")
    assert any("malformed" in row["message"] for row in warnings)
    assert not os.path.exists(os.path.join(tmp_db_dir, "log.db"))


def test_closed_watch_surfaces_on_version_poll(client, push, order_data, firestore_client):
    push(("fs-1", order_data()))
    watch = firestore_client.collection.return_value.order_by.return_value.on_snapshot.return_value
    watch.is_active = False

    data = client.get("/admin/orders-manager/api/version").get_json()
    assert data["subscribed"] is False
    assert data["loaded"] is True

    notifications = client.get("/admin/orders-manager/api/notifications").get_json()["notifications"]
    errors = [n for n in notifications if n["message"] == "Error loading orders"]
    assert len(errors) == 1
    assert errors[0]["kind"] == "error"


# ---------------------------------------------------------------------------
# 3. Status update
# ---------------------------------------------------------------------------

def test_status_update_then_push(client, push, order_data, firestore_client):
    push(("fs-1", order_data()))

    response = client.post("/admin/orders-manager/api/orders/fs-1/status", json={"status": "shipped"})
    assert response.status_code == 200
    assert response.get_json()["success"] is True
    firestore_client.collection.return_value.document.return_value.update.assert_called_once()

    notes = client.get("/admin/orders-manager/api/notifications").get_json()["notifications"]
    assert any(n["kind"] == "success" and "shipped" in n["message"] for n in notes)

    push(("fs-1", order_data(status="shipped")))
    card = client.get("/admin/orders-manager/api/orders").get_json()["orders"][0]
    selected = [o["value"] for o in card["status_options"] if o["selected"]]
    assert selected == ["shipped"]


def test_invalid_status_is_rejected(client, firestore_client):
    response = client.post("/admin/orders-manager/api/orders/fs-1/status", json={"status": "lost"})
    assert response.status_code == 400
    firestore_client.collection.return_value.document.return_value.update.assert_not_called()


def test_status_form_post_redirects_back(client):
    response = client.post(
        "/admin/orders-manager/api/orders/fs-1/status",
        data={"status": "confirmed", "next": "/admin/orders-manager/?status=pending"},
    )
    assert response.status_code == 302
    assert response.headers["Location"].endswith("/admin/orders-manager/?status=pending")


def test_status_update_failure_returns_error(client, firestore_client):
    firestore_client.collection.return_value.document.return_value.update.side_effect = RuntimeError("down")

    response = client.post("/admin/orders-manager/api/orders/fs-1/status", json={"status": "shipped"})
    assert response.status_code == 500
    assert response.get_json()["error"] == "Error updating order status"


# ---------------------------------------------------------------------------
# 4. Delete
# ---------------------------------------------------------------------------

def test_delete_requires_confirmation(client, firestore_client):
    response = client.post("/admin/orders-manager/api/orders/fs-1/delete", json={})
    assert response.status_code == 400
    firestore_client.collection.return_value.document.return_value.delete.assert_not_called()


def test_confirmed_delete(client, firestore_client):
    response = client.post("/admin/orders-manager/api/orders/fs-1/delete", json={"confirm": True})
    assert response.status_code == 200
    firestore_client.collection.return_value.document.assert_called_with("fs-1")
    firestore_client.collection.return_value.document.return_value.delete.assert_called_once()


def test_confirmed_delete_from_form(client, firestore_client):
    response = client.post("/admin/orders-manager/api/orders/fs-1/delete", data={"confirm": "yes"})
    assert response.status_code == 302
    firestore_client.collection.return_value.document.return_value.delete.assert_called_once()


# ---------------------------------------------------------------------------
# 5. CSV export
# ---------------------------------------------------------------------------

def test_export_csv_download(client, push, order_data):
    push(
        ("fs-1", order_data()),
        ("fs-2", order_data(id="1002", name="Mona", status="shipped", total=99.5)),
    )

    response = client.get("/admin/orders-manager/export.csv")

    assert response.status_code == 200
    assert response.mimetype == "text/csv"
    today = datetime.now().strftime("%Y-%m-%d")
    assert f'filename="majormania-orders-{today}.csv"' in response.headers["Content-Disposition"]

    rows = list(csv.reader(io.StringIO(response.get_data(as_text=True))))
    assert rows[0] == [
        "Order ID", "Customer Name", "Phone", "Email", "Address",
        "City", "Total", "Status", "Order Date",
    ]
    assert rows[1] == [
        "1001", "Ali", "0100", "ali@example.com", "12 Nile St", "Cairo",
        "500", "pending", format_date("2024-03-05T14:30:00"),
    ]
    assert rows[2][6] == "99.5"
    assert len(rows) == 3


def test_export_ignores_active_filter_and_cart(client, push, order_data):
    push(("fs-1", order_data(status="cancelled", total=7, cart=[{"name": "Hat", "quantity": 2, "price": 10}])))

    body = client.get("/admin/orders-manager/export.csv?status=pending").get_data(as_text=True)
    lines = body.split("\n")
    assert len(lines) == 2
    assert '"7"' in lines[1]


def test_export_emits_notification_and_log(client, push, order_data):
    push(("fs-1", order_data()))
    client.get("/admin/orders-manager/export.csv")

    notes = client.get("/admin/orders-manager/api/notifications").get_json()["notifications"]
    assert any(n["message"] == "Orders exported to CSV" for n in notes)


def test_write_failures_are_persisted_to_log(app, client, firestore_client):
    firestore_client.collection.return_value.document.return_value.delete.side_effect = RuntimeError("down")
    client.post("/admin/orders-manager/api/orders/fs-1/delete", json={"confirm": True})

    with app.app_context():
        errors = LoggingService.recent(level="error")
    assert any(row["message"] == "Error deleting order" for row in errors)

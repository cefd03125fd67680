"""
Shared fixtures for the OrderDesk tests.

Firestore is replaced by MagicMock doubles; nothing here talks to Google.
"""

import os
import shutil
import tempfile
from unittest.mock import MagicMock

import pytest
from flask import Flask

from orderdesk import OrderDesk


def make_order_data(**overrides):
    """A valid order document body, as stored by the shop checkout"""
    data = {
        'id': '1001',
        'status': 'pending',
        'name': 'Ali',
        'phone': '0100',
        'email': 'ali@example.com',
        'address': '12 Nile St',
        'city': 'Cairo',
        'notes': '',
        'orderDate': '2024-03-05T14:30:00',
        'total': 500,
        'cart': [{'name': 'Hat', 'quantity': 2, 'price': 10}],
        'createdAt': '2024-03-05T14:30:00',
    }
    data.update(overrides)
    return data


def make_snapshot_doc(doc_id, data):
    """Stand-in for a Firestore DocumentSnapshot"""
    doc = MagicMock()
    doc.id = doc_id
    doc.to_dict.return_value = data
    return doc


@pytest.fixture
def order_data():
    return make_order_data


@pytest.fixture
def snapshot_doc():
    return make_snapshot_doc


@pytest.fixture
def firestore_client():
    """MagicMock shaped like google.cloud.firestore.Client"""
    client = MagicMock()
    query = client.collection.return_value.order_by.return_value
    watch = MagicMock(name='watch')
    watch.is_active = True
    query.on_snapshot.return_value = watch
    return client


@pytest.fixture
def tmp_db_dir():
    """Create a temporary directory for the log database, cleaned up after."""
    d = tempfile.mkdtemp(prefix="orderdesk-test-")
    yield d
    shutil.rmtree(d, ignore_errors=True)


@pytest.fixture(autouse=True)
def log_db_outside_app(tmp_db_dir, monkeypatch):
    """Code running without an app context logs to a temp DB too"""
    from orderdesk.core.config import Config
    monkeypatch.setattr(Config, 'LOG_DB', os.path.join(tmp_db_dir, "log.db"))


@pytest.fixture
def app(tmp_db_dir, firestore_client):
    """Flask app with OrderDesk initialised against the fake client"""
    app = Flask(__name__)
    app.config["TESTING"] = True
    app.config["SECRET_KEY"] = "test-secret"
    app.config["LOG_DB"] = os.path.join(tmp_db_dir, "host.db")
    app.config["ORDERDESK_CORS_ORIGINS"] = ""
    OrderDesk(app, {'client': firestore_client, 'autostart': True})
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def session(app):
    return app.extensions['orderdesk'].session


@pytest.fixture
def push(session):
    """Deliver a snapshot of (doc_id, data) pairs as the watch thread would"""
    def _push(*pairs):
        session.sync._on_snapshot([make_snapshot_doc(doc_id, data) for doc_id, data in pairs])
    return _push

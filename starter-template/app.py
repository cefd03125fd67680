"""
OrderDesk Starter Template
==========================

A ready-to-run Flask application with the orders panel enabled.

Run with:
    python app.py

Visit:
    http://localhost:5000/admin/orders-manager/  - Orders panel
"""

import logging
from flask import Flask, redirect, url_for
from orderdesk import OrderDesk

logging.basicConfig(level=logging.INFO)

# Create Flask app
app = Flask(__name__)

# Initialize OrderDesk - registers the orders panel and starts the Firestore subscription
orderdesk = OrderDesk(app)


@app.route('/')
def index():
    return redirect(url_for('orders_admin.orders_manager'))


if __name__ == '__main__':
    print("\n" + "=" * 60)
    print("OrderDesk Starter Template")
    print("=" * 60)
    print("Orders Panel:    http://localhost:5000/admin/orders-manager/")
    print("=" * 60 + "\n")

    app.run(host='0.0.0.0', port=5000, debug=True)

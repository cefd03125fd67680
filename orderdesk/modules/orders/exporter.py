"""
CSV export of the mirrored orders.

Fields are wrapped in double quotes and nothing inside them is escaped,
so values containing quotes will break the row.
"""

from .formatting import format_amount, format_date, format_export_date

CSV_HEADERS = [
    'Order ID', 'Customer Name', 'Phone', 'Email', 'Address',
    'City', 'Total', 'Status', 'Order Date',
]


def _field(value):
    if value is None:
        return ''
    return str(value)


def order_row(order):
    return [
        order.display_id,
        order.name,
        order.phone,
        order.email,
        order.address,
        order.city,
        format_amount(order.total),
        order.status,
        format_date(order.order_date),
    ]


def export_csv(orders):
    """Serialize orders (header first) to UTF-8 CSV bytes"""
    rows = [CSV_HEADERS] + [order_row(order) for order in orders]
    content = '\n'.join(
        ','.join(f'"{_field(value)}"' for value in row)
        for row in rows
    )
    return content.encode('utf-8')


def export_filename(prefix='majormania-orders', today=None):
    return f"{prefix}-{format_export_date(today)}.csv"

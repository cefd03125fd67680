import os
from dotenv import load_dotenv

load_dotenv(override=True)


def _env_int(key, default):
    value = os.getenv(key)
    if value in (None, ''):
        return default
    return int(value)


def _env_bool(key, default=False):
    value = os.getenv(key)
    if value in (None, ''):
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


class Config:
    """
    Base configuration for OrderDesk.
    Host apps override any of these through app.config or environment variables.
    """
    # Firestore settings
    # Credentials come from GOOGLE_APPLICATION_CREDENTIALS (standard Google auth)
    FIRESTORE_PROJECT = os.getenv('FIRESTORE_PROJECT')
    ORDERS_COLLECTION = os.getenv('ORDERS_COLLECTION', 'orders')
    ORDERS_ORDER_FIELD = os.getenv('ORDERS_ORDER_FIELD', 'createdAt')

    # Display settings
    ORDERDESK_CURRENCY = os.getenv('ORDERDESK_CURRENCY', 'EGP')
    ORDERDESK_EXPORT_PREFIX = os.getenv('ORDERDESK_EXPORT_PREFIX', 'majormania-orders')

    # Notification timing (milliseconds)
    ORDERDESK_NOTIFY_SHOW_DELAY_MS = _env_int('ORDERDESK_NOTIFY_SHOW_DELAY_MS', 100)
    ORDERDESK_NOTIFY_DURATION_MS = _env_int('ORDERDESK_NOTIFY_DURATION_MS', 3000)
    ORDERDESK_NOTIFY_FADE_MS = _env_int('ORDERDESK_NOTIFY_FADE_MS', 300)

    # Comma-separated list, empty disables CORS on the JSON API
    ORDERDESK_CORS_ORIGINS = os.getenv('ORDERDESK_CORS_ORIGINS', '')

    # Subscribe to the live query as soon as the extension is initialised
    ORDERDESK_AUTOSTART = _env_bool('ORDERDESK_AUTOSTART', True)

    # Persistent log database
    DB_DIR = os.getenv('DB_DIR', os.path.join(os.getcwd(), 'databases'))
    LOG_DB = os.getenv('LOG_DB', os.path.join(DB_DIR, 'orderdesk_log.db'))


def get_config_value(key, default=None):
    """Get configuration value: Flask app config first, then Config, then default"""
    try:
        from flask import current_app
        val = current_app.config.get(key)
        if val is not None:
            return val
    except RuntimeError:
        pass
    val = getattr(Config, key, None)
    if val is not None:
        return val
    return default

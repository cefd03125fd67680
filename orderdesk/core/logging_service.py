"""
Centralized logging service for OrderDesk.
Mirrors operational events into an app_logs SQLite table so they survive restarts.
"""

import os
import json
import sqlite3
import logging
import traceback
from datetime import datetime
from flask import request, has_request_context
from .config import get_config_value

logger = logging.getLogger(__name__)


class LoggingService:
    """Persistent logging service for application-wide events"""

    @staticmethod
    def _db_path():
        return get_config_value('LOG_DB')

    @staticmethod
    def _ensure_logs_table(conn):
        """Ensure the app_logs table exists"""
        cursor = conn.cursor()
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS app_logs (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                timestamp TEXT NOT NULL,
                level TEXT NOT NULL,
                source TEXT NOT NULL,
                message TEXT NOT NULL,
                details TEXT,
                request_path TEXT
            )
        """)
        cursor.execute("""
            CREATE INDEX IF NOT EXISTS idx_logs_timestamp
            ON app_logs(timestamp DESC)
        """)

    @staticmethod
    def _request_path():
        if not has_request_context():
            return None
        return request.path

    @staticmethod
    def log(level, source, message, details=None):
        """
        Store a log entry in the app_logs table

        Args:
            level (str): Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
            source (str): Source component (orders, sync, export, etc.)
            message (str): Main log message
            details (str/dict): Additional details (JSON-encoded if dict)
        """
        level = level.upper()

        if isinstance(details, dict):
            details = json.dumps(details, indent=2, default=str)

        db_path = LoggingService._db_path()
        if not db_path:
            logger.log(getattr(logging, level, logging.INFO), f"[{source}] {message}")
            return

        try:
            directory = os.path.dirname(db_path)
            if directory:
                os.makedirs(directory, exist_ok=True)

            with sqlite3.connect(db_path) as conn:
                LoggingService._ensure_logs_table(conn)
                conn.execute("""
                    INSERT INTO app_logs
                    (timestamp, level, source, message, details, request_path)
                    VALUES (?, ?, ?, ?, ?, ?)
                """, (
                    datetime.now().isoformat(), level, source, message, details,
                    LoggingService._request_path()
                ))
                conn.commit()
        except Exception as e:
            # Fall back to console logging if database fails
            logger.warning(f"Logging service error ({e}): [{level}] [{source}] {message}")

    @staticmethod
    def error(source, message, details=None):
        LoggingService.log('ERROR', source, message, details)

    @staticmethod
    def log_error_with_traceback(source, error, details=None):
        """Log error with full traceback"""
        error_details = {
            'error_type': type(error).__name__,
            'error_message': str(error),
            'traceback': traceback.format_exc()
        }
        if details:
            error_details['additional_details'] = details

        LoggingService.error(source, f"Exception occurred: {type(error).__name__}", error_details)

    @staticmethod
    def recent(limit=50, level=None):
        """Return the most recent log rows as dicts, newest first"""
        db_path = LoggingService._db_path()
        if not db_path or not os.path.exists(db_path):
            return []

        with sqlite3.connect(db_path) as conn:
            conn.row_factory = sqlite3.Row
            LoggingService._ensure_logs_table(conn)
            if level:
                rows = conn.execute(
                    "SELECT * FROM app_logs WHERE level = ? ORDER BY id DESC LIMIT ?",
                    (level.upper(), limit)
                ).fetchall()
            else:
                rows = conn.execute(
                    "SELECT * FROM app_logs ORDER BY id DESC LIMIT ?", (limit,)
                ).fetchall()
            return [dict(row) for row in rows]


def db_log(level, source, message, details=None):
    """Module-level shortcut used by the feature modules"""
    LoggingService.log(level, source, message, details)

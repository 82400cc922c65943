"""
Centralized logging service for NextTrip Admin.
Provides structured logging with database storage and easy integration.
"""

import json
import logging
from datetime import datetime, timedelta
from flask import request, has_request_context
from .database import Database
from .config import get_config_value

console = logging.getLogger('nexttrip_admin')

LOG_SCHEMA = (
    """
    CREATE TABLE IF NOT EXISTS app_logs (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        timestamp TEXT NOT NULL,
        level TEXT NOT NULL,
        source TEXT NOT NULL,
        message TEXT NOT NULL,
        details TEXT,
        ip_address TEXT,
        user_agent TEXT,
        request_path TEXT
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_logs_timestamp ON app_logs(timestamp DESC)",
    "CREATE INDEX IF NOT EXISTS idx_logs_level ON app_logs(level)",
    "CREATE INDEX IF NOT EXISTS idx_logs_source ON app_logs(source)",
)


class LoggingService:
    """Centralized logging service for application-wide logging"""

    @staticmethod
    def _log_db_path():
        return get_config_value('LOG_DB')

    @staticmethod
    def _get_request_context():
        """Extract request context information"""
        if not has_request_context():
            return None, None, None

        try:
            ip_address = request.headers.get('X-Forwarded-For', request.remote_addr)
            if ip_address and ',' in ip_address:
                ip_address = ip_address.split(',')[0].strip()

            user_agent = request.headers.get('User-Agent', '')
            request_path = request.path

            return ip_address, user_agent, request_path
        except Exception:
            return None, None, None

    @staticmethod
    def log(level, source, message, details=None):
        """
        Log a message to the console logger and the log database

        Args:
            level (str): Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
            source (str): Source component (menus, blog_posts, api_client, etc.)
            message (str): Main log message
            details (str/dict): Additional details (will be JSON-encoded if dict)
        """
        level = level.upper()
        console.log(getattr(logging, level, logging.INFO), "[%s] %s", source, message)

        db_path = LoggingService._log_db_path()
        if not db_path:
            return

        try:
            Database.ensure_schema(db_path, LOG_SCHEMA)

            ip_address, user_agent, request_path = LoggingService._get_request_context()

            if isinstance(details, (dict, list)):
                details = json.dumps(details, indent=2, default=str)

            timestamp = datetime.now().isoformat()

            with Database.connect(db_path) as conn:
                cursor = conn.cursor()
                cursor.execute("""
                    INSERT INTO app_logs
                    (timestamp, level, source, message, details, ip_address, user_agent, request_path)
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """, (
                    timestamp, level, source, message, details,
                    ip_address, user_agent, request_path
                ))
                conn.commit()

        except Exception as e:
            # Fallback to console only if the log database is unavailable
            console.warning("Logging service error: %s", e)
            if details:
                console.warning("Details: %s", details)

    @staticmethod
    def info(source, message, details=None):
        """Log info message"""
        LoggingService.log('INFO', source, message, details)

    @staticmethod
    def error(source, message, details=None):
        """Log error message"""
        LoggingService.log('ERROR', source, message, details)

    @staticmethod
    def log_api_call(source, endpoint, method='GET', status_code=200, details=None):
        """Log calls made to the NextTrip backend"""
        message = f"API {method} {endpoint} - Status: {status_code}"
        if status_code == 0:
            level = 'ERROR'
        else:
            level = 'INFO' if 200 <= status_code < 400 else 'WARNING' if status_code < 500 else 'ERROR'
        LoggingService.log(level, source, message, details)

    @staticmethod
    def recent(limit=50, level=None):
        """Return the newest log rows as dicts"""
        db_path = LoggingService._log_db_path()
        if not db_path:
            return []
        try:
            Database.ensure_schema(db_path, LOG_SCHEMA)
            with Database.connect(db_path) as conn:
                cursor = conn.cursor()
                if level:
                    cursor.execute("""
                        SELECT timestamp, level, source, message, details, request_path
                        FROM app_logs WHERE level = ?
                        ORDER BY id DESC LIMIT ?
                    """, (level.upper(), limit))
                else:
                    cursor.execute("""
                        SELECT timestamp, level, source, message, details, request_path
                        FROM app_logs ORDER BY id DESC LIMIT ?
                    """, (limit,))
                return [{
                    'timestamp': row[0],
                    'level': row[1],
                    'source': row[2],
                    'message': row[3],
                    'details': row[4],
                    'request_path': row[5],
                } for row in cursor.fetchall()]
        except Exception as e:
            console.warning("Failed to read logs: %s", e)
            return []

    @staticmethod
    def cleanup_old_logs(days_to_keep=30):
        """Clean up old log entries"""
        db_path = LoggingService._log_db_path()
        if not db_path:
            return 0
        try:
            cutoff_iso = (datetime.now() - timedelta(days=days_to_keep)).isoformat()

            Database.ensure_schema(db_path, LOG_SCHEMA)
            with Database.connect(db_path) as conn:
                cursor = conn.cursor()
                cursor.execute("DELETE FROM app_logs WHERE timestamp < ?", (cutoff_iso,))
                deleted_count = cursor.rowcount
                conn.commit()

            LoggingService.info('system', f"Cleaned up {deleted_count} old log entries")
            return deleted_count

        except Exception as e:
            LoggingService.error('system', f"Failed to cleanup old logs: {e}")
            return 0


def db_log(level, source, message, details=None):
    """Shorthand used by modules: db_log('error', 'menus', 'Reorder failed', {...})"""
    LoggingService.log(level, source, message, details)


# Convenience instance for easy importing
logger = LoggingService()

import os
import sqlite3
import threading


class Database:
    # Serializes table creation across request threads
    _lock = threading.Lock()
    _initialized = set()

    @staticmethod
    def connect(path):
        return sqlite3.connect(path)

    @classmethod
    def ensure_directory(cls, path):
        """Create the parent directory of a database file if it is missing."""
        db_dir = os.path.dirname(path)
        if db_dir:
            os.makedirs(db_dir, exist_ok=True)

    @classmethod
    def ensure_schema(cls, path, statements):
        """
        Run CREATE statements once per database path.

        Args:
            path: SQLite file path
            statements: Iterable of DDL statements (CREATE ... IF NOT EXISTS)
        """
        with cls._lock:
            if path in cls._initialized:
                return
            cls.ensure_directory(path)
            with cls.connect(path) as conn:
                cursor = conn.cursor()
                for statement in statements:
                    cursor.execute(statement)
                conn.commit()
            cls._initialized.add(path)

    @classmethod
    def reset(cls):
        """Forget initialised paths (tests point LOG_DB at fresh files)."""
        with cls._lock:
            cls._initialized.clear()

# Overview: Flask extension instances and engine hooks for the store database.

from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()


def set_sqlite_pragmas(busy_timeout_ms: int):
    """
    Build a connect hook that turns on FK enforcement and lock waits.

    NOTE: SQLite ships with foreign keys disabled per connection; without this
    the RESTRICT/CASCADE rules on Vendas and ItensVenda are not applied.
    """
    def _on_connect(dbapi_connection, _connection_record):
        cursor = dbapi_connection.cursor()
        try:
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.execute(f"PRAGMA busy_timeout={int(busy_timeout_ms)}")
        finally:
            cursor.close()

    return _on_connect

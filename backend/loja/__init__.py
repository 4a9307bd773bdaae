# backend/loja/__init__.py
import logging

from flask import Flask
from sqlalchemy import event

from .config import Config
from .extensions import db, set_sqlite_pragmas


LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def _configure_logging(app: Flask) -> None:
    level = getattr(logging, str(app.config["LOG_LEVEL"]).upper(), logging.INFO)
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger("loja").setLevel(level)
    app.logger.setLevel(level)


def create_app(config: dict | None = None) -> Flask:
    app = Flask(__name__, instance_relative_config=True)
    app.config.from_object(Config)

    # Overrides must land before the engine is bound (tests swap the database URI)
    if config:
        app.config.update(config)

    _configure_logging(app)

    # Initialize extensions
    db.init_app(app)

    # Import models so the schema (tables + projection views) is registered on metadata
    from . import models  # noqa: F401

    with app.app_context():
        dialect = db.engine.dialect.name
        if dialect == "sqlite":
            event.listen(
                db.engine,
                "connect",
                set_sqlite_pragmas(app.config["SQLITE_BUSY_TIMEOUT_MS"]),
            )

    # Register CLI commands
    from .cli import register_commands
    register_commands(app)

    app.logger.debug("Loja app created (dialect=%s)", dialect)
    return app

"""
Read-only catalog projections.

v_produtos_cliente and v_produtos_funcionario select the same columns; they
are kept as two views so each role's grant can be managed on its own.
"""
from __future__ import annotations

from sqlalchemy import column, event, table, text

from ..extensions import db


CUSTOMER_PRODUCTS_VIEW = "v_produtos_cliente"
EMPLOYEE_PRODUCTS_VIEW = "v_produtos_funcionario"

PROJECTION_SELECT = "SELECT IDProduto, Nome, Preco, Estoque FROM Produtos"


def _projection(name: str):
    return table(
        name,
        column("IDProduto", db.Integer),
        column("Nome", db.String(120)),
        column("Preco", db.Numeric(10, 2)),
        column("Estoque", db.Integer),
    )


PRODUCT_PROJECTIONS = {
    CUSTOMER_PRODUCTS_VIEW: _projection(CUSTOMER_PRODUCTS_VIEW),
    EMPLOYEE_PRODUCTS_VIEW: _projection(EMPLOYEE_PRODUCTS_VIEW),
}


def _create_views(target, connection, **kw):
    for name in PRODUCT_PROJECTIONS:
        if connection.dialect.name == "sqlite":
            stmt = f"CREATE VIEW IF NOT EXISTS {name} AS {PROJECTION_SELECT}"
        else:
            stmt = f"CREATE OR REPLACE VIEW {name} AS {PROJECTION_SELECT}"
        connection.execute(text(stmt))


def _drop_views(target, connection, **kw):
    for name in PRODUCT_PROJECTIONS:
        connection.execute(text(f"DROP VIEW IF EXISTS {name}"))


# Views live outside the ORM; tie their lifecycle to create_all/drop_all
event.listen(db.metadata, "after_create", _create_views)
event.listen(db.metadata, "before_drop", _drop_views)

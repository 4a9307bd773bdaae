# Overview: Role-scoped read access to the catalog projection views.

from __future__ import annotations

from sqlalchemy import select

from ..errors import InvalidArgumentError
from ..extensions import db
from ..models import CUSTOMER_PRODUCTS_VIEW, EMPLOYEE_PRODUCTS_VIEW, PRODUCT_PROJECTIONS
from ..permissions import AccessRole, Operation


# Default view per role when the caller does not name one
ROLE_PROJECTIONS = {
    AccessRole.CUSTOMER: CUSTOMER_PRODUCTS_VIEW,
    AccessRole.EMPLOYEE: EMPLOYEE_PRODUCTS_VIEW,
    AccessRole.MANAGER: EMPLOYEE_PRODUCTS_VIEW,
}


def list_product_projection(view: str | None = None, *, access) -> list[dict]:
    """
    Read {id, name, price, stock} for every product through a projection view.

    Both views expose identical data; they differ only in who may read them.
    """
    view = view or ROLE_PROJECTIONS.get(access.role)
    projection = PRODUCT_PROJECTIONS.get(view)
    if projection is None:
        raise InvalidArgumentError(f"Unknown product view: {view}", details={"view": view})

    access.require((view, Operation.SELECT))

    rows = db.session.execute(
        select(projection).order_by(projection.c.IDProduto)
    ).all()

    return [
        {
            "id": row.IDProduto,
            "name": row.Nome,
            "price": row.Preco,
            "stock": row.Estoque,
        }
        for row in rows
    ]

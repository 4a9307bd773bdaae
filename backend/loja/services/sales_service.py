"""
Sales Ledger - sale headers, sale items and the running total

WHY: Selling is immediate settlement. Each item added to a sale takes its
units out of stock right away (through the same locked movement step as a
manual Saída adjustment) and bumps the sale total in the same transaction.

Sale totals have two code paths on purpose:
- add_item() updates Total incrementally (normal path).
- recompute_total() rebuilds Total from the items (reconciliation after
  out-of-band edits). It takes the sale row lock like add_item().
"""

from __future__ import annotations

import logging
from decimal import Decimal

from ..errors import NotFoundError
from ..extensions import db
from ..models import Customer, Employee, MovementType, Sale, SaleItem
from ..permissions import Operation, Resource
from ..validation import CENT, require_positive_int, to_decimal, to_money
from .catalog_service import apply_movement, load_product
from .concurrency import begin_write_transaction, lock_for_update, run_with_retry


logger = logging.getLogger(__name__)

ZERO = Decimal("0.00")


def _load_sale(sale_id: int, *, lock: bool = False) -> Sale:
    query = db.session.query(Sale).filter_by(id=sale_id)
    if lock:
        query = lock_for_update(query)
    sale = query.first()
    if sale is None:
        raise NotFoundError("Sale not found", details={"sale_id": sale_id})
    return sale


def _sum_items(sale_id: int) -> Decimal:
    items = db.session.query(SaleItem).filter_by(sale_id=sale_id).all()
    total = sum((item.quantity * item.unit_price for item in items), ZERO)
    return total.quantize(CENT)


def resolve_unit_price(product, unit_price) -> Decimal:
    """
    Price charged for a new item.

    Absent, zero or negative -> the product's current price. Anything else is
    taken as given (rounded to the cent).
    """
    if unit_price is None:
        return product.price
    # Sign first: any non-positive amount falls back, however large
    if to_decimal(unit_price, "unit_price") <= 0:
        return product.price
    price = to_money(unit_price, "unit_price")
    if price <= 0:
        return product.price
    return price


def create_sale(customer_id: int, employee_id: int, *, access) -> Sale:
    """Open a sale with Total 0."""
    access.require((Resource.SALES, Operation.INSERT))

    def _op():
        if db.session.get(Customer, customer_id) is None:
            raise NotFoundError("Customer not found", details={"customer_id": customer_id})
        if db.session.get(Employee, employee_id) is None:
            raise NotFoundError("Employee not found", details={"employee_id": employee_id})

        sale = Sale(customer_id=customer_id, employee_id=employee_id, total=ZERO)
        db.session.add(sale)
        db.session.commit()
        logger.info(
            "Sale created: sale_id=%s customer_id=%s employee_id=%s",
            sale.id,
            customer_id,
            employee_id,
        )
        return sale

    return run_with_retry(_op)


def add_item(sale_id: int, product_id: int, quantity, unit_price=None, *, access) -> SaleItem:
    """
    Add an item to a sale.

    In one transaction, holding the sale row lock and then the product row lock:
    1. resolve the unit price (product price when absent or <= 0)
    2. check and decrement stock with a Saída movement
       (InsufficientStockError leaves everything unchanged)
    3. insert the item with the resolved price
    4. Total += quantity * price

    The stock side effects run with the service's own rights: the caller
    needs grants on ItensVenda and Vendas only.
    """
    access.require(
        (Resource.SALE_ITEMS, Operation.INSERT),
        (Resource.SALES, Operation.UPDATE),
    )
    quantity = require_positive_int(quantity, "quantity")

    def _op():
        begin_write_transaction()
        sale = _load_sale(sale_id, lock=True)
        product = load_product(product_id, lock=True)

        price = resolve_unit_price(product, unit_price)

        apply_movement(product, MovementType.OUTBOUND, quantity)

        item = SaleItem(
            sale_id=sale.id,
            product_id=product.id,
            quantity=quantity,
            unit_price=price,
        )
        db.session.add(item)

        sale.total = (Decimal(sale.total) + quantity * price).quantize(CENT)

        db.session.commit()
        logger.info(
            "Sale item added: sale_id=%s product_id=%s quantity=%s unit_price=%s",
            sale_id,
            product_id,
            quantity,
            price,
        )
        return item

    return run_with_retry(_op)


def sale_total(sale_id: int, *, access) -> Decimal:
    """Theoretical total of a sale: sum of quantity * unit_price over its items."""
    access.require(
        (Resource.SALES, Operation.SELECT),
        (Resource.SALE_ITEMS, Operation.SELECT),
    )
    _load_sale(sale_id)
    return _sum_items(sale_id)


def recompute_total(sale_id: int, *, access) -> Sale:
    """
    Overwrite Total with the exact sum over the sale's current items.

    Reconciliation only; add_item() never calls this.
    """
    access.require(
        (Resource.SALES, Operation.UPDATE),
        (Resource.SALE_ITEMS, Operation.SELECT),
    )

    def _op():
        begin_write_transaction()
        sale = _load_sale(sale_id, lock=True)
        recomputed = _sum_items(sale.id)
        stored = Decimal(sale.total)
        if stored != recomputed:
            logger.warning(
                "Sale total drift repaired: sale_id=%s stored=%s recomputed=%s",
                sale.id,
                stored,
                recomputed,
            )
        sale.total = recomputed
        db.session.commit()
        return sale

    return run_with_retry(_op)


def get_sale(sale_id: int, *, access) -> Sale:
    access.require((Resource.SALES, Operation.SELECT))
    return _load_sale(sale_id)


def list_items(sale_id: int, *, access) -> list[SaleItem]:
    access.require(
        (Resource.SALES, Operation.SELECT),
        (Resource.SALE_ITEMS, Operation.SELECT),
    )
    _load_sale(sale_id)
    return (
        db.session.query(SaleItem)
        .filter_by(sale_id=sale_id)
        .order_by(SaleItem.id)
        .all()
    )


def delete_sale(sale_id: int, *, access) -> None:
    """
    Delete a sale and, by cascade, its items.

    Stock is not given back: the decrement happened when each item was added
    and the ledger keeps its Saída rows. Return units with an Entrada
    adjustment if that is what is wanted.
    """
    access.require((Resource.SALES, Operation.DELETE))

    def _op():
        sale = _load_sale(sale_id, lock=True)
        db.session.delete(sale)
        db.session.commit()
        logger.info("Sale deleted: sale_id=%s", sale_id)

    run_with_retry(_op)

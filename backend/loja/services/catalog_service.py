# Overview: Catalog operations; owns products, authoritative stock levels and the stock movement ledger.
"""
Catalog Stock Invariants (authoritative)

- Produtos.Estoque is never negative. An outbound movement larger than the
  current stock is rejected with InsufficientStockError and changes nothing.
- Every change to Estoque has exactly one MovimentacoesEstoque row with the
  same product, direction and quantity, written in the same transaction.
- The stock read, the check, the write and the ledger append happen while
  holding the product row lock (FOR UPDATE, or BEGIN IMMEDIATE on SQLite).
  There is never a separate round trip between the check and the write.
- apply_movement() is the only code that writes Estoque. Manual adjustments
  and sale items both go through it.
"""

from __future__ import annotations

import logging

from ..errors import ConflictError, InsufficientStockError, InvalidArgumentError, NotFoundError
from ..extensions import db
from ..models import MovementType, Product, SaleItem, StockMovement
from ..permissions import Operation, Resource
from ..validation import (
    optional_text,
    require_non_negative_int,
    require_non_negative_money,
    require_positive_int,
    require_text,
)
from .concurrency import begin_write_transaction, lock_for_update, run_with_retry


logger = logging.getLogger(__name__)


def parse_movement_type(value) -> MovementType:
    """
    Accept a MovementType, its stored label ("Entrada" / "Saída") or its
    name ("INBOUND" / "OUTBOUND", any case).
    """
    if isinstance(value, MovementType):
        return value
    if isinstance(value, str):
        stripped = value.strip()
        for member in MovementType:
            if stripped == member.value or stripped.upper() == member.name:
                return member
    raise InvalidArgumentError(
        "Invalid movement type. Use Entrada or Saída.",
        details={"type": value},
    )


def load_product(product_id: int, *, lock: bool = False) -> Product:
    query = db.session.query(Product).filter_by(id=product_id)
    if lock:
        query = lock_for_update(query)
    product = query.first()
    if product is None:
        raise NotFoundError("Product not found", details={"product_id": product_id})
    return product


def apply_movement(product: Product, movement_type: MovementType, quantity: int) -> StockMovement:
    """
    Core stock change without locking, retry or commit.

    Caller must hold the product row lock and owns the transaction.
    Called by adjust_stock() and sales_service.add_item().
    """
    if movement_type is MovementType.OUTBOUND:
        if quantity > product.stock:
            logger.warning(
                "Rejected outbound movement: product_id=%s requested=%s on_hand=%s",
                product.id,
                quantity,
                product.stock,
            )
            raise InsufficientStockError(
                "Insufficient stock",
                details={
                    "product_id": product.id,
                    "requested_quantity": quantity,
                    "on_hand": product.stock,
                },
            )
        product.stock = product.stock - quantity
    else:
        product.stock = product.stock + quantity

    movement = StockMovement(product_id=product.id, type=movement_type, quantity=quantity)
    db.session.add(movement)
    db.session.flush()  # ensures movement.id is assigned without committing
    return movement


def available_stock(product_id: int, *, access) -> int:
    """Current stock of a product; NotFoundError if it does not exist."""
    access.require((Resource.PRODUCTS, Operation.SELECT))
    return load_product(product_id).stock


def adjust_stock(product_id: int, movement_type, quantity, *, access) -> StockMovement:
    """
    Manual stock adjustment (receipts and corrections).

    - Entrada: increments stock.
    - Saída: decrements stock; InsufficientStockError if quantity > stock.

    The stock write and the ledger append commit together or not at all.
    """
    access.require(
        (Resource.PRODUCTS, Operation.UPDATE),
        (Resource.STOCK_MOVEMENTS, Operation.INSERT),
    )
    movement_type = parse_movement_type(movement_type)
    quantity = require_positive_int(quantity, "quantity")

    def _op():
        begin_write_transaction()
        product = load_product(product_id, lock=True)
        movement = apply_movement(product, movement_type, quantity)
        db.session.commit()
        logger.info(
            "Stock adjusted: product_id=%s type=%s quantity=%s movement_id=%s",
            product_id,
            movement_type.value,
            quantity,
            movement.id,
        )
        return movement

    return run_with_retry(_op)


def create_product(name, price, *, description=None, stock=0, access) -> Product:
    """
    Create a product.

    An opening stock above zero is recorded as an Entrada movement so the
    ledger accounts for every unit from the start.
    """
    access.require((Resource.PRODUCTS, Operation.INSERT))
    name = require_text(name, "name", 120)
    price = require_non_negative_money(price, "price")
    description = optional_text(description, "description")
    stock = require_non_negative_int(stock, "stock")

    if stock:
        access.require((Resource.STOCK_MOVEMENTS, Operation.INSERT))

    def _op():
        product = Product(name=name, description=description, price=price, stock=0)
        db.session.add(product)
        db.session.flush()
        if stock:
            apply_movement(product, MovementType.INBOUND, stock)
        db.session.commit()
        logger.info("Product created: product_id=%s name=%r stock=%s", product.id, name, stock)
        return product

    return run_with_retry(_op)


def get_product(product_id: int, *, access) -> Product:
    access.require((Resource.PRODUCTS, Operation.SELECT))
    return load_product(product_id)


def update_price(product_id: int, price, *, access) -> Product:
    """Change the list price. Existing sale items keep their snapshot price."""
    access.require((Resource.PRODUCTS, Operation.UPDATE))
    price = require_non_negative_money(price, "price")

    def _op():
        product = load_product(product_id, lock=True)
        product.price = price
        db.session.commit()
        return product

    return run_with_retry(_op)


def delete_product(product_id: int, *, access) -> None:
    """
    Delete a product.

    RESTRICT: refused while any sale item or stock movement references it.
    """
    access.require((Resource.PRODUCTS, Operation.DELETE))

    def _op():
        product = load_product(product_id, lock=True)
        in_sales = db.session.query(SaleItem.id).filter_by(product_id=product.id).first()
        in_ledger = db.session.query(StockMovement.id).filter_by(product_id=product.id).first()
        if in_sales or in_ledger:
            raise ConflictError(
                "Product is referenced by sale items or stock movements",
                details={"product_id": product.id},
            )
        db.session.delete(product)
        db.session.commit()

    run_with_retry(_op)


def list_stock_movements(product_id: int, *, limit: int = 200, access) -> list[StockMovement]:
    access.require((Resource.STOCK_MOVEMENTS, Operation.SELECT))
    load_product(product_id)

    return (
        db.session.query(StockMovement)
        .filter_by(product_id=product_id)
        .order_by(StockMovement.id.desc())
        .limit(limit)
        .all()
    )

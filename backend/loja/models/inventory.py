from __future__ import annotations

import enum

from ..extensions import db
from loja.time_utils import to_utc_z


class MovementType(str, enum.Enum):
    """Direction of a stock movement; values are the stored ENUM labels."""
    INBOUND = "Entrada"
    OUTBOUND = "Saída"


class Product(db.Model):
    """
    Product master data and authoritative stock level.

    Stock is a mutable counter (Estoque), kept in step with the
    MovimentacoesEstoque ledger by catalog_service. Every change to it goes
    through one locked movement step; nothing else writes the column.

    Price is the current list price. Sale items snapshot it at insertion, so
    later price changes never reach existing items.
    """
    __tablename__ = "Produtos"
    __table_args__ = (
        db.Index("idx_produtos_nome", "Nome"),
        db.CheckConstraint("Estoque >= 0", name="ck_produtos_estoque_non_negative"),
        db.CheckConstraint("Preco >= 0", name="ck_produtos_preco_non_negative"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column("IDProduto", db.Integer, primary_key=True)
    name = db.Column("Nome", db.String(120), nullable=False)
    description = db.Column("Descricao", db.Text, nullable=True)

    # Exact cents so Vendas.Total always equals the sum of its items
    price = db.Column("Preco", db.Numeric(10, 2), nullable=False)

    stock = db.Column("Estoque", db.Integer, nullable=False, default=0, server_default="0")

    created_at = db.Column("CriadoEm", db.DateTime, server_default=db.func.now())

    def __repr__(self) -> str:
        return f"<Product id={self.id} name={self.name!r} stock={self.stock}>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "price": str(self.price) if self.price is not None else None,
            "stock": self.stock,
            "created_at": to_utc_z(self.created_at),
        }


class StockMovement(db.Model):
    """
    Append-only stock ledger.

    IMMUTABLE: rows are written inside the same transaction as the stock
    change they record and are never updated or deleted.
    """
    __tablename__ = "MovimentacoesEstoque"
    __table_args__ = (
        db.CheckConstraint("Quantidade > 0", name="ck_movimentacoes_quantidade_positive"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column("IDMovimentacao", db.Integer, primary_key=True)
    product_id = db.Column(
        "IDProduto",
        db.Integer,
        db.ForeignKey("Produtos.IDProduto"),
        nullable=False,
        index=True,
    )

    type = db.Column(
        "TipoMovimentacao",
        db.Enum(
            MovementType,
            name="tipo_movimentacao",
            values_callable=lambda members: [m.value for m in members],
            validate_strings=True,
        ),
        nullable=False,
    )

    quantity = db.Column("Quantidade", db.Integer, nullable=False)

    occurred_at = db.Column("DataMovimentacao", db.DateTime, server_default=db.func.now())

    product = db.relationship("Product", backref=db.backref("movements", lazy=True, passive_deletes="all"))

    def __repr__(self) -> str:
        return f"<StockMovement id={self.id} product_id={self.product_id} type={self.type.value} quantity={self.quantity}>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "product_id": self.product_id,
            "type": self.type.value,
            "quantity": self.quantity,
            "occurred_at": to_utc_z(self.occurred_at),
        }

from __future__ import annotations

from ..extensions import db
from loja.time_utils import to_utc_z


class Sale(db.Model):
    """
    Sale header.

    total is maintained incrementally by sales_service.add_item and can be
    rebuilt from the items by sales_service.recompute_total. A sale is always
    open: there is no finalize or cancel state.
    """
    __tablename__ = "Vendas"
    __table_args__ = (
        db.Index("idx_vendas_data", "DataVenda"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column("IDVenda", db.Integer, primary_key=True)
    customer_id = db.Column(
        "IDCliente",
        db.Integer,
        db.ForeignKey("Clientes.IDCliente", name="fk_venda_cliente", onupdate="CASCADE", ondelete="RESTRICT"),
        nullable=False,
    )
    employee_id = db.Column(
        "IDFuncionario",
        db.Integer,
        db.ForeignKey("Funcionarios.IDFuncionario", name="fk_venda_funcionario", onupdate="CASCADE", ondelete="RESTRICT"),
        nullable=False,
    )

    created_at = db.Column("DataVenda", db.DateTime, server_default=db.func.now())

    total = db.Column("Total", db.Numeric(12, 2), nullable=False, default=0, server_default="0")

    customer = db.relationship("Customer", backref=db.backref("sales", lazy=True, passive_deletes="all"))
    employee = db.relationship("Employee", backref=db.backref("sales", lazy=True, passive_deletes="all"))
    items = db.relationship(
        "SaleItem",
        back_populates="sale",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="SaleItem.id",
    )

    def __repr__(self) -> str:
        return f"<Sale id={self.id} customer_id={self.customer_id} total={self.total}>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "customer_id": self.customer_id,
            "employee_id": self.employee_id,
            "created_at": to_utc_z(self.created_at),
            "total": str(self.total) if self.total is not None else None,
        }


class SaleItem(db.Model):
    """Individual line of a sale; unit_price is the price charged, fixed at insertion."""
    __tablename__ = "ItensVenda"
    __table_args__ = (
        db.Index("idx_itens_venda_venda", "IDVenda"),
        db.CheckConstraint("Quantidade > 0", name="ck_itens_venda_quantidade_positive"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column("IDItem", db.Integer, primary_key=True)
    sale_id = db.Column(
        "IDVenda",
        db.Integer,
        db.ForeignKey("Vendas.IDVenda", name="fk_item_venda", ondelete="CASCADE"),
        nullable=False,
    )
    product_id = db.Column(
        "IDProduto",
        db.Integer,
        db.ForeignKey("Produtos.IDProduto", name="fk_item_produto", ondelete="RESTRICT"),
        nullable=False,
    )

    quantity = db.Column("Quantidade", db.Integer, nullable=False)
    unit_price = db.Column("PrecoUnitario", db.Numeric(10, 2), nullable=False)

    sale = db.relationship("Sale", back_populates="items")
    product = db.relationship("Product", backref=db.backref("sale_items", lazy=True, passive_deletes="all"))

    @property
    def line_total(self):
        return self.quantity * self.unit_price

    def __repr__(self) -> str:
        return f"<SaleItem id={self.id} sale_id={self.sale_id} product_id={self.product_id} quantity={self.quantity}>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "sale_id": self.sale_id,
            "product_id": self.product_id,
            "quantity": self.quantity,
            "unit_price": str(self.unit_price),
            "line_total": str(self.line_total),
        }

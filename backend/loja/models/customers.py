from __future__ import annotations

from ..extensions import db
from loja.time_utils import to_utc_z


class Customer(db.Model):
    """
    Customer master data.

    CPF is optional but unique when present. Customers referenced by a Sale
    cannot be deleted (Vendas.IDCliente is ON DELETE RESTRICT).
    """
    __tablename__ = "Clientes"
    __table_args__ = (
        db.Index("idx_clientes_nome", "Nome"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column("IDCliente", db.Integer, primary_key=True)
    name = db.Column("Nome", db.String(120), nullable=False)
    cpf = db.Column("CPF", db.CHAR(11), nullable=True, unique=True)
    created_at = db.Column("CriadoEm", db.DateTime, server_default=db.func.now())

    def __repr__(self) -> str:
        return f"<Customer id={self.id} name={self.name!r}>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "cpf": self.cpf,
            "created_at": to_utc_z(self.created_at),
        }

from __future__ import annotations

from ..extensions import db
from loja.time_utils import to_utc_z


class Employee(db.Model):
    """Staff member who handles sales."""
    __tablename__ = "Funcionarios"
    __table_args__ = (
        db.Index("idx_funcionarios_nome", "Nome"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column("IDFuncionario", db.Integer, primary_key=True)
    name = db.Column("Nome", db.String(120), nullable=False)
    cpf = db.Column("CPF", db.CHAR(11), nullable=True, unique=True)
    title = db.Column("Cargo", db.String(60), nullable=True)
    salary = db.Column("Salario", db.Numeric(10, 2), nullable=True)
    created_at = db.Column("CriadoEm", db.DateTime, server_default=db.func.now())

    def __repr__(self) -> str:
        return f"<Employee id={self.id} name={self.name!r} title={self.title!r}>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "cpf": self.cpf,
            "title": self.title,
            "salary": str(self.salary) if self.salary is not None else None,
            "created_at": to_utc_z(self.created_at),
        }

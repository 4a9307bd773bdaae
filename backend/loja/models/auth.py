from __future__ import annotations

from ..extensions import db
from loja.time_utils import to_utc_z


class UserGroup(db.Model):
    """
    Account group; the group name is the access role of its users.

    Seeded groups: GERENCIA, FUNCIONARIO, CLIENTE (see permissions.categories.AccessRole).
    """
    __tablename__ = "grupos_usuarios"
    __table_args__ = {"sqlite_autoincrement": True}

    id = db.Column("IDGrupo", db.Integer, primary_key=True)
    name = db.Column("NomeGrupo", db.String(60), nullable=False, unique=True)
    description = db.Column("Descricao", db.String(255), nullable=True)

    def __repr__(self) -> str:
        return f"<UserGroup id={self.id} name={self.name!r}>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
        }


class User(db.Model):
    """
    Store account. Every operation runs on behalf of a user's group.

    WHY: replaces the fixed gerencia/funcionario/cliente database logins with
    rows that can be resolved into an explicit AccessContext.
    """
    __tablename__ = "usuarios"
    __table_args__ = {"sqlite_autoincrement": True}

    id = db.Column("IDUsuario", db.Integer, primary_key=True)
    name = db.Column("Nome", db.String(120), nullable=False)
    group_id = db.Column(
        "IDGrupo",
        db.Integer,
        db.ForeignKey("grupos_usuarios.IDGrupo", name="fk_usuario_grupo", onupdate="CASCADE", ondelete="RESTRICT"),
        nullable=False,
    )
    created_at = db.Column("CriadoEm", db.DateTime, server_default=db.func.now())

    group = db.relationship("UserGroup", backref=db.backref("users", lazy=True))

    def __repr__(self) -> str:
        return f"<User id={self.id} name={self.name!r} group_id={self.group_id}>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "group_id": self.group_id,
            "group": self.group.name if self.group else None,
            "created_at": to_utc_z(self.created_at),
        }

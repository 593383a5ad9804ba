"""create usuarios, telefones, enderecos and usuario_audit_logs

Revision ID: 0001_create_usuarios
Revises:
Create Date: 2026-10-19
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import JSONB


# revision identifiers
revision: str = "0001_create_usuarios"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "usuarios",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("nome", sa.String(150), nullable=False),
        sa.Column("login", sa.String(60), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("cpf", sa.String(11), nullable=False),
        sa.Column("senha", sa.Text, nullable=False),
        sa.Column("nome_imagem", sa.String(255), nullable=True),
        sa.Column("perfil", sa.String(20), nullable=False, server_default="USER"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True)),
    )
    op.create_index(op.f("ix_usuarios_nome"), "usuarios", ["nome"], unique=False)
    op.create_index(op.f("ix_usuarios_login"), "usuarios", ["login"], unique=True)
    op.create_index(op.f("ix_usuarios_email"), "usuarios", ["email"], unique=True)
    op.create_index(op.f("ix_usuarios_cpf"), "usuarios", ["cpf"], unique=True)

    op.create_table(
        "telefones",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("usuario_id", sa.Integer,
                  sa.ForeignKey("usuarios.id", ondelete="CASCADE"),
                  nullable=False, index=True),
        sa.Column("codigo_area", sa.String(2), nullable=False),
        sa.Column("numero", sa.String(9), nullable=False),
    )

    op.create_table(
        "enderecos",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("usuario_id", sa.Integer,
                  sa.ForeignKey("usuarios.id", ondelete="CASCADE"),
                  nullable=False, index=True),
        sa.Column("cep", sa.String(8), nullable=False),
        sa.Column("logradouro", sa.String(255), nullable=False),
        sa.Column("numero", sa.String(20), nullable=False),
        sa.Column("complemento", sa.String(255), nullable=True),
        sa.Column("bairro", sa.String(150), nullable=False),
        sa.Column("cidade", sa.String(150), nullable=False),
        sa.Column("estado", sa.String(2), nullable=False),
    )

    op.create_table(
        "usuario_audit_logs",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("usuario_id", sa.Integer, nullable=False, index=True),
        sa.Column("action", sa.String(50), nullable=False),
        sa.Column("changed_fields", JSONB, server_default="{}"),
        sa.Column("performed_at", sa.DateTime(timezone=True), server_default=sa.func.now(), index=True),
    )


def downgrade() -> None:
    op.drop_table("usuario_audit_logs")
    op.drop_table("enderecos")
    op.drop_table("telefones")
    op.drop_index(op.f("ix_usuarios_cpf"), table_name="usuarios")
    op.drop_index(op.f("ix_usuarios_email"), table_name="usuarios")
    op.drop_index(op.f("ix_usuarios_login"), table_name="usuarios")
    op.drop_index(op.f("ix_usuarios_nome"), table_name="usuarios")
    op.drop_table("usuarios")

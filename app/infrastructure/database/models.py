"""
Modelos SQLAlchemy — camada de Infraestrutura.

Tabelas:
  - usuarios            (dados cadastrais + nome da imagem de perfil)
  - telefones           (N telefones por usuário)
  - enderecos           (N endereços por usuário)
  - usuario_audit_logs  (log de modificações em usuarios)
"""

from __future__ import annotations

from sqlalchemy import (
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    func,
    JSON,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import relationship

from app.infrastructure.database.session import Base


# ────────────────────────────────────────────────────────────────
# USUARIOS
# ────────────────────────────────────────────────────────────────
class UsuarioModel(Base):
    __tablename__ = "usuarios"

    id = Column(Integer, primary_key=True, autoincrement=True)
    nome = Column(String(150), nullable=False, index=True)
    login = Column(String(60), unique=True, nullable=False, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    cpf = Column(String(11), unique=True, nullable=False, index=True)
    senha = Column(Text, nullable=False)
    nome_imagem = Column(String(255), nullable=True)
    perfil = Column(String(20), nullable=False, server_default="USER")
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    telefones = relationship(
        "TelefoneModel",
        back_populates="usuario",
        cascade="all, delete-orphan",
        order_by="TelefoneModel.id",
    )
    enderecos = relationship(
        "EnderecoModel",
        back_populates="usuario",
        cascade="all, delete-orphan",
        order_by="EnderecoModel.id",
    )


# ────────────────────────────────────────────────────────────────
# TELEFONES
# ────────────────────────────────────────────────────────────────
class TelefoneModel(Base):
    __tablename__ = "telefones"

    id = Column(Integer, primary_key=True, autoincrement=True)
    usuario_id = Column(Integer, ForeignKey("usuarios.id", ondelete="CASCADE"), nullable=False, index=True)
    codigo_area = Column(String(2), nullable=False)
    numero = Column(String(9), nullable=False)

    usuario = relationship("UsuarioModel", back_populates="telefones")


# ────────────────────────────────────────────────────────────────
# ENDERECOS
# ────────────────────────────────────────────────────────────────
class EnderecoModel(Base):
    __tablename__ = "enderecos"

    id = Column(Integer, primary_key=True, autoincrement=True)
    usuario_id = Column(Integer, ForeignKey("usuarios.id", ondelete="CASCADE"), nullable=False, index=True)
    cep = Column(String(8), nullable=False)
    logradouro = Column(String(255), nullable=False)
    numero = Column(String(20), nullable=False)
    complemento = Column(String(255), nullable=True)
    bairro = Column(String(150), nullable=False)
    cidade = Column(String(150), nullable=False)
    estado = Column(String(2), nullable=False)

    usuario = relationship("UsuarioModel", back_populates="enderecos")


# ────────────────────────────────────────────────────────────────
# AUDIT LOGS — Modificações de Usuário
# ────────────────────────────────────────────────────────────────
class UsuarioAuditLogModel(Base):
    __tablename__ = "usuario_audit_logs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    # Sem FK: o log sobrevive à remoção do usuário
    usuario_id = Column(Integer, nullable=False, index=True)
    action = Column(String(50), nullable=False)       # "created", "updated", "deleted", "password_changed"
    changed_fields = Column(JSON().with_variant(JSONB, "postgresql"), default=dict)
    performed_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)

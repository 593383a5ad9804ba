"""Entidade de domínio Usuario — com telefones, endereços e eventos de domínio."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from app.domain.events.base import AggregateRoot
from app.domain.events.usuario_events import (
    UsuarioCreated,
    UsuarioDeleted,
    UsuarioSenhaAlterada,
    UsuarioUpdated,
)


class Perfil(str, enum.Enum):
    ADMIN = "ADMIN"
    USER = "USER"


@dataclass
class Telefone:
    id: Optional[int] = None
    codigo_area: str = ""
    numero: str = ""


@dataclass
class Endereco:
    id: Optional[int] = None
    cep: str = ""
    logradouro: str = ""
    numero: str = ""
    complemento: Optional[str] = None
    bairro: str = ""
    cidade: str = ""
    estado: str = ""


@dataclass
class Usuario(AggregateRoot):
    id: Optional[int] = None
    nome: str = ""
    login: str = ""
    email: str = ""
    cpf: str = ""
    senha: str = ""  # sempre o hash, nunca a senha em texto
    nome_imagem: Optional[str] = None
    perfil: Perfil = Perfil.USER
    telefones: list[Telefone] = field(default_factory=list)
    enderecos: list[Endereco] = field(default_factory=list)
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: Optional[datetime] = None

    def __post_init__(self):
        AggregateRoot.__init__(self)

    # ── Regras de negócio ──

    def alterar_senha(self, nova_senha_hash: str) -> None:
        self.senha = nova_senha_hash
        self.updated_at = datetime.utcnow()
        self._record_event(UsuarioSenhaAlterada(usuario_id=self.id))

    def possui_telefone(self, telefone_id: int) -> bool:
        return any(t.id == telefone_id for t in self.telefones)

    def possui_endereco(self, endereco_id: int) -> bool:
        return any(e.id == endereco_id for e in self.enderecos)

    def record_creation(self) -> None:
        self._record_event(UsuarioCreated(
            usuario_id=self.id,
            login=self.login,
            email=self.email,
        ))

    def record_update(self, changed_fields: dict) -> None:
        self._record_event(UsuarioUpdated(
            usuario_id=self.id,
            changed_fields=changed_fields,
        ))

    def record_deletion(self) -> None:
        self._record_event(UsuarioDeleted(
            usuario_id=self.id,
            login=self.login,
        ))

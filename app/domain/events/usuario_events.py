"""Eventos de domínio relacionados a Usuários."""

from __future__ import annotations

from dataclasses import dataclass

from app.domain.events.base import DomainEvent


@dataclass(frozen=True)
class UsuarioCreated(DomainEvent):
    usuario_id: int = 0
    login: str = ""
    email: str = ""


@dataclass(frozen=True)
class UsuarioUpdated(DomainEvent):
    usuario_id: int = 0
    changed_fields: dict = None  # {"campo": {"old": ..., "new": ...}}

    def __post_init__(self):
        if self.changed_fields is None:
            object.__setattr__(self, "changed_fields", {})


@dataclass(frozen=True)
class UsuarioDeleted(DomainEvent):
    usuario_id: int = 0
    login: str = ""


@dataclass(frozen=True)
class UsuarioSenhaAlterada(DomainEvent):
    usuario_id: int = 0

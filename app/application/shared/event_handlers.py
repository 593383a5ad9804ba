"""
Event Handlers — gravam audit logs no banco a partir de eventos de domínio.

Registrados na inicialização da app (app/main.py).
"""

from __future__ import annotations

import logging

from app.domain.events.usuario_events import (
    UsuarioCreated,
    UsuarioDeleted,
    UsuarioSenhaAlterada,
    UsuarioUpdated,
)
from app.infrastructure.database.models import UsuarioAuditLogModel
from app.infrastructure.database.session import AsyncSessionLocal

logger = logging.getLogger(__name__)


async def _write_audit_log(usuario_id: int, action: str, changed_fields: dict) -> None:
    """Sessão independente da request: o log é gravado após o commit principal."""
    async with AsyncSessionLocal() as session:
        session.add(UsuarioAuditLogModel(
            usuario_id=usuario_id,
            action=action,
            changed_fields=changed_fields,
        ))
        await session.commit()


async def handle_usuario_created(event: UsuarioCreated) -> None:
    await _write_audit_log(event.usuario_id, "created", {"login": event.login, "email": event.email})
    logger.info("Audit: Usuário %d criado", event.usuario_id)


async def handle_usuario_updated(event: UsuarioUpdated) -> None:
    await _write_audit_log(event.usuario_id, "updated", event.changed_fields)
    logger.info("Audit: Usuário %d atualizado (%s)", event.usuario_id, ", ".join(event.changed_fields))


async def handle_usuario_deleted(event: UsuarioDeleted) -> None:
    await _write_audit_log(event.usuario_id, "deleted", {"login": event.login})
    logger.info("Audit: Usuário %d removido", event.usuario_id)


async def handle_usuario_senha_alterada(event: UsuarioSenhaAlterada) -> None:
    await _write_audit_log(event.usuario_id, "password_changed", {})
    logger.info("Audit: Senha do usuário %d alterada", event.usuario_id)


def register_all_handlers() -> None:
    """Registra todos os handlers de audit log no dispatcher."""
    from app.application.shared.event_dispatcher import register_handler

    register_handler(UsuarioCreated, handle_usuario_created)
    register_handler(UsuarioUpdated, handle_usuario_updated)
    register_handler(UsuarioDeleted, handle_usuario_deleted)
    register_handler(UsuarioSenhaAlterada, handle_usuario_senha_alterada)

    logger.info("Audit log event handlers registered")

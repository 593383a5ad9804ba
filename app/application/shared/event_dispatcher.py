"""
Dispatcher de eventos de domínio.

O UnitOfWork entrega aqui os eventos coletados dos aggregates após o commit.
Falha de um handler é logada e não interrompe os demais nem a request.
"""

from __future__ import annotations

import inspect
import logging
from typing import Callable, Type

from app.domain.events.base import DomainEvent

logger = logging.getLogger(__name__)

# Registry: tipo de evento → handlers
_handlers: dict[Type[DomainEvent], list[Callable]] = {}


def register_handler(event_type: Type[DomainEvent], handler: Callable) -> None:
    """Registra um handler; registrar o mesmo handler duas vezes não duplica."""
    handlers = _handlers.setdefault(event_type, [])
    if handler not in handlers:
        handlers.append(handler)


async def dispatch_events(events: list[DomainEvent]) -> None:
    for event in events:
        for handler in _handlers.get(type(event), []):
            try:
                result = handler(event)
                if inspect.isawaitable(result):
                    await result
            except Exception as exc:
                logger.error(
                    "Erro ao despachar evento %s (%s) para %s: %s",
                    event.event_type,
                    event.event_id,
                    handler.__name__,
                    exc,
                )


def clear_handlers() -> None:
    """Limpa todos os handlers (útil em testes)."""
    _handlers.clear()

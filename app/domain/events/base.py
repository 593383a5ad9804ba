"""
Base dos eventos de domínio.

O aggregate (Usuario) acumula eventos enquanto é alterado; o UnitOfWork
os recolhe e só os despacha depois do commit.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone


def _novo_id() -> str:
    return uuid.uuid4().hex


def _agora() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class DomainEvent:
    """Evento imutável; identificado por event_id e datado em UTC."""
    event_id: str = field(default_factory=_novo_id)
    occurred_at: datetime = field(default_factory=_agora)

    @property
    def event_type(self) -> str:
        return type(self).__name__


class AggregateRoot:
    """Mixin que guarda eventos pendentes até a camada de aplicação recolhê-los."""

    def __init__(self) -> None:
        self._events: list[DomainEvent] = []

    @property
    def pending_events(self) -> tuple[DomainEvent, ...]:
        return tuple(self._events)

    def _record_event(self, event: DomainEvent) -> None:
        self._events.append(event)

    def collect_events(self) -> list[DomainEvent]:
        """Entrega e esvazia a fila de eventos."""
        events, self._events = self._events, []
        return events

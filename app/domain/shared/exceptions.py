"""
Exceções de domínio — lançadas pelos serviços sem conhecer HTTP.

A camada de apresentação traduz cada uma para um status code
(ver app/presentation/middleware/exception_handlers.py).
"""

from __future__ import annotations

from dataclasses import dataclass


class NotFoundError(Exception):
    """Recurso não encontrado."""
    def __init__(self, resource: str = "Recurso", resource_id: int | str = ""):
        self.resource = resource
        self.resource_id = resource_id
        label = f"{resource} {resource_id}" if resource_id != "" else resource
        super().__init__(f"{label} não encontrado")


@dataclass(frozen=True)
class Violation:
    field: str
    message: str

    def __str__(self) -> str:
        return f"{self.field}: {self.message}"


class ConstraintViolationError(Exception):
    """Uma ou mais regras de validação violadas."""
    def __init__(self, violations: list[Violation]):
        self.violations = list(violations)
        super().__init__("; ".join(str(v) for v in self.violations))

    def messages(self) -> list[str]:
        return [str(v) for v in self.violations]

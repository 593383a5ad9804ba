"""Value Objects do domínio — imutáveis, comparados por valor."""

from __future__ import annotations

import re
from dataclasses import dataclass

_NAO_DIGITO = re.compile(r"\D")


def somente_digitos(valor: str) -> str:
    return _NAO_DIGITO.sub("", valor or "")


@dataclass(frozen=True)
class Email:
    """Value object para email validado."""
    address: str

    def __post_init__(self):
        if not self.address or "@" not in self.address:
            raise ValueError(f"Email inválido: {self.address}")


@dataclass(frozen=True)
class Cpf:
    """
    CPF com 11 dígitos e dígitos verificadores conferidos.
    Aceita máscara (000.000.000-00); `numero` guarda só os dígitos.
    """
    numero: str

    def __post_init__(self):
        digitos = somente_digitos(self.numero)
        if len(digitos) != 11 or digitos == digitos[0] * 11:
            raise ValueError(f"CPF inválido: {self.numero}")
        for tamanho in (9, 10):
            soma = sum(int(d) * peso for d, peso in zip(digitos[:tamanho], range(tamanho + 1, 1, -1)))
            verificador = (soma * 10) % 11 % 10
            if verificador != int(digitos[tamanho]):
                raise ValueError(f"CPF inválido: {self.numero}")
        object.__setattr__(self, "numero", digitos)

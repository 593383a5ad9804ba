"""DTOs da camada de aplicação para Usuários — commands e results."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional


# ════════════════════════════════════════════════════════════════
# COMMANDS (escrita)
# ════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class TelefoneData:
    codigo_area: str
    numero: str


@dataclass(frozen=True)
class EnderecoData:
    cep: str
    logradouro: str
    numero: str
    bairro: str
    cidade: str
    estado: str
    complemento: Optional[str] = None


@dataclass(frozen=True)
class InsertUsuarioCommand:
    nome: str
    login: str
    email: str
    cpf: str
    senha: str
    telefones: tuple[TelefoneData, ...] = ()
    enderecos: tuple[EnderecoData, ...] = ()


@dataclass(frozen=True)
class UpdateUsuarioCommand:
    """None em senha/telefones/enderecos mantém o valor atual."""
    nome: str
    login: str
    email: str
    cpf: str
    senha: Optional[str] = None
    telefones: Optional[tuple[TelefoneData, ...]] = None
    enderecos: Optional[tuple[EnderecoData, ...]] = None


# ════════════════════════════════════════════════════════════════
# RESULT DTOs
# ════════════════════════════════════════════════════════════════

@dataclass
class TelefoneResult:
    id: int
    codigo_area: str
    numero: str


@dataclass
class EnderecoResult:
    id: int
    cep: str
    logradouro: str
    numero: str
    complemento: Optional[str]
    bairro: str
    cidade: str
    estado: str


@dataclass
class UsuarioResult:
    id: int
    nome: str
    login: str
    email: str
    cpf: str
    perfil: str
    nome_imagem: Optional[str] = None
    telefones: list[TelefoneResult] = field(default_factory=list)
    enderecos: list[EnderecoResult] = field(default_factory=list)
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

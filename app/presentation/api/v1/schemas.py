"""
Schemas Pydantic — camada de Apresentação.

Inclui: DTOs de request/response de usuários, telefones e endereços,
requests de senha e error model para OpenAPI.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator

from app.domain.shared.value_objects import Cpf, Email, somente_digitos


# ════════════════════════════════════════════════════════════════
# ERROR MODEL (para Swagger docs)
# ════════════════════════════════════════════════════════════════
class ErrorResponse(BaseModel):
    error: str = Field(..., examples=["not_found"])
    detail: Any = Field(..., examples=["Usuário 5 não encontrado"])
    request_id: Optional[str] = None

    model_config = {"json_schema_extra": {"example": {"error": "not_found", "detail": "Usuário 5 não encontrado", "request_id": "a1b2c3d4"}}}


# ════════════════════════════════════════════════════════════════
# TELEFONES / ENDEREÇOS
# ════════════════════════════════════════════════════════════════
class TelefoneIn(BaseModel):
    codigo_area: str = Field(..., pattern=r"^\d{2}$", examples=["63"])
    numero: str = Field(..., pattern=r"^\d{8,9}$", examples=["984561234"])

    @field_validator("codigo_area", "numero", mode="before")
    @classmethod
    def _digits(cls, v):
        return somente_digitos(v) if isinstance(v, str) else v


class TelefoneOut(BaseModel):
    id: int
    codigo_area: str
    numero: str

    model_config = {"from_attributes": True}


class EnderecoIn(BaseModel):
    cep: str = Field(..., pattern=r"^\d{8}$", examples=["77001002"])
    logradouro: str = Field(..., min_length=1, max_length=255)
    numero: str = Field(..., min_length=1, max_length=20)
    complemento: Optional[str] = Field(None, max_length=255)
    bairro: str = Field(..., min_length=1, max_length=150)
    cidade: str = Field(..., min_length=1, max_length=150)
    estado: str = Field(..., pattern=r"^[A-Z]{2}$", examples=["TO"])

    @field_validator("cep", mode="before")
    @classmethod
    def _cep_digits(cls, v):
        return somente_digitos(v) if isinstance(v, str) else v

    @field_validator("estado", mode="before")
    @classmethod
    def _uf_upper(cls, v):
        return v.strip().upper() if isinstance(v, str) else v


class EnderecoOut(BaseModel):
    id: int
    cep: str
    logradouro: str
    numero: str
    complemento: Optional[str] = None
    bairro: str
    cidade: str
    estado: str

    model_config = {"from_attributes": True}


# ════════════════════════════════════════════════════════════════
# USUARIOS
# ════════════════════════════════════════════════════════════════
class _UsuarioBase(BaseModel):
    nome: str = Field(..., min_length=1, max_length=150, examples=["Maria Souza"])
    login: str = Field(..., min_length=3, max_length=60, examples=["maria.souza"])
    email: str = Field(..., max_length=255, examples=["maria@empresa.com"])
    cpf: str = Field(..., examples=["529.982.247-25"])

    @field_validator("email")
    @classmethod
    def _email(cls, v: str) -> str:
        return Email(v).address

    @field_validator("cpf")
    @classmethod
    def _cpf(cls, v: str) -> str:
        return Cpf(v).numero


class UsuarioCreate(_UsuarioBase):
    senha: str = Field(..., min_length=6, examples=["senhaForte123"])
    telefones: list[TelefoneIn] = Field(default_factory=list)
    enderecos: list[EnderecoIn] = Field(default_factory=list)

    model_config = {"json_schema_extra": {"example": {
        "nome": "Maria Souza", "login": "maria.souza", "email": "maria@empresa.com",
        "cpf": "52998224725", "senha": "senhaForte123",
        "telefones": [{"codigo_area": "63", "numero": "984561234"}],
    }}}


class UsuarioUpdate(_UsuarioBase):
    """PUT: senha/telefones/enderecos ausentes mantêm os valores atuais."""
    senha: Optional[str] = Field(None, min_length=6)
    telefones: Optional[list[TelefoneIn]] = None
    enderecos: Optional[list[EnderecoIn]] = None


class UsuarioOut(BaseModel):
    id: int
    nome: str
    login: str
    email: str
    cpf: str
    perfil: str
    nome_imagem: Optional[str] = None
    telefones: list[TelefoneOut] = []
    enderecos: list[EnderecoOut] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


# ════════════════════════════════════════════════════════════════
# SENHA
# ════════════════════════════════════════════════════════════════
class ChangePasswordRequest(BaseModel):
    """Campos opcionais no parse: a ausência vira 400 no endpoint, antes do serviço."""
    current_password: Optional[str] = Field(None, alias="currentPassword")
    new_password: Optional[str] = Field(None, alias="newPassword")

    model_config = {"populate_by_name": True}


class ValidarSenhaRequest(BaseModel):
    """Valores crus: o endpoint converte o id e responde 400 se não for inteiro."""
    id: Any = None
    senha: Any = None


class ValidarSenhaOut(BaseModel):
    valido: bool

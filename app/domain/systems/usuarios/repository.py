"""Interface (porta) do repositório de Usuários — camada de domínio."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional, Sequence

from .entity import Endereco, Telefone, Usuario


class IUsuarioRepository(ABC):

    @abstractmethod
    async def get_by_id(self, usuario_id: int) -> Optional[Usuario]:
        ...

    @abstractmethod
    async def find_by_login(self, login: str) -> Optional[Usuario]:
        ...

    @abstractmethod
    async def find_by_email(self, email: str) -> Optional[Usuario]:
        ...

    @abstractmethod
    async def find_by_cpf(self, cpf: str) -> Optional[Usuario]:
        ...

    @abstractmethod
    async def find_by_nome(self, nome: str) -> Sequence[Usuario]:
        ...

    @abstractmethod
    async def list_paginated(self, skip: int = 0, limit: int = 8) -> Sequence[Usuario]:
        ...

    @abstractmethod
    async def count(self) -> int:
        ...

    @abstractmethod
    async def create(self, usuario: Usuario) -> Usuario:
        ...

    @abstractmethod
    async def update(self, usuario: Usuario) -> Usuario:
        ...

    @abstractmethod
    async def delete(self, usuario_id: int) -> None:
        ...

    @abstractmethod
    async def add_telefone(self, usuario_id: int, telefone: Telefone) -> Usuario:
        ...

    @abstractmethod
    async def remove_telefone(self, usuario_id: int, telefone_id: int) -> Usuario:
        ...

    @abstractmethod
    async def add_endereco(self, usuario_id: int, endereco: Endereco) -> Usuario:
        ...

    @abstractmethod
    async def remove_endereco(self, usuario_id: int, endereco_id: int) -> Usuario:
        ...

    @abstractmethod
    async def update_nome_imagem(self, usuario_id: int, nome_imagem: str) -> Optional[Usuario]:
        ...

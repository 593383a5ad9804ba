"""
Serviço de Usuários — camada de Aplicação.

Orquestra entidade, repositório e unit of work. Cada operação de escrita
roda dentro de `async with self._uow` (commit no sucesso, rollback no erro);
o controller apenas delega.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional

from app.domain.shared.exceptions import ConstraintViolationError, NotFoundError, Violation
from app.domain.shared.value_objects import somente_digitos
from app.domain.systems.usuarios.entity import Endereco, Telefone, Usuario
from app.domain.systems.usuarios.repository import IUsuarioRepository
from app.application.dtos.usuario_dtos import (
    EnderecoData,
    EnderecoResult,
    InsertUsuarioCommand,
    TelefoneData,
    TelefoneResult,
    UpdateUsuarioCommand,
    UsuarioResult,
)
from app.application.shared.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)

MIN_SENHA = 6


def _to_result(usuario: Usuario) -> UsuarioResult:
    return UsuarioResult(
        id=usuario.id,
        nome=usuario.nome,
        login=usuario.login,
        email=usuario.email,
        cpf=usuario.cpf,
        perfil=usuario.perfil.value,
        nome_imagem=usuario.nome_imagem,
        telefones=[TelefoneResult(id=t.id, codigo_area=t.codigo_area, numero=t.numero) for t in usuario.telefones],
        enderecos=[
            EnderecoResult(
                id=e.id, cep=e.cep, logradouro=e.logradouro, numero=e.numero,
                complemento=e.complemento, bairro=e.bairro, cidade=e.cidade, estado=e.estado,
            )
            for e in usuario.enderecos
        ],
        created_at=usuario.created_at.isoformat() if usuario.created_at else None,
        updated_at=usuario.updated_at.isoformat() if usuario.updated_at else None,
    )


def _telefone(data: TelefoneData) -> Telefone:
    return Telefone(codigo_area=data.codigo_area, numero=data.numero)


def _endereco(data: EnderecoData) -> Endereco:
    return Endereco(
        cep=data.cep, logradouro=data.logradouro, numero=data.numero,
        complemento=data.complemento, bairro=data.bairro, cidade=data.cidade,
        estado=data.estado,
    )


class UsuarioService:
    def __init__(
        self,
        repo: IUsuarioRepository,
        uow: UnitOfWork,
        hash_fn: Callable[[str], str],
        verify_fn: Callable[[str, str], bool],
    ) -> None:
        self._repo = repo
        self._uow = uow
        self._hash_fn = hash_fn
        self._verify_fn = verify_fn

    # ── Helpers ──

    async def _get_or_404(self, usuario_id: int) -> Usuario:
        usuario = await self._repo.get_by_id(usuario_id)
        if not usuario:
            raise NotFoundError("Usuário", usuario_id)
        return usuario

    async def _ensure_unique(self, login: str, email: str, cpf: str, ignore_id: Optional[int] = None) -> None:
        """Login, email e CPF não podem pertencer a outro usuário."""
        checks = (
            ("login", self._repo.find_by_login, login, "Login já cadastrado"),
            ("email", self._repo.find_by_email, email, "Email já cadastrado"),
            ("cpf", self._repo.find_by_cpf, cpf, "CPF já cadastrado"),
        )
        violations = []
        for field_name, lookup, value, message in checks:
            existing = await lookup(value)
            if existing and existing.id != ignore_id:
                violations.append(Violation(field_name, message))
        if violations:
            raise ConstraintViolationError(violations)

    # ── CRUD ──

    async def insert(self, cmd: InsertUsuarioCommand) -> UsuarioResult:
        cpf = somente_digitos(cmd.cpf)
        async with self._uow:
            await self._ensure_unique(cmd.login, cmd.email, cpf)
            usuario = Usuario(
                nome=cmd.nome,
                login=cmd.login,
                email=cmd.email,
                cpf=cpf,
                senha=self._hash_fn(cmd.senha),
                telefones=[_telefone(t) for t in cmd.telefones],
                enderecos=[_endereco(e) for e in cmd.enderecos],
            )
            created = await self._repo.create(usuario)
            created.record_creation()
            self._uow.collect_events_from(created)
        return _to_result(created)

    async def update(self, cmd: UpdateUsuarioCommand, usuario_id: int) -> UsuarioResult:
        cpf = somente_digitos(cmd.cpf)
        async with self._uow:
            usuario = await self._get_or_404(usuario_id)
            await self._ensure_unique(cmd.login, cmd.email, cpf, ignore_id=usuario_id)

            changed: dict = {}
            for name, value in (("nome", cmd.nome), ("login", cmd.login), ("email", cmd.email), ("cpf", cpf)):
                old = getattr(usuario, name)
                if value != old:
                    changed[name] = {"old": old, "new": value}
                    setattr(usuario, name, value)

            if cmd.senha is not None:
                usuario.senha = self._hash_fn(cmd.senha)
                changed["senha"] = {"old": "***", "new": "***"}

            if cmd.telefones is not None:
                usuario.telefones = [_telefone(t) for t in cmd.telefones]
                changed["telefones"] = {"new": len(usuario.telefones)}

            if cmd.enderecos is not None:
                usuario.enderecos = [_endereco(e) for e in cmd.enderecos]
                changed["enderecos"] = {"new": len(usuario.enderecos)}

            if changed:
                usuario.record_update(changed)

            updated = await self._repo.update(usuario)
            self._uow.collect_events_from(usuario)
        return _to_result(updated)

    async def delete(self, usuario_id: int) -> None:
        async with self._uow:
            usuario = await self._get_or_404(usuario_id)
            usuario.record_deletion()
            self._uow.collect_events_from(usuario)
            await self._repo.delete(usuario_id)

    # ── Consultas ──

    async def find_all(self, page: int = 0, page_size: int = 8) -> list[UsuarioResult]:
        if page < 0 or page_size < 1:
            raise ValueError("Paginação inválida")
        usuarios = await self._repo.list_paginated(skip=page * page_size, limit=page_size)
        return [_to_result(u) for u in usuarios]

    async def find_by_id(self, usuario_id: int) -> UsuarioResult:
        return _to_result(await self._get_or_404(usuario_id))

    async def find_by_nome(self, nome: str) -> list[UsuarioResult]:
        return [_to_result(u) for u in await self._repo.find_by_nome(nome)]

    async def count(self) -> int:
        return await self._repo.count()

    # ── Senha ──

    async def change_password(self, usuario_id: int, senha_atual: str, nova_senha: str) -> None:
        async with self._uow:
            usuario = await self._get_or_404(usuario_id)
            if not self._verify_fn(senha_atual, usuario.senha):
                raise ValueError("Senha atual incorreta")
            if len(nova_senha) < MIN_SENHA:
                raise ValueError(f"A nova senha deve ter ao menos {MIN_SENHA} caracteres")
            usuario.alterar_senha(self._hash_fn(nova_senha))
            await self._repo.update(usuario)
            self._uow.collect_events_from(usuario)

    async def validar_senha(self, usuario_id: int, senha: str) -> bool:
        usuario = await self._get_or_404(usuario_id)
        return self._verify_fn(senha, usuario.senha)

    # ── Telefones / Endereços ──

    async def add_telefone(self, usuario_id: int, telefone: TelefoneData) -> UsuarioResult:
        async with self._uow:
            await self._get_or_404(usuario_id)
            usuario = await self._repo.add_telefone(usuario_id, _telefone(telefone))
        return _to_result(usuario)

    async def remove_telefone(self, usuario_id: int, telefone_id: int) -> UsuarioResult:
        async with self._uow:
            usuario = await self._get_or_404(usuario_id)
            if not usuario.possui_telefone(telefone_id):
                raise NotFoundError("Telefone", telefone_id)
            usuario = await self._repo.remove_telefone(usuario_id, telefone_id)
        return _to_result(usuario)

    async def add_endereco(self, usuario_id: int, endereco: EnderecoData) -> UsuarioResult:
        async with self._uow:
            await self._get_or_404(usuario_id)
            usuario = await self._repo.add_endereco(usuario_id, _endereco(endereco))
        return _to_result(usuario)

    async def remove_endereco(self, usuario_id: int, endereco_id: int) -> UsuarioResult:
        async with self._uow:
            usuario = await self._get_or_404(usuario_id)
            if not usuario.possui_endereco(endereco_id):
                raise NotFoundError("Endereço", endereco_id)
            usuario = await self._repo.remove_endereco(usuario_id, endereco_id)
        return _to_result(usuario)

    # ── Imagem ──

    async def update_nome_imagem(self, usuario_id: int, nome_imagem: str) -> Optional[UsuarioResult]:
        """None quando o usuário não existe."""
        async with self._uow:
            usuario = await self._repo.update_nome_imagem(usuario_id, nome_imagem)
        if usuario is None:
            return None
        logger.debug("Imagem %s associada ao usuário %d", nome_imagem, usuario_id)
        return _to_result(usuario)

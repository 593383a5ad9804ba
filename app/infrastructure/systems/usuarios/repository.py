"""Implementação concreta do repositório de Usuários — SQLAlchemy."""

from __future__ import annotations

from typing import Optional, Sequence

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.domain.shared.value_objects import somente_digitos
from app.domain.systems.usuarios.entity import Endereco, Perfil, Telefone, Usuario
from app.domain.systems.usuarios.repository import IUsuarioRepository
from app.infrastructure.database.models import EnderecoModel, TelefoneModel, UsuarioModel

_ENDERECO_FIELDS = ("cep", "logradouro", "numero", "complemento", "bairro", "cidade", "estado")
_TELEFONE_FIELDS = ("codigo_area", "numero")


class UsuarioRepository(IUsuarioRepository):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    # ── Helpers de mapeamento ──
    @staticmethod
    def _telefone_to_entity(model: TelefoneModel) -> Telefone:
        return Telefone(id=model.id, codigo_area=model.codigo_area, numero=model.numero)

    @staticmethod
    def _endereco_to_entity(model: EnderecoModel) -> Endereco:
        return Endereco(id=model.id, **{f: getattr(model, f) for f in _ENDERECO_FIELDS})

    @staticmethod
    def _to_entity(model: UsuarioModel) -> Usuario:
        return Usuario(
            id=model.id,
            nome=model.nome,
            login=model.login,
            email=model.email,
            cpf=model.cpf,
            senha=model.senha,
            nome_imagem=model.nome_imagem,
            perfil=Perfil(model.perfil),
            telefones=[UsuarioRepository._telefone_to_entity(t) for t in model.telefones],
            enderecos=[UsuarioRepository._endereco_to_entity(e) for e in model.enderecos],
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    @staticmethod
    def _to_model(entity: Usuario) -> UsuarioModel:
        return UsuarioModel(
            id=entity.id,
            nome=entity.nome,
            login=entity.login,
            email=entity.email,
            cpf=entity.cpf,
            senha=entity.senha,
            nome_imagem=entity.nome_imagem,
            perfil=entity.perfil.value,
            telefones=[
                TelefoneModel(**{f: getattr(t, f) for f in _TELEFONE_FIELDS})
                for t in entity.telefones
            ],
            enderecos=[
                EnderecoModel(**{f: getattr(e, f) for f in _ENDERECO_FIELDS})
                for e in entity.enderecos
            ],
        )

    @staticmethod
    def _sync_children(current: list, wanted: list, model_cls, fields: tuple[str, ...]) -> list:
        """Reaproveita filhos pelo id, cria os novos; os ausentes viram órfãos."""
        by_id = {c.id: c for c in current}
        result = []
        for item in wanted:
            model = by_id.get(item.id) if item.id is not None else None
            if model is None:
                model = model_cls()
            for f in fields:
                setattr(model, f, getattr(item, f))
            result.append(model)
        return result

    def _select(self):
        return select(UsuarioModel).options(
            selectinload(UsuarioModel.telefones),
            selectinload(UsuarioModel.enderecos),
        )

    async def _load(self, usuario_id: int) -> Optional[UsuarioModel]:
        # populate_existing: recarrega colunas com default no servidor e coleções
        stmt = (
            self._select()
            .where(UsuarioModel.id == usuario_id)
            .execution_options(populate_existing=True)
        )
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def _find_one(self, *criteria) -> Optional[Usuario]:
        result = await self._session.execute(self._select().where(*criteria))
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    # ── Interface ──
    async def get_by_id(self, usuario_id: int) -> Optional[Usuario]:
        model = await self._load(usuario_id)
        return self._to_entity(model) if model else None

    async def find_by_login(self, login: str) -> Optional[Usuario]:
        return await self._find_one(UsuarioModel.login == login)

    async def find_by_email(self, email: str) -> Optional[Usuario]:
        return await self._find_one(UsuarioModel.email == email)

    async def find_by_cpf(self, cpf: str) -> Optional[Usuario]:
        return await self._find_one(UsuarioModel.cpf == somente_digitos(cpf))

    async def find_by_nome(self, nome: str) -> Sequence[Usuario]:
        termo = nome.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
        stmt = self._select().where(UsuarioModel.nome.ilike(f"%{termo}%", escape="\\")).order_by(UsuarioModel.id)
        result = await self._session.execute(stmt)
        return [self._to_entity(m) for m in result.scalars().all()]

    async def list_paginated(self, skip: int = 0, limit: int = 8) -> Sequence[Usuario]:
        stmt = self._select().offset(skip).limit(limit).order_by(UsuarioModel.id)
        result = await self._session.execute(stmt)
        return [self._to_entity(m) for m in result.scalars().all()]

    async def count(self) -> int:
        result = await self._session.execute(select(func.count(UsuarioModel.id)))
        return result.scalar_one()

    async def create(self, usuario: Usuario) -> Usuario:
        model = self._to_model(usuario)
        self._session.add(model)
        await self._session.flush()
        return self._to_entity(await self._load(model.id))

    async def update(self, usuario: Usuario) -> Usuario:
        model = await self._load(usuario.id)
        if not model:
            raise ValueError(f"Usuário {usuario.id} não encontrado")
        model.nome = usuario.nome
        model.login = usuario.login
        model.email = usuario.email
        model.cpf = usuario.cpf
        model.senha = usuario.senha
        model.nome_imagem = usuario.nome_imagem
        model.perfil = usuario.perfil.value
        model.telefones = self._sync_children(
            model.telefones, usuario.telefones, TelefoneModel, _TELEFONE_FIELDS
        )
        model.enderecos = self._sync_children(
            model.enderecos, usuario.enderecos, EnderecoModel, _ENDERECO_FIELDS
        )
        await self._session.flush()
        return self._to_entity(await self._load(usuario.id))

    async def delete(self, usuario_id: int) -> None:
        # Coleções carregadas para o cascade não disparar lazy load
        model = await self._load(usuario_id)
        if model:
            await self._session.delete(model)
            await self._session.flush()

    # ── Sub-recursos ──
    async def add_telefone(self, usuario_id: int, telefone: Telefone) -> Usuario:
        self._session.add(TelefoneModel(
            usuario_id=usuario_id,
            **{f: getattr(telefone, f) for f in _TELEFONE_FIELDS},
        ))
        await self._session.flush()
        return self._to_entity(await self._load(usuario_id))

    async def remove_telefone(self, usuario_id: int, telefone_id: int) -> Usuario:
        model = await self._session.get(TelefoneModel, telefone_id)
        if model and model.usuario_id == usuario_id:
            await self._session.delete(model)
            await self._session.flush()
        return self._to_entity(await self._load(usuario_id))

    async def add_endereco(self, usuario_id: int, endereco: Endereco) -> Usuario:
        self._session.add(EnderecoModel(
            usuario_id=usuario_id,
            **{f: getattr(endereco, f) for f in _ENDERECO_FIELDS},
        ))
        await self._session.flush()
        return self._to_entity(await self._load(usuario_id))

    async def remove_endereco(self, usuario_id: int, endereco_id: int) -> Usuario:
        model = await self._session.get(EnderecoModel, endereco_id)
        if model and model.usuario_id == usuario_id:
            await self._session.delete(model)
            await self._session.flush()
        return self._to_entity(await self._load(usuario_id))

    async def update_nome_imagem(self, usuario_id: int, nome_imagem: str) -> Optional[Usuario]:
        model = await self._session.get(UsuarioModel, usuario_id)
        if not model:
            return None
        model.nome_imagem = nome_imagem
        await self._session.flush()
        return self._to_entity(await self._load(usuario_id))

"""
Dependências e factories de DI.

Hash de senha (passlib/bcrypt), unit of work, repositório,
serviço de usuários e armazenamento de imagens.
"""

from __future__ import annotations

from fastapi import Depends
from passlib.context import CryptContext
from sqlalchemy.ext.asyncio import AsyncSession

from app.infrastructure.database import get_db
from app.infrastructure.services.file_storage import UsuarioFileService
from app.infrastructure.systems.usuarios.repository import UsuarioRepository
from app.application.shared.unit_of_work import UnitOfWork
from app.application.systems.usuarios.service import UsuarioService

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


# ════════════════════════════════════════════════════════════════
# PASSWORD
# ════════════════════════════════════════════════════════════════

def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain: str, hashed: str) -> bool:
    return pwd_context.verify(plain, hashed)


# ════════════════════════════════════════════════════════════════
# DI FACTORIES — Repositório, UoW e serviços
# ════════════════════════════════════════════════════════════════

def get_uow(db: AsyncSession = Depends(get_db)) -> UnitOfWork:
    return UnitOfWork(db)


def get_usuario_repo(db: AsyncSession = Depends(get_db)) -> UsuarioRepository:
    return UsuarioRepository(db)


def get_usuario_service(
    repo: UsuarioRepository = Depends(get_usuario_repo),
    uow: UnitOfWork = Depends(get_uow),
) -> UsuarioService:
    return UsuarioService(repo, uow, hash_password, verify_password)


def get_file_service() -> UsuarioFileService:
    return UsuarioFileService()

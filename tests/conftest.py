"""
Fixtures de teste — client HTTP + banco SQLite em memória.

Usa SQLite async para testes rápidos sem Docker. Imagens vão para um
diretório temporário por teste.
"""

from typing import AsyncGenerator
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app.infrastructure.database.session import Base, get_db
from app.infrastructure.services.file_storage import UsuarioFileService
from app.application.systems.usuarios.service import UsuarioService
from app.main import app
from app.presentation.api.v1.deps import get_file_service, get_usuario_service

# ── SQLite async para testes ──
TEST_DATABASE_URL = "sqlite+aiosqlite:///./test.db"

test_engine = create_async_engine(TEST_DATABASE_URL, echo=False)
TestSessionLocal = async_sessionmaker(bind=test_engine, class_=AsyncSession, expire_on_commit=False)

BASE_URL = "/api/v1/users"

# PNG mínimo: assinatura + cabeçalho IHDR
PNG_BYTES = b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR\x00\x00\x00\x01\x00\x00\x00\x01\x08\x06\x00\x00\x00"


async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
    async with TestSessionLocal() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


# Override dependency
app.dependency_overrides[get_db] = override_get_db


@pytest_asyncio.fixture(autouse=True)
async def setup_db():
    """Cria/destrói tabelas antes/depois de cada teste."""
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture(autouse=True)
def upload_dir(tmp_path):
    """Imagens gravadas em diretório temporário."""
    app.dependency_overrides[get_file_service] = lambda: UsuarioFileService(tmp_path)
    yield tmp_path / "usuarios"
    app.dependency_overrides.pop(get_file_service, None)


@pytest_asyncio.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.fixture
def mock_service():
    """Substitui o UsuarioService por um AsyncMock (só o controller é exercitado)."""
    service = AsyncMock(spec=UsuarioService)
    app.dependency_overrides[get_usuario_service] = lambda: service
    yield service
    app.dependency_overrides.pop(get_usuario_service, None)


def usuario_payload(**overrides) -> dict:
    payload = {
        "nome": "Maria Souza",
        "login": "maria.souza",
        "email": "maria@test.com",
        "cpf": "529.982.247-25",
        "senha": "senha123",
    }
    payload.update(overrides)
    return payload


async def criar_usuario(client: AsyncClient, **overrides) -> dict:
    resp = await client.post(f"{BASE_URL}/", json=usuario_payload(**overrides))
    assert resp.status_code == 201, resp.text
    return resp.json()

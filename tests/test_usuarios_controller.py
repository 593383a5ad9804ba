"""
Testes do mapeamento de erros do controller, com o serviço mockado.

Cobre os ramos que dependem do colaborador falhar de formas que o
banco de teste não reproduz (erros inesperados, update_nome_imagem → None).
"""

import pytest
from httpx import AsyncClient

from app.application.dtos.usuario_dtos import TelefoneResult, UsuarioResult
from app.domain.shared.exceptions import ConstraintViolationError, NotFoundError, Violation
from app.infrastructure.config import get_settings
from tests.conftest import BASE_URL, PNG_BYTES, usuario_payload


def _result(**overrides) -> UsuarioResult:
    data = dict(id=5, nome="Maria Souza", login="maria.souza", email="maria@test.com",
                cpf="52998224725", perfil="USER")
    data.update(overrides)
    return UsuarioResult(**data)


@pytest.mark.asyncio
async def test_upload_update_returns_none(client: AsyncClient, mock_service):
    mock_service.update_nome_imagem.return_value = None

    resp = await client.patch(
        f"{BASE_URL}/5/upload/imagem",
        files={"imagem": ("perfil.png", PNG_BYTES, "image/png")},
    )

    assert resp.status_code == 404
    assert resp.json()["detail"] == "Imagem não encontrada"
    mock_service.update_nome_imagem.assert_awaited_once()
    assert mock_service.update_nome_imagem.await_args.args[0] == 5


@pytest.mark.asyncio
async def test_upload_returns_view(client: AsyncClient, mock_service):
    mock_service.update_nome_imagem.return_value = _result(nome_imagem="abc.png")
    resp = await client.patch(
        f"{BASE_URL}/5/upload/imagem",
        files={"imagem": ("perfil.png", PNG_BYTES, "image/png")},
    )
    assert resp.status_code == 200
    assert resp.json()["nome_imagem"] == "abc.png"


@pytest.mark.asyncio
async def test_change_password_missing_field_skips_service(client: AsyncClient, mock_service):
    resp = await client.post(f"{BASE_URL}/5/change-password", json={"currentPassword": "senha123"})
    assert resp.status_code == 400
    mock_service.change_password.assert_not_awaited()


@pytest.mark.asyncio
async def test_change_password_unexpected_error(client: AsyncClient, mock_service):
    mock_service.change_password.side_effect = RuntimeError("db down")
    resp = await client.post(f"{BASE_URL}/5/change-password", json={
        "currentPassword": "senha123", "newPassword": "novaSenha456",
    })
    assert resp.status_code == 500
    assert resp.json()["detail"] == "Erro interno no servidor"


@pytest.mark.asyncio
async def test_update_unexpected_error(client: AsyncClient, mock_service):
    mock_service.update.side_effect = RuntimeError("boom")
    resp = await client.put(f"{BASE_URL}/5", json=usuario_payload())
    assert resp.status_code == 500
    assert resp.json()["detail"] == "Erro interno no servidor: boom"


@pytest.mark.asyncio
async def test_update_value_error(client: AsyncClient, mock_service):
    mock_service.update.side_effect = ValueError("argumento inválido")
    resp = await client.put(f"{BASE_URL}/5", json=usuario_payload())
    assert resp.status_code == 400
    assert resp.json()["detail"] == "argumento inválido"


@pytest.mark.asyncio
async def test_update_constraint_violation(client: AsyncClient, mock_service):
    mock_service.update.side_effect = ConstraintViolationError([
        Violation("login", "Login já cadastrado"),
        Violation("cpf", "CPF já cadastrado"),
    ])
    resp = await client.put(f"{BASE_URL}/5", json=usuario_payload())
    assert resp.status_code == 400
    assert resp.json()["detail"] == ["login: Login já cadastrado", "cpf: CPF já cadastrado"]


@pytest.mark.asyncio
async def test_delete_unexpected_error(client: AsyncClient, mock_service):
    mock_service.delete.side_effect = RuntimeError("fk violada")
    resp = await client.delete(f"{BASE_URL}/5")
    assert resp.status_code == 500
    assert resp.json()["detail"] == "Erro ao deletar usuário: fk violada"


@pytest.mark.asyncio
async def test_add_telefone_unexpected_error(client: AsyncClient, mock_service):
    mock_service.add_telefone.side_effect = RuntimeError("timeout")
    resp = await client.post(f"{BASE_URL}/5/telefones", json={"codigo_area": "63", "numero": "984561234"})
    assert resp.status_code == 500
    assert resp.json()["detail"] == "Erro interno no servidor: timeout"


@pytest.mark.asyncio
async def test_add_telefone_returns_view(client: AsyncClient, mock_service):
    mock_service.add_telefone.return_value = _result(
        telefones=[TelefoneResult(id=1, codigo_area="63", numero="984561234")],
    )
    resp = await client.post(f"{BASE_URL}/5/telefones", json={"codigo_area": "63", "numero": "984561234"})
    assert resp.status_code == 200
    assert resp.json()["telefones"] == [{"id": 1, "codigo_area": "63", "numero": "984561234"}]


@pytest.mark.asyncio
async def test_remove_endereco_unexpected_error(client: AsyncClient, mock_service):
    mock_service.remove_endereco.side_effect = RuntimeError("lock")
    resp = await client.delete(f"{BASE_URL}/5/enderecos/1")
    assert resp.status_code == 500


@pytest.mark.asyncio
async def test_validar_senha_not_found_is_bad_request(client: AsyncClient, mock_service):
    mock_service.validar_senha.side_effect = NotFoundError("Usuário", 5)
    resp = await client.post(f"{BASE_URL}/validar-senha", json={"id": 5, "senha": "x"})
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Requisição inválida"


@pytest.mark.asyncio
async def test_insert_not_found_goes_to_global_handler(client: AsyncClient, mock_service):
    mock_service.insert.side_effect = NotFoundError("Perfil", "USER")
    resp = await client.post(f"{BASE_URL}/", json=usuario_payload())
    assert resp.status_code == 404
    body = resp.json()
    assert body["error"] == "not_found"
    assert body["resource"] == "Perfil"


@pytest.mark.asyncio
async def test_find_all_uses_configured_page_size(client: AsyncClient, mock_service):
    mock_service.find_all.return_value = []
    resp = await client.get(f"{BASE_URL}/")
    assert resp.status_code == 200
    mock_service.find_all.assert_awaited_once_with(0, get_settings().DEFAULT_PAGE_SIZE)

"""Testes de senha — change-password e validar-senha."""

import pytest
from httpx import AsyncClient
from tests.conftest import BASE_URL, criar_usuario


@pytest.mark.asyncio
async def test_change_password_success(client: AsyncClient):
    created = await criar_usuario(client)
    resp = await client.post(f"{BASE_URL}/{created['id']}/change-password", json={
        "currentPassword": "senha123",
        "newPassword": "novaSenha456",
    })
    assert resp.status_code == 200

    check = await client.post(f"{BASE_URL}/validar-senha", json={"id": created["id"], "senha": "novaSenha456"})
    assert check.json() == {"valido": True}


@pytest.mark.asyncio
@pytest.mark.parametrize("payload", [
    {"currentPassword": "senha123"},
    {"newPassword": "novaSenha456"},
    {},
])
async def test_change_password_missing_field(client: AsyncClient, payload: dict):
    created = await criar_usuario(client)
    resp = await client.post(f"{BASE_URL}/{created['id']}/change-password", json=payload)
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Senha atual e nova são obrigatórias"


@pytest.mark.asyncio
async def test_change_password_wrong_current(client: AsyncClient):
    created = await criar_usuario(client)
    resp = await client.post(f"{BASE_URL}/{created['id']}/change-password", json={
        "currentPassword": "errada",
        "newPassword": "novaSenha456",
    })
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Senha atual incorreta"

    # Senha antiga continua valendo
    check = await client.post(f"{BASE_URL}/validar-senha", json={"id": created["id"], "senha": "senha123"})
    assert check.json() == {"valido": True}


@pytest.mark.asyncio
async def test_change_password_user_not_found(client: AsyncClient):
    resp = await client.post(f"{BASE_URL}/999/change-password", json={
        "currentPassword": "senha123",
        "newPassword": "novaSenha456",
    })
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_validar_senha(client: AsyncClient):
    created = await criar_usuario(client)

    ok = await client.post(f"{BASE_URL}/validar-senha", json={"id": str(created["id"]), "senha": "senha123"})
    assert ok.status_code == 200
    assert ok.json() == {"valido": True}

    wrong = await client.post(f"{BASE_URL}/validar-senha", json={"id": created["id"], "senha": "outra"})
    assert wrong.status_code == 200
    assert wrong.json() == {"valido": False}


@pytest.mark.asyncio
@pytest.mark.parametrize("raw_id", ["abc", " 1 ", "1_0", "\uff11", "1.0", "", True])
async def test_validar_senha_non_numeric_id(client: AsyncClient, raw_id):
    await criar_usuario(client)
    resp = await client.post(f"{BASE_URL}/validar-senha", json={"id": raw_id, "senha": "senha123"})
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Requisição inválida"


@pytest.mark.asyncio
async def test_validar_senha_missing_senha(client: AsyncClient):
    resp = await client.post(f"{BASE_URL}/validar-senha", json={"id": 1})
    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_validar_senha_unknown_user_is_bad_request(client: AsyncClient):
    resp = await client.post(f"{BASE_URL}/validar-senha", json={"id": 999, "senha": "senha123"})
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Requisição inválida"

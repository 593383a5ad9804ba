"""Testes de upload/download da imagem de perfil."""

import pytest
from httpx import AsyncClient
from tests.conftest import BASE_URL, PNG_BYTES, criar_usuario


@pytest.mark.asyncio
async def test_upload_and_download_imagem(client: AsyncClient, upload_dir):
    created = await criar_usuario(client)

    resp = await client.patch(
        f"{BASE_URL}/{created['id']}/upload/imagem",
        files={"imagem": ("perfil.png", PNG_BYTES, "image/png")},
        data={"nomeImagem": "perfil.png"},
    )
    assert resp.status_code == 200
    nome_imagem = resp.json()["nome_imagem"]
    assert nome_imagem.endswith(".png")
    assert (upload_dir / nome_imagem).read_bytes() == PNG_BYTES

    download = await client.get(f"{BASE_URL}/download/imagem/{nome_imagem}")
    assert download.status_code == 200
    assert download.content == PNG_BYTES
    assert download.headers["content-type"] == "application/octet-stream"
    assert download.headers["content-disposition"] == f'attachment; filename="{nome_imagem}"'


@pytest.mark.asyncio
async def test_upload_rejects_extension_mismatch(client: AsyncClient, upload_dir):
    created = await criar_usuario(client)
    resp = await client.patch(
        f"{BASE_URL}/{created['id']}/upload/imagem",
        files={"imagem": ("foto.jpg", PNG_BYTES, "image/jpeg")},
    )
    assert resp.status_code == 400
    assert "não corresponde" in resp.json()["detail"]
    assert list(upload_dir.iterdir()) == []


@pytest.mark.asyncio
async def test_upload_without_extension_uses_detected_type(client: AsyncClient):
    created = await criar_usuario(client)
    resp = await client.patch(
        f"{BASE_URL}/{created['id']}/upload/imagem",
        files={"imagem": ("foto.png", PNG_BYTES, "image/png")},
        data={"nomeImagem": "avatar"},
    )
    assert resp.status_code == 200
    assert resp.json()["nome_imagem"].endswith(".png")


@pytest.mark.asyncio
async def test_upload_rejects_non_image(client: AsyncClient):
    created = await criar_usuario(client)
    resp = await client.patch(
        f"{BASE_URL}/{created['id']}/upload/imagem",
        files={"imagem": ("exploit.png", b"<script>alert('XSS')</script>", "image/png")},
    )
    assert resp.status_code == 400
    assert "imagem suportada" in resp.json()["detail"]


@pytest.mark.asyncio
async def test_upload_rejects_extension(client: AsyncClient):
    created = await criar_usuario(client)
    resp = await client.patch(
        f"{BASE_URL}/{created['id']}/upload/imagem",
        files={"imagem": ("perfil.html", PNG_BYTES, "text/html")},
    )
    assert resp.status_code == 400
    assert "Extensão não permitida" in resp.json()["detail"]


@pytest.mark.asyncio
async def test_upload_user_not_found(client: AsyncClient):
    resp = await client.patch(
        f"{BASE_URL}/999/upload/imagem",
        files={"imagem": ("perfil.png", PNG_BYTES, "image/png")},
    )
    assert resp.status_code == 404
    assert resp.json()["detail"] == "Imagem não encontrada"


@pytest.mark.asyncio
async def test_download_not_found(client: AsyncClient):
    resp = await client.get(f"{BASE_URL}/download/imagem/nao-existe.png")
    assert resp.status_code == 404
    assert resp.json()["detail"] == "Imagem não encontrada."

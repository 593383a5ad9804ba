"""
Endpoints de Usuários — /api/v1/users

CRUD, buscas, verificação de existência, senha, telefones, endereços
e imagem de perfil. Cada endpoint faz uma única chamada ao colaborador
(serviço, repositório ou armazenamento de arquivos) e traduz as exceções
para status HTTP via `_raise_translated`.

O cadastro (POST /) não trata erros localmente: fica a cargo dos
exception handlers globais.
"""

from __future__ import annotations

import logging
import re
from dataclasses import asdict, dataclass
from typing import Any, Callable, NoReturn, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, Response, UploadFile, status
from fastapi.responses import FileResponse

from app.domain.shared.exceptions import ConstraintViolationError, NotFoundError
from app.infrastructure.config import get_settings
from app.infrastructure.services.file_storage import UsuarioFileService
from app.infrastructure.systems.usuarios.repository import UsuarioRepository
from app.application.dtos.usuario_dtos import (
    EnderecoData,
    InsertUsuarioCommand,
    TelefoneData,
    UpdateUsuarioCommand,
    UsuarioResult,
)
from app.application.systems.usuarios.service import UsuarioService
from app.presentation.api.v1.schemas import (
    ChangePasswordRequest,
    EnderecoIn,
    TelefoneIn,
    UsuarioCreate,
    UsuarioOut,
    UsuarioUpdate,
    ValidarSenhaOut,
    ValidarSenhaRequest,
)
from app.presentation.api.v1.deps import get_file_service, get_usuario_repo, get_usuario_service

logger = logging.getLogger(__name__)
settings = get_settings()

router = APIRouter()


# ════════════════════════════════════════════════════════════════
# TRADUÇÃO DE ERROS
# ════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class _ErrorRule:
    exc_type: type[Exception]
    status_code: int
    log_message: str
    detail: Callable[[Exception], Any] = str
    log_traceback: bool = True


def _violations(exc: Exception) -> list[str]:
    return exc.messages()


def _raise_translated(exc: Exception, rules: tuple[_ErrorRule, ...]) -> NoReturn:
    """Primeira regra compatível vira HTTPException; sem regra, a exceção segue adiante."""
    for rule in rules:
        if isinstance(exc, rule.exc_type):
            logger.error("%s: %s", rule.log_message, exc, exc_info=rule.log_traceback)
            raise HTTPException(status_code=rule.status_code, detail=rule.detail(exc)) from exc
    raise exc


_UPDATE_ERRORS = (
    _ErrorRule(ConstraintViolationError, 400, "Erro de validação", _violations),
    _ErrorRule(ValueError, 400, "Erro ao atualizar usuário"),
    _ErrorRule(NotFoundError, 404, "Usuário não encontrado"),
    _ErrorRule(Exception, 500, "Erro interno ao atualizar usuário",
               lambda e: f"Erro interno no servidor: {e}"),
)

_DELETE_ERRORS = (
    _ErrorRule(NotFoundError, 404, "Usuário não encontrado", log_traceback=False),
    _ErrorRule(Exception, 500, "Erro ao deletar usuário",
               lambda e: f"Erro ao deletar usuário: {e}"),
)

_UPLOAD_ERRORS = (
    _ErrorRule(OSError, 400, "Erro ao salvar imagem", log_traceback=False),
)


def _add_sub_resource_errors(resource: str) -> tuple[_ErrorRule, ...]:
    return (
        _ErrorRule(NotFoundError, 404, "Usuário não encontrado"),
        _ErrorRule(ConstraintViolationError, 400, "Erro de validação", _violations),
        _ErrorRule(Exception, 500, f"Erro ao adicionar {resource}",
                   lambda e: f"Erro interno no servidor: {e}"),
    )


def _remove_sub_resource_errors(resource: str) -> tuple[_ErrorRule, ...]:
    return (
        _ErrorRule(NotFoundError, 404, f"Usuário ou {resource} não encontrado"),
        _ErrorRule(Exception, 500, f"Erro ao remover {resource}",
                   lambda e: f"Erro interno no servidor: {e}"),
    )


_ADD_TELEFONE_ERRORS = _add_sub_resource_errors("telefone")
_REMOVE_TELEFONE_ERRORS = _remove_sub_resource_errors("telefone")
_ADD_ENDERECO_ERRORS = _add_sub_resource_errors("endereço")
_REMOVE_ENDERECO_ERRORS = _remove_sub_resource_errors("endereço")

_CHANGE_PASSWORD_ERRORS = (
    _ErrorRule(NotFoundError, 404, "Usuário não encontrado", log_traceback=False),
    _ErrorRule(ValueError, 400, "Senha não alterada", log_traceback=False),
    _ErrorRule(Exception, 500, "Erro ao alterar senha", lambda e: "Erro interno no servidor"),
)

# Not found também vira 400 aqui
_VALIDAR_SENHA_ERRORS = (
    _ErrorRule(Exception, 400, "Requisição inválida ao validar senha",
               lambda e: "Requisição inválida", log_traceback=False),
)


# ════════════════════════════════════════════════════════════════
# CONVERSÕES
# ════════════════════════════════════════════════════════════════

_ID_PATTERN = re.compile(r"[+-]?[0-9]+")


def _parse_id(raw: Any) -> int:
    """Só dígitos ASCII (com sinal opcional); espaços, "_" e dígitos Unicode são recusados."""
    text = str(raw)
    if isinstance(raw, bool) or not _ID_PATTERN.fullmatch(text):
        raise ValueError(f"Id inválido: {raw!r}")
    return int(text)


def _to_out(result: UsuarioResult) -> UsuarioOut:
    return UsuarioOut.model_validate(asdict(result))


def _telefone_data(t: TelefoneIn) -> TelefoneData:
    return TelefoneData(codigo_area=t.codigo_area, numero=t.numero)


def _endereco_data(e: EnderecoIn) -> EnderecoData:
    return EnderecoData(
        cep=e.cep, logradouro=e.logradouro, numero=e.numero, complemento=e.complemento,
        bairro=e.bairro, cidade=e.cidade, estado=e.estado,
    )


# ════════════════════════════════════════════════════════════════
# CRUD
# ════════════════════════════════════════════════════════════════

@router.post(
    "/",
    response_model=UsuarioOut,
    status_code=status.HTTP_201_CREATED,
    summary="Cadastrar usuário",
)
async def insert(
    payload: UsuarioCreate,
    service: UsuarioService = Depends(get_usuario_service),
):
    logger.info("Iniciando inserção de novo usuário")
    result = await service.insert(InsertUsuarioCommand(
        nome=payload.nome,
        login=payload.login,
        email=payload.email,
        cpf=payload.cpf,
        senha=payload.senha,
        telefones=tuple(_telefone_data(t) for t in payload.telefones),
        enderecos=tuple(_endereco_data(e) for e in payload.enderecos),
    ))
    logger.info("Usuário inserido com sucesso (id=%d)", result.id)
    return _to_out(result)


@router.get(
    "/",
    response_model=list[UsuarioOut],
    summary="Listar usuários paginados",
)
async def find_all(
    page: int = Query(default=0, ge=0),
    page_size: int = Query(default=settings.DEFAULT_PAGE_SIZE, ge=1, alias="pageSize"),
    service: UsuarioService = Depends(get_usuario_service),
):
    return [_to_out(r) for r in await service.find_all(page, page_size)]


@router.get(
    "/search",
    response_model=list[UsuarioOut],
    summary="Buscar usuários pelo nome",
)
async def find_by_nome(
    nome: str = Query(default=""),
    service: UsuarioService = Depends(get_usuario_service),
):
    logger.info("Buscando usuário pelo nome: %s", nome)
    results = await service.find_by_nome(nome)
    logger.info("Usuários com nome: %s recuperados com sucesso", nome)
    return [_to_out(r) for r in results]


@router.get(
    "/count",
    response_model=int,
    summary="Total de usuários",
)
async def count(service: UsuarioService = Depends(get_usuario_service)):
    return await service.count()


@router.get(
    "/exists",
    response_model=bool,
    summary="Verifica se login, email ou CPF já estão cadastrados",
    description="Só o primeiro parâmetro informado é verificado, na ordem login → email → cpf.",
)
async def check_exists(
    login: Optional[str] = Query(default=None),
    email: Optional[str] = Query(default=None),
    cpf: Optional[str] = Query(default=None),
    repo: UsuarioRepository = Depends(get_usuario_repo),
):
    if login is not None:
        return await repo.find_by_login(login) is not None
    if email is not None:
        return await repo.find_by_email(email) is not None
    if cpf is not None:
        return await repo.find_by_cpf(cpf) is not None
    raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Informe login, email ou cpf")


@router.get(
    "/download/imagem/{nome_imagem}",
    summary="Download da imagem de perfil",
)
async def download_imagem(
    nome_imagem: str,
    file_service: UsuarioFileService = Depends(get_file_service),
):
    logger.info("Iniciando download da imagem: %s", nome_imagem)
    path = file_service.obter(nome_imagem)
    if path is None:
        logger.warning("Imagem: %s não encontrada", nome_imagem)
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Imagem não encontrada.")
    logger.info("Download da imagem: %s realizado com sucesso", nome_imagem)
    return FileResponse(
        path=str(path),
        media_type="application/octet-stream",
        headers={"Content-Disposition": f'attachment; filename="{path.name}"'},
    )


@router.post(
    "/validar-senha",
    response_model=ValidarSenhaOut,
    summary="Confere se a senha informada é a do usuário",
)
async def validar_senha(
    payload: ValidarSenhaRequest,
    service: UsuarioService = Depends(get_usuario_service),
):
    try:
        if payload.id is None or payload.senha is None:
            raise ValueError("id e senha são obrigatórios")
        usuario_id = _parse_id(payload.id)
        valido = await service.validar_senha(usuario_id, str(payload.senha))
    except Exception as exc:
        _raise_translated(exc, _VALIDAR_SENHA_ERRORS)
    return ValidarSenhaOut(valido=valido)


@router.get(
    "/{usuario_id}",
    response_model=UsuarioOut,
    summary="Buscar usuário por ID",
)
async def find_by_id(
    usuario_id: int,
    service: UsuarioService = Depends(get_usuario_service),
):
    logger.info("Buscando usuário com ID: %d", usuario_id)
    result = await service.find_by_id(usuario_id)
    logger.info("Usuário com ID: %d recuperado com sucesso", usuario_id)
    return _to_out(result)


@router.put(
    "/{usuario_id}",
    response_model=UsuarioOut,
    summary="Atualizar usuário",
)
async def update(
    usuario_id: int,
    payload: UsuarioUpdate,
    service: UsuarioService = Depends(get_usuario_service),
):
    logger.info("Iniciando atualização do usuário com ID: %d", usuario_id)
    logger.debug("Payload recebido: %s", payload.model_dump(exclude={"senha"}))
    try:
        result = await service.update(UpdateUsuarioCommand(
            nome=payload.nome,
            login=payload.login,
            email=payload.email,
            cpf=payload.cpf,
            senha=payload.senha,
            telefones=None if payload.telefones is None else tuple(_telefone_data(t) for t in payload.telefones),
            enderecos=None if payload.enderecos is None else tuple(_endereco_data(e) for e in payload.enderecos),
        ), usuario_id)
    except Exception as exc:
        _raise_translated(exc, _UPDATE_ERRORS)
    logger.info("Usuário com ID: %d atualizado com sucesso", usuario_id)
    return _to_out(result)


@router.delete(
    "/{usuario_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Remover usuário",
)
async def delete(
    usuario_id: int,
    service: UsuarioService = Depends(get_usuario_service),
):
    logger.info("Iniciando remoção do usuário com ID: %d", usuario_id)
    try:
        await service.delete(usuario_id)
    except Exception as exc:
        _raise_translated(exc, _DELETE_ERRORS)
    logger.info("Usuário com ID: %d removido com sucesso", usuario_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ════════════════════════════════════════════════════════════════
# IMAGEM
# ════════════════════════════════════════════════════════════════

@router.patch(
    "/{usuario_id}/upload/imagem",
    response_model=UsuarioOut,
    summary="Upload da imagem de perfil",
    description="Multipart com os campos `imagem` (arquivo) e `nomeImagem` (opcional).",
)
async def salvar_imagem_usuario(
    usuario_id: int,
    imagem: UploadFile = File(...),
    nome_imagem: Optional[str] = Form(default=None, alias="nomeImagem"),
    service: UsuarioService = Depends(get_usuario_service),
    file_service: UsuarioFileService = Depends(get_file_service),
):
    logger.info("Iniciando atualização do nome da imagem do usuário com ID: %d", usuario_id)
    try:
        stored_name = file_service.salvar(nome_imagem or imagem.filename or "", await imagem.read())
        result = await service.update_nome_imagem(usuario_id, stored_name)
    except Exception as exc:
        _raise_translated(exc, _UPLOAD_ERRORS)

    if result is None:
        logger.warning("Usuário com ID: %d não encontrado.", usuario_id)
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Imagem não encontrada")
    logger.info("Nome da imagem atualizado com sucesso para o usuário com ID: %d", usuario_id)
    return _to_out(result)


# ════════════════════════════════════════════════════════════════
# TELEFONES / ENDEREÇOS
# ════════════════════════════════════════════════════════════════

@router.post(
    "/{usuario_id}/telefones",
    response_model=UsuarioOut,
    summary="Adicionar telefone",
)
async def add_telefone(
    usuario_id: int,
    payload: TelefoneIn,
    service: UsuarioService = Depends(get_usuario_service),
):
    logger.info("Adicionando telefone para usuário ID: %d", usuario_id)
    try:
        result = await service.add_telefone(usuario_id, _telefone_data(payload))
    except Exception as exc:
        _raise_translated(exc, _ADD_TELEFONE_ERRORS)
    logger.info("Telefone adicionado com sucesso para usuário ID: %d", usuario_id)
    return _to_out(result)


@router.delete(
    "/{usuario_id}/telefones/{telefone_id}",
    response_model=UsuarioOut,
    summary="Remover telefone",
)
async def remove_telefone(
    usuario_id: int,
    telefone_id: int,
    service: UsuarioService = Depends(get_usuario_service),
):
    logger.info("Removendo telefone ID: %d do usuário ID: %d", telefone_id, usuario_id)
    try:
        result = await service.remove_telefone(usuario_id, telefone_id)
    except Exception as exc:
        _raise_translated(exc, _REMOVE_TELEFONE_ERRORS)
    logger.info("Telefone ID: %d removido com sucesso", telefone_id)
    return _to_out(result)


@router.post(
    "/{usuario_id}/enderecos",
    response_model=UsuarioOut,
    summary="Adicionar endereço",
)
async def add_endereco(
    usuario_id: int,
    payload: EnderecoIn,
    service: UsuarioService = Depends(get_usuario_service),
):
    logger.info("Adicionando endereço para usuário ID: %d", usuario_id)
    try:
        result = await service.add_endereco(usuario_id, _endereco_data(payload))
    except Exception as exc:
        _raise_translated(exc, _ADD_ENDERECO_ERRORS)
    logger.info("Endereço adicionado com sucesso para usuário ID: %d", usuario_id)
    return _to_out(result)


@router.delete(
    "/{usuario_id}/enderecos/{endereco_id}",
    response_model=UsuarioOut,
    summary="Remover endereço",
)
async def remove_endereco(
    usuario_id: int,
    endereco_id: int,
    service: UsuarioService = Depends(get_usuario_service),
):
    logger.info("Removendo endereço ID: %d do usuário ID: %d", endereco_id, usuario_id)
    try:
        result = await service.remove_endereco(usuario_id, endereco_id)
    except Exception as exc:
        _raise_translated(exc, _REMOVE_ENDERECO_ERRORS)
    logger.info("Endereço ID: %d removido com sucesso", endereco_id)
    return _to_out(result)


# ════════════════════════════════════════════════════════════════
# SENHA
# ════════════════════════════════════════════════════════════════

@router.post(
    "/{usuario_id}/change-password",
    summary="Alterar senha",
    description="Body: `currentPassword` e `newPassword`, ambos obrigatórios.",
)
async def change_password(
    usuario_id: int,
    payload: ChangePasswordRequest,
    service: UsuarioService = Depends(get_usuario_service),
):
    logger.info("Alterando senha para usuário ID: %d", usuario_id)
    if payload.current_password is None or payload.new_password is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Senha atual e nova são obrigatórias",
        )
    try:
        await service.change_password(usuario_id, payload.current_password, payload.new_password)
    except Exception as exc:
        _raise_translated(exc, _CHANGE_PASSWORD_ERRORS)
    logger.info("Senha do usuário ID: %d alterada com sucesso", usuario_id)
    return Response(status_code=status.HTTP_200_OK)

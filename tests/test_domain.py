"""Testes de domínio — value objects, exceções e dispatcher de eventos."""

import pytest

from app.application.shared.event_dispatcher import clear_handlers, dispatch_events, register_handler
from app.domain.events.usuario_events import UsuarioCreated, UsuarioDeleted
from app.domain.shared.exceptions import ConstraintViolationError, NotFoundError, Violation
from app.domain.shared.value_objects import Cpf, Email
from app.domain.systems.usuarios.entity import Telefone, Usuario


@pytest.mark.parametrize("valor", ["52998224725", "529.982.247-25", "111.444.777-35"])
def test_cpf_valido(valor):
    assert len(Cpf(valor).numero) == 11


@pytest.mark.parametrize("valor", ["", "123", "11111111111", "52998224724"])
def test_cpf_invalido(valor):
    with pytest.raises(ValueError):
        Cpf(valor)


def test_email_invalido():
    with pytest.raises(ValueError):
        Email("sem-arroba")


def test_not_found_message():
    assert str(NotFoundError("Usuário", 7)) == "Usuário 7 não encontrado"
    assert str(NotFoundError("Usuário")) == "Usuário não encontrado"


def test_constraint_violation_messages():
    exc = ConstraintViolationError([Violation("login", "obrigatório"), Violation("cpf", "inválido")])
    assert exc.messages() == ["login: obrigatório", "cpf: inválido"]


def test_usuario_records_events():
    usuario = Usuario(id=1, login="maria", email="maria@test.com", telefones=[Telefone(id=3)])
    usuario.record_creation()
    usuario.alterar_senha("hash")
    assert len(usuario.pending_events) == 2
    events = usuario.collect_events()
    assert [e.event_type for e in events] == ["UsuarioCreated", "UsuarioSenhaAlterada"]
    assert usuario.collect_events() == []
    assert usuario.possui_telefone(3)
    assert not usuario.possui_telefone(4)


@pytest.mark.asyncio
async def test_dispatch_events_isolates_failing_handler():
    received = []

    def failing(event):
        raise RuntimeError("falhou")

    async def recorder(event):
        received.append(event.usuario_id)

    clear_handlers()
    try:
        register_handler(UsuarioCreated, failing)
        register_handler(UsuarioCreated, recorder)
        register_handler(UsuarioCreated, recorder)
        await dispatch_events([UsuarioCreated(usuario_id=1), UsuarioDeleted(usuario_id=2)])
    finally:
        clear_handlers()

    assert received == [1]


@pytest.mark.asyncio
async def test_unit_of_work_dispatches_after_commit():
    from unittest.mock import AsyncMock

    from app.application.shared.unit_of_work import UnitOfWork

    received = []

    async def recorder(event):
        received.append(event.event_type)

    session = AsyncMock()
    uow = UnitOfWork(session)
    usuario = Usuario(id=1, login="maria")

    clear_handlers()
    try:
        register_handler(UsuarioDeleted, recorder)
        async with uow:
            usuario.record_deletion()
            uow.collect_events_from(usuario)
            assert received == []
    finally:
        clear_handlers()

    session.commit.assert_awaited_once()
    assert received == ["UsuarioDeleted"]


@pytest.mark.asyncio
async def test_unit_of_work_rolls_back_on_error():
    from unittest.mock import AsyncMock

    from app.application.shared.unit_of_work import UnitOfWork

    session = AsyncMock()
    uow = UnitOfWork(session)

    with pytest.raises(NotFoundError):
        async with uow:
            usuario = Usuario(id=1)
            usuario.record_deletion()
            uow.collect_events_from(usuario)
            raise NotFoundError("Usuário", 1)

    session.rollback.assert_awaited_once()
    session.commit.assert_not_awaited()

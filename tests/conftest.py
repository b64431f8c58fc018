from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from restaurante.api.empresas.repositories.repo_empresa import EmpresaRepository
from restaurante.api.impressao.contracts.impressora_contract import IImpressoraContract
from restaurante.api.impressao.services.dependencies import get_gerenciador_impressora
from restaurante.api.impressao.services.gerenciador_conexao import GerenciadorConexaoImpressora
from restaurante.core.exceptions import PrinterUnavailable
from restaurante.database.db_connection import get_db
from restaurante.database.init_db import inicializar_banco
from restaurante.main import app


class FakeImpressoraAdapter(IImpressoraContract):
    """Transporte de impressão em memória; registra a ordem dos eventos."""

    def __init__(self, eventos: list | None = None, falhar: bool = False):
        self.eventos = eventos if eventos is not None else []
        self.falhar = falhar
        self.impressos: list[tuple[str, str]] = []
        self._conectado = False

    @property
    def conectado(self) -> bool:
        return self._conectado

    def conectar(self) -> None:
        self._conectado = True
        self.eventos.append("conectar")

    async def imprimir(self, impressora: str, conteudo: str) -> None:
        self.eventos.append("imprimir")
        if self.falhar:
            raise PrinterUnavailable("Impressora offline")
        self.impressos.append((impressora, conteudo))

    async def listar_impressoras(self) -> list[str]:
        return ["COZINHA"]

    async def desconectar(self) -> None:
        self._conectado = False
        self.eventos.append("desconectar")


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    inicializar_banco(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def empresa(db):
    return EmpresaRepository(db).criar(
        nome="Cantina da Praça",
        timezone="America/Sao_Paulo",
        taxa_entrega=Decimal("5.00"),
    )


@pytest.fixture
def fake_adapter():
    return FakeImpressoraAdapter()


@pytest.fixture
def gerenciador(fake_adapter):
    return GerenciadorConexaoImpressora(fake_adapter, impressora_padrao="COZINHA")


@pytest.fixture
def client(session_factory, gerenciador):
    def _get_db():
        session = session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_gerenciador_impressora] = lambda: gerenciador
    yield TestClient(app)
    app.dependency_overrides.clear()

import os

from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from restaurante.config.settings import (
    BASE_URL as SETTINGS_BASE_URL,
    CORS_ALLOW_ALL,
    CORS_ORIGINS,
    ENABLE_DOCS,
    IMPRESSORA_PADRAO,
)
from restaurante.core.exception_handlers import (
    domain_exception_handler,
    general_exception_handler,
    http_exception_handler,
    validation_exception_handler,
)
from restaurante.core.exceptions import DomainError
from restaurante.utils.logger import logger

# ───────────────────────────
# Importar modelos antes das rotas
# Garante que todos os modelos estejam registrados no SQLAlchemy
# antes de qualquer query ser executada
# ───────────────────────────
import restaurante.api.pedidos.models  # noqa: F401

from restaurante.api.empresas.router import router_empresa_admin
from restaurante.api.impressao.router import router_impressao
from restaurante.api.loja.router import router_loja
from restaurante.api.mesas.router import router_mesas_admin
from restaurante.api.pedidos.router import router_pedidos_admin

BASE_URL = SETTINGS_BASE_URL or os.getenv("BASE_URL", "http://localhost:8000")

# ──────────────────────────
# Instância FastAPI
# ──────────────────────────
app = FastAPI(
    title="API de Pedidos - Restaurante",
    version="1.0.0",
    description="Fluxo de status, funcionamento da loja, tempo de preparo e comandas de mesa",
    docs_url=("/swagger" if ENABLE_DOCS else None),
    redoc_url=("/redoc" if ENABLE_DOCS else None),
    openapi_url=("/openapi.json" if ENABLE_DOCS else None),
    servers=[{"url": BASE_URL, "description": "Base URL do ambiente"}],
    redirect_slashes=False,
)

# ───────────────────────────
# Exception Handlers Globais
# ───────────────────────────
app.add_exception_handler(DomainError, domain_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(HTTPException, http_exception_handler)
app.add_exception_handler(Exception, general_exception_handler)

# ───────────────────────────
# CORS
# ───────────────────────────
# - CORS_ALLOW_ALL=true => allow_origins=["*"], allow_credentials=False
# - Caso contrário => allow_origins=CORS_ORIGINS (vazio cai para ["*"]),
#   allow_credentials=True somente quando houver origens explícitas
if CORS_ALLOW_ALL:
    allowed_origins = ["*"]
    allow_credentials = False
else:
    allowed_origins = CORS_ORIGINS or ["*"]
    allow_credentials = bool(CORS_ORIGINS)
app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=allow_credentials,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ───────────────────────────
# Startup / Shutdown
# ───────────────────────────
@app.on_event("startup")
async def startup():
    from restaurante.api.impressao.adapters import AgenteImpressaoAdapter
    from restaurante.api.impressao.services import GerenciadorConexaoImpressora
    from restaurante.database.init_db import inicializar_banco

    logger.info("Iniciando API e banco de dados...")
    inicializar_banco()

    app.state.gerenciador_impressora = GerenciadorConexaoImpressora(
        AgenteImpressaoAdapter(),
        impressora_padrao=IMPRESSORA_PADRAO,
    )
    logger.info("API iniciada com sucesso.")


@app.on_event("shutdown")
async def shutdown():
    logger.info("Encerrando API...")
    gerenciador = getattr(app.state, "gerenciador_impressora", None)
    if gerenciador is not None:
        await gerenciador.encerrar()
    logger.info("API encerrada.")


# ───────────────────────────
# Rotas
# ───────────────────────────
@app.get("/health", tags=["Health"])
def health():
    return {"status": "ok"}


app.include_router(router_empresa_admin)
app.include_router(router_loja)
app.include_router(router_pedidos_admin)
app.include_router(router_mesas_admin)
app.include_router(router_impressao)
